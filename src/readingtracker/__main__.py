"""Allow ``python -m readingtracker``."""

from readingtracker.cli import main

if __name__ == "__main__":
    main()
