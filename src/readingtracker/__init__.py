"""Reading activity attribution and streak tracking."""

__version__ = "0.1.0"
