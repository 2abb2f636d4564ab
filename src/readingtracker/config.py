"""Configuration management for readingtracker.

Loads configuration from environment variables and provides defaults.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class Config:
    """Application configuration."""

    # Database
    db_path: Path

    # Session validation
    max_backdate_days: int

    # Logging
    log_level: str
    log_file: Optional[Path]

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables."""
        db_path_str = os.environ.get(
            "READINGTRACKER_DB_PATH",
            str(Path.home() / ".readingtracker" / "reading.db"),
        )
        log_file = os.environ.get("READINGTRACKER_LOG_FILE")

        return cls(
            db_path=Path(db_path_str).expanduser(),
            max_backdate_days=int(os.environ.get("READINGTRACKER_MAX_BACKDATE_DAYS", "30")),
            log_level=os.environ.get("READINGTRACKER_LOG_LEVEL", "INFO").upper(),
            log_file=Path(log_file).expanduser() if log_file else None,
        )

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.max_backdate_days < 0:
            errors.append(
                f"READINGTRACKER_MAX_BACKDATE_DAYS must not be negative: {self.max_backdate_days}"
            )

        if self.log_level not in ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"):
            errors.append(f"Unknown log level: {self.log_level}")

        return errors


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get or create the global config instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global config instance. Used for testing."""
    global _config
    _config = None
