"""
Runtime settings for the queryable bridge.
"""

import logging

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class QueryableSettings(BaseSettings):
    """
    Settings read from ``FLASH_QUERYABLE_*`` environment variables or ``.env``.
    """

    model_config = SettingsConfigDict(
        env_prefix="FLASH_QUERYABLE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    LOG_LEVEL: str = "INFO"

    # Debug-log every composed expression node.
    LOG_EXPRESSIONS: bool = False

    # Log compiled SQL before the SQLAlchemy provider executes it.
    SQL_ECHO: bool = False

    @model_validator(mode="after")
    def validate_log_level(self) -> "QueryableSettings":
        """Rejects level names the logging module does not know."""
        level = self.LOG_LEVEL.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL '{self.LOG_LEVEL}'.")
        self.LOG_LEVEL = level
        return self


queryable_settings = QueryableSettings()
