"""Configuration helpers for MongoDB connections used by mongo_gen.

Applications can create a new ``MongoSettings`` instance at startup and pass
it to ``use_settings`` before the first call to ``get_handler`` to override
the defaults. If not overridden, the defaults below are used.
"""
from loguru import logger
import os

from pydantic import BaseModel, Field


class MongoSettings(BaseModel):
    """Basic MongoDB configuration shared by every helper call."""

    uri: str = Field(
        default_factory=lambda: os.getenv("MONGO_URI", "mongodb://localhost:27017")
    )
    db_name: str = Field(default_factory=lambda: os.getenv("MONGO_DB_NAME", "test_db"))
    timeout_seconds: float = Field(
        default_factory=lambda: float(os.getenv("MONGO_TIMEOUT_SECONDS", "10.0")),
        gt=0,
    )


def _default_settings() -> "MongoSettings":
    """Provide a factory to keep settings override logic simple in the future."""

    return MongoSettings()


def use_settings(new_settings: MongoSettings) -> MongoSettings:
    """Copy ``new_settings`` onto the shared instance so existing imports see it."""

    for name in MongoSettings.model_fields:
        setattr(settings, name, getattr(new_settings, name))
    logger.info(f"MongoSettings overridden with uri={settings.uri} db_name={settings.db_name}")
    return settings


settings: MongoSettings = _default_settings()
logger.info(
    f"MongoSettings initialized with uri={settings.uri} db_name={settings.db_name} "
    f"timeout_seconds={settings.timeout_seconds}"
)
