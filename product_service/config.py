# product_service/config.py

import os
from dataclasses import dataclass

from dotenv import load_dotenv


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


@dataclass(frozen=True)
class Settings:
    mongodb_url: str
    database_name: str = "loja"
    collection_name: str = "produtos"
    timeout_ms: int = 5000
    port: int = 3000


def _get_int_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(
            f"Environment variable '{key}' must be an integer, got '{value}'."
        )


def load_settings() -> Settings:
    """
    Reads service settings from the environment (and a local .env file, if any).
    MONGODB_URL is mandatory; everything else has a default.
    """
    load_dotenv()

    mongodb_url = os.getenv("MONGODB_URL")
    if not mongodb_url:
        raise ConfigurationError(
            "Required environment variable 'MONGODB_URL' is not set. "
            "Please add it to your environment or .env file."
        )

    timeout_ms = _get_int_env("MONGODB_TIMEOUT_MS", 5000)
    if timeout_ms <= 0:
        raise ConfigurationError("MONGODB_TIMEOUT_MS must be a positive integer.")

    return Settings(
        mongodb_url=mongodb_url,
        database_name=os.getenv("MONGODB_DATABASE", "loja"),
        collection_name=os.getenv("MONGODB_COLLECTION", "produtos"),
        timeout_ms=timeout_ms,
        port=_get_int_env("PORT", 3000),
    )
