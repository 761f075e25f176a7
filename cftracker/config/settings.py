import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from . import constants

load_dotenv()


class ConfigurationError(Exception):
    """Raised when a required setting is missing. Fatal at startup."""


def get_env_var(var_name, default=None):
    """Gets an environment variable, stripping inline comments, quotes, and whitespace."""
    value = os.getenv(var_name, default)
    if not value:
        return default

    if '#' in value:
        value = value.split('#', 1)[0]

    # Strip quotes and then any surrounding whitespace
    return value.strip().strip("'\"").strip() or default


def _get_bool(var_name, default: str) -> bool:
    return get_env_var(var_name, default).lower() in ("true", "1", "t")


def build_webhook_url(token: str, explicit_url: Optional[str] = None, external_url: Optional[str] = None) -> Optional[str]:
    """Prefers an explicit WEBHOOK_URL, otherwise derives one from the host's public base URL."""
    if explicit_url:
        return explicit_url
    if external_url:
        return f"{external_url.rstrip('/')}{constants.WEBHOOK_PATH_PREFIX}/{token}"
    return None


@dataclass(frozen=True)
class Settings:
    bot_token: str
    database_url: str
    webhook_url: str
    host: str = constants.DEFAULT_HOST
    port: int = constants.DEFAULT_PORT
    timezone: Optional[str] = None
    drop_pending_updates: bool = True
    log_level: str = "INFO"

    @property
    def webhook_path(self) -> str:
        return f"{constants.WEBHOOK_PATH_PREFIX}/{self.bot_token}"


def load_settings() -> Settings:
    """
    Reads the process environment (and .env) into a Settings object.
    Raises ConfigurationError listing every missing required variable.
    """
    bot_token = get_env_var("BOT_TOKEN")
    database_url = get_env_var("DATABASE_URL")
    explicit_url = get_env_var("WEBHOOK_URL")
    external_url = get_env_var("RENDER_EXTERNAL_URL")

    missing = []
    if not bot_token:
        missing.append("BOT_TOKEN")
    if not database_url:
        missing.append("DATABASE_URL")
    if not (explicit_url or external_url):
        missing.append("WEBHOOK_URL (or RENDER_EXTERNAL_URL)")
    if missing:
        raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

    webhook_url = build_webhook_url(bot_token, explicit_url=explicit_url, external_url=external_url)

    port = get_env_var("PORT", str(constants.DEFAULT_PORT))
    try:
        port = int(port)
    except ValueError:
        raise ConfigurationError(f"PORT must be an integer, got {port!r}")

    log_level = get_env_var("LOG_LEVEL", "INFO").upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigurationError(f"LOG_LEVEL must be a logging level name, got {log_level!r}")

    return Settings(
        bot_token=bot_token,
        database_url=database_url,
        webhook_url=webhook_url,
        host=get_env_var("HOST", constants.DEFAULT_HOST),
        port=port,
        timezone=get_env_var("TIMEZONE"),
        drop_pending_updates=_get_bool("DROP_PENDING_UPDATES", "True"),
        log_level=log_level,
    )
