"""
Centralized configuration with environment variable overrides.

Bot identity, conversation thresholds and server settings are
configurable here. Dialogue rules read their limits from `settings`
instead of hardcoding them.
"""

import logging
import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from mavilda.logging_context import install_session_filter

load_dotenv()

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(name)s] %(levelname)s [%(session_id)s]: %(message)s"


def _safe_int(env_var: str, default: str) -> int:
    """Parse an integer from an env var with a clear error on bad values."""
    raw = os.getenv(env_var, default)
    try:
        return int(raw)
    except (ValueError, TypeError):
        raise ValueError(
            f"Invalid integer for {env_var}: {raw!r}"
        ) from None


@dataclass(frozen=True)
class BusinessConfig:
    """Identity of the bot and the dealer it sells for."""

    bot_name: str = os.getenv("BOT_NAME", "Mavilda")
    company_name: str = os.getenv("COMPANY_NAME", "Seragro")
    currency: str = os.getenv("PRICE_CURRENCY", "USD")


@dataclass(frozen=True)
class ConversationConfig:
    """Thresholds used by the message analyzer and the dialogue rules."""

    name_max_length: int = _safe_int("NAME_MAX_LENGTH", "30")
    contact_prompt_min_messages: int = _safe_int("CONTACT_PROMPT_MIN_MESSAGES", "5")
    phone_min_digits: int = _safe_int("PHONE_MIN_DIGITS", "8")
    recommend_small_max_ha: int = _safe_int("RECOMMEND_SMALL_MAX_HA", "300")
    recommend_medium_max_ha: int = _safe_int("RECOMMEND_MEDIUM_MAX_HA", "500")
    max_message_length: int = _safe_int("MAX_MESSAGE_LENGTH", "2000")


@dataclass(frozen=True)
class ServerConfig:
    """HTTP service settings."""

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = _safe_int("PORT", "3000")
    version: str = os.getenv("SERVICE_VERSION", "2.0")


@dataclass(frozen=True)
class AppConfig:
    """Root configuration aggregating all sub-configs."""

    business: BusinessConfig = field(default_factory=BusinessConfig)
    conversation: ConversationConfig = field(default_factory=ConversationConfig)
    server: ServerConfig = field(default_factory=ServerConfig)
    log_level: str = os.getenv("LOG_LEVEL", "INFO")


def _validate_config(config: AppConfig) -> None:
    """Validate configuration values are within acceptable ranges."""
    conv = config.conversation
    if conv.name_max_length < 2:
        raise ValueError(f"NAME_MAX_LENGTH must be >= 2, got {conv.name_max_length}")
    if conv.contact_prompt_min_messages < 1:
        raise ValueError(
            "CONTACT_PROMPT_MIN_MESSAGES must be >= 1, "
            f"got {conv.contact_prompt_min_messages}"
        )
    if not 1 <= conv.phone_min_digits <= 15:
        raise ValueError(
            f"PHONE_MIN_DIGITS must be between 1 and 15, got {conv.phone_min_digits}"
        )
    if conv.recommend_small_max_ha < 1:
        raise ValueError(
            f"RECOMMEND_SMALL_MAX_HA must be >= 1, got {conv.recommend_small_max_ha}"
        )
    if conv.recommend_medium_max_ha <= conv.recommend_small_max_ha:
        raise ValueError(
            "RECOMMEND_MEDIUM_MAX_HA must be greater than RECOMMEND_SMALL_MAX_HA, "
            f"got {conv.recommend_medium_max_ha} <= {conv.recommend_small_max_ha}"
        )
    if conv.max_message_length < 1:
        raise ValueError(
            f"MAX_MESSAGE_LENGTH must be >= 1, got {conv.max_message_length}"
        )
    if not 1 <= config.server.port <= 65535:
        raise ValueError(f"PORT must be between 1 and 65535, got {config.server.port}")


def load_config() -> AppConfig:
    """Load and validate application configuration."""
    config = AppConfig()
    _validate_config(config)
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    install_session_filter()
    logger.info(
        "Configuration loaded for '%s' (%s)",
        config.business.bot_name, config.business.company_name,
    )
    return config


# Singleton instance
settings = load_config()
