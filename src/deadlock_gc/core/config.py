"""Configuration management for the deadlock-gc client"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

ENV_PREFIX = "DEADLOCK_GC_"


def _env_float(name: str, default: float | None) -> float | None:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    if raw.lower() == "none":
        return None
    try:
        value = float(raw)
    except ValueError as e:
        raise ValueError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e
    if value < 0:
        raise ValueError(f"{ENV_PREFIX}{name} must not be negative, got {value}")
    return value


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(ENV_PREFIX + name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(
            f"{ENV_PREFIX}{name} must be an integer, got {raw!r}"
        ) from e


@dataclass
class ClientConfig:
    """Configuration for the game-coordinator session client"""

    # Game app id the coordinator messages are addressed to
    app_id: int = 1422450

    # Wait before reconnecting after an unexpected drop (seconds)
    reconnect_delay_seconds: float = 10.0

    # Wait between declaring the app active and sending the GC hello (seconds)
    hello_delay_seconds: float = 5.0

    # Default wait for a correlated reply (seconds); None waits until teardown
    reply_timeout_seconds: float | None = 10.0

    # Directory holding the cached .username / .token files
    credential_dir: str = "."

    # Region mode advertised in the GC hello
    region_mode: int = 0

    log_level: str = "INFO"
    log_dir: str | None = None

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "ClientConfig":
        """Load configuration from environment variables

        Reads a .env file first (if present) so local overrides apply.

        Returns:
            ClientConfig instance with values from environment

        Raises:
            ValueError: If an environment variable holds an invalid value
        """
        load_dotenv(env_file)

        reconnect_delay = _env_float(
            "RECONNECT_DELAY", cls.reconnect_delay_seconds
        )
        hello_delay = _env_float("HELLO_DELAY", cls.hello_delay_seconds)
        if reconnect_delay is None or hello_delay is None:
            raise ValueError("Reconnect and hello delays cannot be disabled")

        config = cls(
            app_id=_env_int("APP_ID", cls.app_id),
            reconnect_delay_seconds=reconnect_delay,
            hello_delay_seconds=hello_delay,
            reply_timeout_seconds=_env_float(
                "REPLY_TIMEOUT", cls.reply_timeout_seconds
            ),
            credential_dir=os.getenv(
                ENV_PREFIX + "CREDENTIAL_DIR", cls.credential_dir
            ),
            region_mode=_env_int("REGION_MODE", cls.region_mode),
            log_level=os.getenv(ENV_PREFIX + "LOG_LEVEL", cls.log_level).upper(),
            log_dir=os.getenv(ENV_PREFIX + "LOG_DIR") or None,
        )

        logger.info("Configuration loaded:")
        logger.info(f"  App ID: {config.app_id}")
        logger.info(f"  Reconnect Delay: {config.reconnect_delay_seconds}s")
        logger.info(f"  Hello Delay: {config.hello_delay_seconds}s")
        logger.info(f"  Reply Timeout: {config.reply_timeout_seconds}s")
        logger.info(f"  Credential Dir: {config.credential_dir}")
        logger.info(f"  Region Mode: {config.region_mode}")

        return config
