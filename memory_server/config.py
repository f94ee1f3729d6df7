"""
Configuration

Environment-derived settings (PORT, HOST, LOG_LEVEL) and logging setup.
A .env file in the working directory is loaded first; real environment
variables win over it.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv

from .events import LEVELS

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_LOG_LEVEL = "info"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Aliases accepted on top of error|warn|info|debug
_LEVEL_ALIASES = {"warning": "warn"}


class ConfigError(ValueError):
    """Raised when an environment setting has an invalid value."""
    pass


def parse_log_level(value: str) -> str:
    level = value.strip().lower()
    level = _LEVEL_ALIASES.get(level, level)
    if level not in LEVELS:
        raise ConfigError(
            f"Invalid LOG_LEVEL '{value}'. Expected one of: {', '.join(LEVELS)}"
        )
    return level


def parse_port(value: str) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid PORT '{value}'. Expected an integer")
    if not 0 < port < 65536:
        raise ConfigError(f"Invalid PORT {port}. Expected 1-65535")
    return port


@dataclass
class Settings:
    """Process wiring settings."""
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, dotenv: bool = True) -> "Settings":
        """
        Read settings from the environment.

        Args:
            environ: mapping to read instead of os.environ (tests)
            dotenv: load a .env file into os.environ first
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        return cls(
            port=parse_port(environ.get("PORT", str(DEFAULT_PORT))),
            host=environ.get("HOST", DEFAULT_HOST) or DEFAULT_HOST,
            log_level=parse_log_level(environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL)),
        )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure root logging on stderr; stdout is reserved for the stdio transport."""
    logging.basicConfig(
        level=LEVELS[parse_log_level(level)],
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
