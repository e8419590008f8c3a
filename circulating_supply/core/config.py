"""Configuration management for the circulating supply service.

Loads configuration from environment variables or a .env file.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
DEFAULT_RPC_URL = "https://mainnet.infura.io/v3/1125fe73d87c4e5396678f4e3089b3dd"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _parse_int(key: str, raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(key, f"expected an integer, got {raw!r}")


def _parse_float(key: str, raw: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(key, f"expected a number, got {raw!r}")


@dataclass(frozen=True)
class ServiceConfig:
    """Runtime settings for the refresh loop and the HTTP interface."""

    rpc_url: str = DEFAULT_RPC_URL
    host: str = "0.0.0.0"
    port: int = 3000

    # Comma-separated, the zero address is always added by the exclusion set
    burn_addresses: str = ZERO_ADDRESS

    refresh_interval: float = 10.0
    rpc_timeout_seconds: float = 10.0
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if not self.rpc_url:
            raise ConfigurationError("RPC_URL", "must not be empty")
        if not 1 <= self.port <= 65535:
            raise ConfigurationError("PORT", f"must be between 1 and 65535, got {self.port}")
        if self.refresh_interval <= 0:
            raise ConfigurationError(
                "REFRESH_INTERVAL", f"must be positive, got {self.refresh_interval}"
            )
        if self.rpc_timeout_seconds <= 0:
            raise ConfigurationError(
                "RPC_TIMEOUT_SECONDS", f"must be positive, got {self.rpc_timeout_seconds}"
            )
        if self.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                "LOG_LEVEL", f"must be one of {', '.join(_LOG_LEVELS)}, got {self.log_level!r}"
            )

    @classmethod
    def from_env(cls) -> "ServiceConfig":
        """Load configuration from environment variables."""
        return cls(
            rpc_url=os.getenv("RPC_URL") or DEFAULT_RPC_URL,
            host=os.getenv("HOST") or "0.0.0.0",
            port=_parse_int("PORT", os.getenv("PORT") or "3000"),
            burn_addresses=os.getenv("BURN_ADDRESSES") or ZERO_ADDRESS,
            refresh_interval=_parse_float("REFRESH_INTERVAL", os.getenv("REFRESH_INTERVAL") or "10"),
            rpc_timeout_seconds=_parse_float(
                "RPC_TIMEOUT_SECONDS", os.getenv("RPC_TIMEOUT_SECONDS") or "10"
            ),
            log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        )

    @classmethod
    def load(cls, env_file: Optional[Path] = None) -> "ServiceConfig":
        """
        Load configuration from .env file and environment variables.

        Args:
            env_file: Optional path to .env file. If not provided,
                      looks for .env in the working directory.

        Returns:
            ServiceConfig instance with loaded values

        Raises:
            ConfigurationError: If any value is malformed or out of range
        """
        if env_file:
            load_dotenv(env_file)
        else:
            env_path = Path.cwd() / ".env"
            if env_path.exists():
                load_dotenv(env_path)

        return cls.from_env()


# Global config instance (lazy loaded)
_config: Optional[ServiceConfig] = None


def get_config() -> ServiceConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServiceConfig.load()
    return _config


def reload_config(env_file: Optional[Path] = None) -> ServiceConfig:
    """Reload configuration from environment."""
    global _config
    _config = ServiceConfig.load(env_file)
    return _config
