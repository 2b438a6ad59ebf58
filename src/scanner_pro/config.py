"""Configuration management for Scanner Pro."""

import json
import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def config_file_path() -> Path:
    """Location of the JSON configuration file."""
    return Path.home() / ".config" / "scanner_pro" / "config.json"


def parse_int_env(env_var: str, default: int) -> int:
    """Parse integer environment variable with validation."""
    value = os.getenv(env_var)
    if value is None:
        return default

    try:
        return int(value)
    except ValueError:
        logger.warning(
            f"Invalid integer value '{value}' for {env_var}. "
            f"Using default: {default}"
        )
        return default


@dataclass
class StorageConfig:
    """Configuration for the local scan store."""
    db_path: Optional[Path] = None

    def __post_init__(self):
        """Set default path if not provided."""
        if self.db_path is None:
            self.db_path = Path.home() / ".local/share/scanner_pro/storage.db"
        else:
            self.db_path = Path(self.db_path)


@dataclass
class ScannerConfig:
    """Configuration for scan handling and history views."""
    cooldown_ms: int = 2000            # Delay before the next scan is accepted
    recent_limit: int = 10             # Records shown in "recent scans"


@dataclass
class ScannerProConfig:
    """Main configuration for Scanner Pro."""
    scanner: ScannerConfig
    storage: StorageConfig

    @classmethod
    def load(cls) -> 'ScannerProConfig':
        """Load configuration from file and environment variables."""
        # Start with defaults as dict
        config_dict = {
            "scanner": {
                "cooldown_ms": 2000,
                "recent_limit": 10,
            },
            "storage": {
                "db_path": None,
            },
        }

        # Load from config file if exists
        config_path = config_file_path()
        if config_path.exists():
            try:
                with open(config_path, "r") as f:
                    file_config = json.load(f)
                logger.info(f"Loading configuration from {config_path}")

                # Deep merge file_config into config_dict
                for section, values in file_config.items():
                    if section in config_dict and isinstance(values, dict):
                        config_dict[section].update(
                            {k: v for k, v in values.items() if k in config_dict[section]}
                        )

            except json.JSONDecodeError as e:
                error_msg = (
                    f"Configuration file is corrupted or contains invalid JSON:\n"
                    f"  File: {config_path}\n"
                    f"  Error: {e}\n"
                    f"  Using default configuration instead."
                )
                logger.error(error_msg)
                print(f"WARNING: {error_msg}", file=sys.stderr)

            except (OSError, AttributeError) as e:
                # Permissions, or a top-level value that is not an object
                logger.warning(f"Failed to load config from file: {e}")

        # Override with environment variables
        config_dict["scanner"]["cooldown_ms"] = parse_int_env('SCANNER_PRO_COOLDOWN_MS', config_dict["scanner"]["cooldown_ms"])
        config_dict["scanner"]["recent_limit"] = parse_int_env('SCANNER_PRO_RECENT_LIMIT', config_dict["scanner"]["recent_limit"])
        config_dict["storage"]["db_path"] = Path(os.getenv('SCANNER_PRO_DB_PATH')) if os.getenv('SCANNER_PRO_DB_PATH') else config_dict["storage"]["db_path"]

        config = cls(
            scanner=ScannerConfig(**config_dict["scanner"]),
            storage=StorageConfig(**config_dict["storage"]),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Validate configuration values."""
        if not isinstance(self.scanner.cooldown_ms, int) or self.scanner.cooldown_ms < 0:
            raise ConfigurationError(
                f"Invalid scan cooldown {self.scanner.cooldown_ms}. "
                "Must be an integer >= 0 milliseconds"
            )

        if not isinstance(self.scanner.recent_limit, int) or self.scanner.recent_limit < 1:
            raise ConfigurationError(
                f"Invalid recent limit {self.scanner.recent_limit}. "
                "Must be an integer >= 1"
            )


def save_config_to_file(config: ScannerProConfig) -> Path:
    """Save configuration to JSON file."""
    config_path = config_file_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = {
        "scanner": {
            "cooldown_ms": config.scanner.cooldown_ms,
            "recent_limit": config.scanner.recent_limit,
        },
        "storage": {
            "db_path": str(config.storage.db_path) if config.storage.db_path else None,
        },
    }

    with open(config_path, "w") as f:
        json.dump(config_dict, f, indent=2)

    logger.info(f"Configuration saved to {config_path}")
    return config_path
