"""
Project configuration for archdecide.
"""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, Mapping, Optional, cast

from archdecide.core.exceptions import ConfigurationError
from archdecide.core.logging import logger

CONFIG_FILE_NAME = ".archdecide"
DEFAULT_DECISIONS_DIR = ".decisions"
ALLOWED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigValidator:
    """
    Configuration validator with rules.

    Validations:
    1. Decisions directory is a non-empty string
    2. Log level is a known loguru level
    3. Log file path does not climb out of the project
    """

    def validate_config(self, config: Dict[str, Any]) -> None:
        """
        Validate complete configuration.

        Raises:
            ConfigurationError: naming the offending field
        """
        decisions = config.get("decisions", {})
        if not isinstance(decisions, dict):
            raise ConfigurationError(
                "Config section 'decisions' must be a mapping", context={"field": "decisions"}
            )

        decisions_dir = decisions.get("dir")
        if not isinstance(decisions_dir, str) or not decisions_dir.strip():
            logger.error("Invalid decisions directory", value=decisions_dir)
            raise ConfigurationError(
                f"Invalid decisions.dir: {decisions_dir!r}", context={"field": "decisions.dir"}
            )

        logging_section = config.get("logging", {})
        if not isinstance(logging_section, dict):
            raise ConfigurationError(
                "Config section 'logging' must be a mapping", context={"field": "logging"}
            )

        level = str(logging_section.get("level", "WARNING")).upper()
        if level not in ALLOWED_LOG_LEVELS:
            logger.error("Invalid log level", log_level=level, allowed=ALLOWED_LOG_LEVELS)
            raise ConfigurationError(
                f"Invalid logging.level: {level}. Allowed: {', '.join(ALLOWED_LOG_LEVELS)}",
                context={"field": "logging.level"},
            )

        log_file = logging_section.get("file")
        if log_file is not None:
            if not isinstance(log_file, str) or not log_file.strip():
                raise ConfigurationError(
                    f"Invalid logging.file: {log_file!r}", context={"field": "logging.file"}
                )
            if ".." in Path(log_file).parts:
                logger.error("Unsafe log file path detected", path=log_file)
                raise ConfigurationError(
                    f"Unsafe logging.file path: {log_file}", context={"field": "logging.file"}
                )


class Settings:
    """
    Main tool configuration.

    Priority order:
    1. Default values
    2. .archdecide file in the working directory
    3. Environment variables
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self._config_path = config_path
        self._environ: Mapping[str, str] = os.environ if environ is None else environ
        self.config = self._load_config()
        self.validator = ConfigValidator()
        self.validator.validate_config(self.config)
        logger.debug(
            "Settings initialized",
            config_source=CONFIG_FILE_NAME if self._find_config_file() else "defaults",
        )

    def _get_default_config(self) -> Dict[str, Any]:
        """Get default configuration."""
        return {
            "version": "1.0",
            "decisions": {"dir": DEFAULT_DECISIONS_DIR},
            "logging": {"level": "WARNING", "file": None, "debug_mode": False},
        }

    def _find_config_file(self) -> Optional[Path]:
        """Find the .archdecide configuration file."""
        if self._config_path is not None:
            return self._config_path if self._config_path.is_file() else None

        local_config = Path.cwd() / CONFIG_FILE_NAME
        if local_config.is_file():
            return local_config

        return None

    def _load_config(self) -> Dict[str, Any]:
        """
        Load configuration in priority order.

        1. Defaults
        2. .archdecide file
        3. Environment variables
        """
        defaults = self._get_default_config()

        config_path = self._find_config_file()
        if config_path is not None:
            try:
                with open(config_path, encoding="utf-8") as f:
                    file_config = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.error("Error reading configuration file", file=str(config_path), error=str(e))
                raise ConfigurationError(
                    f"Error reading configuration file: {e}",
                    context={"field": str(config_path)},
                    cause=e,
                )

            if file_config is not None and not isinstance(file_config, dict):
                raise ConfigurationError(
                    f"Configuration file {config_path} must contain a YAML mapping",
                    context={"field": str(config_path)},
                )
            if file_config:
                self._deep_merge(defaults, file_config)
                logger.debug("Config loaded from file", keys=list(file_config.keys()))

        env_overrides = {
            "ARCHDECIDE_DECISIONS_DIR": ("decisions", "dir"),
            "ARCHDECIDE_LOG_LEVEL": ("logging", "level"),
            "ARCHDECIDE_LOG_FILE": ("logging", "file"),
        }

        for env_key, path_tuple in env_overrides.items():
            env_value = self._environ.get(env_key)
            if env_value and env_value.strip():
                self._set_nested(defaults, path_tuple, env_value.strip())

        return defaults

    def _deep_merge(self, base: Dict[str, Any], update: Dict[str, Any]) -> None:
        """Deep merge of dictionaries."""
        for key, value in update.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(cast(Dict[str, Any], base[key]), cast(Dict[str, Any], value))
            else:
                base[key] = value

    def _set_nested(self, data: Dict[str, Any], path: tuple[str, ...], value: Any) -> None:
        """Set value at nested path."""
        current = data
        for key in path[:-1]:
            if not isinstance(current.get(key), dict):
                current[key] = {}
            current = current[key]
        current[path[-1]] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with support for dotted paths ("decisions.dir")."""
        if "." in key:
            current: Any = self.config
            for part in key.split("."):
                if isinstance(current, dict) and part in current:
                    current = current[part]
                else:
                    return default
            return current
        return self.config.get(key, default)

    def require(self, key: str) -> Any:
        """
        Get required value or raise exception.
        """
        value = self.get(key)
        if value is None:
            logger.error("Required config missing", key=key)
            raise ConfigurationError(f"Missing required config: {key}", context={"field": key})
        return value

    @property
    def decisions_dir(self) -> str:
        return str(self.require("decisions.dir"))

    @property
    def log_level(self) -> str:
        return str(self.get("logging.level", "WARNING")).upper()

    @property
    def log_file(self) -> Optional[str]:
        return self.get("logging.file")

    @property
    def debug_mode(self) -> bool:
        return bool(self.get("logging.debug_mode", False))
