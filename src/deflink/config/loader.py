"""Configuration loader for deflink.

This module provides the ConfigLoader class for loading, validating and
overriding deflink settings from a YAML file and environment variables.
"""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError as PydanticValidationError

from deflink.config.defaults import CONFIG_FILENAME, ENV_VAR_MAP
from deflink.config.validator import flatten_pydantic_errors
from deflink.lib.errors import ConfigError, FileNotFoundError
from deflink.models.config import DefLinkConfig

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


def _parse_env_value(field_name: str, value: str) -> Any:
    """Parse environment variable value to appropriate type.

    Args:
        field_name: Name of the field (used to determine type)
        value: String value from environment variable

    Returns:
        Parsed value in correct type (int, bool, or str)

    Raises:
        ValueError: If value cannot be parsed
    """
    if field_name == "cache_size":
        return int(value)
    elif field_name == "auto_rewrite_on_save":
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(f"not a boolean: {value!r}")
    else:
        return value


def _get_env_value(field_name: str, env_vars: Mapping[str, str]) -> Any | None:
    """Get environment variable value for a field.

    Args:
        field_name: Name of field to get
        env_vars: Environment variables mapping

    Returns:
        Parsed value or None if not found or invalid
    """
    env_var_name = ENV_VAR_MAP.get(field_name)
    if not env_var_name or env_var_name not in env_vars:
        return None

    try:
        return _parse_env_value(field_name, env_vars[env_var_name])
    except (ValueError, KeyError):
        logger.warning(
            f"Ignoring invalid value for {env_var_name}: {env_vars[env_var_name]!r}"
        )
        return None


class ConfigLoader:
    """Loads and validates deflink configuration.

    Configuration precedence (highest to lowest):
    1. Environment variables (DEFLINK_*)
    2. The YAML configuration file
    3. Built-in defaults
    """

    def parse_yaml(self, file_path: str | Path) -> dict[str, Any]:
        """Parse a YAML file and return its contents as a dictionary.

        Args:
            file_path: Path to the YAML file to parse

        Returns:
            Dictionary containing parsed YAML content (empty if the file is empty)

        Raises:
            FileNotFoundError: If the file does not exist
            ConfigError: If YAML parsing fails or the top level is not a mapping
        """
        path = Path(file_path)

        try:
            with open(path, encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except OSError as e:
            raise FileNotFoundError(
                str(file_path),
                f"Configuration file not found at {file_path}. "
                f"Please ensure the file exists at this path.",
            ) from e
        except yaml.YAMLError as e:
            raise ConfigError(
                "yaml_parse",
                f"Failed to parse YAML file {file_path}: {str(e)}",
            ) from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigError(
                "yaml_parse",
                f"Expected a mapping at the top level of {file_path}, "
                f"got {type(content).__name__}",
            )
        return content

    def apply_env_overrides(
        self, config: dict[str, Any], env_vars: Mapping[str, str] | None = None
    ) -> dict[str, Any]:
        """Return a copy of ``config`` with DEFLINK_* environment overrides.

        Args:
            config: Configuration values read from the file
            env_vars: Environment mapping, defaults to ``os.environ``

        Returns:
            New dictionary with overridden values
        """
        env = os.environ if env_vars is None else env_vars
        merged = dict(config)
        for field_name in ENV_VAR_MAP:
            value = _get_env_value(field_name, env)
            if value is not None:
                logger.debug(f"Overriding '{field_name}' from environment")
                merged[field_name] = value
        return merged

    def load(
        self,
        file_path: str | Path | None = None,
        base_dir: str | Path = ".",
        env_vars: Mapping[str, str] | None = None,
    ) -> DefLinkConfig:
        """Load the effective configuration.

        When ``file_path`` is omitted, ``deflink.yaml`` inside ``base_dir`` is
        used if it exists; otherwise defaults apply.

        Args:
            file_path: Explicit configuration file; must exist when given
            base_dir: Directory searched for the default configuration file
            env_vars: Environment mapping, defaults to ``os.environ``

        Returns:
            Validated DefLinkConfig instance

        Raises:
            FileNotFoundError: If an explicit file does not exist
            ConfigError: If parsing or validation fails
        """
        raw: dict[str, Any] = {}
        source = "defaults"

        if file_path is not None:
            raw = self.parse_yaml(file_path)
            source = str(file_path)
        else:
            default_path = Path(base_dir) / CONFIG_FILENAME
            if default_path.is_file():
                raw = self.parse_yaml(default_path)
                source = str(default_path)

        merged = self.apply_env_overrides(raw, env_vars)

        try:
            config = DefLinkConfig(**merged)
        except PydanticValidationError as e:
            error_messages = flatten_pydantic_errors(e)
            error_text = "\n".join(error_messages)
            raise ConfigError(
                "config_validation",
                f"Invalid configuration from {source}:\n{error_text}",
            ) from e

        logger.debug(f"Loaded configuration from {source}")
        return config
