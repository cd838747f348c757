"""
Enclave configuration.

Values come from the process environment, then a .env file, then the
schema defaults. They are validated against CONFIG_SCHEMA and frozen into
a Settings snapshot that the gates receive at startup.
"""

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from enclave.shared.gate import GateLogger
from enclave.Config.schema import (
    CONFIG_SCHEMA,
    ConfigField,
    ConfigType,
    ConfigCategory,
    get_schema_by_key,
    get_required_fields,
)

_log = GateLogger.get("Config")


PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = PROJECT_ROOT / ".env"

_TRUE_VALUES = ("true", "1", "yes", "on")
_FALSE_VALUES = ("false", "0", "no", "off")


class Settings(BaseModel):
    """Resolved configuration values, fixed for the life of the process."""

    model_config = ConfigDict(frozen=True)

    workspace_dir: str
    workspace_fallback_dir: str
    platform_url: str
    log_level: str = "INFO"
    search_max_file_bytes: int = Field(default=10 * 1024 * 1024, ge=0)
    strict_traversal: bool = True


class ConfigManager:
    """
    Reads and validates the Enclave settings.

    A process environment variable beats the same key in the .env file,
    which beats the schema default. Empty values count as unset.
    """

    def __init__(self, env_file: Optional[Union[str, Path]] = None):
        self._env_file = Path(env_file) if env_file else ENV_FILE
        self._cache: Dict[str, Any] = {}
        self._loaded = False
        self._load()

    def _load(self):
        if self._env_file.exists():
            load_dotenv(self._env_file, override=False)
            _log.debug(f"Loaded {self._env_file}")

        for field in CONFIG_SCHEMA:
            raw = os.environ.get(field.env_var) or field.default
            self._cache[field.key] = self._convert_type(raw, field.config_type)

        self._loaded = True

    def _convert_type(self, value: Any, config_type: ConfigType) -> Any:
        """
        Coerce a raw value to the field's type.

        Values that do not convert are kept as-is so validate() can
        report them.
        """
        if value is None:
            return None

        if config_type == ConfigType.BOOLEAN:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE_VALUES:
                return True
            if text in _FALSE_VALUES:
                return False
            return value

        if config_type == ConfigType.INTEGER:
            try:
                return int(value)
            except (ValueError, TypeError):
                return value

        text = str(value).strip()
        if config_type == ConfigType.PATH:
            return os.path.expanduser(text)
        return text

    def get(self, key: str, default: Any = None) -> Any:
        """Value of one key after conversion."""
        if not self._loaded:
            self._load()
        return self._cache.get(key, default)

    def get_all(self) -> Dict[str, Any]:
        return {field.key: self._cache.get(field.key) for field in CONFIG_SCHEMA}

    def validate(self) -> Tuple[bool, List[str]]:
        """
        Check every value against its schema field.

        Returns:
            (is_valid, list of error messages)
        """
        errors = []

        for field in CONFIG_SCHEMA:
            value = self._cache.get(field.key)

            if value is None or value == "":
                if field.required:
                    errors.append(f"Required config missing: {field.key}")
                continue

            if field.validation and not re.match(field.validation, str(value)):
                errors.append(f"Invalid format for {field.key}: {value!r}")

            if field.options and str(value).upper() not in field.options:
                errors.append(
                    f"Invalid option for {field.key}: {value} "
                    f"(expected one of {', '.join(field.options)})"
                )

        return not errors, errors

    def settings(self) -> Settings:
        """
        Freeze the current values into Settings.

        Raises:
            ValueError: If validate() reports any error
        """
        is_valid, errors = self.validate()
        if not is_valid:
            for error in errors:
                _log.error(error)
            raise ValueError("Invalid configuration: " + "; ".join(errors))

        return Settings(
            workspace_dir=self._cache["WORKSPACE_DIR"],
            workspace_fallback_dir=self._cache["WORKSPACE_FALLBACK_DIR"],
            platform_url=self._cache["PLATFORM_URL"],
            log_level=str(self._cache["LOG_LEVEL"]).upper(),
            search_max_file_bytes=self._cache["SEARCH_MAX_FILE_BYTES"],
            strict_traversal=self._cache["STRICT_TRAVERSAL"],
        )

    def create_env_template(self) -> str:
        """Render a .env.example with every key at its default."""
        lines = [
            "# Enclave Configuration",
            "# Copy this file to .env and fill in your values",
            "",
        ]

        category = None
        for field in CONFIG_SCHEMA:
            if field.category != category:
                category = field.category
                lines += [f"# === {category.value.title()} ===", ""]
            lines += _template_entry(field)

        return "\n".join(lines)


def _template_entry(field: ConfigField) -> List[str]:
    entry = [f"# {field.description}"]
    if field.options:
        entry.append(f"# Options: {', '.join(field.options)}")

    default = field.default
    if isinstance(default, bool):
        default = str(default).lower()
    entry.append(f"{field.env_var}={'' if default is None else default}")
    entry.append("")
    return entry


# Process-wide manager used by the entry points
_manager: Optional[ConfigManager] = None


def get_manager() -> ConfigManager:
    global _manager
    if _manager is None:
        _manager = ConfigManager()
    return _manager


def reload():
    """Re-read the environment and .env file."""
    global _manager
    _manager = ConfigManager()


def get(key: str, default: Any = None) -> Any:
    return get_manager().get(key, default)


def validate() -> Tuple[bool, List[str]]:
    return get_manager().validate()


def load_settings() -> Settings:
    """Settings for this process, from the shared manager."""
    return get_manager().settings()


__all__ = [
    "CONFIG_SCHEMA",
    "ConfigCategory",
    "ConfigField",
    "ConfigManager",
    "ConfigType",
    "Settings",
    "get",
    "get_manager",
    "get_required_fields",
    "get_schema_by_key",
    "load_settings",
    "reload",
    "validate",
]
