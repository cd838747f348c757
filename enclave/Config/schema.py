"""
Configuration schema for Enclave.

Defines all configurable options with metadata for validation,
documentation, and the .env template.
"""

from enum import Enum
from typing import Optional, List, Any
from dataclasses import dataclass


class ConfigType(Enum):
    """Configuration value types."""
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    PATH = "path"          # File system path
    URL = "url"


class ConfigCategory(Enum):
    """Configuration categories for grouping."""
    PATHS = "paths"
    SERVER = "server"
    FEATURES = "features"


@dataclass
class ConfigField:
    """Definition of a configuration field."""
    key: str
    description: str
    config_type: ConfigType
    category: ConfigCategory
    required: bool = False
    default: Any = None
    env_var: str = None          # Override env var name (defaults to key)
    validation: str = None       # Regex pattern
    options: List[str] = None    # For enumerated types

    def __post_init__(self):
        if self.env_var is None:
            self.env_var = self.key


# ==================== Schema Definition ====================

CONFIG_SCHEMA: List[ConfigField] = [
    # === Paths ===
    ConfigField(
        key="WORKSPACE_DIR",
        description="Root directory that bounds every file operation",
        config_type=ConfigType.PATH,
        category=ConfigCategory.PATHS,
        required=True,
        default="/app/workspace",
    ),
    ConfigField(
        key="WORKSPACE_FALLBACK_DIR",
        description="Workspace used when WORKSPACE_DIR cannot be created",
        config_type=ConfigType.PATH,
        category=ConfigCategory.PATHS,
        required=True,
        default="/tmp/filesystem-workspace",
    ),

    # === Server ===
    ConfigField(
        key="PLATFORM_URL",
        description="Base URL used to build shareable file links",
        config_type=ConfigType.URL,
        category=ConfigCategory.SERVER,
        required=True,
        default="https://mcp.platform.dev",
        validation=r"^https?://.+",
    ),
    ConfigField(
        key="LOG_LEVEL",
        description="Logging level for the enclave loggers",
        config_type=ConfigType.STRING,
        category=ConfigCategory.SERVER,
        required=False,
        default="INFO",
        options=["DEBUG", "INFO", "WARNING", "ERROR"],
    ),

    # === Features ===
    ConfigField(
        key="SEARCH_MAX_FILE_BYTES",
        description="Largest file scanned by content search (0 = no limit)",
        config_type=ConfigType.INTEGER,
        category=ConfigCategory.FEATURES,
        required=False,
        default=10 * 1024 * 1024,
        validation=r"^\d+$",
    ),
    ConfigField(
        key="STRICT_TRAVERSAL",
        description="Fail listings and searches on unreadable subdirectories",
        config_type=ConfigType.BOOLEAN,
        category=ConfigCategory.FEATURES,
        required=False,
        default=True,
        validation=r"^(True|False)$",
    ),
]


def get_schema_by_key(key: str) -> Optional[ConfigField]:
    """Get schema field by key."""
    for field in CONFIG_SCHEMA:
        if field.key == key:
            return field
    return None


def get_schema_by_category(category: ConfigCategory) -> List[ConfigField]:
    """Get all fields in a category."""
    return [f for f in CONFIG_SCHEMA if f.category == category]


def get_required_fields() -> List[ConfigField]:
    """Get all required fields."""
    return [f for f in CONFIG_SCHEMA if f.required]
