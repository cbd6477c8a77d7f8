"""Default configuration values for deflink."""

from typing import Any

CONFIG_FILENAME = "deflink.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "definitions_folder": "definitions",
    "auto_rewrite_on_save": False,
    "cache_size": 200,
    "file_extensions": (".md",),
}

# Environment variable to field name mapping
ENV_VAR_MAP: dict[str, str] = {
    "definitions_folder": "DEFLINK_DEFINITIONS_FOLDER",
    "auto_rewrite_on_save": "DEFLINK_AUTO_REWRITE_ON_SAVE",
    "cache_size": "DEFLINK_CACHE_SIZE",
}
