"""Configuration loading and validation for deflink.

Main components:
- ConfigLoader: Load deflink.yaml and apply DEFLINK_* environment overrides
- Default configuration values
- Validation utilities for configuration data
"""

from deflink.config.loader import ConfigLoader

__all__ = ["ConfigLoader"]
