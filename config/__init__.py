"""
Centralized configuration package for the configurator library.

This package loads the library's own settings, validates them, and makes
them available to the engine. It also holds the registry that maps type
names found in exported data back to container classes.

Usage:
    from config import config

    # Access using attribute notation
    tag_key = config.export.type_tag_key

    # Or using get() method with dot notation
    tag_key = config.get("export.type_tag_key")

    # Container classes by type name
    from config import registry
    address_class = registry.require("Address")
"""

# First, initialize the registry (which has no dependencies)
from config.registry import registry

# Then, import the configuration system
from config.config_manager import AppConfig, config

# Export the public interface
__all__ = ["config", "AppConfig", "registry"]
