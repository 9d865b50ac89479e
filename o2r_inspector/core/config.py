# ==============================================================================
# O2R INSPECTOR - CONFIGURATION MODULE
# ==============================================================================
# Centralized configuration management for the inspector.
#
# This module handles:
#   - Loading/saving configuration from a JSON file
#   - Default values for all settings
#   - Typed property access to the common settings
#
# Configuration is stored in the user data directory (see paths.py).
#
# Usage:
#   from o2r_inspector.core.config import get_config
#   config = get_config()
#   print(config.default_export_name)
#   config.c_values_per_line = 16
#   config.save()
# ==============================================================================

import os
import json
from typing import Optional, Dict, Any

from .paths import Paths


# ==============================================================================
# DEFAULT CONFIGURATION VALUES
# ==============================================================================
# These are used when no config file exists or when values are missing.

DEFAULT_CONFIG = {
    # -------------------------------------------------------------------------
    # ARCHIVES
    # -------------------------------------------------------------------------
    # File name suggested when exporting a workspace archive
    "default_export_name": "workspace.o2r",

    # Last archive opened from the command line
    "last_archive_path": "",

    # -------------------------------------------------------------------------
    # NEW RESOURCES
    # -------------------------------------------------------------------------
    # Resource version written into synthesized headers
    "default_resource_version": 0,

    # Unique id written into synthesized headers (hex string)
    "default_unique_id": "0xDEADBEEFDEADBEEF",

    # -------------------------------------------------------------------------
    # EDITORS
    # -------------------------------------------------------------------------
    # Hex literals per line when writing animation C source
    "c_values_per_line": 8,

    # Characters shown in message previews
    "preview_length": 80,

    # Bytes per line in hex dumps
    "hex_bytes_per_line": 16,

    # -------------------------------------------------------------------------
    # ADVANCED
    # -------------------------------------------------------------------------
    # Print [DEBUG] lines
    "debug_mode": False,

    # ANSI colours in CLI output
    "color_output": True,
}


# ==============================================================================
# CONFIGURATION CLASS
# ==============================================================================
class Config:
    """
    Configuration manager for O2R Inspector.

    Handles loading, saving, and accessing settings. Settings are stored in a
    JSON file and exposed as properties on this object.

    Attributes:
        config_path: Path to the configuration file
        data: Dictionary containing all settings

    Example:
        >>> config = Config()
        >>> config.load()
        >>> config.preview_length = 120
        >>> config.save()
    """

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to config file. If None, uses the user data dir.
        """
        self.config_path = config_path or Paths.get_config_path()
        self.data: Dict[str, Any] = DEFAULT_CONFIG.copy()
        self._modified = False

    # -------------------------------------------------------------------------
    # LOADING AND SAVING
    # -------------------------------------------------------------------------

    def load(self) -> bool:
        """
        Load configuration from file.

        If the file doesn't exist, defaults are used. Keys that are not part
        of DEFAULT_CONFIG are ignored. Values go through the property setters;
        a rejected value keeps its default.

        Returns:
            True if file was loaded, False if using defaults
        """
        if not os.path.isfile(self.config_path):
            self._debug("Config file not found, using defaults")
            return False

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            print(f"[ERROR] Invalid config file {self.config_path}: {e}")
            return False

        if not isinstance(loaded, dict):
            print(f"[ERROR] Invalid config file {self.config_path}: expected an object")
            return False

        for key, value in loaded.items():
            if key not in DEFAULT_CONFIG:
                continue
            try:
                setattr(self, key, value)
            except (TypeError, ValueError) as e:
                print(f"[WARN] Ignoring invalid value for {key} in {self.config_path}: {e}")

        self._debug(f"Loaded config from {self.config_path}")
        self._modified = False
        return True

    def save(self) -> bool:
        """
        Save configuration to file, creating the directory if needed.

        Returns:
            True if saved successfully
        """
        try:
            directory = os.path.dirname(self.config_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self.data, f, indent=4, sort_keys=True)
        except OSError as e:
            print(f"[ERROR] Failed to save config: {e}")
            return False

        self._debug(f"Saved config to {self.config_path}")
        self._modified = False
        return True

    def reset_to_defaults(self):
        """Reset all settings to their default values."""
        self.data = DEFAULT_CONFIG.copy()
        self._modified = True

    @property
    def is_modified(self) -> bool:
        return self._modified

    def _debug(self, message: str):
        if self.debug_mode:
            print(f"[DEBUG] {message}")

    # -------------------------------------------------------------------------
    # PROPERTY ACCESS
    # -------------------------------------------------------------------------

    @property
    def default_export_name(self) -> str:
        """Get the suggested archive export file name."""
        return self.data.get('default_export_name', 'workspace.o2r')

    @default_export_name.setter
    def default_export_name(self, value: str):
        self.data['default_export_name'] = str(value)
        self._modified = True

    @property
    def last_archive_path(self) -> str:
        return self.data.get('last_archive_path', '')

    @last_archive_path.setter
    def last_archive_path(self, value: str):
        self.data['last_archive_path'] = str(value)
        self._modified = True

    @property
    def default_resource_version(self) -> int:
        """Get the resource version used for new resources."""
        return int(self.data.get('default_resource_version', 0))

    @default_resource_version.setter
    def default_resource_version(self, value: int):
        value = int(value)
        if value < 0:
            raise ValueError("default_resource_version must be a non-negative integer")
        self.data['default_resource_version'] = value
        self._modified = True

    @property
    def default_unique_id(self) -> int:
        """Get the unique id used for new resources."""
        return int(str(self.data.get('default_unique_id', '0xDEADBEEFDEADBEEF')), 0)

    @default_unique_id.setter
    def default_unique_id(self, value: int):
        value = int(value, 0) if isinstance(value, str) else int(value)
        if not 0 <= value <= 0xFFFFFFFFFFFFFFFF:
            raise ValueError("default_unique_id must fit in 64 bits")
        self.data['default_unique_id'] = f"0x{value:016X}"
        self._modified = True

    @property
    def c_values_per_line(self) -> int:
        """Get the number of hex literals per line in generated C source."""
        return self.data.get('c_values_per_line', 8)

    @c_values_per_line.setter
    def c_values_per_line(self, value: int):
        self.data['c_values_per_line'] = max(1, min(64, int(value)))
        self._modified = True

    @property
    def preview_length(self) -> int:
        """Get the message preview length in characters."""
        return self.data.get('preview_length', 80)

    @preview_length.setter
    def preview_length(self, value: int):
        self.data['preview_length'] = max(8, int(value))
        self._modified = True

    @property
    def hex_bytes_per_line(self) -> int:
        return self.data.get('hex_bytes_per_line', 16)

    @hex_bytes_per_line.setter
    def hex_bytes_per_line(self, value: int):
        value = int(value)
        if value not in (8, 16, 32):
            raise ValueError("hex_bytes_per_line must be 8, 16 or 32")
        self.data['hex_bytes_per_line'] = value
        self._modified = True

    @property
    def debug_mode(self) -> bool:
        """Check if debug mode is enabled."""
        return bool(self.data.get('debug_mode', False))

    @debug_mode.setter
    def debug_mode(self, value: bool):
        self.data['debug_mode'] = bool(value)
        self._modified = True

    @property
    def color_output(self) -> bool:
        return bool(self.data.get('color_output', True))

    @color_output.setter
    def color_output(self, value: bool):
        self.data['color_output'] = bool(value)
        self._modified = True

    # -------------------------------------------------------------------------
    # GENERIC ACCESS
    # -------------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key
            default: Default value if key not found

        Returns:
            The configuration value
        """
        return self.data.get(key, default)

    def set(self, key: str, value: Any):
        """
        Set a configuration value through its typed property.

        Raises:
            KeyError: If the key is not a known setting
            ValueError: If the value is rejected by the property
        """
        if key not in DEFAULT_CONFIG:
            raise KeyError(f"Unknown setting: {key}")
        setattr(self, key, value)

    def __getitem__(self, key: str) -> Any:
        """Allow dictionary-style access: config['key']"""
        return self.data[key]

    def __setitem__(self, key: str, value: Any):
        """Allow dictionary-style setting: config['key'] = value"""
        self.set(key, value)


# ==============================================================================
# GLOBAL CONFIG INSTANCE
# ==============================================================================

_global_config: Optional[Config] = None


def get_config() -> Config:
    """
    Get the global configuration instance.

    Creates and loads config on first call.

    Returns:
        The global Config instance
    """
    global _global_config

    if _global_config is None:
        _global_config = Config()
        _global_config.load()

    return _global_config


def reset_config():
    """Drop the cached global instance so the next get_config() reloads."""
    global _global_config
    _global_config = None
