# ==============================================================================
# O2R INSPECTOR - PATH UTILITIES
# ==============================================================================
# Per-user data locations (configuration file).
#
# User data is stored in:
#   - Windows: %APPDATA%/O2RInspector/
#   - Linux:   $XDG_CONFIG_HOME/O2RInspector/ (default ~/.config/O2RInspector/)
#   - macOS:   ~/Library/Application Support/O2RInspector/
#
# Usage:
#   from o2r_inspector.core.paths import Paths
#   config_path = Paths.get_config_path()
# ==============================================================================

import os
import sys
from typing import Optional


class Paths:
    """
    Centralized path management for O2R Inspector.

    The user data directory can be overridden with the ``O2R_INSPECTOR_HOME``
    environment variable (used by the test-suite and portable installs).
    """

    APP_NAME = "O2RInspector"
    ENV_OVERRIDE = "O2R_INSPECTOR_HOME"

    _user_data_dir: Optional[str] = None

    @classmethod
    def get_user_data_dir(cls) -> str:
        """
        Get the user data directory, creating it on first use.

        Returns:
            Absolute path to the user data directory
        """
        override = os.environ.get(cls.ENV_OVERRIDE)
        if override:
            os.makedirs(override, exist_ok=True)
            return override

        if cls._user_data_dir is None:
            if sys.platform == 'win32':
                base = os.environ.get('APPDATA', os.path.expanduser('~'))
                cls._user_data_dir = os.path.join(base, cls.APP_NAME)
            elif sys.platform == 'darwin':
                cls._user_data_dir = os.path.join(
                    os.path.expanduser('~'),
                    'Library', 'Application Support', cls.APP_NAME
                )
            else:
                base = os.environ.get('XDG_CONFIG_HOME',
                                      os.path.join(os.path.expanduser('~'), '.config'))
                cls._user_data_dir = os.path.join(base, cls.APP_NAME)

            os.makedirs(cls._user_data_dir, exist_ok=True)

        return cls._user_data_dir

    @classmethod
    def get_config_path(cls) -> str:
        """Absolute path to config.json."""
        return os.path.join(cls.get_user_data_dir(), 'config.json')
