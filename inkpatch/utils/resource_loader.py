"""
Per-user data and configuration directories.
"""
import os
import sys
from pathlib import Path

APP_NAME = "Inkpatch"


def get_app_data_dir(app_name: str = APP_NAME, create: bool = True) -> Path:
    """
    Get the application data directory for storing user data.

    Args:
        app_name: Name of the application
        create: Create the directory if it does not exist

    Returns:
        Path to the app data directory
    """
    if os.name == 'nt':  # Windows
        base_dir = os.environ.get('APPDATA', os.path.expanduser('~'))
    elif sys.platform == 'darwin':  # macOS
        base_dir = os.path.expanduser('~/Library/Application Support')
    else:  # Linux and others
        base_dir = os.environ.get('XDG_DATA_HOME', os.path.expanduser('~/.local/share'))

    app_dir = Path(base_dir) / app_name
    if create:
        app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_config_dir(app_name: str = APP_NAME, create: bool = True) -> Path:
    """
    Get the configuration directory for storing settings.

    Args:
        app_name: Name of the application
        create: Create the directory if it does not exist

    Returns:
        Path to the config directory
    """
    if os.name == 'nt':  # Windows
        config_dir = get_app_data_dir(app_name, create) / "config"
    elif sys.platform == 'darwin':  # macOS
        config_dir = Path.home() / "Library" / "Preferences" / app_name
    else:  # Linux
        base_dir = os.environ.get('XDG_CONFIG_HOME', str(Path.home() / ".config"))
        config_dir = Path(base_dir) / app_name

    if create:
        config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir
