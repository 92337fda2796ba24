"""
Utility functions and helpers.
"""
from .resource_loader import (
    APP_NAME,
    get_app_data_dir,
    get_config_dir,
)

__all__ = [
    'APP_NAME',
    'get_app_data_dir',
    'get_config_dir',
]
