"""
Configuration

Application settings and directory bootstrap.
"""

from .settings import (
    Settings,
    StorageSettings,
    MonitoringSettings,
    ServerSettings,
    get_settings,
    reload_settings,
    prepare_directories,
)

__all__ = [
    'Settings',
    'StorageSettings',
    'MonitoringSettings',
    'ServerSettings',
    'get_settings',
    'reload_settings',
    'prepare_directories',
]
