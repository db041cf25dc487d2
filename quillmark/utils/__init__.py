"""
Utility functions and helpers.

Qt-dependent helpers (``warning_manager``) are imported from their module
directly so the settings and logging helpers stay usable without a display.
"""
from .logging_config import setup_logging
from .resource_loader import get_app_data_dir, get_config_dir, get_log_dir
from .settings import EditorSettings, load_settings, save_settings

__all__ = [
    'setup_logging',
    'get_app_data_dir',
    'get_config_dir',
    'get_log_dir',
    'EditorSettings',
    'load_settings',
    'save_settings'
]
