"""Core functionality"""
from .config import load_settings, get_settings
from .context import ConfigContext
from .defaults import default_configuration

__all__ = ["load_settings", "get_settings", "ConfigContext", "default_configuration"]
