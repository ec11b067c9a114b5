# pngtoico/config/__init__.py
from .config_manager import ConfigManager, IconSettings, default_output_dir

__all__ = ["ConfigManager", "IconSettings", "default_output_dir"]
