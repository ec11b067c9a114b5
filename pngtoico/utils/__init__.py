# pngtoico/utils/__init__.py
from .files import atomic_write_bytes, ensure_dir, read_bytes
from .log import setup_logging

__all__ = ["atomic_write_bytes", "ensure_dir", "read_bytes", "setup_logging"]
