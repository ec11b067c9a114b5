# pngtoico/__init__.py
"""Pack PNG images into multi-resolution Windows ICO files and unpack them again."""

__version__ = "1.0.0"
