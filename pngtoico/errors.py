# pngtoico/errors.py
"""Exception hierarchy shared by the codec, the image adapter and the CLI."""


class IconToolError(Exception):
    """Base class for every failure the tool reports instead of crashing on"""


class ArgumentError(IconToolError):
    """Missing, unknown or invalid argument or configuration value"""


class InvalidArgumentError(ArgumentError, ValueError):
    """A value handed to the codec cannot be represented in an ICO container"""


class NotFoundError(IconToolError):
    """Input file does not exist"""


class DecodeError(IconToolError):
    """Source image or embedded payload is not a decodable raster"""


class MalformedContainerError(IconToolError):
    """ICO header or directory is truncated, inconsistent or out of bounds"""


class EncodeError(IconToolError):
    """Resizing or PNG encoding failed"""


class IconIOError(IconToolError):
    """Filesystem read or write failed"""
