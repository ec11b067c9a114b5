# pngtoico/ico/__init__.py
from .directory import (
    IconDirectory,
    IconDirEntry,
    IconHeader,
    decode_directory,
    decode_entry,
    decode_header,
    encode_directory,
    encode_entry,
    encode_header,
)
from .packer import DEFAULT_SIZES, IconPacker, assemble
from .unpacker import EntryResult, IconUnpacker, UnpackReport

__all__ = [
    "IconDirectory",
    "IconDirEntry",
    "IconHeader",
    "decode_directory",
    "decode_entry",
    "decode_header",
    "encode_directory",
    "encode_entry",
    "encode_header",
    "DEFAULT_SIZES",
    "IconPacker",
    "assemble",
    "EntryResult",
    "IconUnpacker",
    "UnpackReport",
]
