# pngtoico/ico/directory.py
"""Binary layout of the ICO header and directory.

An ICO container is a 6 byte header (reserved, image type, entry count)
followed by one 16 byte directory entry per image, followed by the image
payloads. Every integer is little-endian. This module only deals with the
header and directory; payloads are opaque byte blobs here.
"""
import logging
import struct
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from pngtoico.errors import InvalidArgumentError, MalformedContainerError

logger = logging.getLogger(__name__)

HEADER_FORMAT = "<HHH"
ENTRY_FORMAT = "<BBBBHHII"
HEADER_SIZE = struct.calcsize(HEADER_FORMAT)  # 6
ENTRY_SIZE = struct.calcsize(ENTRY_FORMAT)  # 16

ICON_TYPE = 1
CURSOR_TYPE = 2

MAX_ENTRIES = 0xFFFF
MAX_DIMENSION = 256
MAX_UINT32 = 0xFFFFFFFF

TRUE_COLOR_PLANES = 1
TRUE_COLOR_BPP = 32


@dataclass
class IconHeader:
    image_type: int
    entry_count: int
    reserved: int = 0


@dataclass
class IconDirEntry:
    """One size variant of the icon and where its payload lives"""
    width: int
    height: int
    payload_size: int
    payload_offset: int
    color_count: int = 0
    reserved: int = 0
    color_planes: int = TRUE_COLOR_PLANES
    bits_per_pixel: int = TRUE_COLOR_BPP

    @property
    def payload_end(self) -> int:
        return self.payload_offset + self.payload_size

    @property
    def label(self) -> str:
        return f"{self.width}x{self.height}"


@dataclass
class IconDirectory:
    entries: List[IconDirEntry] = field(default_factory=list)
    image_type: int = ICON_TYPE
    reserved: int = 0

    @property
    def data_offset(self) -> int:
        """Absolute offset of the first payload byte"""
        return data_offset(len(self.entries))

    @classmethod
    def layout(cls, frames: Iterable[Tuple[int, int, int]]) -> "IconDirectory":
        """Build a directory from ``(width, height, payload_size)`` triples.

        Payloads are placed back to back in the given order, the first one
        immediately after the directory.
        """
        frames = list(frames)
        if len(frames) > MAX_ENTRIES:
            raise InvalidArgumentError(
                f"An ICO container holds at most {MAX_ENTRIES} images, got {len(frames)}"
            )
        offset = data_offset(len(frames))
        entries = []
        for width, height, size in frames:
            entries.append(IconDirEntry(width=width, height=height,
                                        payload_size=size, payload_offset=offset))
            offset += size
        return cls(entries=entries)


def data_offset(entry_count: int) -> int:
    return HEADER_SIZE + ENTRY_SIZE * entry_count


def _encode_dimension(name: str, value: int) -> int:
    if not 1 <= value <= MAX_DIMENSION:
        raise InvalidArgumentError(f"Icon {name} must be between 1 and {MAX_DIMENSION}, got {value}")
    # 256 does not fit in a byte; the format stores it as 0
    return 0 if value == MAX_DIMENSION else value


def _decode_dimension(value: int) -> int:
    return MAX_DIMENSION if value == 0 else value


def encode_header(entry_count: int) -> bytes:
    if not 0 <= entry_count <= MAX_ENTRIES:
        raise InvalidArgumentError(f"Entry count must be between 0 and {MAX_ENTRIES}, got {entry_count}")
    return struct.pack(HEADER_FORMAT, 0, ICON_TYPE, entry_count)


def encode_entry(entry: IconDirEntry) -> bytes:
    width = _encode_dimension("width", entry.width)
    height = _encode_dimension("height", entry.height)
    for name in ("payload_size", "payload_offset"):
        value = getattr(entry, name)
        if not 0 <= value <= MAX_UINT32:
            raise InvalidArgumentError(f"{name} out of range for a 32-bit field: {value}")
    return struct.pack(
        ENTRY_FORMAT,
        width,
        height,
        entry.color_count,
        entry.reserved,
        entry.color_planes,
        entry.bits_per_pixel,
        entry.payload_size,
        entry.payload_offset,
    )


def encode_directory(directory: IconDirectory) -> bytes:
    """Header followed by every directory entry, in order"""
    parts = [encode_header(len(directory.entries))]
    parts.extend(encode_entry(entry) for entry in directory.entries)
    return b"".join(parts)


def decode_header(data: bytes) -> IconHeader:
    """Read the 6 byte header.

    The reserved word is returned as found and not checked.
    """
    if len(data) < HEADER_SIZE:
        raise MalformedContainerError(
            f"Container too short for an ICO header: {len(data)} bytes, need {HEADER_SIZE}"
        )
    reserved, image_type, entry_count = struct.unpack_from(HEADER_FORMAT, data, 0)
    return IconHeader(image_type=image_type, entry_count=entry_count, reserved=reserved)


def decode_entry(data: bytes, index: int) -> IconDirEntry:
    """Read directory record ``index``; a stored width/height of 0 means 256"""
    if index < 0:
        raise MalformedContainerError(f"Directory index must not be negative, got {index}")
    start = HEADER_SIZE + index * ENTRY_SIZE
    if start + ENTRY_SIZE > len(data):
        raise MalformedContainerError(
            f"Directory entry {index} at offset {start} runs past the end of the "
            f"container ({len(data)} bytes)"
        )
    (width, height, color_count, reserved,
     planes, bpp, size, offset) = struct.unpack_from(ENTRY_FORMAT, data, start)
    return IconDirEntry(
        width=_decode_dimension(width),
        height=_decode_dimension(height),
        payload_size=size,
        payload_offset=offset,
        color_count=color_count,
        reserved=reserved,
        color_planes=planes,
        bits_per_pixel=bpp,
    )


def decode_directory(data: bytes) -> IconDirectory:
    header = decode_header(data)
    entries = [decode_entry(data, i) for i in range(header.entry_count)]
    return IconDirectory(entries=entries, image_type=header.image_type, reserved=header.reserved)


def check_image_type(header: IconHeader, strict: bool = True) -> None:
    """Apply the image type policy: icons only, unless running permissively"""
    if header.image_type == ICON_TYPE:
        return
    kind = "cursor" if header.image_type == CURSOR_TYPE else f"unknown type {header.image_type}"
    if strict:
        raise MalformedContainerError(f"Not an icon container ({kind})")
    logger.warning(f"Container declares {kind}, reading it as an icon anyway")
