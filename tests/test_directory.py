import logging
import struct

import pytest

from pngtoico.errors import InvalidArgumentError, MalformedContainerError
from pngtoico.ico.directory import (
    CURSOR_TYPE,
    ENTRY_SIZE,
    HEADER_SIZE,
    IconDirectory,
    IconDirEntry,
    IconHeader,
    check_image_type,
    decode_directory,
    decode_entry,
    decode_header,
    encode_directory,
    encode_entry,
    encode_header,
)


def test_encode_header_layout():
    assert encode_header(3) == b"\x00\x00\x01\x00\x03\x00"
    assert encode_header(0xFFFF) == b"\x00\x00\x01\x00\xff\xff"


@pytest.mark.parametrize("count", [-1, 0x10000])
def test_encode_header_rejects_out_of_range_count(count):
    with pytest.raises(InvalidArgumentError):
        encode_header(count)
    # Also usable as a plain ValueError by callers
    with pytest.raises(ValueError):
        encode_header(count)


def test_encode_entry_layout():
    entry = IconDirEntry(width=48, height=32, payload_size=0x1234, payload_offset=0x56)
    data = encode_entry(entry)
    assert len(data) == ENTRY_SIZE
    assert data == bytes([48, 32, 0, 0, 1, 0, 32, 0, 0x34, 0x12, 0, 0, 0x56, 0, 0, 0])


def test_256_is_stored_as_zero_and_read_back_as_256():
    entry = IconDirEntry(width=256, height=256, payload_size=10, payload_offset=22)
    data = encode_header(1) + encode_entry(entry)
    assert data[HEADER_SIZE] == 0
    assert data[HEADER_SIZE + 1] == 0

    decoded = decode_entry(data, 0)
    assert (decoded.width, decoded.height) == (256, 256)
    assert decoded == entry


@pytest.mark.parametrize("width,height", [(0, 16), (16, 0), (257, 16), (16, 300)])
def test_encode_entry_rejects_bad_dimensions(width, height):
    with pytest.raises(InvalidArgumentError):
        encode_entry(IconDirEntry(width=width, height=height, payload_size=1, payload_offset=22))


def test_encode_entry_rejects_values_beyond_32_bits():
    with pytest.raises(InvalidArgumentError):
        encode_entry(IconDirEntry(width=16, height=16, payload_size=1 << 32, payload_offset=22))
    with pytest.raises(InvalidArgumentError):
        encode_entry(IconDirEntry(width=16, height=16, payload_size=1, payload_offset=-1))


def test_decode_header_reads_type_and_count():
    header = decode_header(b"\x00\x00\x01\x00\x02\x00trailing")
    assert header == IconHeader(image_type=1, entry_count=2, reserved=0)


def test_decode_header_tolerates_nonzero_reserved():
    header = decode_header(struct.pack("<HHH", 7, 1, 1))
    assert header.reserved == 7
    assert header.entry_count == 1


@pytest.mark.parametrize("length", range(0, HEADER_SIZE))
def test_decode_header_rejects_short_input(length):
    with pytest.raises(MalformedContainerError):
        decode_header(b"\x00" * length)


def test_decode_entry_past_end_of_buffer():
    data = encode_header(2) + encode_entry(
        IconDirEntry(width=16, height=16, payload_size=1, payload_offset=38))
    decode_entry(data, 0)
    with pytest.raises(MalformedContainerError):
        decode_entry(data, 1)
    with pytest.raises(MalformedContainerError):
        decode_entry(data[:-1], 0)
    with pytest.raises(MalformedContainerError):
        decode_entry(data, -1)


def test_decode_entry_keeps_nonstandard_fields():
    raw = encode_header(1) + struct.pack("<BBBBHHII", 16, 16, 4, 9, 0, 8, 5, 22)
    entry = decode_entry(raw, 0)
    assert (entry.color_count, entry.reserved, entry.color_planes, entry.bits_per_pixel) == (4, 9, 0, 8)


def test_layout_is_contiguous():
    directory = IconDirectory.layout([(16, 16, 100), (32, 32, 250), (256, 256, 7)])
    entries = directory.entries
    assert directory.data_offset == HEADER_SIZE + ENTRY_SIZE * 3
    assert entries[0].payload_offset == 6 + 16 * 3
    for current, following in zip(entries, entries[1:]):
        assert following.payload_offset == current.payload_offset + current.payload_size


def test_directory_encode_decode():
    directory = IconDirectory.layout([(16, 16, 100), (48, 48, 300)])
    data = encode_directory(directory)
    assert len(data) == directory.data_offset
    assert decode_directory(data) == directory


def test_decode_directory_with_missing_records():
    data = encode_header(3) + encode_entry(
        IconDirEntry(width=16, height=16, payload_size=1, payload_offset=54))
    with pytest.raises(MalformedContainerError):
        decode_directory(data)


def test_image_type_policy(caplog):
    cursor = IconHeader(image_type=CURSOR_TYPE, entry_count=1)
    check_image_type(IconHeader(image_type=1, entry_count=1))
    with pytest.raises(MalformedContainerError, match="cursor"):
        check_image_type(cursor, strict=True)

    with caplog.at_level(logging.WARNING):
        check_image_type(cursor, strict=False)
    assert "cursor" in caplog.text
