# pngtoico/ico/unpacker.py
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from pngtoico import imaging
from pngtoico.errors import IconToolError, MalformedContainerError
from pngtoico.ico.directory import (
    IconDirEntry,
    IconHeader,
    check_image_type,
    data_offset,
    decode_entry,
    decode_header,
)
from pngtoico.utils.files import atomic_write_bytes, ensure_dir, read_bytes

logger = logging.getLogger(__name__)


@dataclass
class EntryResult:
    """Outcome of extracting one directory entry"""
    index: int
    entry: Optional[IconDirEntry] = None
    png: Optional[bytes] = None
    path: Optional[Path] = None
    error: Optional[IconToolError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class UnpackReport:
    source: str
    output_dir: Optional[Path]
    results: List[EntryResult] = field(default_factory=list)

    @property
    def written(self) -> List[Path]:
        return [r.path for r in self.results if r.path is not None]

    @property
    def failures(self) -> List[EntryResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        return not self.failures


def output_name(basename: str, entry: IconDirEntry) -> str:
    return f"{basename}_{entry.width}x{entry.height}.png"


class IconUnpacker:
    """Recovers the embedded PNG images of an ICO container.

    Failures are isolated per directory entry: a payload range past the end
    of the data or a payload that does not decode as PNG fails that entry
    only. An unreadable header, or a directory that does not fit in the data,
    aborts the whole unpack.
    """

    def __init__(self, strict_image_type: bool = True):
        self.strict_image_type = strict_image_type

    def read_header(self, data: bytes) -> IconHeader:
        header = decode_header(data)
        check_image_type(header, strict=self.strict_image_type)
        return header

    @staticmethod
    def slice_payload(data: bytes, entry: IconDirEntry) -> bytes:
        if entry.payload_end > len(data):
            raise MalformedContainerError(
                f"Payload of {entry.label} entry ({entry.payload_size} bytes at offset "
                f"{entry.payload_offset}) exceeds the container length ({len(data)} bytes)"
            )
        return data[entry.payload_offset:entry.payload_end]

    def _extract_entry(self, data: bytes, index: int) -> EntryResult:
        result = EntryResult(index=index)
        try:
            result.entry = decode_entry(data, index)
            payload = self.slice_payload(data, result.entry)
            image = imaging.load_image(payload, expect_format="PNG")
            try:
                if image.size != (result.entry.width, result.entry.height):
                    logger.warning(
                        f"Entry {index} is listed as {result.entry.label} but its image is "
                        f"{image.size[0]}x{image.size[1]}"
                    )
                result.png = imaging.encode_png(image)
            finally:
                image.close()
        except IconToolError as e:
            logger.error(f"Entry {index}: {e}")
            result.error = e
        return result

    def extract(self, data: bytes) -> List[EntryResult]:
        """Decode every entry in memory, one result per directory record"""
        header = self.read_header(data)
        if data_offset(header.entry_count) > len(data):
            raise MalformedContainerError(
                f"Header declares {header.entry_count} images but the directory does not fit "
                f"in the container ({len(data)} bytes)"
            )
        logger.debug(f"Container declares {header.entry_count} images")
        return [self._extract_entry(data, i) for i in range(header.entry_count)]

    def unpack_bytes(self, data: bytes, basename: str, output_dir) -> UnpackReport:
        """Write each good entry as ``<output_dir>/<basename>_<w>x<h>.png``.

        Entries sharing a size map to the same file name; the later entry
        overwrites the earlier one.
        """
        results = self.extract(data)
        output_dir = ensure_dir(output_dir)
        report = UnpackReport(source=basename, output_dir=output_dir, results=results)

        seen = {}
        for result in results:
            if not result.ok:
                continue
            path = output_dir / output_name(basename, result.entry)
            if path in seen:
                logger.info(f"Entry {result.index} overwrites {path.name} from entry {seen[path]}")
            try:
                atomic_write_bytes(path, result.png)
            except IconToolError as e:
                logger.error(f"Entry {result.index}: {e}")
                result.error = e
                continue
            seen[path] = result.index
            result.path = path
        return report

    def unpack_file(self, ico_path, output_dir) -> UnpackReport:
        """Unpack ``ico_path`` into ``<output_dir>/<basename>_sizes/``"""
        ico_path = Path(ico_path)
        data = read_bytes(ico_path)
        target = Path(output_dir) / f"{ico_path.stem}_sizes"
        report = self.unpack_bytes(data, ico_path.stem, target)
        report.source = str(ico_path)
        logger.info(f"Unpacked {len(report.written)} of {len(report.results)} images "
                    f"from {ico_path} into {target}")
        return report
