# pngtoico/ico/packer.py
import logging
from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from PIL import Image

from pngtoico import imaging
from pngtoico.errors import InvalidArgumentError
from pngtoico.ico.directory import MAX_DIMENSION, MAX_ENTRIES, IconDirectory, encode_directory
from pngtoico.utils.files import atomic_write_bytes, ensure_dir, read_bytes

logger = logging.getLogger(__name__)

DEFAULT_SIZES = (16, 32, 48, 64, 128, 256)


def assemble(frames: Iterable[Tuple[int, int, bytes]]) -> bytes:
    """Lay out ``(width, height, payload)`` frames as a complete ICO container.

    The directory precedes the data, so every payload must be known before
    anything is emitted.
    """
    frames = list(frames)
    directory = IconDirectory.layout((w, h, len(payload)) for w, h, payload in frames)
    return encode_directory(directory) + b"".join(payload for _, _, payload in frames)


class IconPacker:
    """Turns one source raster into a multi-resolution ICO container"""

    def __init__(self, sizes: Sequence[int] = DEFAULT_SIZES, resample: str = "lanczos"):
        sizes = [int(s) for s in sizes]
        if not sizes:
            raise InvalidArgumentError("At least one icon size is required")
        if len(sizes) > MAX_ENTRIES:
            raise InvalidArgumentError(f"At most {MAX_ENTRIES} icon sizes are supported")
        for size in sizes:
            if not 1 <= size <= MAX_DIMENSION:
                raise InvalidArgumentError(f"Icon size must be between 1 and {MAX_DIMENSION}, got {size}")
        self.sizes = sizes
        self.resample = imaging.resolve_resample(resample)

    def render(self, image: Image.Image) -> List[Tuple[int, bytes]]:
        """Resize ``image`` to every configured size and PNG-encode each one"""
        rendered = []
        for size in self.sizes:
            resized = imaging.resize_square(image, size, self.resample)
            try:
                png = imaging.encode_png(resized)
            finally:
                resized.close()
            logger.debug(f"Rendered {size}x{size} frame ({len(png)} bytes)")
            rendered.append((size, png))
        return rendered

    def pack_image(self, image: Image.Image) -> bytes:
        frames = [(size, size, png) for size, png in self.render(image)]
        return assemble(frames)

    def pack_bytes(self, data: bytes) -> bytes:
        """Decode encoded source bytes and pack them"""
        image = imaging.load_image(data)
        try:
            return self.pack_image(image)
        finally:
            image.close()

    def pack_file(self, input_path, output_dir) -> Path:
        """Convert ``input_path`` to ``<output_dir>/<basename>.ico``.

        The container is written atomically: on any failure no ``.ico`` file
        (complete or partial) is left behind, and an existing file of the same
        name is only replaced once the new one is fully written.
        """
        input_path = Path(input_path)
        data = read_bytes(input_path)
        container = self.pack_bytes(data)

        output_dir = ensure_dir(output_dir)
        output_path = output_dir / f"{input_path.stem}.ico"
        atomic_write_bytes(output_path, container)
        logger.info(f"Packed {input_path} into {output_path} "
                    f"({len(self.sizes)} images, {len(container)} bytes)")
        return output_path
