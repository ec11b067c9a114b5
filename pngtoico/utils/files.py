# pngtoico/utils/files.py
import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Union

from pngtoico.errors import IconIOError, NotFoundError

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]


def read_bytes(path: PathLike) -> bytes:
    """Read a whole input file, mapping filesystem errors to tool errors"""
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(f"The file '{path}' does not exist.")
    try:
        with open(path, 'rb') as f:
            return f.read()
    except OSError as e:
        raise IconIOError(f"Failed to read '{path}': {e}") from e


def ensure_dir(path: PathLike) -> Path:
    """Create a directory (and parents) if it is missing"""
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IconIOError(f"Failed to create directory '{path}': {e}") from e
    return path


def _target_mode(path: Path) -> int:
    """Mode a freshly written ``path`` should get: the existing file's, else 0666 minus umask"""
    try:
        return path.stat().st_mode & 0o7777
    except FileNotFoundError:
        pass
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


@contextmanager
def atomic_writer(path: PathLike):
    """Context manager for an all-or-nothing file write.

    Yields a binary file object backed by a temporary file in the target
    directory. The temporary file replaces ``path`` only when the block exits
    cleanly; on any exception it is removed and ``path`` is left untouched.
    The result gets the permissions a plain ``open(path, 'wb')`` would give it.
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        # mkstemp always creates 0600
        os.chmod(tmp_name, _target_mode(path))
        with os.fdopen(fd, 'wb') as f:
            yield f
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise


def atomic_write_bytes(path: PathLike, data: bytes) -> Path:
    """Write ``data`` to ``path`` atomically, overwriting any existing file"""
    path = Path(path)
    try:
        with atomic_writer(path) as f:
            f.write(data)
    except OSError as e:
        raise IconIOError(f"Failed to write '{path}': {e}") from e
    logger.debug(f"Wrote {len(data)} bytes to {path}")
    return path
