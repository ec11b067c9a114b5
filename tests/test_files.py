import os
import stat

import pytest

from pngtoico.errors import IconIOError, NotFoundError
from pngtoico.ico import IconPacker, IconUnpacker
from pngtoico.utils.files import atomic_write_bytes, atomic_writer, ensure_dir, read_bytes


def test_atomic_writer_cleans_up_on_error(tmp_path):
    target = tmp_path / "icon.ico"
    target.write_bytes(b"original")

    with pytest.raises(RuntimeError):
        with atomic_writer(target) as f:
            f.write(b"half a contai")
            raise RuntimeError("encoder blew up")

    assert target.read_bytes() == b"original"
    assert [p.name for p in tmp_path.iterdir()] == ["icon.ico"]


def test_atomic_write_bytes_replaces(tmp_path):
    target = tmp_path / "icon.ico"
    target.write_bytes(b"original")
    atomic_write_bytes(target, b"new")
    assert target.read_bytes() == b"new"
    assert [p.name for p in tmp_path.iterdir()] == ["icon.ico"]


def test_atomic_write_into_missing_directory(tmp_path):
    with pytest.raises(IconIOError):
        atomic_write_bytes(tmp_path / "nope" / "icon.ico", b"data")


def test_read_bytes(tmp_path):
    path = tmp_path / "a.png"
    path.write_bytes(b"abc")
    assert read_bytes(path) == b"abc"
    with pytest.raises(NotFoundError):
        read_bytes(tmp_path / "b.png")
    with pytest.raises(NotFoundError):
        read_bytes(tmp_path)


def test_ensure_dir(tmp_path):
    path = ensure_dir(tmp_path / "a" / "b")
    assert path.is_dir()
    assert ensure_dir(path) == path

    blocker = tmp_path / "file"
    blocker.write_bytes(b"")
    with pytest.raises(IconIOError):
        ensure_dir(blocker / "child")


@pytest.fixture
def umask_022():
    previous = os.umask(0o022)
    yield
    os.umask(previous)


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_new_file_honours_umask(tmp_path, umask_022):
    target = atomic_write_bytes(tmp_path / "icon.ico", b"data")
    assert stat.S_IMODE(target.stat().st_mode) == 0o644


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_overwrite_keeps_existing_mode(tmp_path, umask_022):
    target = tmp_path / "icon.ico"
    target.write_bytes(b"old")
    target.chmod(0o640)
    atomic_write_bytes(target, b"new")
    assert stat.S_IMODE(target.stat().st_mode) == 0o640


@pytest.mark.skipif(os.name != "posix", reason="POSIX permission bits")
def test_packed_and_unpacked_files_are_world_readable(make_png, tmp_path, umask_022):
    ico = IconPacker(sizes=[16]).pack_file(make_png("logo.png"), tmp_path / "out")
    report = IconUnpacker().unpack_file(ico, tmp_path / "out")
    modes = [stat.S_IMODE(p.stat().st_mode) for p in [ico] + report.written]
    assert modes == [0o644, 0o644]
