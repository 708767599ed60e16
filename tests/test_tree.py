import os
import stat
import shutil
import pytest
from pathlib import Path

from yaib.io import copy_file, copy_tree
from yaib.exceptions import TreeCopyError


def mode_of(path: Path) -> int:
    return stat.S_IMODE(os.lstat(path).st_mode)


@pytest.fixture
def source_tree(tmp_path: Path) -> Path:
    src = tmp_path / "src"
    (src / "etc" / "ssh").mkdir(parents=True)
    os.chmod(src / "etc" / "ssh", 0o750)
    (src / "etc" / "hostname").write_text("yaib\n")
    os.chmod(src / "etc" / "hostname", 0o644)
    (src / "usr" / "bin").mkdir(parents=True)
    (src / "usr" / "bin" / "hello").write_text("#!/bin/sh\necho hello\n")
    os.chmod(src / "usr" / "bin" / "hello", 0o755)
    os.symlink("usr/bin", src / "bin")
    os.symlink("/does/not/exist", src / "etc" / "dangling")
    return src


class TestCopyTree:

    def test_round_trip_onto_empty_destination(self, tmp_path, source_tree):
        dst = tmp_path / "dst"
        copy_tree(source_tree, dst)

        assert (dst / "etc" / "hostname").read_text() == "yaib\n"
        assert mode_of(dst / "etc" / "hostname") == 0o644
        assert mode_of(dst / "usr" / "bin" / "hello") == 0o755
        assert (dst / "etc" / "ssh").is_dir()
        assert mode_of(dst / "etc" / "ssh") == 0o750
        assert os.readlink(dst / "bin") == "usr/bin"
        assert os.readlink(dst / "etc" / "dangling") == "/does/not/exist"

        def listing(root):
            return sorted(str(p.relative_to(root)) for p in root.rglob("*"))
        assert listing(dst) == listing(source_tree)

    def test_existing_directories_are_tolerated(self, tmp_path, source_tree):
        dst = tmp_path / "dst"
        (dst / "etc").mkdir(parents=True)
        (dst / "etc" / "keep").write_text("keep me")

        copy_tree(source_tree, dst)

        assert (dst / "etc" / "keep").read_text() == "keep me"
        assert (dst / "etc" / "hostname").exists()

    def test_overlay_replaces_files_and_links(self, tmp_path, source_tree):
        dst = tmp_path / "dst"
        copy_tree(source_tree, dst)
        (source_tree / "etc" / "hostname").write_text("changed\n")

        copy_tree(source_tree, dst)

        assert (dst / "etc" / "hostname").read_text() == "changed\n"
        assert os.readlink(dst / "bin") == "usr/bin"

    def test_link_over_existing_directory_raises(self, tmp_path):
        src = tmp_path / "src"
        (src / "usr" / "lib").mkdir(parents=True)
        os.symlink("usr/lib", src / "lib")
        dst = tmp_path / "dst"
        (dst / "lib").mkdir(parents=True)
        (dst / "lib" / "libc.so").write_text("elf")

        with pytest.raises(TreeCopyError, match="/lib"):
            copy_tree(src, dst)

        assert (dst / "lib" / "libc.so").read_text() == "elf"

    def test_link_over_link_to_directory_is_replaced(self, tmp_path):
        src = tmp_path / "src"
        src.mkdir()
        os.symlink("usr/lib", src / "lib")
        dst = tmp_path / "dst"
        (dst / "opt").mkdir(parents=True)
        os.symlink("opt", dst / "lib")

        copy_tree(src, dst)

        assert os.readlink(dst / "lib") == "usr/lib"
        assert (dst / "opt").is_dir()

    def test_unsupported_file_type_raises(self, tmp_path, source_tree):
        os.mkfifo(source_tree / "etc" / "fifo")

        with pytest.raises(TreeCopyError, match="etc/fifo"):
            copy_tree(source_tree, tmp_path / "dst")


class TestCopyFile:

    def test_copy_sets_mode(self, tmp_path):
        src = tmp_path / "a"
        src.write_bytes(b"data")
        copy_file(src, tmp_path / "b", 0o600)

        assert (tmp_path / "b").read_bytes() == b"data"
        assert mode_of(tmp_path / "b") == 0o600

    def test_failed_copy_leaves_no_partial_file(self, tmp_path, monkeypatch):
        src = tmp_path / "src.bin"
        src.write_bytes(b"0123456789" * 100)
        dst_dir = tmp_path / "out"
        dst_dir.mkdir()

        def failing_copy(fin, fout, *args, **kwargs):
            fout.write(fin.read(10))
            raise OSError("disk full")

        monkeypatch.setattr(shutil, "copyfileobj", failing_copy)
        with pytest.raises(OSError, match="disk full"):
            copy_file(src, dst_dir / "dst.bin", 0o644)

        assert list(dst_dir.iterdir()) == []

    def test_failed_copy_keeps_previous_destination(self, tmp_path, monkeypatch):
        src = tmp_path / "src.bin"
        src.write_bytes(b"new content")
        dst = tmp_path / "dst.bin"
        dst.write_bytes(b"old content")

        def failing_copy(fin, fout, *args, **kwargs):
            fout.write(fin.read(3))
            raise OSError("interrupted")

        monkeypatch.setattr(shutil, "copyfileobj", failing_copy)
        with pytest.raises(OSError):
            copy_file(src, dst, 0o644)

        assert dst.read_bytes() == b"old content"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["dst.bin", "src.bin"]
