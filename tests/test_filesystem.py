"""
Unit tests for the filesystem abstraction.
"""

import os

import pytest

from gouse.core.filesystem import DirFileSystem, MemoryFileSystem
from gouse.core.interfaces import DirEntry


class TestDirFileSystem:
    """Test the disk-backed filesystem."""

    @pytest.fixture
    def fs(self, tmp_path):
        (tmp_path / "go1.20").write_text("")
        (tmp_path / "go1.21").write_text("")
        (tmp_path / "pkg").mkdir()
        return DirFileSystem(tmp_path)

    def test_list_dir(self, fs):
        assert fs.list_dir() == [
            DirEntry("go1.20", False),
            DirEntry("go1.21", False),
            DirEntry("pkg", True),
        ]

    def test_list_dir_missing_root(self, tmp_path):
        assert DirFileSystem(tmp_path / "missing").list_dir() == []

    def test_symlink_and_readlink(self, fs, tmp_path):
        fs.symlink("go1.20", "go")
        assert fs.readlink("go") == "go1.20"
        assert os.path.islink(tmp_path / "go")

    def test_symlink_overwrites(self, fs):
        fs.symlink("go1.20", "go")
        fs.symlink("go1.21", "go")
        assert fs.readlink("go") == "go1.21"
        assert not any(e.name.endswith(".tmp") for e in fs.list_dir())

    def test_readlink_missing(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.readlink("go")

    def test_remove(self, fs, tmp_path):
        fs.remove("go1.20")
        assert not (tmp_path / "go1.20").exists()

    def test_remove_missing(self, fs):
        with pytest.raises(FileNotFoundError):
            fs.remove("go")

    def test_remove_all(self, fs, tmp_path):
        (tmp_path / "pkg" / "nested").mkdir()
        (tmp_path / "pkg" / "nested" / "file").write_text("x")
        fs.remove_all("pkg")
        assert not (tmp_path / "pkg").exists()

    def test_remove_all_missing(self, fs):
        fs.remove_all("does-not-exist")

    def test_exists(self, fs):
        assert fs.exists("go1.20")
        assert not fs.exists("go1.22")

    @pytest.mark.parametrize("name", ["../outside", "/etc/passwd", ""])
    def test_rejects_paths_outside_root(self, fs, name):
        with pytest.raises(ValueError):
            fs.exists(name)


class TestMemoryFileSystem:
    """Test the in-memory filesystem."""

    def test_nested_files_create_directories(self):
        fs = MemoryFileSystem({"go1.21/.unpacked-success": ""})
        assert fs.list_dir() == [DirEntry("go1.21", True)]
        assert fs.exists("go1.21/.unpacked-success")

    def test_symlink_lifecycle(self):
        fs = MemoryFileSystem({"go1.20": ""})
        with pytest.raises(FileNotFoundError):
            fs.readlink("go")
        fs.symlink("go1.20", "go")
        assert fs.readlink("go") == "go1.20"
        assert DirEntry("go", False) in fs.list_dir()
        fs.remove("go")
        with pytest.raises(FileNotFoundError):
            fs.remove("go")

    def test_readlink_on_regular_file(self):
        fs = MemoryFileSystem({"go": ""})
        with pytest.raises(OSError):
            fs.readlink("go")

    def test_remove_all(self):
        fs = MemoryFileSystem({"go1.20/bin/go": "", "go1.20/.unpacked-success": "", "go1.21/x": ""})
        fs.remove_all("go1.20")
        assert fs.list_dir() == [DirEntry("go1.21", True)]
        fs.remove_all("go1.20")

    def test_remove_non_empty_directory(self):
        fs = MemoryFileSystem({"go1.20/bin/go": ""})
        with pytest.raises(OSError):
            fs.remove("go1.20")
