"""
Pytest configuration and shared fixtures for gouse tests.
"""

import subprocess
from unittest.mock import patch

import pytest

from gouse.core.config_manager import ConfigManager
from gouse.core.env_manager import EnvManager
from gouse.core.filesystem import MemoryFileSystem
from gouse.core.interfaces import IInstaller
from gouse.core.local_manager import LocalManager
from gouse.core.version_manager import VersionManager


class FakeInstaller(IInstaller):
    """Installer that writes into in-memory filesystems instead of running go."""

    def __init__(self, bin_fs, sdk_fs):
        self.bin_fs = bin_fs
        self.sdk_fs = sdk_fs
        self.installed = []
        self.downloaded = []
        self.fail_install = False
        self.fail_download = False

    def install(self, version):
        self.installed.append(version)
        if self.fail_install:
            raise subprocess.CalledProcessError(1, ["go", "install"])
        self.bin_fs.write_file(f"go{version}")

    def download_sdk(self, version):
        self.downloaded.append(version)
        if self.fail_download:
            raise subprocess.CalledProcessError(1, [f"go{version}", "download"])
        self.sdk_fs.write_file(f"go{version}/.unpacked-success")


class FakeGo:
    """Stands in for `go version`, reporting a configurable main version."""

    def __init__(self, main="1.21"):
        self.main = main
        self.output = None
        self.calls = []

    def __call__(self, cmd, **kwargs):
        self.calls.append(cmd)
        stdout = self.output if self.output is not None else f"go version go{self.main} linux/amd64\n"
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")


@pytest.fixture
def config_manager(tmp_path):
    """ConfigManager rooted in a temporary directory with explicit bin/sdk dirs."""
    manager = ConfigManager(tmp_path / "config")
    manager.get_settings()["gobin"] = str(tmp_path / "gobin")
    manager.get_settings()["sdk_dir"] = str(tmp_path / "sdk")
    return manager


@pytest.fixture
def bin_fs():
    return MemoryFileSystem()


@pytest.fixture
def sdk_fs():
    return MemoryFileSystem()


@pytest.fixture
def fake_go():
    """Patch subprocess.run in the local manager with a fake `go version`."""
    fake = FakeGo()
    with patch("gouse.core.local_manager.subprocess.run", side_effect=fake):
        yield fake


@pytest.fixture
def env_manager():
    return EnvManager({"PATH": "/usr/local/go/bin:/usr/bin"})


@pytest.fixture
def local_manager(config_manager, bin_fs, env_manager, fake_go):
    return LocalManager(config_manager, bin_fs, env_manager)


@pytest.fixture
def installer(bin_fs, sdk_fs):
    return FakeInstaller(bin_fs, sdk_fs)


@pytest.fixture
def messages():
    return []


@pytest.fixture
def version_manager(local_manager, bin_fs, sdk_fs, installer, messages):
    return VersionManager(
        local_manager=local_manager,
        bin_fs=bin_fs,
        sdk_fs=sdk_fs,
        installer=installer,
        status_callback=messages.append,
    )
