"""
gouse 核心模块。

提供配置管理、本地状态解析、远程版本获取和版本切换功能。
"""

from .interfaces import DirEntry, IConfigManager, IFileSystem, IInstaller, ILocalManager, IRemoteFetcher, IVersionManager
from .config_manager import ConfigManager, ConfigManagerError, ConfigValidationError, ConfigSaveError
from .env_manager import EnvManager, cut_from_path
from .filesystem import DirFileSystem, MemoryFileSystem
from .local_manager import LocalManager, LocalManagerError, LocalState, UnexpectedFormatError, has_sdk
from .remote_fetcher import RemoteFetcher, RemoteFetcherError, CatalogFormatError
from .download_manager import DownloadManager
from .version_manager import (
    VersionManager, VersionManagerError, MalformedVersionError, VersionNotInstalledError,
    RemoveMainError, UseResult, VersionEntry,
)
from . import version_utils

__all__ = [
    "DirEntry", "IConfigManager", "IFileSystem", "IInstaller", "ILocalManager", "IRemoteFetcher", "IVersionManager",
    "ConfigManager", "ConfigManagerError", "ConfigValidationError", "ConfigSaveError",
    "EnvManager", "cut_from_path",
    "DirFileSystem", "MemoryFileSystem",
    "LocalManager", "LocalManagerError", "LocalState", "UnexpectedFormatError", "has_sdk",
    "RemoteFetcher", "RemoteFetcherError", "CatalogFormatError",
    "DownloadManager",
    "VersionManager", "VersionManagerError", "MalformedVersionError", "VersionNotInstalledError",
    "RemoveMainError", "UseResult", "VersionEntry",
    "version_utils",
]
