"""
版本管理器模块。

提供 Go 版本的切换、安装、删除和列表功能。

切换通过重写 bin 目录中名为 go 的符号链接完成；
没有该符号链接时生效的是系统默认版本（main）。

注意：没有跨进程加锁，两个同时运行的 gouse 可能在同一个符号链接上竞争。
"""

import enum
from typing import List, NamedTuple, Optional

from gouse.core import version_utils
from gouse.core.interfaces import IFileSystem, IInstaller, IRemoteFetcher, IVersionManager, StatusCallback
from gouse.core.local_manager import CURRENT_LINK_NAME, LocalManager, LocalState, has_sdk
from gouse.utils.logger import get_logger

logger = get_logger()

MAIN_ALIAS = "main"

NOTE_MAIN = "main"
NOTE_NOT_INSTALLED = "not installed"
NOTE_MISSING_SDK = "missing SDK"


class VersionManagerError(Exception):
    """版本管理错误异常。"""
    pass


class MalformedVersionError(VersionManagerError):
    """版本号格式错误异常。"""
    pass


class VersionNotInstalledError(VersionManagerError):
    """版本未安装错误异常。"""
    pass


class RemoveMainError(VersionManagerError):
    """试图删除 main 版本的错误异常。"""
    pass


class UseResult(enum.Enum):
    """use 操作的结果。"""

    ALREADY_IN_USE = "already_in_use"
    SWITCHED_TO_MAIN = "switched_to_main"
    SWITCHED = "switched"


class VersionEntry(NamedTuple):
    """版本列表中的一行。"""

    version: str
    note: Optional[str]
    is_current: bool


def _print_status(message: str) -> None:
    print(message)


class VersionManager(IVersionManager):
    """
    版本管理器类。

    每个操作开始时都会重新解析本地状态，快照不会在操作之间复用。
    安装和 SDK 下载委托给注入的 IInstaller。
    实现 IVersionManager 抽象接口。
    """

    def __init__(
        self,
        local_manager: LocalManager,
        bin_fs: IFileSystem,
        sdk_fs: IFileSystem,
        installer: IInstaller,
        remote_fetcher: Optional[IRemoteFetcher] = None,
        status_callback: Optional[StatusCallback] = None,
    ):
        """
        初始化版本管理器。

        参数:
            local_manager: 本地状态解析器
            bin_fs: bin 目录的文件系统
            sdk_fs: SDK 目录的文件系统
            installer: 安装和下载步骤
            remote_fetcher: 远程版本获取器，list 需要远程版本时使用
            status_callback: 进度消息回调，默认打印到标准输出
        """
        self.local_manager = local_manager
        self.bin_fs = bin_fs
        self.sdk_fs = sdk_fs
        self.installer = installer
        self.remote_fetcher = remote_fetcher
        self.status_callback = status_callback or _print_status

    def _status(self, message: str) -> None:
        logger.info(message)
        self.status_callback(message)

    def _resolve_version(self, version: str, local: LocalState) -> str:
        """
        解析 main 别名并校验版本号。

        main 版本来自 go version 的输出（例如 1.23.0），不做语法校验。

        抛出:
            MalformedVersionError: 版本号不符合语法
        """
        if version == MAIN_ALIAS or version == local.main:
            return local.main
        if not version_utils.is_valid_version(version):
            raise MalformedVersionError(f"malformed version {version!r}")
        return version

    def _unlink_current(self) -> None:
        """删除 go 符号链接，链接本来就不存在视为成功。"""
        try:
            self.bin_fs.remove(CURRENT_LINK_NAME)
        except FileNotFoundError:
            logger.debug("go 符号链接不存在，无需删除")

    def use(self, version: str) -> UseResult:
        """
        切换到指定版本。

        版本未安装时先安装 go<version>；SDK 缺失时（包括上次下载被中断）
        重新下载，因此中途失败后再次执行即可继续完成。

        参数:
            version: 版本号或 main

        返回:
            UseResult

        抛出:
            MalformedVersionError: 版本号不符合语法
            OSError, subprocess.CalledProcessError: 文件系统或外部命令失败
        """
        local = self.local_manager.resolve()
        version = self._resolve_version(version, local)

        if version == local.current:
            self._status(f"{version} is already in use")
            return UseResult.ALREADY_IN_USE

        if version == local.main:
            # 删除符号链接即可恢复 main 版本
            self._unlink_current()
            self._status(f"Switched to {version} (main)")
            return UseResult.SWITCHED_TO_MAIN

        initial = False
        if not local.contains(version):
            initial = True
            self._status(f"{version} is not installed. Looking for it on go.dev ...")
            self.installer.install(version)

        if not has_sdk(version, self.sdk_fs):
            if not initial:
                self._status(f"{version} SDK is missing. Starting download ...")
            self.installer.download_sdk(version)

        self._unlink_current()
        self.bin_fs.symlink(version_utils.binary_name(version), CURRENT_LINK_NAME)

        self._status(f"Switched to {version}")
        return UseResult.SWITCHED

    def remove(self, version: str) -> None:
        """
        删除指定版本的二进制文件和 SDK。

        如果该版本正在使用，先切换回 main。删除失败不会回滚，
        二进制文件或 SDK 可能残留。

        参数:
            version: 版本号或 main

        抛出:
            MalformedVersionError: 版本号不符合语法
            VersionNotInstalledError: 版本未安装
            RemoveMainError: 试图删除 main 版本
            OSError: 删除失败
        """
        local = self.local_manager.resolve()
        version = self._resolve_version(version, local)

        if not local.contains(version):
            raise VersionNotInstalledError(f"{version} is not installed")

        if version == local.main:
            raise RemoveMainError(f"unable to remove {version} (main)")

        if version == local.current:
            self._unlink_current()
            self._status(f"Switched to {local.main} (main)")

        name = version_utils.binary_name(version)
        self.bin_fs.remove(name)
        self.sdk_fs.remove_all(name)

        self._status(f"Removed {version}")

    def list_versions(self, only: str = "", include_remote: bool = False) -> List[VersionEntry]:
        """
        列出版本及其状态标注。

        标注优先级为 main > not installed > missing SDK。

        参数:
            only: 只列出以该前缀开头的版本
            include_remote: 为 True 时列出 go.dev 上的全部版本（服务端顺序）

        返回:
            VersionEntry 列表
        """
        local = self.local_manager.resolve()

        versions: List[str] = list(local.versions)
        if include_remote:
            if self.remote_fetcher is None:
                raise VersionManagerError("未配置远程版本获取器")
            versions = self.remote_fetcher.get_remote_versions()

        entries = []
        for version in versions:
            if not version.startswith(only):
                continue

            if version == local.main:
                note = NOTE_MAIN
            elif not local.contains(version):
                note = NOTE_NOT_INSTALLED
            elif not has_sdk(version, self.sdk_fs):
                note = NOTE_MISSING_SDK
            else:
                note = None

            entries.append(VersionEntry(version, note, version == local.current))

        return entries
