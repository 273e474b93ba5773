"""
本地版本管理模块。

将系统默认 go 报告的版本、bin 目录中的 go 符号链接和目录列表
整合为一份一致的本地版本状态快照。
"""

import posixpath
import subprocess
from dataclasses import dataclass
from typing import Optional, Tuple

from gouse.core import version_utils
from gouse.core.config_manager import ConfigManager
from gouse.core.env_manager import EnvManager
from gouse.core.interfaces import IFileSystem, ILocalManager
from gouse.utils.logger import get_logger

logger = get_logger()

# bin 目录中指向当前版本的符号链接名称
CURRENT_LINK_NAME = "go"

# golang.org/dl 在 SDK 解压成功后写入的零字节标记文件
SDK_SENTINEL = ".unpacked-success"


class LocalManagerError(Exception):
    """本地管理错误异常。"""
    pass


class UnexpectedFormatError(LocalManagerError):
    """go version 输出格式无法识别。"""
    pass


@dataclass(frozen=True)
class LocalState:
    """
    本地版本状态快照。

    属性:
        main: 系统默认 go 报告的版本
        current: 当前生效的版本（无符号链接时等于 main）
        versions: 本地已知的全部版本，升序且不重复，总是包含 main
    """

    main: str
    current: str
    versions: Tuple[str, ...]

    def contains(self, version: str) -> bool:
        """检查版本是否已在本地安装。"""
        return version in self.versions


def has_sdk(version: str, sdk_fs: IFileSystem) -> bool:
    """
    检查指定版本的 SDK 是否已下载并解压完成。

    任何文件系统错误都视为 SDK 不存在，重新下载即可恢复。

    参数:
        version: 版本号
        sdk_fs: SDK 目录的文件系统

    返回:
        标记文件存在返回 True，否则返回 False
    """
    marker = f"{version_utils.binary_name(version)}/{SDK_SENTINEL}"
    try:
        return sdk_fs.exists(marker)
    except (OSError, ValueError) as e:
        logger.debug(f"检查 {version} SDK 标记文件失败: {e}")
        return False


def parse_version_output(output: str) -> str:
    """
    从 go version 的输出中解析版本号。

    输出格式为 ``go version go1.21.3 linux/amd64``。

    参数:
        output: 命令输出

    返回:
        去掉 go 前缀的版本号

    抛出:
        UnexpectedFormatError: 输出不是 4 段
    """
    parts = output.split()
    if len(parts) != 4:
        raise UnexpectedFormatError(f"无法识别的 go version 输出格式: {output!r}")
    return version_utils.strip_prefix(parts[2])


class LocalManager(ILocalManager):
    """
    本地版本管理器类。

    每次调用 resolve 都会重新读取进程和文件系统状态，不做缓存。
    实现 ILocalManager 抽象接口。
    """

    def __init__(
        self,
        config_manager: ConfigManager,
        bin_fs: IFileSystem,
        env_manager: Optional[EnvManager] = None,
    ):
        """
        初始化本地版本管理器。

        参数:
            config_manager: 配置管理器实例
            bin_fs: bin 目录的文件系统
            env_manager: 环境变量管理器实例，默认操作 os.environ
        """
        self.config_manager = config_manager
        self.bin_fs = bin_fs
        self.env_manager = env_manager or EnvManager()

    def get_main_version(self) -> str:
        """
        获取系统默认 go 报告的版本。

        执行期间临时把 bin 目录从 PATH 中移除，
        使查找到的 go 不是 bin 目录中的符号链接。

        返回:
            main 版本号

        抛出:
            FileNotFoundError: 找不到 go 命令
            subprocess.CalledProcessError: go version 以非零状态退出
            UnexpectedFormatError: 输出格式无法识别
        """
        go_command = self.config_manager.get_go_command()
        bin_dir = self.config_manager.get_bin_dir()

        with self.env_manager.path_excluded(bin_dir):
            logger.debug(f"执行 {go_command} version 获取 main 版本")
            result = subprocess.run(
                [go_command, "version"],
                capture_output=True,
                text=True,
                check=True,
            )

        main = parse_version_output(result.stdout)
        logger.debug(f"main 版本: {main}")
        return main

    def get_current_version(self, main: str) -> str:
        """
        根据 go 符号链接确定当前版本。

        参数:
            main: main 版本号，符号链接不存在时返回它

        返回:
            当前版本号
        """
        try:
            target = self.bin_fs.readlink(CURRENT_LINK_NAME)
        except FileNotFoundError:
            return main
        name = posixpath.basename(target.replace("\\", "/"))
        return version_utils.strip_prefix(name)

    def scan_local_versions(self) -> list[str]:
        """
        扫描 bin 目录中已安装的 go<version> 二进制文件。

        返回:
            版本号列表（未排序）
        """
        versions = []
        for entry in self.bin_fs.list_dir():
            if entry.is_dir:
                continue
            version = version_utils.strip_prefix(entry.name)
            if version_utils.is_valid_version(version):
                versions.append(version)
        return versions

    def resolve(self) -> LocalState:
        """
        解析本地版本状态快照。

        返回:
            LocalState 实例
        """
        main = self.get_main_version()
        current = self.get_current_version(main)

        versions = {main}
        versions.update(self.scan_local_versions())

        state = LocalState(
            main=main,
            current=current,
            versions=tuple(version_utils.sort_versions(versions)),
        )
        logger.debug(f"本地状态: main={state.main} current={state.current} versions={list(state.versions)}")
        return state
