"""
下载管理器模块。

通过外部 go 命令安装 go<version> 启动器并下载对应的 SDK。
"""

import os
import subprocess
from typing import Optional

from gouse.core import version_utils
from gouse.core.config_manager import ConfigManager
from gouse.core.interfaces import IInstaller
from gouse.utils.logger import get_logger

logger = get_logger()


class DownloadManager(IInstaller):
    """
    下载管理器类。

    子进程继承当前进程的标准输出和标准错误，
    以便用户直接看到 go install 和 go<version> download 的进度。
    实现 IInstaller 抽象接口。
    """

    def __init__(self, config_manager: ConfigManager):
        """
        初始化下载管理器。

        参数:
            config_manager: 配置管理器实例
        """
        self.config_manager = config_manager

    def _run(self, cmd: list[str], env: Optional[dict[str, str]] = None) -> None:
        logger.info(f"执行命令: {' '.join(cmd)}")
        subprocess.run(cmd, env=env, check=True)

    def install(self, version: str) -> None:
        """
        执行 go install golang.org/dl/go<version>@latest。

        参数:
            version: 版本号

        抛出:
            FileNotFoundError: 找不到 go 命令
            subprocess.CalledProcessError: 安装失败
        """
        package = self.config_manager.get_install_url_template().format(version=version)
        # 确保二进制文件安装到配置的 bin 目录
        env = dict(os.environ, GOBIN=self.config_manager.get_bin_dir())
        self._run([self.config_manager.get_go_command(), "install", package], env=env)
        logger.info(f"已安装 {version_utils.binary_name(version)}")

    def download_sdk(self, version: str) -> None:
        """
        执行 <bin>/go<version> download 下载 SDK。

        参数:
            version: 版本号

        抛出:
            FileNotFoundError: go<version> 不存在
            subprocess.CalledProcessError: 下载失败
        """
        binary = os.path.join(self.config_manager.get_bin_dir(), version_utils.binary_name(version))
        self._run([binary, "download"])
        logger.info(f"已下载 {version} SDK")
