"""
核心模块抽象接口定义。

定义 ConfigManager、文件系统、安装器、VersionManager 等核心模块的抽象接口。
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, List, NamedTuple


class DirEntry(NamedTuple):
    """目录条目：名称以及是否为目录。"""

    name: str
    is_dir: bool


class IConfigManager(ABC):
    """配置管理器抽象接口。"""

    @abstractmethod
    def get_config(self) -> dict[str, Any]:
        """获取配置字典。"""
        pass

    @abstractmethod
    def save_config(self, config: dict[str, Any] | None = None) -> None:
        """保存配置到文件。"""
        pass

    @abstractmethod
    def get_settings(self) -> dict[str, Any]:
        """获取 settings 配置部分。"""
        pass

    @abstractmethod
    def get_bin_dir(self) -> str:
        """获取存放 go<version> 二进制文件的目录。"""
        pass

    @abstractmethod
    def get_sdk_dir(self) -> str:
        """获取存放各版本 SDK 的目录。"""
        pass

    @abstractmethod
    def get_go_command(self) -> str:
        """获取系统默认 go 命令名称。"""
        pass

    @abstractmethod
    def get_catalog_url(self) -> str:
        """获取远程版本列表地址。"""
        pass

    @abstractmethod
    def get_request_timeout(self) -> int:
        """获取网络请求超时时间（秒）。"""
        pass

    @abstractmethod
    def get_install_url_template(self) -> str:
        """获取 go install 使用的包地址模板。"""
        pass


class IFileSystem(ABC):
    """
    单一根目录上的文件系统能力接口。

    所有名称都相对于根目录，不允许跨根目录操作。
    """

    @abstractmethod
    def readlink(self, name: str) -> str:
        """读取符号链接目标；不存在时抛出 FileNotFoundError。"""
        pass

    @abstractmethod
    def symlink(self, target: str, name: str) -> None:
        """原子地创建或覆盖名为 name、指向 target 的符号链接。"""
        pass

    @abstractmethod
    def remove(self, name: str) -> None:
        """删除单个条目；不存在时抛出 FileNotFoundError。"""
        pass

    @abstractmethod
    def remove_all(self, name: str) -> None:
        """递归删除条目；条目不存在视为成功。"""
        pass

    @abstractmethod
    def list_dir(self) -> List[DirEntry]:
        """列出根目录下的直接条目。"""
        pass

    @abstractmethod
    def exists(self, path: str) -> bool:
        """检查相对路径是否存在。"""
        pass


class IInstaller(ABC):
    """外部安装步骤的抽象接口。"""

    @abstractmethod
    def install(self, version: str) -> None:
        """安装 go<version> 启动器二进制文件，失败时抛出异常。"""
        pass

    @abstractmethod
    def download_sdk(self, version: str) -> None:
        """调用 go<version> download 下载 SDK，失败时抛出异常。"""
        pass


class ILocalManager(ABC):
    """本地版本状态解析器抽象接口。"""

    @abstractmethod
    def get_main_version(self) -> str:
        """获取系统默认 go 报告的版本。"""
        pass

    @abstractmethod
    def resolve(self) -> Any:
        """解析本地版本状态快照。"""
        pass


class IRemoteFetcher(ABC):
    """远程版本获取器抽象接口。"""

    @abstractmethod
    def fetch_releases(self) -> List[dict[str, Any]]:
        """获取远程发布记录列表。"""
        pass

    @abstractmethod
    def get_remote_versions(self) -> List[str]:
        """获取远程可用的版本号列表（服务端顺序）。"""
        pass


class IVersionManager(ABC):
    """版本管理器抽象接口。"""

    @abstractmethod
    def use(self, version: str) -> Any:
        """切换到指定版本，必要时先安装。"""
        pass

    @abstractmethod
    def remove(self, version: str) -> None:
        """删除指定版本的二进制文件和 SDK。"""
        pass

    @abstractmethod
    def list_versions(self, only: str = "", include_remote: bool = False) -> List[Any]:
        """列出版本及其状态标注。"""
        pass


StatusCallback = Callable[[str], None]
