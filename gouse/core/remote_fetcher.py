"""
远程版本获取模块。

提供从 go.dev 获取全部 Go 发布版本列表的功能。
"""

from typing import Any, Dict, List, Optional

import requests

from gouse.core import version_utils
from gouse.core.config_manager import ConfigManager
from gouse.core.interfaces import IRemoteFetcher
from gouse.utils.logger import get_logger

logger = get_logger()


class RemoteFetcherError(Exception):
    """远程获取错误异常。"""
    pass


class CatalogFormatError(RemoteFetcherError):
    """远程版本列表格式错误异常。"""
    pass


class RemoteFetcher(IRemoteFetcher):
    """
    远程版本获取器类。

    只发送一次请求，不重试也不缓存；网络和解码错误原样抛出。
    实现 IRemoteFetcher 抽象接口。
    """

    def __init__(self, config_manager: ConfigManager, session: Optional[requests.Session] = None):
        """
        初始化远程版本获取器。

        参数:
            config_manager: 配置管理器实例
            session: 可选的 requests 会话
        """
        self.config_manager = config_manager
        self.session = session

    def fetch_releases(self) -> List[Dict[str, Any]]:
        """
        获取远程发布记录列表。

        服务端按版本从新到旧排序，每条记录包含 version（如 go1.21）和 stable。

        返回:
            发布记录列表，保持服务端顺序

        抛出:
            requests.RequestException: 网络请求失败或返回错误状态码
            ValueError: 响应不是合法 JSON
            CatalogFormatError: JSON 结构不符合预期
        """
        url = self.config_manager.get_catalog_url()
        timeout = self.config_manager.get_request_timeout()

        logger.info(f"正在从 {url} 获取版本列表")
        getter = self.session.get if self.session is not None else requests.get
        response = getter(url, timeout=timeout)
        response.raise_for_status()
        payload = response.json()

        if not isinstance(payload, list):
            raise CatalogFormatError(f"版本列表应为数组，实际为 {type(payload).__name__}")

        releases = []
        for item in payload:
            if not isinstance(item, dict) or not isinstance(item.get("version"), str):
                raise CatalogFormatError(f"无法识别的版本记录: {item!r}")
            releases.append({
                "version": item["version"],
                "stable": bool(item.get("stable", False)),
            })

        logger.info(f"成功获取 {len(releases)} 个远程版本")
        return releases

    def get_remote_versions(self) -> List[str]:
        """
        获取远程可用的版本号列表。

        返回:
            去掉 go 前缀的版本号列表，从新到旧，不重新排序
        """
        return [version_utils.strip_prefix(r["version"]) for r in self.fetch_releases()]
