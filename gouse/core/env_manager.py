"""
环境变量管理器模块。

提供进程内 PATH 环境变量的读取和临时修改功能。
"""

import os
from contextlib import contextmanager
from typing import Iterator, List, MutableMapping, Optional

from gouse.utils.logger import get_logger

logger = get_logger()


def _normalize_entry(entry: str) -> str:
    entry = entry.strip()
    if len(entry) > 1:
        entry = entry.rstrip("/\\")
    return os.path.normcase(os.path.normpath(entry)) if entry else entry


def cut_from_path(path: str, value: str) -> str:
    """
    从 PATH 形式的字符串中移除指定条目。

    参数:
        path: 以 os.pathsep 分隔的路径字符串
        value: 要移除的目录

    返回:
        移除后的路径字符串，其余条目顺序不变
    """
    if not value:
        return path
    target = _normalize_entry(value)
    entries = [e for e in path.split(os.pathsep) if _normalize_entry(e) != target]
    return os.pathsep.join(entries)


class EnvManager:
    """
    环境变量管理器类。

    管理当前进程的环境变量，子进程会继承这里做出的修改。
    """

    def __init__(self, environ: Optional[MutableMapping[str, str]] = None):
        """
        初始化环境变量管理器。

        参数:
            environ: 要操作的环境变量映射，默认为 os.environ
        """
        self.environ = os.environ if environ is None else environ

    def get_path_entries(self) -> List[str]:
        """
        获取 PATH 环境变量的所有条目。

        返回:
            PATH 条目列表
        """
        path_value = self.environ.get("PATH", "")
        return [e for e in path_value.split(os.pathsep) if e.strip()]

    def path_contains(self, entry: str) -> bool:
        """检查 PATH 是否包含指定条目。"""
        if not entry or not entry.strip():
            return False
        target = _normalize_entry(entry)
        return any(_normalize_entry(e) == target for e in self.get_path_entries())

    @contextmanager
    def path_excluded(self, entry: str) -> Iterator[str]:
        """
        在上下文中临时从 PATH 移除指定目录。

        无论上下文正常结束还是抛出异常，退出时都会恢复原来的 PATH。

        参数:
            entry: 要移除的目录

        返回:
            上下文中生效的 PATH 值
        """
        had_path = "PATH" in self.environ
        original = self.environ.get("PATH", "")
        if self.path_contains(entry):
            logger.debug(f"已临时从 PATH 移除 {entry}")
        temp_path = cut_from_path(original, entry)
        self.environ["PATH"] = temp_path
        try:
            yield temp_path
        finally:
            if had_path:
                self.environ["PATH"] = original
            else:
                self.environ.pop("PATH", None)
