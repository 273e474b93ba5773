"""
文件系统抽象模块。

提供 IFileSystem 的两种实现：
- DirFileSystem: 以磁盘目录为根的真实文件系统
- MemoryFileSystem: 用于测试的内存文件系统
"""

import os
import posixpath
import shutil
import uuid
from pathlib import Path
from typing import Dict, List, Optional, Union

from gouse.core.interfaces import DirEntry, IFileSystem
from gouse.utils.logger import get_logger

logger = get_logger()


def _check_relative(name: str) -> str:
    """
    校验名称是根目录内的相对路径。

    参数:
        name: 相对路径

    返回:
        规范化后的相对路径（使用 / 分隔）

    抛出:
        ValueError: 名称为空、为绝对路径或试图跳出根目录
    """
    if not name:
        raise ValueError("路径不能为空")
    normalized = posixpath.normpath(name.replace("\\", "/"))
    if normalized.startswith("/") or normalized == ".." or normalized.startswith("../"):
        raise ValueError(f"路径超出根目录范围: {name}")
    return normalized


class DirFileSystem(IFileSystem):
    """
    以指定目录为根的真实文件系统。

    所有操作都限定在根目录内。
    """

    def __init__(self, root: Union[str, Path]):
        """
        初始化文件系统。

        参数:
            root: 根目录路径
        """
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"DirFileSystem({str(self.root)!r})"

    def _path(self, name: str) -> Path:
        return self.root / _check_relative(name)

    def readlink(self, name: str) -> str:
        return os.readlink(self._path(name))

    def symlink(self, target: str, name: str) -> None:
        """
        原子地创建或覆盖符号链接。

        先在同一目录下创建临时链接，再通过 os.replace 替换目标名称。

        参数:
            target: 链接目标
            name: 链接名称
        """
        path = self._path(name)
        temp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        os.symlink(target, temp_path)
        try:
            os.replace(temp_path, path)
        except OSError:
            temp_path.unlink()
            raise
        logger.debug(f"已创建符号链接 {path} -> {target}")

    def remove(self, name: str) -> None:
        path = self._path(name)
        if path.is_dir() and not path.is_symlink():
            path.rmdir()
        else:
            path.unlink()
        logger.debug(f"已删除 {path}")

    def remove_all(self, name: str) -> None:
        """
        递归删除条目。

        参数:
            name: 相对路径，条目不存在时直接返回
        """
        path = self._path(name)
        if path.is_symlink() or path.is_file():
            path.unlink()
        elif path.is_dir():
            shutil.rmtree(path)
        else:
            return
        logger.debug(f"已递归删除 {path}")

    def list_dir(self) -> List[DirEntry]:
        # 尚未安装过任何版本时根目录可能还不存在
        if not self.root.exists():
            return []
        entries = []
        with os.scandir(self.root) as it:
            for entry in it:
                entries.append(DirEntry(entry.name, entry.is_dir(follow_symlinks=False)))
        return sorted(entries)

    def exists(self, path: str) -> bool:
        return self._path(path).exists()


class MemoryFileSystem(IFileSystem):
    """
    内存文件系统。

    用字典保存文件、目录和符号链接，路径使用 / 分隔。
    """

    FILE = "file"
    DIR = "dir"
    LINK = "link"

    def __init__(self, files: Optional[Dict[str, str]] = None):
        """
        初始化内存文件系统。

        参数:
            files: 初始文件，键为相对路径，值为文件内容
        """
        self._nodes: Dict[str, str] = {}
        self._links: Dict[str, str] = {}
        self._contents: Dict[str, str] = {}
        for path, content in (files or {}).items():
            self.write_file(path, content)

    def _ensure_parents(self, path: str) -> None:
        parent = posixpath.dirname(path)
        while parent:
            kind = self._nodes.get(parent)
            if kind is not None and kind != self.DIR:
                raise NotADirectoryError(parent)
            self._nodes[parent] = self.DIR
            parent = posixpath.dirname(parent)

    def write_file(self, path: str, content: str = "") -> None:
        """写入文件，自动创建父目录。"""
        path = _check_relative(path)
        self._ensure_parents(path)
        self._nodes[path] = self.FILE
        self._contents[path] = content

    def mkdir(self, path: str) -> None:
        """创建目录，自动创建父目录。"""
        path = _check_relative(path)
        self._ensure_parents(path)
        self._nodes[path] = self.DIR

    def readlink(self, name: str) -> str:
        name = _check_relative(name)
        kind = self._nodes.get(name)
        if kind is None:
            raise FileNotFoundError(name)
        if kind != self.LINK:
            raise OSError(f"不是符号链接: {name}")
        return self._links[name]

    def symlink(self, target: str, name: str) -> None:
        name = _check_relative(name)
        if self._nodes.get(name) == self.DIR:
            raise IsADirectoryError(name)
        self._ensure_parents(name)
        self._nodes[name] = self.LINK
        self._links[name] = target
        self._contents.pop(name, None)

    def remove(self, name: str) -> None:
        name = _check_relative(name)
        kind = self._nodes.get(name)
        if kind is None:
            raise FileNotFoundError(name)
        if kind == self.DIR and any(p.startswith(name + "/") for p in self._nodes):
            raise OSError(f"目录非空: {name}")
        self._drop(name)

    def remove_all(self, name: str) -> None:
        name = _check_relative(name)
        for path in [p for p in self._nodes if p == name or p.startswith(name + "/")]:
            self._drop(path)

    def _drop(self, path: str) -> None:
        del self._nodes[path]
        self._links.pop(path, None)
        self._contents.pop(path, None)

    def list_dir(self) -> List[DirEntry]:
        return sorted(
            DirEntry(path, kind == self.DIR)
            for path, kind in self._nodes.items()
            if "/" not in path
        )

    def exists(self, path: str) -> bool:
        return _check_relative(path) in self._nodes
