"""
gouse 工具模块。

提供日志记录等工具功能。
"""

from .logger import get_logger, setup_logger

__all__ = [
    "get_logger",
    "setup_logger",
]
