"""
版本工具模块。

提供 Go 版本号校验、比较和排序等工具函数。

版本号格式为 ``1[.MINOR][.PATCH][(rc|beta)N]``，各数字段为不含前导零的正整数，
例如 ``1.21``、``1.21.3``、``1.22rc1``。
"""

import re
from typing import Iterable, List, Tuple

VERSION_PATTERN = re.compile(
    r"^1(\.[1-9][0-9]*)?(\.[1-9][0-9]*)?((rc|beta)[1-9][0-9]*)?$"
)

_PARTS_PATTERN = re.compile(
    r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:(rc|beta)(\d+))?$"
)

# 同一数字版本下的发布阶段顺序: beta < rc < 正式版
_STAGE_ORDER = {"beta": 0, "rc": 1, None: 2}

VERSION_PREFIX = "go"


def is_valid_version(version: str) -> bool:
    """
    校验版本字符串是否符合 Go 版本号语法。

    参数:
        version: 版本字符串（不带 go 前缀）

    返回:
        符合语法返回 True，否则返回 False
    """
    if not isinstance(version, str):
        return False
    return VERSION_PATTERN.match(version) is not None


def version_key(version: str) -> Tuple[int, int, int, int, int, int]:
    """
    将版本字符串解析为可比较的元组。

    缺失的 minor/patch 视为 0；预发布版本排在相同数字版本的正式版之前。
    数值相同时段数少的排在前面，例如 1.21 < 1.21.0。
    本函数不做语法检查，无法识别的格式按其中出现的数字排序。

    参数:
        version: 版本字符串

    返回:
        (major, minor, patch, stage, number, parts) 元组
    """
    match = _PARTS_PATTERN.match(version)
    if match is None:
        numbers = [int(p) for p in re.findall(r"\d+", version)[:3]]
        parts = len(numbers)
        numbers += [0] * (3 - len(numbers))
        return (numbers[0], numbers[1], numbers[2], _STAGE_ORDER[None], 0, parts)
    major, minor, patch, stage, number = match.groups()
    parts = 1 + (minor is not None) + (patch is not None)
    return (
        int(major),
        int(minor or 0),
        int(patch or 0),
        _STAGE_ORDER[stage],
        int(number or 0),
        parts,
    )


def version_less(a: str, b: str) -> bool:
    """判断版本 a 是否严格小于版本 b。"""
    return version_key(a) < version_key(b)


def sort_versions(versions: Iterable[str]) -> List[str]:
    """
    按版本号升序排列版本列表。

    参数:
        versions: 版本字符串序列

    返回:
        排序后的新列表
    """
    return sorted(versions, key=version_key)


def strip_prefix(name: str) -> str:
    """去掉名称开头的 go 前缀，例如 go1.21 -> 1.21。"""
    if name.startswith(VERSION_PREFIX):
        return name[len(VERSION_PREFIX):]
    return name


def binary_name(version: str) -> str:
    """返回版本对应的二进制文件名，例如 1.21 -> go1.21。"""
    return VERSION_PREFIX + version
