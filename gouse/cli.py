"""
gouse 命令行接口模块。
"""

import argparse
import json
import logging
import subprocess
import sys

import requests

from gouse import __version__
from gouse.core.config_manager import ConfigManager, ConfigManagerError
from gouse.core.download_manager import DownloadManager
from gouse.core.filesystem import DirFileSystem
from gouse.core.local_manager import LocalManager, LocalManagerError
from gouse.core.remote_fetcher import RemoteFetcher, RemoteFetcherError
from gouse.core.version_manager import VersionManager, VersionManagerError
from gouse.utils.logger import get_logger, setup_logger

logger = get_logger()

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_INTERRUPTED = 130

RUNTIME_ERRORS = (
    VersionManagerError,
    LocalManagerError,
    RemoteFetcherError,
    ConfigManagerError,
    OSError,
    ValueError,
    subprocess.CalledProcessError,
    requests.RequestException,
)


def create_parser() -> argparse.ArgumentParser:
    """
    创建并配置命令行参数解析器。

    返回:
        配置好的 ArgumentParser 实例
    """
    parser = argparse.ArgumentParser(
        prog="gouse",
        description="gouse - Go 版本切换工具",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例:
  gouse use 1.21          切换到 Go 1.21（未安装时自动安装）
  gouse use main          切换回系统默认版本
  gouse list              列出本地已安装的版本
  gouse list -a -only=1.2 列出 go.dev 上以 1.2 开头的版本
  gouse remove 1.20       删除 Go 1.20 及其 SDK
        """,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="启用详细输出",
    )

    parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="配置目录路径",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="命令",
        description="可用的 CLI 命令",
    )

    use_parser = subparsers.add_parser(
        "use",
        help="切换到指定版本，未安装时先安装",
    )
    use_parser.add_argument(
        "version",
        help="要切换到的版本，或 main",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="列出已安装的版本",
    )
    list_parser.add_argument(
        "-a",
        "-all",
        "--all",
        dest="all",
        action="store_true",
        help="同时列出 go.dev 上的可用版本",
    )
    list_parser.add_argument(
        "-only",
        "--only",
        dest="only",
        default="",
        metavar="PREFIX",
        help="只列出以该前缀开头的版本",
    )
    list_parser.add_argument(
        "--format",
        "-f",
        choices=["simple", "json"],
        default="simple",
        help="输出格式",
    )

    remove_parser = subparsers.add_parser(
        "remove",
        help="删除指定版本及其 SDK",
    )
    remove_parser.add_argument(
        "version",
        help="要删除的版本，或 main",
    )

    config_parser = subparsers.add_parser(
        "config",
        help="显示或修改配置",
    )
    config_parser.add_argument(
        "--set",
        "-s",
        type=str,
        help="设置配置值（格式：key=value，例如 settings.gobin=/opt/go/bin）",
    )

    return parser


def _get_version_manager(args: argparse.Namespace) -> VersionManager:
    """
    根据配置构建版本管理器。

    参数:
        args: 解析后的命令行参数

    返回:
        VersionManager 实例
    """
    config_manager = ConfigManager(args.config)
    bin_fs = DirFileSystem(config_manager.get_bin_dir())
    sdk_fs = DirFileSystem(config_manager.get_sdk_dir())
    logger.debug(f"bin 目录: {bin_fs.root}，SDK 目录: {sdk_fs.root}")
    return VersionManager(
        local_manager=LocalManager(config_manager, bin_fs),
        bin_fs=bin_fs,
        sdk_fs=sdk_fs,
        installer=DownloadManager(config_manager),
        remote_fetcher=RemoteFetcher(config_manager),
    )


def handle_use(args: argparse.Namespace) -> int:
    """处理 use 命令：切换到指定版本。"""
    _get_version_manager(args).use(args.version)
    return EXIT_OK


def handle_list(args: argparse.Namespace) -> int:
    """
    处理 list 命令：列出本地或远程版本。

    当前版本以 * 标记。

    参数:
        args: 解析后的命令行参数

    返回:
        退出码
    """
    entries = _get_version_manager(args).list_versions(only=args.only, include_remote=args.all)

    if args.format == "json":
        result = [
            {"version": e.version, "note": e.note, "current": e.is_current}
            for e in entries
        ]
        print(json.dumps(result, indent=2))
        return EXIT_OK

    for entry in entries:
        prefix = "*" if entry.is_current else " "
        extra = f" ({entry.note})" if entry.note else ""
        print(f"{prefix} {entry.version:<10}{extra}")
    return EXIT_OK


def handle_remove(args: argparse.Namespace) -> int:
    """处理 remove 命令：删除指定版本。"""
    _get_version_manager(args).remove(args.version)
    return EXIT_OK


def handle_config(args: argparse.Namespace) -> int:
    """
    处理 config 命令：显示或修改配置。

    参数:
        args: 解析后的命令行参数

    返回:
        退出码
    """
    config_manager = ConfigManager(args.config)

    if args.set:
        key, _, value = args.set.partition("=")
        if not key or not value:
            print("格式无效。请使用: key=value", file=sys.stderr)
            return EXIT_USAGE

        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            pass

        config_manager.set_value(key, value)
        print(f"已设置 {key} = {value}")
    else:
        print(json.dumps(config_manager.get_config(), indent=2, ensure_ascii=False))

    return EXIT_OK


COMMAND_HANDLERS = {
    "use": handle_use,
    "list": handle_list,
    "remove": handle_remove,
    "config": handle_config,
}


def run_cli(args: argparse.Namespace) -> int:
    """
    运行命令行接口。

    参数:
        args: 解析后的命令行参数

    返回:
        退出码（0 表示成功）
    """
    config_dir = ConfigManager(args.config).config_dir
    setup_logger(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_to_console=args.verbose,
        log_dir=config_dir / "logs",
    )

    handler = COMMAND_HANDLERS.get(args.command)
    if handler is None:
        print("未指定命令。使用 --help 查看帮助信息。", file=sys.stderr)
        return EXIT_USAGE

    try:
        return handler(args)
    except KeyboardInterrupt:
        logger.info("操作已被用户取消")
        return EXIT_INTERRUPTED
    except RUNTIME_ERRORS as e:
        logger.error(f"{args.command} 执行失败: {e}")
        print(f"错误: {e}", file=sys.stderr)
        return EXIT_ERROR
