"""
配置管理器模块。

提供应用程序配置的加载、保存和验证功能。
"""

import copy
import json
import os
from pathlib import Path
from typing import Any, Optional, Union

from gouse.core.interfaces import IConfigManager
from gouse.utils.logger import get_logger

logger = get_logger()

DEFAULT_CATALOG_URL = "https://go.dev/dl/?mode=json&include=all"
DEFAULT_INSTALL_URL_TEMPLATE = "golang.org/dl/go{version}@latest"
DEFAULT_REQUEST_TIMEOUT = 60


class ConfigManagerError(Exception):
    """配置管理错误异常。"""
    pass


class ConfigValidationError(ConfigManagerError):
    """配置验证错误异常。"""
    pass


class ConfigSaveError(ConfigManagerError):
    """配置保存错误异常。"""
    pass


def get_config_dir() -> Path:
    """
    获取默认配置目录路径。

    优先使用 GOUSE_CONFIG_DIR 环境变量，否则为 ~/.gouse。

    返回:
        配置目录的 Path 对象
    """
    config_dir = os.environ.get("GOUSE_CONFIG_DIR")
    if config_dir:
        return Path(config_dir)
    return Path.home() / ".gouse"


def _atomic_save_json(file_path: Path, data: Any, indent: int = 2) -> None:
    """
    原子保存 JSON 数据到文件，防止写入中断导致文件损坏。

    参数:
        file_path: 目标文件路径
        data: 要保存的数据
        indent: JSON 缩进
    """
    temp_path = file_path.with_suffix(file_path.suffix + ".tmp")

    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=indent, ensure_ascii=False)
        os.replace(temp_path, file_path)
    except BaseException:
        if temp_path.exists():
            temp_path.unlink()
        raise


class ConfigManager(IConfigManager):
    """
    配置管理器类。

    负责管理应用程序配置的加载、保存、验证和访问。
    实现 IConfigManager 抽象接口。
    """

    CONFIG_FILE_NAME = "config.json"

    REQUIRED_FIELDS = {
        "settings": dict,
    }

    SETTINGS_FIELDS = {
        "gobin": str,
        "sdk_dir": str,
        "go_command": str,
        "catalog_url": str,
        "request_timeout": int,
        "install_url_template": str,
    }

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        初始化配置管理器。

        参数:
            config_dir: 配置目录，默认为 get_config_dir() 的返回值
        """
        self.config_dir = Path(config_dir) if config_dir else get_config_dir()
        self.config_file = self.config_dir / self.CONFIG_FILE_NAME
        self._config: dict[str, Any] = {}

    @staticmethod
    def get_builtin_default_config() -> dict[str, Any]:
        """获取内置默认配置。"""
        return {
            "settings": {
                "gobin": "",
                "sdk_dir": "",
                "go_command": "go",
                "catalog_url": DEFAULT_CATALOG_URL,
                "request_timeout": DEFAULT_REQUEST_TIMEOUT,
                "install_url_template": DEFAULT_INSTALL_URL_TEMPLATE,
            },
        }

    def load_config(self) -> dict[str, Any]:
        """
        加载配置文件。

        配置文件不存在时使用内置默认配置；文件中缺少的字段用默认值补齐。
        文件损坏或验证失败时记录错误并回退到默认配置。

        返回:
            配置字典
        """
        default_config = self.get_builtin_default_config()
        if not self.config_file.exists():
            logger.debug(f"配置文件不存在，使用默认配置: {self.config_file}")
            self._config = default_config
            return self._config

        try:
            logger.debug(f"从文件加载配置: {self.config_file}")
            with open(self.config_file, "r", encoding="utf-8") as f:
                loaded = json.load(f)
            if not isinstance(loaded, dict):
                raise ConfigValidationError("配置文件顶层必须是对象")

            merged = default_config
            for key, value in loaded.items():
                if key == "settings" and isinstance(value, dict):
                    merged["settings"].update(value)
                else:
                    merged[key] = value

            self.validate_config(merged)
            self._config = merged
            logger.debug("配置加载成功")
        except (IOError, OSError, json.JSONDecodeError) as e:
            logger.error(f"加载配置文件失败，使用默认配置: {e}")
            self._config = self.get_builtin_default_config()
        except ConfigValidationError as e:
            logger.error(f"配置验证失败，使用默认配置: {e}")
            self._config = self.get_builtin_default_config()
        return self._config

    def save_config(self, config: dict[str, Any] | None = None) -> None:
        """
        保存配置到文件。

        参数:
            config: 要保存的配置字典，如果为 None 则保存当前配置

        抛出:
            ConfigValidationError: 配置不合法
            ConfigSaveError: 写入文件失败
        """
        if config is not None:
            self._config = config

        self.validate_config(self.config)

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            logger.debug(f"保存配置到 {self.config_file}")
            _atomic_save_json(self.config_file, self._config, indent=2)
            logger.info(f"配置已保存到 {self.config_file}")
        except (IOError, OSError) as e:
            logger.error(f"保存配置失败: {e}")
            raise ConfigSaveError(f"无法保存配置到 {self.config_file}: {e}") from e

    def validate_config(self, config: dict[str, Any]) -> bool:
        """
        验证配置的有效性。

        参数:
            config: 要验证的配置字典

        返回:
            验证通过返回 True

        抛出:
            ConfigValidationError: 配置验证失败时抛出
        """
        for field, expected_type in self.REQUIRED_FIELDS.items():
            if field not in config:
                raise ConfigValidationError(f"缺少必需字段: {field}")
            if not isinstance(config[field], expected_type):
                raise ConfigValidationError(
                    f"字段 '{field}' 必须是 {expected_type.__name__} 类型，"
                    f"实际为 {type(config[field]).__name__}"
                )

        settings = config["settings"]
        for field, expected_type in self.SETTINGS_FIELDS.items():
            if field not in settings:
                raise ConfigValidationError(f"settings 中缺少必需字段: {field}")
            value = settings[field]
            # bool 是 int 的子类，需要单独排除
            if not isinstance(value, expected_type) or isinstance(value, bool):
                raise ConfigValidationError(
                    f"字段 'settings.{field}' 必须是 {expected_type.__name__} 类型，"
                    f"实际为 {type(value).__name__}"
                )

        if settings["request_timeout"] <= 0:
            raise ConfigValidationError("settings.request_timeout 必须大于 0")
        if "{version}" not in settings["install_url_template"]:
            raise ConfigValidationError("settings.install_url_template 必须包含 {version}")
        if not settings["go_command"].strip():
            raise ConfigValidationError("settings.go_command 不能为空")

        return True

    @property
    def config(self) -> dict[str, Any]:
        """配置字典（延迟加载）。"""
        if not self._config:
            self.load_config()
        return self._config

    def get_config(self) -> dict[str, Any]:
        return self.config

    def get_settings(self) -> dict[str, Any]:
        return self.config.get("settings", {})

    def set_value(self, key: str, value: Any) -> None:
        """
        按点分隔的键设置配置值并保存，例如 settings.gobin。

        参数:
            key: 点分隔的配置键
            value: 配置值

        抛出:
            ConfigValidationError: 设置后的配置不合法，此时不会写入文件
        """
        keys = key.split(".")
        updated = copy.deepcopy(self.config)
        obj = updated
        for k in keys[:-1]:
            if not isinstance(obj.get(k), dict):
                obj[k] = {}
            obj = obj[k]
        obj[keys[-1]] = value

        self.validate_config(updated)
        self.save_config(updated)

    def get_bin_dir(self) -> str:
        """
        获取存放 go<version> 二进制文件的目录。

        依次使用配置中的 gobin、GOBIN 环境变量、GOPATH/bin、~/go/bin。

        返回:
            目录路径字符串
        """
        gobin = self.get_settings().get("gobin") or os.environ.get("GOBIN")
        if gobin:
            return str(Path(gobin).expanduser())
        gopath = os.environ.get("GOPATH")
        if gopath:
            # GOPATH 可以包含多个目录，go install 使用第一个
            first = gopath.split(os.pathsep)[0]
            if first:
                return str(Path(first).expanduser() / "bin")
        return str(Path.home() / "go" / "bin")

    def get_sdk_dir(self) -> str:
        """获取 SDK 目录，默认为 ~/sdk（golang.org/dl 的下载位置）。"""
        sdk_dir = self.get_settings().get("sdk_dir")
        if sdk_dir:
            return str(Path(sdk_dir).expanduser())
        return str(Path.home() / "sdk")

    def get_go_command(self) -> str:
        return self.get_settings().get("go_command", "go")

    def get_catalog_url(self) -> str:
        return self.get_settings().get("catalog_url", DEFAULT_CATALOG_URL)

    def get_request_timeout(self) -> int:
        return self.get_settings().get("request_timeout", DEFAULT_REQUEST_TIMEOUT)

    def get_install_url_template(self) -> str:
        return self.get_settings().get("install_url_template", DEFAULT_INSTALL_URL_TEMPLATE)
