# ============================================================================
# 2. dye_profile/config/settings.py - 配置管理
# ============================================================================

import json
import logging
import math
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..core.channels import Channel

logger = logging.getLogger(__name__)

DEFAULT_BLUR_RADIUS = 10


@dataclass(frozen=True)
class ProfileConfig:
    """单次运行的配置，启动时确定，之后只读"""

    identifier: str
    distance_upper: float
    distance_lower: float
    channel: Channel
    blur_radius: int = DEFAULT_BLUR_RADIUS
    input_folder: str = "."
    output_folder: str = "output"

    def validate(self, check_folders: bool = True) -> "ProfileConfig":
        """验证配置，出错时抛出 ``ValueError``"""
        if not self.identifier or not str(self.identifier).strip():
            raise ValueError("数据集标识符不能为空")

        for name in ("distance_upper", "distance_lower"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"{name} 必须是数字: {value!r}")
            if not math.isfinite(value):
                raise ValueError(f"{name} 必须是有限数值: {value}")

        if self.distance_lower >= self.distance_upper:
            raise ValueError(
                f"距离下界必须小于上界 ({self.distance_lower} >= {self.distance_upper})"
            )

        if not isinstance(self.channel, Channel):
            raise ValueError(f"无效的通道: {self.channel!r}")

        if isinstance(self.blur_radius, bool) or not isinstance(self.blur_radius, int):
            raise ValueError(f"模糊半径必须是整数: {self.blur_radius!r}")
        if self.blur_radius < 0:
            raise ValueError(f"模糊半径不能为负数: {self.blur_radius}")

        if check_folders and not Path(self.input_folder).is_dir():
            raise ValueError(f"输入目录不存在: {self.input_folder}")

        return self

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["channel"] = self.channel.tag
        return data


@dataclass
class LoggingConfig:
    """日志配置"""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: Optional[str] = "logs"


class ConfigManager:
    """配置管理器

    配置来源的优先级（从低到高）：默认值 -> 配置文件 -> 命令行参数。
    配置文件支持 YAML 和 JSON，包含 ``profile`` 与 ``logging`` 两个部分::

        profile:
          identifier: W
          distance_upper: 14.4
          distance_lower: 2.4
          channel: R
          blur_radius: 10
          input_folder: images/
          output_folder: output/
        logging:
          level: INFO
    """

    PROFILE_FIELDS = (
        "identifier",
        "distance_upper",
        "distance_lower",
        "channel",
        "blur_radius",
        "input_folder",
        "output_folder",
    )

    def __init__(self, config_path: Optional[str] = None):
        """初始化配置管理器"""
        self.config_path = self._resolve_config_path(config_path)

        self.profile: Dict[str, Any] = {}
        self.logging = LoggingConfig()

        self._load_config()

    def _resolve_config_path(self, config_path: Optional[str]) -> str:
        """解析配置文件路径"""
        if config_path:
            if not Path(config_path).exists():
                raise FileNotFoundError(f"配置文件不存在: {config_path}")
            return str(config_path)

        default_locations = [
            Path("config.yaml"),
            Path.home() / ".dye_profile" / "config.yaml",
        ]

        for path in default_locations:
            if path.exists():
                return str(path)

        # 返回默认路径（可能不存在）
        return str(Path.home() / ".dye_profile" / "config.yaml")

    def _load_config(self):
        """从文件加载配置"""
        if not Path(self.config_path).exists():
            logger.debug(f"配置文件不存在，使用默认配置: {self.config_path}")
            return

        with open(self.config_path, "r", encoding="utf-8") as f:
            if self.config_path.endswith(".json"):
                config_data = json.load(f)
            else:
                config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(f"配置文件格式错误: {self.config_path}")

        self._update_config_from_dict(config_data)
        logger.info(f"已从 {self.config_path} 加载配置")

    def _update_config_from_dict(self, config_data: Dict[str, Any]):
        """从字典更新配置"""
        profile_data = config_data.get("profile") or {}
        for field_name, field_value in profile_data.items():
            if field_name in self.PROFILE_FIELDS:
                self.profile[field_name] = field_value
            else:
                logger.warning(f"忽略未知的配置项: profile.{field_name}")

        logging_data = config_data.get("logging") or {}
        for field_name, field_value in logging_data.items():
            if hasattr(self.logging, field_name):
                setattr(self.logging, field_name, field_value)

    def get(self, section: str, key: Optional[str] = None, default: Any = None) -> Any:
        """获取配置值"""
        if section == "profile":
            return dict(self.profile) if key is None else self.profile.get(key, default)
        if section == "logging":
            return self.logging if key is None else getattr(self.logging, key, default)
        return default

    def update_from_args(self, args):
        """从命令行参数更新配置（只覆盖显式给出的参数）"""
        for field_name in self.PROFILE_FIELDS:
            value = getattr(args, field_name, None)
            if value is not None:
                self.profile[field_name] = value

        if getattr(args, "log_level", None):
            self.logging.level = args.log_level
        if getattr(args, "verbose", False):
            self.logging.level = "DEBUG"
        if getattr(args, "log_dir", None):
            self.logging.log_dir = args.log_dir
        if getattr(args, "no_log_file", False):
            self.logging.log_to_file = False

    def missing_fields(self):
        """返回尚未提供的运行配置字段"""
        return [
            name for name in self.PROFILE_FIELDS
            if name != "blur_radius" and self.profile.get(name) is None
        ]

    def build_profile_config(self, check_folders: bool = True) -> ProfileConfig:
        """构造并验证 ``ProfileConfig``"""
        missing = self.missing_fields()
        if missing:
            raise ValueError(f"缺少必需的配置项: {', '.join(missing)}")

        data = self.profile
        try:
            config = ProfileConfig(
                identifier=str(data["identifier"]).strip(),
                distance_upper=float(data["distance_upper"]),
                distance_lower=float(data["distance_lower"]),
                channel=Channel.from_tag(data["channel"]),
                blur_radius=_as_int(
                    DEFAULT_BLUR_RADIUS if data.get("blur_radius") is None else data["blur_radius"]
                ),
                input_folder=str(data["input_folder"]),
                output_folder=str(data["output_folder"]),
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"配置值无效: {e}") from e

        return config.validate(check_folders=check_folders)


def _as_int(value: Any) -> int:
    """严格的整数转换，拒绝 ``2.5`` 之类的值"""
    if isinstance(value, bool):
        raise ValueError(f"不是整数: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"不是整数: {value!r}")
        return int(value)
    return int(str(value).strip())
