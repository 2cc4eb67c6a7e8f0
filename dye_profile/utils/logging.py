# dye_profile/utils/logging.py
import logging
import platform
import sys
import time
from pathlib import Path
from typing import Optional

from tqdm import tqdm

PACKAGE_LOGGER = "dye_profile"


class TqdmHandler(logging.StreamHandler):
    """自定义处理器，使用 ``tqdm.write`` 输出日志，避免打断进度条"""

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
            self.flush()
        except Exception:
            self.handleError(record)


class LogManager:
    """日志管理器

    同时输出到控制台和按时间戳命名的日志文件。作为上下文管理器使用时，
    退出时一定会关闭并移除文件处理器::

        with LogManager(identifier="W", config=cfg) as log:
            pipeline = ProfilePipeline(profile_cfg, logger=log.logger)
    """

    def __init__(self, identifier: str = "run", config=None, stream=None):
        """
        初始化日志管理器

        Args:
            identifier: 数据集标识符，用于日志文件名
            config: 配置管理器
            stream: 控制台输出流，默认 ``sys.stdout``
        """
        log_level = "INFO"
        log_to_file = True
        log_dir = "logs"

        # 从配置获取日志设置
        if config is not None and hasattr(config, "get"):
            log_level = config.get("logging", "level", "INFO")
            log_to_file = config.get("logging", "log_to_file", True)
            log_dir = config.get("logging", "log_dir", None) or "logs"

        numeric_level = getattr(logging, str(log_level).upper(), None)
        if not isinstance(numeric_level, int):
            numeric_level = logging.INFO

        self.identifier = identifier
        self.level = numeric_level
        self.log_to_file = log_to_file
        self.log_dir = Path(log_dir)
        self.stream = stream or sys.stdout
        self.log_file: Optional[Path] = None
        self.logger = logging.getLogger(PACKAGE_LOGGER)
        self._handlers = []
        self._saved_state = None

    def open(self) -> "LogManager":
        console_format = "%(levelname)s: %(message)s"
        file_format = "%(asctime)s - %(levelname)s - %(message)s"

        self._saved_state = (self.logger.level, self.logger.propagate)
        self.logger.setLevel(self.level)
        self.logger.propagate = False

        console_handler = TqdmHandler(self.stream)
        console_handler.setFormatter(logging.Formatter(console_format))
        self._add_handler(console_handler)

        if self.log_to_file:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = time.strftime("%Y%m%d_%H%M%S")
            self.log_file = self.log_dir / f"{self.identifier}_log_{timestamp}.txt"

            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(file_format))
            self._add_handler(file_handler)

            self.logger.info(f"日志记录到文件: {self.log_file}")
        return self

    def close(self):
        """移除并关闭本管理器添加的处理器"""
        for handler in self._handlers:
            self.logger.removeHandler(handler)
            handler.close()
        self._handlers = []
        if self._saved_state is not None:
            self.logger.setLevel(self._saved_state[0])
            self.logger.propagate = self._saved_state[1]
            self._saved_state = None

    def _add_handler(self, handler: logging.Handler):
        self.logger.addHandler(handler)
        self._handlers.append(handler)

    def __enter__(self) -> "LogManager":
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def log_system_info(self):
        """记录系统信息"""
        self.logger.info("=" * 50)
        self.logger.info("系统信息:")
        self.logger.info(f"操作系统: {platform.platform()}")
        self.logger.info(f"Python版本: {platform.python_version()}")
        self.logger.info(f"解释器路径: {sys.executable}")

        try:
            import cv2
            self.logger.info(f"OpenCV版本: {cv2.__version__}")
        except ImportError:
            self.logger.info("OpenCV状态: 未安装")

        self.logger.info("=" * 50)
