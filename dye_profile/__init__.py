# ============================================================================
# 1. dye_profile/__init__.py - 包初始化
# ============================================================================

"""
Dye Profile Analysis
离心管染料分布图像的逐列通道比例分析工具

版本: 1.0.0
"""

__version__ = "1.0.0"


# 延迟导入主要模块，避免在导入包时触发繁重依赖
def __getattr__(name):
    if name == "ProfilePipeline":
        from .pipeline import ProfilePipeline
        return ProfilePipeline
    if name in ("ConfigManager", "ProfileConfig"):
        from . import config
        return getattr(config, name)
    if name == "Channel":
        from .core import Channel
        return Channel
    if name == "LogManager":
        from .utils import LogManager
        return LogManager
    raise AttributeError(name)


__all__ = [
    "Channel",
    "ConfigManager",
    "LogManager",
    "ProfileConfig",
    "ProfilePipeline",
]
