# ============================================================================
# dye_profile/utils/file_utils.py - 通用文件工具
# ============================================================================

import logging
import re
from pathlib import Path
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

_RPM_PATTERN = re.compile(r"(?<=_)\d+(?=_)", re.ASCII)


def list_filenames(input_folder) -> List[str]:
    """列出目录下的普通文件名（不递归），按名称排序"""
    folder = Path(input_folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"输入目录不存在: {input_folder}")
    return sorted(entry.name for entry in folder.iterdir() if entry.is_file())


def parse_rpm(filename: str) -> Optional[int]:
    """从文件名中解析 RPM，取第一个 ``_<数字>_`` 片段

    例如 ``W_500_Rness.csv`` -> 500
    """
    match = _RPM_PATTERN.search(filename)
    return int(match.group(0)) if match else None


def collect_profile_csvs(folder, max_rpm: Optional[int] = None) -> List[Tuple[int, Path]]:
    """收集目录中的曲线 CSV，返回按 RPM 升序排列的 (RPM, 路径)"""
    folder = Path(folder)
    if not folder.is_dir():
        raise FileNotFoundError(f"目录不存在: {folder}")

    files = []
    for path in sorted(folder.glob("*.csv")):
        rpm = parse_rpm(path.name)
        if rpm is None:
            logger.warning(f"无法从文件名解析 RPM，跳过: {path.name}")
            continue
        if max_rpm is not None and rpm > max_rpm:
            continue
        files.append((rpm, path))

    files.sort(key=lambda item: item[0])
    return files
