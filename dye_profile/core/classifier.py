# ============================================================================
# 4. dye_profile/core/classifier.py - 文件名分类
# ============================================================================

import re
from typing import Iterable, List


def replicate_prefix(identifier: str, group_key: int) -> str:
    """某个 RPM 组的文件名前缀，例如 ``W_500_R``"""
    return f"{identifier}_{group_key}_R"


def group_key_pattern(identifier: str) -> "re.Pattern":
    """``<identifier>_<RPM>_R<重复编号>`` 的匹配模式（子串匹配）"""
    return re.compile(re.escape(identifier) + r"_(\d+)_R\d+", re.ASCII)


def extract_group_keys(filenames: Iterable[str], identifier: str) -> List[int]:
    """从文件名中提取不重复的 RPM，并按数值升序返回

    匹配不要求覆盖整个文件名，扩展名和前后的其他文字都会被忽略。
    """
    pattern = group_key_pattern(identifier)
    keys = set()
    for filename in filenames:
        match = pattern.search(filename)
        if match:
            keys.add(int(match.group(1)))
    return sorted(keys)


def match_group_files(filenames: Iterable[str], identifier: str, group_key: int) -> List[str]:
    """返回属于某个 RPM 组的文件名，保持输入顺序"""
    prefix = replicate_prefix(identifier, group_key)
    return [name for name in filenames if prefix in name]
