# ============================================================================
# 5. dye_profile/core/validator.py - 重复组验证
# ============================================================================

import logging
from typing import Dict, Iterable, List, Optional

from .classifier import match_group_files

logger = logging.getLogger(__name__)

EXPECTED_REPLICATES = 3


class ReplicateValidationError(ValueError):
    """存在重复数不等于 3 的 RPM 组，整个运行需要中止"""

    def __init__(self, failures: Dict[int, int], expected: int = EXPECTED_REPLICATES):
        self.failures = dict(failures)
        self.expected = expected
        details = ", ".join(f"RPM {key}: {count}" for key, count in sorted(self.failures.items()))
        super().__init__(f"以下 RPM 组不是恰好 {expected} 个重复: {details}")


def count_replicates(filenames: Iterable[str], identifier: str, group_key: int) -> int:
    """统计包含 ``<identifier>_<RPM>_R`` 的文件数

    只做子串计数，不区分具体的重复编号（``R10`` 之类的异常名称同样计入）。
    """
    return len(match_group_files(filenames, identifier, group_key))


def find_incomplete_groups(
    filenames: Iterable[str],
    group_keys: Iterable[int],
    identifier: str,
    expected: int = EXPECTED_REPLICATES,
) -> Dict[int, int]:
    """返回 {RPM: 实际数量}，仅包含数量不符合要求的组"""
    names: List[str] = list(filenames)
    failures = {}
    for key in group_keys:
        count = count_replicates(names, identifier, key)
        if count != expected:
            failures[key] = count
    return failures


def validate_replicates(
    filenames: Iterable[str],
    group_keys: Iterable[int],
    identifier: str,
    expected: int = EXPECTED_REPLICATES,
    log: Optional[logging.Logger] = None,
):
    """检查每个 RPM 是否恰好有 ``expected`` 个重复

    失败的组逐一记录错误，然后抛出 ``ReplicateValidationError``。
    """
    log = log or logger
    failures = find_incomplete_groups(filenames, group_keys, identifier, expected)
    for key, count in sorted(failures.items()):
        log.error(f"错误: RPM {key} 不是恰好 {expected} 个重复 (找到 {count} 个)")
    if failures:
        raise ReplicateValidationError(failures, expected)
