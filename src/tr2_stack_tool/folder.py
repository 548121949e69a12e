"""
调用栈折叠

把所有定型记录按扁平化后的栈路径聚合，相同路径的时长相加。
这里的数值是累计时长，不是采样计数。
"""

from collections import defaultdict
from typing import Dict, Iterable
import logging

from .models import Record

logger = logging.getLogger(__name__)

# 扁平栈键内部使用的私有连接符，输入中不会出现
JOIN_MARKER = '\x1e'


def stack_key(hierarchy: str) -> str:
    """将 '/' 分隔的层级转换为扁平栈键"""
    return hierarchy.replace('/', JOIN_MARKER)


def fold_stacks(records: Iterable[Record]) -> Dict[str, int]:
    """
    聚合定型记录

    Args:
        records: 调用记录与 region 记录

    Returns:
        Dict[str, int]: 扁平栈键 -> 累计时长
    """
    stacks: Dict[str, int] = defaultdict(int)
    skipped = 0

    for record in records:
        hierarchy = record.final_hierarchy
        if hierarchy is None or record.duration is None:
            skipped += 1
            continue
        stacks[stack_key(hierarchy)] += record.duration

    logger.info(f"折叠得到 {len(stacks)} 条调用栈，跳过 {skipped} 条不完整记录")
    return dict(stacks)
