"""
时间工具函数
"""

from datetime import datetime, timezone
from typing import Optional
import logging

logger = logging.getLogger(__name__)

# 时长单位: 秒差值乘以该系数后向零截断 (不是真正的微秒)
DURATION_SCALE = 100000

_FORMATS = ("%Y-%m-%dT%H:%M:%S.%f", "%Y-%m-%dT%H:%M:%S")


def parse_epoch(timestamp: Optional[str]) -> Optional[float]:
    """
    将 trace2 的 ISO-8601 时间字符串转换为 epoch 秒 (浮点数)

    Args:
        timestamp: 形如 2019-04-19T22:08:49.123456Z 的时间字符串

    Returns:
        Optional[float]: epoch 秒，无法解析时返回 None
    """
    if not isinstance(timestamp, str) or not timestamp:
        return None

    text = timestamp.strip()
    if text.endswith('Z'):
        text = text[:-1]

    for fmt in _FORMATS:
        try:
            dt = datetime.strptime(text, fmt)
        except ValueError:
            continue
        return dt.replace(tzinfo=timezone.utc).timestamp()

    logger.debug(f"时间戳解析失败: {timestamp}")
    return None


def scaled_duration(start: float, end: float) -> int:
    """计算缩放后的时长，向零截断"""
    return int(DURATION_SCALE * (end - start))
