"""
region 合成器

region 是单个调用内部的命名子区间，不是独立进程，但仍需作为独立的栈帧出现。
enter/leave 时间戳按位置累积在两个列表里，配对在调和阶段通过排序完成，
因此不同调用交错乱序到达时不会破坏配对。
"""

from typing import Dict
import logging

from .models import (
    RegionEvent, RegionRecord, RecordKey, REGION_PREFIX, SLASH_PLACEHOLDER, region_key,
)

logger = logging.getLogger(__name__)


def escape_label(text: str) -> str:
    """将标签内的 '/' 替换为私有占位符"""
    return text.replace('/', SLASH_PLACEHOLDER)


def unescape_label(text: str) -> str:
    return text.replace(SLASH_PLACEHOLDER, '/')


def synthetic_label(category: str, label: str) -> str:
    """
    生成 region 的合成标签

    例如 category='index', label='do_read_index' 生成 'REGION:index<占位符>do_read_index'
    """
    return REGION_PREFIX + escape_label(f"{category}/{label}")


def apply_region_event(records: Dict[RecordKey, RegionRecord], event: RegionEvent) -> RegionRecord:
    """
    将 region_enter / region_leave 事件记录到对应的 RegionRecord

    Args:
        records: 复合键 -> 记录 的映射 (会被原地修改)
        event: region 事件

    Returns:
        RegionRecord: 被更新的记录
    """
    label = synthetic_label(event.category, event.label)
    key = region_key(event.sid, label)

    record = records.get(key)
    if record is None:
        record = RegionRecord(sid=event.sid, label=label)
        records[key] = record
        logger.debug(f"新建 region 记录: {event.sid} {label!r}")

    if event.is_enter:
        record.enter_epochs.append(event.epoch)
        record.enter_count += 1
    else:
        record.leave_epochs.append(event.epoch)
        record.leave_count += 1

    return record
