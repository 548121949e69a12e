"""
调和阶段

事件可能乱序到达，所有跨行的计算都放在这里:
- finalize_regions: 把 region 记录定型为真正的栈帧 (计算时长并挂到父调用层级下)
- patch_invocations: 修补因异常退出或顺序缺失而不完整的调用记录
"""

from dataclasses import dataclass
from typing import List
import logging

from .errors import TraceStructureError
from .models import ERROR_HIERARCHY, RecordKey
from .session_store import SessionStore
from .utils.time import scaled_duration

logger = logging.getLogger(__name__)


@dataclass
class ReconcileStats:
    """调和阶段统计"""
    regions_finalized: int = 0
    regions_dropped: int = 0
    regions_orphaned: int = 0
    signal_substituted: int = 0
    error_bucketed: int = 0
    incomplete: int = 0


def finalize_regions(store: SessionStore, stats: ReconcileStats = None) -> ReconcileStats:
    """
    Pass A: 定型 region 记录

    - 没有 leave 或 leave 少于 enter: 丢弃 (进程可能在 region 中途退出)
    - leave 多于 enter: 致命错误
    - 否则 enter/leave 分别升序排序后按下标配对求和
    """
    stats = stats or ReconcileStats()
    dropped: List[RecordKey] = []

    for key, record in store.regions.items():
        if not record.leave_epochs or record.leave_count < record.enter_count:
            logger.debug(f"丢弃不完整的 region {record.sid} {record.label!r}: "
                         f"enter={record.enter_count} leave={record.leave_count}")
            dropped.append(key)
            continue
        if record.leave_count > record.enter_count:
            raise TraceStructureError(
                f"region {record.label!r} 的 leave 次数多于 enter 次数 "
                f"({record.leave_count} > {record.enter_count})",
                detail=record.to_dict())

        enters = sorted(record.enter_epochs)
        leaves = sorted(record.leave_epochs)
        record.enter_epochs = enters
        record.leave_epochs = leaves
        record.duration = sum(scaled_duration(start, end) for start, end in zip(enters, leaves))

        parent = store.get_invocation(record.sid)
        if parent is None or not parent.hierarchy:
            logger.debug(f"region {record.label!r} 的父调用 {record.sid} 没有层级信息")
            stats.regions_orphaned += 1
        else:
            record.parent_hierarchy = '/'.join(parent.hierarchy)
            stats.regions_finalized += 1

    for key in dropped:
        del store.regions[key]
    stats.regions_dropped += len(dropped)
    return stats


def patch_invocations(store: SessionStore, stats: ReconcileStats = None) -> ReconcileStats:
    """
    Pass B: 修补调用记录

    - 只有 signal 没有 exit: 用 signal 的时间和信号值代替 exit
    - 同时有 start 和 exit 且时长未设置: 计算时长
    - 非零退出码但没有层级 (在宣布命令名之前就出错了): 归入 __error__
    """
    stats = stats or ReconcileStats()

    for record in store.invocations.values():
        if record.is_finalized:
            continue

        if record.exit_code is None and record.signal_signo is not None:
            record.exit_epoch = record.signal_epoch
            record.exit_code = record.signal_signo
            stats.signal_substituted += 1

        if record.duration is None and record.start_epoch is not None and record.exit_epoch is not None:
            record.duration = scaled_duration(record.start_epoch, record.exit_epoch)

        if record.hierarchy:
            record.final_hierarchy = '/'.join(record.hierarchy)
        elif record.exit_code:
            record.final_hierarchy = ERROR_HIERARCHY
            stats.error_bucketed += 1

        if not record.is_finalized:
            logger.debug(f"调用 {record.sid} 数据不完整，不参与输出")
            stats.incomplete += 1

    return stats


def reconcile(store: SessionStore) -> ReconcileStats:
    """依次执行 Pass A 和 Pass B"""
    stats = ReconcileStats()
    finalize_regions(store, stats)
    patch_invocations(store, stats)
    return stats
