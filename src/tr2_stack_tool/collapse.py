"""
折叠流程编排

单线程批处理: 逐行解码并更新状态机，然后依次执行 Pass A、Pass B、折叠和排序输出。
"""

from dataclasses import dataclass, asdict
from typing import Callable, Dict, Iterable, Optional, TextIO
import logging

from .errors import TraceStructureError
from .parser import decode_line
from .reconcile import reconcile
from .session_store import SessionStore, echo_diagnostic
from .folder import fold_stacks
from .utils.path_utils import resolve_worktree

logger = logging.getLogger(__name__)


@dataclass
class CollapseStats:
    """单次运行的统计信息"""
    lines_read: int = 0
    lines_skipped: int = 0
    events_unrecognized: int = 0
    invocations: int = 0
    regions: int = 0
    regions_dropped: int = 0
    regions_orphaned: int = 0
    signal_substituted: int = 0
    error_bucketed: int = 0
    incomplete: int = 0
    stacks: int = 0


@dataclass
class CollapseResult:
    store: SessionStore
    stacks: Dict[str, int]
    stats: CollapseStats


def load_events(lines: Iterable[str], debug: int = 0, diag_stream: Optional[TextIO] = None,
                resolver: Callable[[str], str] = resolve_worktree,
                stats: CollapseStats = None) -> SessionStore:
    """
    逐行解码输入并折叠为会话记录

    Args:
        lines: 输入行
        debug: 诊断级别，>=2 回显未识别的事件，>=3 回显所有事件
        diag_stream: 诊断输出流，默认为 stderr
        resolver: worktree 路径解析函数
        stats: 统计信息 (会被原地更新)

    Returns:
        SessionStore: 会话记录集合

    Raises:
        TraceStructureError: 缺少 sid 或重复的 version 事件
    """
    stats = stats if stats is not None else CollapseStats()
    store = SessionStore(resolver=resolver)

    for line in lines:
        stats.lines_read += 1
        result = decode_line(line)

        if result.is_skip:
            stats.lines_skipped += 1
            logger.debug(f"跳过第 {stats.lines_read} 行: {result.reason}")
            continue
        if result.is_fatal:
            raise TraceStructureError(result.reason, line=result.line, detail=result.raw)

        recognized = store.apply(result.event, line=result.line)
        if not recognized:
            stats.events_unrecognized += 1

        if (debug > 1 and not recognized) or debug > 2:
            echo_diagnostic(result.line, result.event, diag_stream)

    stats.invocations = len(store.invocations)
    stats.regions = len(store.regions)
    return store


def collapse_lines(lines: Iterable[str], debug: int = 0, diag_stream: Optional[TextIO] = None,
                   resolver: Callable[[str], str] = resolve_worktree) -> CollapseResult:
    """
    完整流程: 解码 -> 调和 -> 折叠

    Returns:
        CollapseResult: 会话记录、折叠后的调用栈和统计信息
    """
    stats = CollapseStats()
    store = load_events(lines, debug=debug, diag_stream=diag_stream, resolver=resolver, stats=stats)

    reconcile_stats = reconcile(store)
    stats.regions_dropped = reconcile_stats.regions_dropped
    stats.regions_orphaned = reconcile_stats.regions_orphaned
    stats.signal_substituted = reconcile_stats.signal_substituted
    stats.error_bucketed = reconcile_stats.error_bucketed
    stats.incomplete = reconcile_stats.incomplete

    records = [record for _, record in store.items()]
    stacks = fold_stacks(records)
    stats.stacks = len(stacks)

    logger.info(f"统计信息: {asdict(stats)}")
    return CollapseResult(store=store, stacks=stacks, stats=stats)
