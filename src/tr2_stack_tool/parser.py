"""
git trace2 事件行解析器
"""

import io
import json
from pathlib import Path
from typing import Dict, Any, Iterator, List, Optional, Tuple, Union, TextIO
import logging

from .models import (
    DecodeResult, VersionEvent, StartEvent, CmdNameEvent, DefRepoEvent, ExitEvent,
    SignalEvent, CmdModeEvent, AliasEvent, RegionEvent, IgnoredEvent, UnknownEvent,
)
from .utils.time import parse_epoch

logger = logging.getLogger(__name__)

# 已知但不参与聚合的事件类型
IGNORED_EVENT_TYPES = frozenset([
    'atexit', 'data', 'child_start', 'child_exit', 'exec', 'error',
])


class _SkipLine(Exception):
    """内部使用: 当前行无法解码为对应的事件"""


def _as_list(value: Any) -> List[Any]:
    if value is None:
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


def _as_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_hierarchy(value: Any) -> Tuple[str, ...]:
    """cmd_name 的 hierarchy 既可能是 'a/b' 字符串，也可能是片段列表"""
    if isinstance(value, list):
        return tuple(str(segment) for segment in value)
    if value is None or value == '':
        return ()
    return tuple(str(value).split('/'))


def _required_epoch(raw_event: Dict[str, Any]) -> float:
    epoch = parse_epoch(raw_event.get('time'))
    if epoch is None:
        raise _SkipLine(f"时间字段无法解析: {raw_event.get('time')!r}")
    return epoch


def _build_event(sid: str, raw_event: Dict[str, Any]):
    """
    按事件类型把原始字典映射为对应的事件对象

    Args:
        sid: 调用标识
        raw_event: 解码后的原始事件字典

    Returns:
        Event: 事件对象
    """
    kind = raw_event.get('event')
    if not isinstance(kind, str):
        return UnknownEvent(sid=sid, kind=None)

    if kind == 'version':
        return VersionEvent(sid=sid, exe=raw_event.get('exe'))
    if kind == 'start':
        return StartEvent(sid=sid, epoch=_required_epoch(raw_event),
                          argv=_as_list(raw_event.get('argv')))
    if kind == 'cmd_name':
        return CmdNameEvent(sid=sid, name=raw_event.get('name'),
                            hierarchy=_parse_hierarchy(raw_event.get('hierarchy')))
    if kind == 'def_repo':
        worktree = raw_event.get('worktree')
        if not isinstance(worktree, str):
            raise _SkipLine("def_repo 缺少 worktree 字段")
        return DefRepoEvent(sid=sid, worktree=worktree)
    if kind == 'exit':
        return ExitEvent(sid=sid, epoch=_required_epoch(raw_event),
                         code=_as_int(raw_event.get('code')))
    if kind == 'signal':
        return SignalEvent(sid=sid, epoch=_required_epoch(raw_event),
                           signo=_as_int(raw_event.get('signo')))
    if kind == 'cmd_mode':
        return CmdModeEvent(sid=sid, name=raw_event.get('name'))
    if kind == 'alias':
        return AliasEvent(sid=sid, alias=raw_event.get('alias'),
                          argv=_as_list(raw_event.get('argv')))
    if kind in ('region_enter', 'region_leave'):
        category = raw_event.get('category')
        label = raw_event.get('label')
        return RegionEvent(sid=sid, kind=kind, epoch=_required_epoch(raw_event),
                           category='' if category is None else str(category),
                           label='' if label is None else str(label),
                           nesting=_as_int(raw_event.get('nesting')))
    if kind in IGNORED_EVENT_TYPES:
        return IgnoredEvent(sid=sid, kind=kind)
    return UnknownEvent(sid=sid, kind=kind)


def decode_line(line: str) -> DecodeResult:
    """
    解码单行输入

    Args:
        line: 一行 JSON 文本

    Returns:
        DecodeResult: ok 携带事件; skip 表示该行被丢弃; fatal 表示缺少 sid
    """
    line = line.rstrip('\r\n')
    try:
        raw_event = json.loads(line)
    except ValueError as e:
        return DecodeResult(status=DecodeResult.SKIP, line=line, reason=f"JSON 解码失败: {e}")

    sid = raw_event.get('sid') if isinstance(raw_event, dict) else None
    if not sid:
        return DecodeResult(status=DecodeResult.FATAL, line=line, raw=raw_event,
                            reason="记录中没有 sid")
    sid = str(sid)

    try:
        event = _build_event(sid, raw_event)
    except _SkipLine as e:
        return DecodeResult(status=DecodeResult.SKIP, line=line, raw=raw_event, reason=str(e))

    return DecodeResult(status=DecodeResult.OK, line=line, event=event, raw=raw_event)


def iter_lines(file_path: Union[str, Path, None] = None, stream: Optional[TextIO] = None) -> Iterator[str]:
    """
    逐行读取输入，文件路径为空或 '-' 时读取给定的流

    Args:
        file_path: 输入文件路径
        stream: 备用输入流 (通常为 stdin)
    """
    if file_path is None or str(file_path) == '-':
        if stream is None:
            raise ValueError("没有指定输入文件或输入流")
        buffer = getattr(stream, 'buffer', None)
        if buffer is None:
            yield from stream
            return
        # 按字节重新解码，非法 UTF-8 字节被替换后由 JSON 解码阶段跳过
        wrapper = io.TextIOWrapper(buffer, encoding='utf-8', errors='replace')
        try:
            yield from wrapper
        finally:
            wrapper.detach()
        return

    file_path = Path(file_path)
    with open(file_path, 'r', encoding='utf-8', errors='replace') as f:
        yield from f
