"""
会话事件存储

按调用标识把事件序列折叠为每个调用一条累积记录。存储对象由编排函数在运行开始时
创建、结束时丢弃，worktree 路径解析缓存也属于该对象。
"""

import sys
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, Optional, TextIO, Tuple
import logging

from .errors import TraceStructureError
from .models import (
    Event, VersionEvent, StartEvent, CmdNameEvent, DefRepoEvent, ExitEvent, SignalEvent,
    CmdModeEvent, AliasEvent, RegionEvent, IgnoredEvent, UnknownEvent,
    InvocationRecord, RegionRecord, Record, RecordKey, invocation_key,
)
from .regions import apply_region_event
from .utils.path_utils import resolve_worktree

logger = logging.getLogger(__name__)


@dataclass
class SessionStore:
    """调用记录与 region 记录的集合"""
    resolver: Callable[[str], str] = resolve_worktree
    invocations: Dict[RecordKey, InvocationRecord] = field(default_factory=dict)
    regions: Dict[RecordKey, RegionRecord] = field(default_factory=dict)
    worktree_cache: Dict[str, str] = field(default_factory=dict)

    def invocation(self, sid: str) -> InvocationRecord:
        """查找或新建调用记录"""
        key = invocation_key(sid)
        record = self.invocations.get(key)
        if record is None:
            record = InvocationRecord(sid=sid)
            self.invocations[key] = record
        return record

    def get_invocation(self, sid: str) -> Optional[InvocationRecord]:
        return self.invocations.get(invocation_key(sid))

    def resolve_worktree(self, worktree: str) -> str:
        """带缓存的 worktree 规范路径解析"""
        resolved = self.worktree_cache.get(worktree)
        if resolved is None:
            resolved = self.resolver(worktree) or worktree
            self.worktree_cache[worktree] = resolved
        return resolved

    def items(self) -> Iterator[Tuple[RecordKey, Record]]:
        """按键排序遍历所有记录"""
        merged: Dict[RecordKey, Record] = {}
        merged.update(self.invocations)
        merged.update(self.regions)
        for key in sorted(merged):
            yield key, merged[key]

    def apply(self, event: Event, line: Optional[str] = None) -> bool:
        """
        将单个事件应用到对应的记录

        Args:
            event: 解码后的事件
            line: 原始输入行，仅用于错误信息

        Returns:
            bool: 事件类型是否被识别
        """
        if isinstance(event, RegionEvent):
            apply_region_event(self.regions, event)
            return True

        record = self.invocation(event.sid)

        if isinstance(event, VersionEvent):
            if not record.is_empty():
                raise TraceStructureError(f"调用 {event.sid} 出现了两次 version 事件", line=line,
                                          detail=record.to_dict())
            record.version = event.exe
        elif isinstance(event, StartEvent):
            record.start_epoch = event.epoch
            record.argv = event.argv
        elif isinstance(event, CmdNameEvent):
            record.cmd_name = event.name
            record.hierarchy = event.hierarchy
        elif isinstance(event, DefRepoEvent):
            record.worktree = self.resolve_worktree(event.worktree)
        elif isinstance(event, ExitEvent):
            record.exit_epoch = event.epoch
            record.exit_code = event.code
        elif isinstance(event, SignalEvent):
            record.signal_epoch = event.epoch
            record.signal_signo = event.signo
        elif isinstance(event, CmdModeEvent):
            record.cmd_mode.append(event.name)
        elif isinstance(event, AliasEvent):
            record.alias = event.alias
            record.alias_argv = event.argv
        elif isinstance(event, IgnoredEvent):
            return True
        elif isinstance(event, UnknownEvent):
            return False
        else:
            raise TypeError(f"不支持的事件对象: {type(event).__name__}")

        record.populated = True
        return True


def echo_diagnostic(line: str, event, stream: Optional[TextIO] = None):
    """向诊断流输出原始行和解码后的事件"""
    stream = stream or sys.stderr
    print(line, file=stream)
    print(repr(event), file=stream)
