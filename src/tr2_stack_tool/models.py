# -*- coding: utf-8 -*-
"""
git trace2 事件与会话记录数据模型定义
"""

from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any, Optional, Tuple, Union


# 区域记录的合成标签前缀
REGION_PREFIX = "REGION:"
# 标签内部 '/' 的私有占位符，仅在最终输出时还原
SLASH_PLACEHOLDER = "\x1c"
# 无法归属的错误调用的保留层级
ERROR_HIERARCHY = "__error__"


@dataclass
class VersionEvent:
    """version 事件"""
    sid: str
    exe: Optional[str] = None


@dataclass
class StartEvent:
    """start 事件"""
    sid: str
    epoch: float
    argv: List[str] = field(default_factory=list)


@dataclass
class CmdNameEvent:
    """cmd_name 事件"""
    sid: str
    name: Optional[str]
    hierarchy: Tuple[str, ...]


@dataclass
class DefRepoEvent:
    """def_repo 事件"""
    sid: str
    worktree: str


@dataclass
class ExitEvent:
    """exit 事件"""
    sid: str
    epoch: float
    code: Optional[int]


@dataclass
class SignalEvent:
    """signal 事件"""
    sid: str
    epoch: float
    signo: Optional[int]


@dataclass
class CmdModeEvent:
    """cmd_mode 事件"""
    sid: str
    name: Optional[str]


@dataclass
class AliasEvent:
    """alias 事件"""
    sid: str
    alias: Optional[str]
    argv: List[str] = field(default_factory=list)


@dataclass
class RegionEvent:
    """region_enter / region_leave 事件"""
    sid: str
    kind: str  # 'region_enter' 或 'region_leave'
    epoch: float
    category: str = ""
    label: str = ""
    nesting: Optional[int] = None

    @property
    def is_enter(self) -> bool:
        return self.kind == 'region_enter'


@dataclass
class IgnoredEvent:
    """已知但不参与聚合的事件 (atexit, data, child_start, child_exit, exec, error)"""
    sid: str
    kind: str


@dataclass
class UnknownEvent:
    """无法识别的事件类型"""
    sid: str
    kind: Optional[str]


Event = Union[VersionEvent, StartEvent, CmdNameEvent, DefRepoEvent, ExitEvent,
              SignalEvent, CmdModeEvent, AliasEvent, RegionEvent, IgnoredEvent,
              UnknownEvent]


@dataclass
class DecodeResult:
    """单行解码结果: ok / skip / fatal 三态"""
    status: str
    line: str
    event: Optional[Event] = None
    raw: Any = None
    reason: str = ""

    OK = 'ok'
    SKIP = 'skip'
    FATAL = 'fatal'

    @property
    def is_ok(self) -> bool:
        return self.status == self.OK

    @property
    def is_skip(self) -> bool:
        return self.status == self.SKIP

    @property
    def is_fatal(self) -> bool:
        return self.status == self.FATAL


@dataclass
class InvocationRecord:
    """单个 git 进程调用的累积记录"""
    sid: str
    version: Optional[str] = None
    start_epoch: Optional[float] = None
    argv: Optional[List[str]] = None
    cmd_name: Optional[str] = None
    hierarchy: Optional[Tuple[str, ...]] = None
    worktree: Optional[str] = None
    exit_epoch: Optional[float] = None
    exit_code: Optional[int] = None
    signal_epoch: Optional[float] = None
    signal_signo: Optional[int] = None
    cmd_mode: List[str] = field(default_factory=list)
    alias: Optional[str] = None
    alias_argv: Optional[List[str]] = None
    duration: Optional[int] = None
    final_hierarchy: Optional[str] = None
    populated: bool = False

    def is_empty(self) -> bool:
        """是否还没有被任何会填充字段的事件 (包括不带 exe 的 version) 作用过"""
        return not self.populated

    @property
    def is_finalized(self) -> bool:
        return self.final_hierarchy is not None and self.duration is not None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.hierarchy is not None:
            data['hierarchy'] = '/'.join(self.hierarchy)
        return data


@dataclass
class RegionRecord:
    """调用内部的一个命名子区间 (region)，作为独立的栈帧参与聚合"""
    sid: str
    label: str
    enter_epochs: List[float] = field(default_factory=list)
    leave_epochs: List[float] = field(default_factory=list)
    enter_count: int = 0
    leave_count: int = 0
    duration: Optional[int] = None
    parent_hierarchy: Optional[str] = None

    @property
    def final_hierarchy(self) -> Optional[str]:
        """由父调用层级派生，不能单独设置"""
        if self.parent_hierarchy is None:
            return None
        return f"{self.parent_hierarchy}/{self.label}"

    @property
    def is_finalized(self) -> bool:
        return self.final_hierarchy is not None and self.duration is not None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['final_hierarchy'] = self.final_hierarchy
        return data


RecordKey = Tuple[str, ...]
Record = Union[InvocationRecord, RegionRecord]


def invocation_key(sid: str) -> RecordKey:
    return (sid,)


def region_key(sid: str, label: str) -> RecordKey:
    return (sid, label)


def key_to_text(key: RecordKey) -> str:
    """将复合键转为可读文本，用于 dump 输出"""
    return '/'.join(key)
