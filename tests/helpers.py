"""
测试辅助函数: 构造 trace2 事件行
"""

import json
from datetime import datetime, timezone

BASE_EPOCH = 1555711729


def ts(offset: float) -> str:
    """生成相对基准时间 offset 秒的 ISO-8601 时间字符串"""
    dt = datetime.fromtimestamp(BASE_EPOCH + offset, timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def line(event: str, sid: str, **fields) -> str:
    record = {'event': event, 'sid': sid}
    record.update(fields)
    return json.dumps(record)


def invocation_lines(sid: str, hierarchy: str, start: float, end: float, code: int = 0):
    """一个完整调用的 version -> start -> cmd_name -> exit 事件行"""
    return [
        line('version', sid, evt='2', exe='2.21.0', time=ts(start)),
        line('start', sid, time=ts(start), argv=['git'] + hierarchy.split('/')),
        line('cmd_name', sid, time=ts(start), name=hierarchy.split('/')[-1], hierarchy=hierarchy),
        line('exit', sid, time=ts(end), code=code),
    ]


def region_line(kind: str, sid: str, offset: float, category: str, label: str, nesting: int = 1) -> str:
    return line(kind, sid, time=ts(offset), nesting=nesting, category=category, label=label)
