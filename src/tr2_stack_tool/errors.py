# -*- coding: utf-8 -*-
"""
致命错误定义
"""


class TraceStructureError(Exception):
    """事件流结构性错误，整个运行必须中止"""

    def __init__(self, message: str, line: str = None, detail=None):
        self.line = line
        self.detail = detail
        parts = [message]
        if line is not None:
            parts.append(f"原始行: <{line}>")
        if detail is not None:
            parts.append(f"内容: <{detail!r}>")
        super().__init__(' '.join(parts))
