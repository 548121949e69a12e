"""
工具模块
"""

from .time import parse_epoch, scaled_duration, DURATION_SCALE
from .path_utils import resolve_worktree

__all__ = ['parse_epoch', 'scaled_duration', 'DURATION_SCALE', 'resolve_worktree']
