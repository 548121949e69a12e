"""
CLI命令模块
"""

from .collapse import CollapseCommand

__all__ = ['CollapseCommand']
