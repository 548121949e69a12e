"""
路径处理工具
"""

from pathlib import Path
import logging

logger = logging.getLogger(__name__)


def resolve_worktree(worktree: str) -> str:
    """
    将 worktree 路径解析为规范的绝对路径

    目录已经不存在时无法解析，此时返回原始字符串
    """
    try:
        return str(Path(worktree).resolve(strict=True))
    except (OSError, RuntimeError, ValueError) as e:
        logger.debug(f"无法解析 worktree 路径 {worktree}: {e}")
        return worktree
