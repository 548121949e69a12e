"""
日志配置工具
"""

import logging
import sys


def configure(debug: int = 0, stream=None):
    """
    配置根日志记录器

    Args:
        debug: 诊断级别，大于 0 时输出 DEBUG 日志，否则只输出 WARNING 及以上
        stream: 日志输出流，默认为 stderr (stdout 只用于折叠结果)
    """
    logging.basicConfig(
        level=logging.DEBUG if debug > 0 else logging.WARNING,
        format="%(levelname)s %(name)s - %(message)s",
        stream=stream or sys.stderr,
        force=True,
    )
