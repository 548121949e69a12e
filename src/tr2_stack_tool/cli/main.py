"""
CLI主模块
"""

import argparse
import sys
from typing import List, Optional

from .commands import CollapseCommand


def build_parser() -> argparse.ArgumentParser:
    """构建命令行解析器"""
    parser = argparse.ArgumentParser(
        prog='tr2-stack-tool',
        description="Tr2 Stack Tool - 将 git trace2 事件流折叠为火焰图调用栈",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
示例用法:
  # 先确认 git 支持 trace2 事件输出
  GIT_TRACE2_EVENT=/dev/stderr git status >/dev/null

  # 折叠事件文件
  tr2-stack-tool git.events > out.folded

  # 从标准输入读取
  tr2-stack-tool < git.events > out.folded

  # 使用 ';' 分隔，直接交给 flamegraph.pl
  tr2-stack-tool git.events --separator ';' | flamegraph.pl --countname microseconds > out.svg

  # 同时输出 CSV 和 Excel 表格
  tr2-stack-tool git.events --output-format text,csv,xlsx --output-dir results --label git_tests

  # 诊断输出
  tr2-stack-tool git.events --debug 2

  # 输出折叠前的内部记录 (格式不稳定)
  tr2-stack-tool git.events --dump-raw
        """
    )

    parser.add_argument('file', nargs='?', default='-',
                        help='trace2 事件文件路径，省略或 "-" 时读取标准输入')
    parser.add_argument('--debug', type=int, default=0,
                        help='诊断级别 0-3:\n'
                             '  1: 输出调试日志\n'
                             '  2: 回显未识别的事件\n'
                             '  3: 回显所有事件\n'
                             '(默认: 0)')
    parser.add_argument('--dump-raw', action='store_true',
                        help='输出折叠前的内部记录 JSON，格式不稳定 (默认: False)')
    parser.add_argument('--separator', default='/',
                        help='输出路径分隔符，支持 "/" 或 ";" (默认: /)')
    parser.add_argument('--output-format', default='text',
                        help='输出格式，使用逗号分隔: text, csv, xlsx (默认: text)')
    parser.add_argument('--output-dir', default='.', help='csv/xlsx 输出目录 (默认: 当前目录)')
    parser.add_argument('--label', default='tr2_stacks', help='csv/xlsx 文件名 (默认: tr2_stacks)')

    return parser


def parse_arguments(argv: Optional[List[str]] = None):
    """解析命令行参数"""
    return build_parser().parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """主函数"""
    args = parse_arguments(argv)
    command = CollapseCommand()
    return command.run(args)


if __name__ == "__main__":
    sys.exit(main())
