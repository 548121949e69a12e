"""
折叠命令模块
"""

import sys
import time
from pathlib import Path

from ..validators import validate_output_formats, validate_debug_level, validate_separator
from ...collapse import collapse_lines
from ...errors import TraceStructureError
from ...parser import iter_lines
from ...presenter import render_folded_lines, dump_raw, generate_output_files
from ...utils.logging_utils import configure


class CollapseCommand:
    """折叠命令处理器"""

    def __init__(self, stdin=None, stdout=None, stderr=None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def _error(self, message: str):
        print(f"错误: {message}", file=self.stderr)

    def run(self, args) -> int:
        """运行折叠流程"""
        try:
            debug = validate_debug_level(args.debug)
            separator = validate_separator(args.separator)
            formats = validate_output_formats(args.output_format)
        except ValueError as e:
            self._error(f"参数验证失败 - {e}")
            return 1

        configure(debug, stream=self.stderr)

        if args.file != '-' and not Path(args.file).exists():
            self._error(f"文件不存在: {args.file}")
            return 1

        start_time = time.time()
        try:
            result = collapse_lines(iter_lines(args.file, self.stdin), debug=debug, diag_stream=self.stderr)
        except TraceStructureError as e:
            self._error(str(e))
            return 2

        if args.dump_raw:
            print(dump_raw(result.store), file=self.stdout)
            return 0

        if 'text' in formats:
            for line in render_folded_lines(result.stacks, separator):
                print(line, file=self.stdout)

        table_formats = [item for item in formats if item != 'text']
        if table_formats:
            generated_files = generate_output_files(result.stacks, args.output_dir, args.label,
                                                    table_formats, separator)
            for file_path in generated_files:
                print(f"生成文件: {file_path}", file=self.stderr)

        if debug:
            print(f"处理完成，耗时 {time.time() - start_time:.2f} 秒", file=self.stderr)
        return 0
