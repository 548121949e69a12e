"""
命令行接口测试
"""

import io
import json
import os
import sys
import tempfile
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from helpers import line, invocation_lines, region_line

from tr2_stack_tool.cli.main import parse_arguments
from tr2_stack_tool.cli.commands import CollapseCommand
from tr2_stack_tool.cli.validators import validate_output_formats, validate_debug_level, validate_separator


class TestValidators(unittest.TestCase):
    """测试参数验证"""

    def test_output_formats(self):
        self.assertEqual(validate_output_formats('text'), ['text'])
        self.assertEqual(validate_output_formats('text, csv,xlsx'), ['text', 'csv', 'xlsx'])

    def test_invalid_output_formats(self):
        for spec in ('', 'pdf', 'text,text', 'text,'):
            with self.assertRaises(ValueError):
                validate_output_formats(spec)

    def test_debug_level(self):
        self.assertEqual(validate_debug_level(3), 3)
        with self.assertRaises(ValueError):
            validate_debug_level(4)

    def test_separator(self):
        self.assertEqual(validate_separator(';'), ';')
        with self.assertRaises(ValueError):
            validate_separator('|')


class TestCollapseCommand(unittest.TestCase):
    """测试折叠命令"""

    def setUp(self):
        lines = invocation_lines('sid-1', 'status', 0.0, 1.0) + [
            region_line('region_enter', 'sid-1', 0.0, 'index', 'read'),
            region_line('region_leave', 'sid-1', 0.5, 'index', 'read'),
        ]
        self.input_text = '\n'.join(lines) + '\n'

    def run_command(self, argv, input_text=None):
        stdin = io.StringIO(self.input_text if input_text is None else input_text)
        stdout = io.StringIO()
        stderr = io.StringIO()
        code = CollapseCommand(stdin=stdin, stdout=stdout, stderr=stderr).run(parse_arguments(argv))
        return code, stdout.getvalue(), stderr.getvalue()

    def test_default_reads_stdin(self):
        code, out, err = self.run_command([])
        self.assertEqual(code, 0)
        self.assertEqual(out, 'status 100000\nstatus/REGION:index/read 50000\n')

    def test_invalid_utf8_line_on_stdin_is_skipped(self):
        raw = b'\xff\xfe garbage\n' + self.input_text.encode('utf-8')
        stdin = io.TextIOWrapper(io.BytesIO(raw), encoding='utf-8')
        stdout = io.StringIO()
        stderr = io.StringIO()
        code = CollapseCommand(stdin=stdin, stdout=stdout, stderr=stderr).run(parse_arguments([]))
        self.assertEqual(code, 0)
        self.assertEqual(stdout.getvalue(), 'status 100000\nstatus/REGION:index/read 50000\n')

    def test_reads_file_argument(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            path = os.path.join(tmpdir, 'git.events')
            with open(path, 'w', encoding='utf-8') as f:
                f.write(self.input_text)
            code, out, _ = self.run_command([path, '--separator', ';'])
        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ['status 100000', 'status;REGION:index/read 50000'])

    def test_missing_file(self):
        code, out, err = self.run_command(['/no/such/file.events'])
        self.assertEqual(code, 1)
        self.assertEqual(out, '')
        self.assertIn('错误', err)

    def test_invalid_option(self):
        code, _, err = self.run_command(['--output-format', 'pdf'])
        self.assertEqual(code, 1)
        self.assertIn('pdf', err)

    def test_fatal_error_exits_non_zero_without_output(self):
        text = self.input_text + line('version', 'sid-1', exe='2.21.0') + '\n'
        code, out, err = self.run_command([], input_text=text)
        self.assertEqual(code, 2)
        self.assertEqual(out, '')
        self.assertIn('sid-1', err)

    def test_dump_raw(self):
        code, out, _ = self.run_command(['--dump-raw'])
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertIn('sid-1', data)
        self.assertEqual(data['sid-1']['final_hierarchy'], 'status')
        self.assertEqual(len(data), 2)

    def test_csv_output(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            code, out, err = self.run_command(['--output-format', 'csv', '--output-dir', tmpdir,
                                               '--label', 'run1'])
            self.assertEqual(code, 0)
            self.assertEqual(out, '')
            self.assertTrue(os.path.exists(os.path.join(tmpdir, 'run1.csv')))
            self.assertIn('run1.csv', err)


if __name__ == '__main__':
    unittest.main()
