# -*- coding: utf-8 -*-
"""
CLI验证器模块
"""

from typing import List

VALID_OUTPUT_FORMATS = ('text', 'csv', 'xlsx')
VALID_SEPARATORS = ('/', ';')


def validate_output_formats(format_spec: str) -> List[str]:
    """
    验证输出格式组合

    Args:
        format_spec: 逗号分隔的输出格式，如 "text" 或 "text,csv"

    Returns:
        List[str]: 验证后的格式列表

    Raises:
        ValueError: 如果格式组合不合法
    """
    if not format_spec or not format_spec.strip():
        raise ValueError("输出格式不能为空")

    formats = [item.strip() for item in format_spec.split(',')]
    for item in formats:
        if not item:
            raise ValueError("输出格式不能为空字符串")
        if item not in VALID_OUTPUT_FORMATS:
            raise ValueError(f"不支持的输出格式: {item}。支持的格式: {', '.join(VALID_OUTPUT_FORMATS)}")

    if len(formats) != len(set(formats)):
        raise ValueError("输出格式不能重复")

    return formats


def validate_debug_level(level: int) -> int:
    """诊断级别必须在 0..3 之间"""
    if level < 0 or level > 3:
        raise ValueError(f"诊断级别必须在 0 到 3 之间: {level}")
    return level


def validate_separator(separator: str) -> str:
    if separator not in VALID_SEPARATORS:
        raise ValueError(f"不支持的路径分隔符: {separator!r}。支持: {', '.join(VALID_SEPARATORS)}")
    return separator
