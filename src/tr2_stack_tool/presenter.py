"""
输出展示阶段
"""

import json
from pathlib import Path
from typing import Dict, List, Any, Tuple
import logging

from .folder import JOIN_MARKER
from .regions import unescape_label
from .session_store import SessionStore
from .models import key_to_text

logger = logging.getLogger(__name__)


def render_path(key: str, separator: str = '/') -> str:
    """还原扁平栈键: 连接符换回分隔符，占位符换回 '/'"""
    return unescape_label(key.replace(JOIN_MARKER, separator))


def sorted_stacks(stacks: Dict[str, int], separator: str = '/') -> List[Tuple[str, int]]:
    """
    按路径文本排序

    Returns:
        List[Tuple[str, int]]: (路径, 累计时长) 列表
    """
    rows = [(render_path(key, separator), key, duration) for key, duration in stacks.items()]
    rows.sort()
    return [(path, duration) for path, _, duration in rows]


def render_folded_lines(stacks: Dict[str, int], separator: str = '/') -> List[str]:
    """生成 '<路径> <时长>' 格式的输出行"""
    return [f"{path} {duration}" for path, duration in sorted_stacks(stacks, separator)]


def dump_raw(store: SessionStore) -> str:
    """
    序列化折叠前的全部记录，仅供人工检查，格式不稳定

    按键排序，父调用在前，其 region 紧随其后
    """
    data: Dict[str, Any] = {}
    for key, record in store.items():
        data[key_to_text(key)] = record.to_dict()
    return json.dumps(data, indent=1, ensure_ascii=False)


def generate_output_files(stacks: Dict[str, int], output_dir: str, base_name: str,
                          formats: List[str], separator: str = '/') -> List[Path]:
    """
    生成表格输出文件 (CSV 和 Excel)

    Args:
        stacks: 扁平栈键 -> 累计时长
        output_dir: 输出目录
        base_name: 基础文件名
        formats: 需要生成的格式，支持 csv, xlsx
        separator: 路径分隔符

    Returns:
        List[Path]: 生成的文件路径列表
    """
    import pandas as pd

    rows = [{'stack': path, 'duration': duration} for path, duration in sorted_stacks(stacks, separator)]
    if not rows:
        logger.warning("没有数据可供展示")
        return []

    output_path = Path(output_dir)
    output_path.mkdir(parents=True, exist_ok=True)

    df = pd.DataFrame(rows, columns=['stack', 'duration'])

    files = []

    if 'csv' in formats:
        csv_file = output_path / f"{base_name}.csv"
        df.to_csv(csv_file, index=False)
        files.append(csv_file)
        logger.info(f"生成 CSV 文件: {csv_file}")

    if 'xlsx' in formats:
        excel_file = output_path / f"{base_name}.xlsx"
        df.to_excel(excel_file, index=False)
        files.append(excel_file)
        logger.info(f"生成 Excel 文件: {excel_file}")

    return files
