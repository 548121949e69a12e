"""
Tr2 Stack Tool Package
"""

from .models import InvocationRecord, RegionRecord, DecodeResult
from .parser import decode_line
from .session_store import SessionStore
from .reconcile import reconcile, finalize_regions, patch_invocations
from .folder import fold_stacks
from .presenter import render_folded_lines, dump_raw
from .collapse import collapse_lines, CollapseResult, CollapseStats
from .errors import TraceStructureError

__all__ = [
    'InvocationRecord',
    'RegionRecord',
    'DecodeResult',
    'decode_line',
    'SessionStore',
    'reconcile',
    'finalize_regions',
    'patch_invocations',
    'fold_stacks',
    'render_folded_lines',
    'dump_raw',
    'collapse_lines',
    'CollapseResult',
    'CollapseStats',
    'TraceStructureError',
]
