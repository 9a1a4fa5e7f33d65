"""
Token extraction for stylesheet sources
"""

from .extract_tokens import (
    ExtractionResult,
    build_baseline,
    extract_file_tokens,
    load_baseline,
    write_baseline,
)
from .scss_scanner import AtRule, Declaration, scan_statements

__all__ = [
    'ExtractionResult',
    'build_baseline',
    'extract_file_tokens',
    'load_baseline',
    'write_baseline',
    'AtRule',
    'Declaration',
    'scan_statements',
]
