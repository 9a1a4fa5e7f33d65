"""
Duplicate report rendering and the disposition tooling around it
"""

from .dispositions import fill_dispositions
from .duplicate_report import load_report, parse_report, render_report
from .replace_map import derive_replace_map, write_replace_map

__all__ = [
    'fill_dispositions',
    'load_report',
    'parse_report',
    'render_report',
    'derive_replace_map',
    'write_replace_map',
]
