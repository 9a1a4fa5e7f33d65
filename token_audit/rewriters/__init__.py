"""
Rewrite engine: rename tokens from a mapping, prune merged duplicates
"""

from .prune_declarations import prune_from_report, prune_text
from .rename_tokens import TokenRenamer, rename_in_text, rename_tree

__all__ = [
    'prune_from_report',
    'prune_text',
    'TokenRenamer',
    'rename_in_text',
    'rename_tree',
]
