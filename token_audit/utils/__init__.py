"""
Utility modules for the token_audit package.

Provides stylesheet tree walking and stage timing for debug runs.
"""

from .files import is_protected, relative_posix, walk_stylesheets, write_text_atomic
from .timing import TimingMetrics, Timer

__all__ = [
    'is_protected',
    'relative_posix',
    'walk_stylesheets',
    'write_text_atomic',
    'TimingMetrics',
    'Timer',
]
