"""
Pydantic Models for the Token Consolidation Pipeline

Models:
- Token / FileInventory / Baseline: extractor output
- DuplicateGroup: exact or near-duplicate token group with canonical pick
- ReplaceMap / AliasPlan / RewriteSummary: rewrite engine inputs and outputs
"""

from .tokens import (
    Baseline,
    FileInventory,
    GROUPED_KINDS,
    Token,
    TokenKind,
)

from .duplicate_group import (
    Disposition,
    DuplicateGroup,
    MatchType,
)

from .rewrite import (
    AliasPlan,
    FileChange,
    ReplaceMap,
    RewriteSummary,
)

__all__ = [
    # tokens
    'Baseline',
    'FileInventory',
    'GROUPED_KINDS',
    'Token',
    'TokenKind',

    # duplicate_group
    'Disposition',
    'DuplicateGroup',
    'MatchType',

    # rewrite
    'AliasPlan',
    'FileChange',
    'ReplaceMap',
    'RewriteSummary',
]
