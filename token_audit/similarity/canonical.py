"""
Canonical Source Ranking

Chooses which file keeps a duplicated declaration. Files in more
foundational directories win; ties go to the first file in sorted order.
"""

from typing import List, Sequence


def rank_file(path: str, priority: Sequence[str]) -> int:
    """
    Priority rank of a file path (lower is preferred).

    The rank is the table position of the first directory segment of
    path that appears in the table. Paths with no listed directory rank
    after every listed one.

    Example:
        rank_file('src/core/_tokens.scss', ('core', 'features'))      -> 0
        rank_file('src/features/card.scss', ('core', 'features'))     -> 1
        rank_file('src/misc/x.scss', ('core', 'features'))            -> 2
    """
    positions = {name: i for i, name in enumerate(priority)}
    segments = path.replace('\\', '/').split('/')[:-1]
    for segment in segments:
        if segment in positions:
            return positions[segment]
    return len(priority)


def pick_canonical(files: List[str], priority: Sequence[str]) -> str:
    """
    Pick the canonical file among files.

    Deterministic: the same set of files always yields the same pick,
    whatever order it is given in.
    """
    if not files:
        raise ValueError('Cannot pick a canonical file from an empty list')
    ordered = sorted(files)
    # min() keeps the first of equal ranks, i.e. sorted order breaks ties
    return min(ordered, key=lambda f: rank_file(f, priority))
