"""
Stylesheet tree helpers shared by the extractor and the rewrite engine.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, List, Sequence


def walk_stylesheets(root: Path, extensions: Sequence[str]) -> List[Path]:
    """Recursively collect files under root whose name ends with one of extensions.

    Every subdirectory is visited; other files are skipped silently.
    The result is sorted so callers see a stable order regardless of
    file system enumeration.
    """
    suffixes = tuple(extensions)
    collected = []
    for dirpath, _dirnames, filenames in os.walk(root):
        for filename in filenames:
            if filename.endswith(suffixes):
                collected.append(Path(dirpath) / filename)
    return sorted(collected)


def relative_posix(path: Path, base: Path) -> str:
    """Path relative to base with forward slashes, as stored in artifacts."""
    try:
        rel = Path(os.path.relpath(path, base))
    except ValueError:
        # Different drive on Windows
        rel = path
    return rel.as_posix()


def is_protected(path: Path, root: Path, protected_dirs: Iterable[str]) -> bool:
    """True when path lies inside one of the protected directories of root."""
    try:
        rel = path.relative_to(root)
    except ValueError:
        return False
    rel_posix = rel.as_posix()
    for protected in protected_dirs:
        prefix = protected.strip('/').replace('\\', '/')
        if prefix and (rel_posix == prefix or rel_posix.startswith(prefix + '/')):
            return True
    return False


def write_text_atomic(path: Path, text: str) -> None:
    """Replace path's content in one step so readers never see a partial file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + '.tmp')
    with open(tmp, 'w', encoding='utf-8', newline='') as f:
        f.write(text)
    os.replace(tmp, path)
