#!/usr/bin/env python3
"""
Derive replace-map.json from an annotated duplicate report.

Reviewers record renames in the report in either of two forms:

    @include cdf-alias('--old-accent', '--spice-accent');
    --old-accent -> --spice-accent

Any mixin call whose name ends in `alias(` counts, with quoted or bare
names. Pairs mapping a name to itself are dropped; when the same old
name appears twice the later pair wins.

Usage:
    token-audit-replace-map [--report ...] [--out build/css-audit/replace-map.json]
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from ..config import PipelineConfig
from ..errors import InputError
from ..models import ReplaceMap
from ..utils import relative_posix, write_text_atomic
from .duplicate_report import read_report

_NAME = r'--[\w-]+'
ALIAS_CALL_PATTERN = re.compile(
    rf"""[\w-]*alias\(\s*['"]?({_NAME})['"]?\s*,\s*['"]?({_NAME})['"]?\s*\)"""
)
ARROW_PATTERN = re.compile(rf'({_NAME})\s*->\s*({_NAME})')


def find_rename_pairs(text: str) -> List[Tuple[str, str]]:
    """(old, new) pairs in document order, from both notations."""
    found = []
    for pattern in (ALIAS_CALL_PATTERN, ARROW_PATTERN):
        for match in pattern.finditer(text):
            found.append((match.start(), match.group(1), match.group(2)))
    found.sort(key=lambda item: item[0])
    return [(old, new) for _, old, new in found]


def derive_replace_map(text: str) -> ReplaceMap:
    return ReplaceMap.from_pairs(find_rename_pairs(text))


def write_replace_map(replace_map: ReplaceMap, path: Path) -> Path:
    path = Path(path)
    write_text_atomic(path, replace_map.to_json())
    return path


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='token-audit-replace-map',
        description='Build replace-map.json from alias notes in the duplicate report',
    )
    parser.add_argument('--report', default=str(PipelineConfig.report_path()),
                        help='Annotated report (default: %(default)s)')
    parser.add_argument('--out', default=str(PipelineConfig.replace_map_path()),
                        help='Output mapping (default: %(default)s)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        replace_map = derive_replace_map(read_report(Path(args.report)))
        out_path = write_replace_map(replace_map, Path(args.out))
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not len(replace_map):
        print("Warning: no alias pairs found in report; wrote an empty mapping", file=sys.stderr)
    print(f"Wrote {len(replace_map)} mappings to {relative_posix(out_path, Path.cwd())}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
