#!/usr/bin/env python3
"""
Fill the `Disposition:` placeholders in duplicate-report.md.

Every group still carrying the placeholder `Disposition: _merge | alias | ignore_`
gets the chosen mode (default `merge`), or a per-group override given
with --set NAME=MODE. Lines that already hold a decision are left alone,
so re-running never changes a reviewed report.

Usage:
    token-audit-fill                          # every placeholder -> merge
    token-audit-fill --mode alias             # every placeholder -> alias
    token-audit-fill --set=--old-accent=ignore
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..config import PipelineConfig
from ..errors import InputError
from ..models import Disposition
from ..utils import relative_posix, write_text_atomic
from .duplicate_report import read_report

PLACEHOLDER_PATTERN = re.compile(r'Disposition:\s+_merge \| alias \| ignore_')
_GROUP_HEADER = re.compile(r'^#{3,4}\s+(?:Token|Variants):\s*(.+?)\s*$')


def _header_names(line: str) -> List[str]:
    match = _GROUP_HEADER.match(line.rstrip('\r\n'))
    if not match:
        return []
    return [n.strip() for n in match.group(1).split(',') if n.strip()]


def fill_dispositions(
    text: str,
    mode: Disposition = Disposition.MERGE,
    overrides: Optional[Dict[str, Disposition]] = None,
) -> Tuple[str, int]:
    """
    Replace disposition placeholders.

    Args:
        text: Report markdown
        mode: Value written for groups without an override
        overrides: Group name -> value; a near-duplicate group matches
            when any of its variant names is listed

    Returns:
        (updated text, number of placeholders replaced)
    """
    if mode == Disposition.UNSET:
        raise ValueError('mode must be merge, alias or ignore')
    overrides = overrides or {}

    out = []
    count = 0
    current_names: List[str] = []

    for line in text.splitlines(keepends=True):
        names = _header_names(line)
        if names:
            current_names = names

        if PLACEHOLDER_PATTERN.search(line):
            value = mode
            for name in current_names:
                if name in overrides:
                    value = overrides[name]
                    break
            line, replaced = PLACEHOLDER_PATTERN.subn(f"Disposition: {value.value}", line)
            count += replaced
        out.append(line)

    return ''.join(out), count


def _parse_override(raw: str) -> Tuple[str, Disposition]:
    name, sep, value = raw.rpartition('=')
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=MODE, got {raw!r}")
    if value not in Disposition.choices():
        raise argparse.ArgumentTypeError(f"mode must be one of {Disposition.choices()}, got {value!r}")
    return name, Disposition(value)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='token-audit-fill',
        description='Fill disposition placeholders in duplicate-report.md',
    )
    parser.add_argument('--mode', choices=Disposition.choices(), default=Disposition.MERGE.value,
                        help='Disposition for every placeholder (default: %(default)s)')
    parser.add_argument('--report', default=str(PipelineConfig.report_path()),
                        help='Report path (default: %(default)s)')
    parser.add_argument('--set', dest='overrides', action='append', type=_parse_override, default=[],
                        metavar='NAME=MODE', help='Per-group override, repeatable')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    report_path = Path(args.report)
    mode = Disposition(args.mode)

    try:
        text = read_report(report_path)
        updated, count = fill_dispositions(text, mode, dict(args.overrides))
        if count:
            write_text_atomic(report_path, updated)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(
        f"Updated {count} Disposition line{'' if count == 1 else 's'} "
        f"to \"{mode.value}\" in {relative_posix(report_path, Path.cwd())}"
    )
    return 0


if __name__ == '__main__':
    sys.exit(main())
