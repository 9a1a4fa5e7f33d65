#!/usr/bin/env python3
"""
Duplicate & Near-Duplicate Token Report

Renders analyzer groups into duplicate-report.md and reads the report
back, including any dispositions a reviewer has filled in. The markdown
file is the hand-off between the analyzer and the rewrite engine.

Group layout:

    ### Token: --spice-accent
    Defined in:
    - src/core/_tokens.scss
    - src/features/_card.scss
    Preferred source (auto-ranked): src/core/_tokens.scss
    Disposition: _merge | alias | ignore_

Usage:
    token-audit-report [--baseline build/css-audit/baseline.json] [--out ...]
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError

from ..config import PipelineConfig
from ..constants import ReportMarkers
from ..errors import InputError
from ..extractors.extract_tokens import load_baseline
from ..models import Disposition, DuplicateGroup, MatchType, TokenKind
from ..similarity import AnalysisResult, AnalyzerConfig, DuplicateAnalyzer
from ..utils import relative_posix, write_text_atomic

DEBUG = PipelineConfig.DEBUG

_KIND_HEADER = re.compile(r'^##\s+(\w+)\s+Duplicates\s*$')
_TOKEN_HEADER = re.compile(r'^###\s+Token:\s*(\S+)\s*$')
_VARIANTS_HEADER = re.compile(r'^####\s+Variants:\s*(.+?)\s*$')
_DEFINED_IN = re.compile(r'^Defined in:\s*$')
_FILE_BULLET = re.compile(r'^\s*-\s+(.+?)\s*$')
_PREFERRED = re.compile(r'^\s*Preferred source[^:]*:\s*(.+?)\s*$')
_DISPOSITION = re.compile(r'^\s*Disposition:\s*(.*?)\s*$')


def _disposition_text(group: DuplicateGroup) -> str:
    if group.disposition == Disposition.UNSET:
        return ReportMarkers.PLACEHOLDER
    return group.disposition.value


def _render_group_body(group: DuplicateGroup) -> List[str]:
    lines = ["Defined in:"]
    lines.extend(f"- {f}" for f in group.files)
    lines.append(f"Preferred source (auto-ranked): {group.canonical}")
    lines.append(f"Disposition: {_disposition_text(group)}")
    lines.append("")
    return lines


def render_report(result: AnalysisResult) -> str:
    """
    Render analysis results as the duplicate report markdown.

    One section per kind: exact groups first, then near-duplicate
    clusters. Undecided groups carry the disposition placeholder.
    """
    lines = [ReportMarkers.TITLE, ""]

    for analysis in result.kinds:
        label = analysis.kind.baseline_key
        lines.append(f"## {label} Duplicates")
        lines.append("")
        if not analysis.exact:
            lines.append(ReportMarkers.NO_EXACT)
            lines.append("")
        for group in analysis.exact:
            lines.append(f"### Token: {group.representative_name}")
            lines.extend(_render_group_body(group))

        lines.append(f"### Near-Duplicate {label}")
        lines.append("")
        if not analysis.near:
            lines.append(ReportMarkers.NO_NEAR)
            lines.append("")
        for group in analysis.near:
            lines.append(f"#### Variants: {', '.join(group.names)}")
            lines.extend(_render_group_body(group))

    return '\n'.join(lines).rstrip('\n') + '\n'


def parse_disposition(raw: str) -> Disposition:
    """Disposition named on a report line; the placeholder or anything else is UNSET."""
    if ReportMarkers.PLACEHOLDER in raw:
        return Disposition.UNSET
    word = raw.strip().strip('*_`').strip().split(' ')[0].lower() if raw.strip() else ''
    try:
        value = Disposition(word)
    except ValueError:
        return Disposition.UNSET
    return value


class _PendingGroup:
    """Fields collected for a group while reading the report."""

    def __init__(self, kind: TokenKind, match_type: MatchType, names: List[str]) -> None:
        self.kind = kind
        self.match_type = match_type
        self.names = names
        self.files: List[str] = []
        self.canonical: Optional[str] = None
        self.collecting_files = False

    def finish(self, disposition: Disposition) -> Optional[DuplicateGroup]:
        if self.canonical is None:
            print(f"Warning: report group {self.names} has no preferred source, skipped", file=sys.stderr)
            return None
        try:
            return DuplicateGroup(
                kind=self.kind,
                match_type=self.match_type,
                names=self.names,
                files=sorted(set(self.files)),
                canonical=self.canonical,
                disposition=disposition,
            )
        except ValidationError as e:
            print(f"Warning: report group {self.names} is malformed, skipped: {e}", file=sys.stderr)
            return None


def parse_report(text: str) -> List[DuplicateGroup]:
    """
    Read groups back from duplicate report markdown.

    Tolerates prose between groups and hand edits of the canonical file
    or disposition. A group whose lines no longer form a valid group is
    reported and skipped.
    """
    groups: List[DuplicateGroup] = []
    kind: Optional[TokenKind] = None
    pending: Optional[_PendingGroup] = None

    for line in text.splitlines():
        match = _KIND_HEADER.match(line)
        if match:
            pending = None
            try:
                kind = TokenKind.from_baseline_key(match.group(1))
            except ValueError:
                kind = None
            continue

        if kind is None:
            continue

        match = _TOKEN_HEADER.match(line)
        if match:
            pending = _PendingGroup(kind, MatchType.EXACT, [match.group(1)])
            continue

        match = _VARIANTS_HEADER.match(line)
        if match:
            names = [n.strip() for n in match.group(1).split(',') if n.strip()]
            pending = _PendingGroup(kind, MatchType.NEAR, names)
            continue

        if pending is None:
            continue

        if _DEFINED_IN.match(line):
            pending.collecting_files = True
            continue

        match = _PREFERRED.match(line)
        if match:
            pending.collecting_files = False
            pending.canonical = match.group(1).replace('\\', '/')
            continue

        match = _DISPOSITION.match(line)
        if match:
            group = pending.finish(parse_disposition(match.group(1)))
            if group is not None:
                groups.append(group)
            pending = None
            continue

        if pending.collecting_files:
            match = _FILE_BULLET.match(line)
            if match:
                pending.files.append(match.group(1).replace('\\', '/'))
            elif line.strip():
                pending.collecting_files = False

    return groups


def read_report(path: Path) -> str:
    """
    Read report text.

    Raises:
        InputError: report missing or unreadable
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(f"Cannot read report at {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return f.read()
    except UnicodeDecodeError as e:
        raise InputError(f"Report is not valid UTF-8: {path}: {e}") from e
    except OSError as e:
        raise InputError(f"Cannot read report at {path}: {e}") from e


def load_report(path: Path) -> List[DuplicateGroup]:
    return parse_report(read_report(path))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='token-audit-report',
        description='Analyze baseline.json and write duplicate-report.md',
    )
    parser.add_argument('--baseline', default=str(PipelineConfig.baseline_json_path()),
                        help='Baseline produced by token-audit-scan (default: %(default)s)')
    parser.add_argument('--out', default=str(PipelineConfig.report_path()),
                        help='Report path (default: %(default)s)')
    parser.add_argument('--threshold', type=int, default=None,
                        help='Near-duplicate edit distance threshold (default: 3)')
    parser.add_argument('--priority', default=None,
                        help='Comma-separated directory priority, most preferred first')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main analysis stage
    """
    args = build_parser().parse_args(argv)

    try:
        config = AnalyzerConfig.from_env()
        overrides = {}
        if args.threshold is not None:
            overrides['threshold'] = args.threshold
        if args.priority:
            overrides['directory_priority'] = tuple(args.priority.split(','))
        if overrides:
            config = AnalyzerConfig(**{**config.model_dump(), **overrides})
    except (ValueError, ValidationError) as e:
        print(f"Error: invalid analyzer configuration: {e}", file=sys.stderr)
        return 1

    if DEBUG:
        config.print_config()

    try:
        baseline = load_baseline(Path(args.baseline))
        result = DuplicateAnalyzer(config).analyze(baseline)
        out_path = Path(args.out)
        write_text_atomic(out_path, render_report(result))
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error in analysis stage: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        return 1

    for label, counts in result.counts().items():
        print(f"  {label}: {counts['exact']} exact, {counts['near']} near-duplicate groups")
    print(f"Duplicate report written to {relative_posix(out_path, Path.cwd())}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
