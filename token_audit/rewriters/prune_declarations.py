#!/usr/bin/env python3
"""
Duplicate Declaration Pruner

Removes custom-property declarations that duplicate the canonical one,
for every exact property group marked `Disposition: merge` in
duplicate-report.md. The canonical file of a group is never touched;
each other member file loses its whole `--token: value;` line.

Every removal is recorded in short-term-aliases.json (file -> removed
token names) so temporary aliases can be added by hand for a release.
The plan is written on dry runs too; stylesheets are only written with
--write.

Usage:
    token-audit-prune                # dry run, prints summary and plan
    token-audit-prune --write        # applies edits in place
"""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from ..config import PipelineConfig
from ..errors import InputError
from ..models import AliasPlan, DuplicateGroup, FileChange, RewriteSummary
from ..reports.duplicate_report import load_report
from ..utils import relative_posix, write_text_atomic

DEBUG = PipelineConfig.DEBUG


# Value fragments: `#{...}` interpolation, quoted strings, anything but `;{}`
_VALUE_PART = r'''(?:\#\{[^{}]*\}|"[^"\n]*"|'[^'\n]*'|[^;{}"'])'''


def _declaration_pattern(token: str) -> re.Pattern:
    # Indentation, `token :`, then the value up to its `;` across lines, or
    # to end of line for a final declaration without one; trailing blanks
    # and newline go with it
    return re.compile(
        rf'^[ \t]*{re.escape(token)}[ \t]*:'
        rf'(?:{_VALUE_PART}*;|(?:\#\{{[^{{}}]*\}}|[^;{{}}\n])*$)'
        r'[ \t]*(?:\r?\n)?',
        re.MULTILINE,
    )


def prune_text(text: str, tokens: Iterable[str]) -> Tuple[str, List[str]]:
    """
    Delete the declaration lines of tokens from stylesheet text.

    Returns:
        (new text, tokens that had at least one declaration removed)
    """
    removed = []
    for token in tokens:
        text, count = _declaration_pattern(token).subn('', text)
        if count:
            removed.append(token)
    return text, removed


def plan_removals(groups: Iterable[DuplicateGroup]) -> Dict[str, List[str]]:
    """file -> tokens to delete there, from merge-marked exact property groups."""
    targets: Dict[str, List[str]] = {}
    for group in groups:
        if not group.is_actionable:
            continue
        for path in group.redundant_files:
            names = targets.setdefault(path, [])
            if group.representative_name not in names:
                names.append(group.representative_name)
    return targets


def prune_from_report(
    groups: Iterable[DuplicateGroup],
    base: Optional[Path] = None,
    write: bool = False,
) -> Tuple[AliasPlan, RewriteSummary]:
    """
    Prune redundant declarations named by report groups.

    Args:
        groups: Groups read back from the report
        base: Directory the report's file paths are relative to
            (defaults to the current directory)
        write: Commit changes to the stylesheets

    Returns:
        (alias plan of declarations found, per-file summary)
    """
    base = Path(base) if base is not None else Path.cwd()
    targets = plan_removals(groups)
    plan = AliasPlan()
    changes: List[FileChange] = []

    for rel_path in sorted(targets):
        path = base / rel_path
        try:
            with open(path, 'r', encoding='utf-8', newline='') as f:
                original = f.read()
        except (OSError, UnicodeDecodeError) as e:
            print(f"Warning: Cannot read {rel_path}, skipped: {e}", file=sys.stderr)
            continue

        updated, removed = prune_text(original, targets[rel_path])
        if DEBUG:
            print(f"DEBUG: {rel_path}: planned {targets[rel_path]}, found {removed}", file=sys.stderr)
        if not removed:
            continue

        for token in removed:
            plan.record(rel_path, token)
        changes.append(FileChange(path=rel_path, replacements=len(removed)))
        if write:
            write_text_atomic(path, updated)

    return plan, RewriteSummary(changes=changes, scanned_files=len(targets), written=write)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='token-audit-prune',
        description='Remove merge-marked duplicate declarations from non-canonical files',
    )
    parser.add_argument('--report', default=str(PipelineConfig.report_path()),
                        help='Annotated report (default: %(default)s)')
    parser.add_argument('--plan', default=str(PipelineConfig.alias_plan_path()),
                        help='Alias plan output (default: %(default)s)')
    parser.add_argument('--base', default='.',
                        help='Directory report paths are relative to (default: current directory)')
    parser.add_argument('-w', '--write', action='store_true',
                        help='Write changes (default is a dry run)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main prune stage
    """
    args = build_parser().parse_args(argv)

    try:
        groups = load_report(Path(args.report))
        if not any(g.is_actionable for g in groups):
            print("No merge-disposition duplicates found. Nothing to prune.")
        plan, summary = prune_from_report(groups, base=Path(args.base), write=args.write)
        plan_path = Path(args.plan)
        write_text_atomic(plan_path, plan.to_json())
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error in prune stage: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        return 1

    for change in summary.changes:
        plural = '' if change.replacements == 1 else 's'
        action = 'removed' if summary.written else 'would remove'
        print(f"  {change.path} - {action} {change.replacements} duplicated token{plural}")

    if plan.total_removed:
        print(f"{plan.total_removed} duplicated declaration(s) across {len(plan.removed)} file(s)")
    print(f"Alias plan written -> {relative_posix(plan_path, Path.cwd())}")
    if summary.written:
        print(f"Pruned {summary.changed_files} file{'' if summary.changed_files == 1 else 's'}.")
    else:
        print("Dry run complete - add --write to modify files.")
    return 0


if __name__ == '__main__':
    sys.exit(main())
