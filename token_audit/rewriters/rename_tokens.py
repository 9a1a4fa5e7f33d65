#!/usr/bin/env python3
"""
Token Rename Codemod

Renames duplicated or legacy tokens to their canonical names across a
source tree, driven by replace-map.json (`{"--old": "--new"}`).

Custom properties (`--name`) are rewritten where they are used,
`var(--old` , and where they are declared, `--old:`. Mixin and function
names are rewritten in `@mixin` / `@function` / `@include` rules and in
call sites `old(`. A name only matches as a whole: `--old` never matches
inside `--old-x`.

Files under protected directories (default `core/` of the root) hold the
canonical declarations and are never touched. Without --write nothing is
written; the summary shows what would change.

Usage:
    token-audit-rename [--mapping build/css-audit/replace-map.json] [--write|-w]
"""

from __future__ import annotations

import argparse
import json
import re
import sys
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Mapping, Optional, Sequence, Tuple

from ..config import PipelineConfig
from ..constants import ExtractionDefaults
from ..errors import InputError
from ..models import FileChange, ReplaceMap, RewriteSummary
from ..utils import Timer, TimingMetrics, is_protected, relative_posix, walk_stylesheets, write_text_atomic

DEBUG = PipelineConfig.DEBUG


def _alternation(names) -> str:
    # Longest first so a name never loses to its own prefix
    return '|'.join(re.escape(n) for n in sorted(names, key=lambda n: (-len(n), n)))


def _property_pattern(names) -> re.Pattern:
    alt = _alternation(names)
    return re.compile(
        rf'(var\(\s*)({alt})(?![\w-])'
        rf'|(?<![\w-])({alt})(?=\s*:)'
    )


def _callable_pattern(names) -> re.Pattern:
    alt = _alternation(names)
    return re.compile(
        rf'(@(?:mixin|function|include)\s+(?:[\w-]+\.)?)({alt})(?![\w-])'
        rf'|(?<![\w-])({alt})(?=\()'
    )


class TokenRenamer:
    """
    Compiled rename rules for one mapping.

    All names are substituted in a single pass over the text, so a
    mapping that chains names (`--a -> --b`, `--b -> --c`) renames each
    occurrence once.
    """

    def __init__(self, mapping: Mapping[str, str]) -> None:
        self.mapping = {old: new for old, new in mapping.items() if old and new and old != new}
        properties = [n for n in self.mapping if n.startswith(ExtractionDefaults.PROPERTY_SIGIL)]
        callables = [n for n in self.mapping if not n.startswith(ExtractionDefaults.PROPERTY_SIGIL)]
        self._patterns = []
        if properties:
            self._patterns.append(_property_pattern(properties))
        if callables:
            self._patterns.append(_callable_pattern(callables))

    def _replace(self, match: re.Match) -> str:
        if match.group(2) is not None:
            return match.group(1) + self.mapping[match.group(2)]
        return self.mapping[match.group(3)]

    def rename(self, text: str) -> Tuple[str, int]:
        total = 0
        for pattern in self._patterns:
            text, count = pattern.subn(self._replace, text)
            total += count
        return text, total


def rename_in_text(text: str, mapping: Mapping[str, str]) -> Tuple[str, int]:
    """
    Apply a rename mapping to stylesheet text.

    Returns:
        (new text, number of substitutions); text is returned unchanged
        when the count is 0
    """
    return TokenRenamer(mapping).rename(text)


def _rename_file(path: Path, renamer: TokenRenamer, write: bool) -> Tuple[int, float]:
    with Timer() as timer:
        with open(path, 'r', encoding='utf-8', newline='') as f:
            original = f.read()
        updated, count = renamer.rename(original)
        if count and write:
            write_text_atomic(path, updated)
    return count, timer.elapsed_ms


def rename_tree(
    root: Path,
    mapping: Mapping[str, str],
    protected_dirs: Sequence[str] = PipelineConfig.PROTECTED_DIRS,
    write: bool = False,
    max_workers: Optional[int] = None,
    project_root: Optional[Path] = None,
    extensions: Sequence[str] = ExtractionDefaults.EXTENSIONS,
) -> RewriteSummary:
    """
    Rename tokens in every stylesheet under root.

    Args:
        root: Source tree to rewrite
        mapping: old name -> new name
        protected_dirs: Directories of root that are never rewritten
        write: Commit changes; files without matches are never written
        max_workers: Thread pool size (defaults to PipelineConfig.MAX_WORKERS)
        project_root: Base for reported paths (defaults to the current directory)

    Raises:
        InputError: root does not exist
    """
    root = Path(root)
    project_root = Path(project_root) if project_root is not None else Path.cwd()
    if not root.is_dir():
        raise InputError(f"Source root not found: {root}")

    renamer = TokenRenamer(mapping)
    paths = [p for p in walk_stylesheets(root, extensions) if not is_protected(p, root, protected_dirs)]
    workers = max(1, max_workers or PipelineConfig.MAX_WORKERS)
    timing = TimingMetrics('rename')

    changes: List[FileChange] = []
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = [(path, executor.submit(_rename_file, path, renamer, write)) for path in paths]
        for path, future in futures:
            rel_path = relative_posix(path, project_root)
            try:
                count, elapsed_ms = future.result()
            except (OSError, UnicodeDecodeError) as e:
                print(f"Warning: Failed to rewrite {rel_path}: {e}", file=sys.stderr)
                continue
            timing.record(elapsed_ms, rel_path)
            if count:
                changes.append(FileChange(path=rel_path, replacements=count))

    if DEBUG:
        timing.report()

    return RewriteSummary(changes=changes, scanned_files=len(paths), written=write)


def load_mapping(path: Path) -> ReplaceMap:
    """
    Read replace-map.json.

    Raises:
        InputError: file missing, not JSON, or not an object of strings
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(f"Mapping file not found: {path}")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InputError(f"Mapping file is not valid JSON: {path}: {e}") from e
    if not isinstance(data, dict) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in data.items()
    ):
        raise InputError(f"Mapping file must be an object of name -> name: {path}")
    return ReplaceMap(mapping=data)


def print_summary(summary: RewriteSummary) -> None:
    print("\nCodemod Summary:")
    for change in summary.changes:
        plural = '' if change.replacements == 1 else 's'
        print(f"  {change.path}  ->  {change.replacements} replacement{plural}")
    if summary.written:
        print(f"\nFiles updated: {summary.changed_files}.")
    else:
        print("\nDry run only - re-run with --write to apply.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='token-audit-rename',
        description='Rename tokens across the source tree using replace-map.json',
    )
    parser.add_argument('--mapping', default=str(PipelineConfig.replace_map_path()),
                        help='old -> new mapping (default: %(default)s)')
    parser.add_argument('--root', default=PipelineConfig.SOURCE_ROOT,
                        help='Source tree to rewrite (default: %(default)s)')
    parser.add_argument('--protect', action='append', dest='protected',
                        help='Directory under root to leave untouched, repeatable (default: core)')
    parser.add_argument('--workers', type=int, default=PipelineConfig.MAX_WORKERS,
                        help='Parallel rewrite workers (default: %(default)s)')
    parser.add_argument('-w', '--write', action='store_true',
                        help='Write changes (default is a dry run)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main rename stage
    """
    args = build_parser().parse_args(argv)
    protected = tuple(args.protected) if args.protected else PipelineConfig.PROTECTED_DIRS

    try:
        replace_map = load_mapping(Path(args.mapping))
        if not len(replace_map):
            print("Mapping file empty or no changes required.")
            return 0
        summary = rename_tree(
            Path(args.root),
            dict(replace_map.items()),
            protected_dirs=protected,
            write=args.write,
            max_workers=args.workers,
        )
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error in rename stage: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        return 1

    if not summary.changes:
        print("No matches - codebase already aligned with canonical tokens.")
        return 0

    print_summary(summary)
    return 0


if __name__ == '__main__':
    sys.exit(main())
