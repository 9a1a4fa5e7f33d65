#!/usr/bin/env python3
"""
Token Extraction Pipeline

Walks a source tree, scans every stylesheet and records the tokens each
file declares:
- custom properties (`--name: value`)
- reusable blocks (`@mixin name`)
- functions (`@function name`)
- module references (`@use`, `@forward`, `@import` arguments)

Writes:
- baseline.json: file -> {properties, blocks, functions, moduleRefs}
- baseline.csv: token,files (pipe-separated)

Usage:
    token-audit-scan [--root src] [--out-dir build/css-audit] [--ext .scss]
"""

from __future__ import annotations

import argparse
import csv
import io
import json
import re
import sys
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..config import PipelineConfig
from ..constants import ExtractionDefaults, OutputDefaults
from ..errors import InputError, StylesheetParseError
from ..models import Baseline, FileInventory
from ..utils import Timer, TimingMetrics, relative_posix, walk_stylesheets, write_text_atomic
from .scss_scanner import AtRule, Declaration, scan_statements

DEBUG = PipelineConfig.DEBUG

# First identifier after @mixin / @function; parameters and whitespace end it
_IDENTIFIER = re.compile(r'^[A-Za-z_\-][\w\-]*')
_QUOTES = re.compile(r'["\']')


@dataclass
class ExtractionResult:
    """Baseline plus the files that could not be parsed."""
    baseline: Baseline
    failed_files: Dict[str, str] = field(default_factory=dict)
    timing: Optional[TimingMetrics] = None

    @property
    def scanned_count(self) -> int:
        return self.baseline.file_count + len(self.failed_files)


def _first_identifier(params: str) -> Optional[str]:
    match = _IDENTIFIER.match(params.strip())
    return match.group(0) if match else None


def extract_file_tokens(source: str, rel_path: str) -> FileInventory:
    """
    Extract the token inventory of one stylesheet.

    Args:
        source: File contents
        rel_path: Path recorded in the inventory

    Returns:
        FileInventory with sorted, de-duplicated name lists

    Raises:
        StylesheetParseError: the file cannot be scanned
    """
    try:
        statements = scan_statements(source)
    except StylesheetParseError as e:
        raise e.with_path(rel_path) from e

    properties: List[str] = []
    blocks: List[str] = []
    functions: List[str] = []
    module_refs: List[str] = []

    for statement in statements:
        if isinstance(statement, Declaration):
            if statement.prop.startswith(ExtractionDefaults.PROPERTY_SIGIL):
                properties.append(statement.prop)
        elif isinstance(statement, AtRule):
            if statement.name in ExtractionDefaults.BLOCK_AT_RULES:
                name = _first_identifier(statement.params)
                if name:
                    blocks.append(name)
            elif statement.name in ExtractionDefaults.FUNCTION_AT_RULES:
                name = _first_identifier(statement.params)
                if name:
                    functions.append(name)
            elif statement.name in ExtractionDefaults.MODULE_AT_RULES:
                cleaned = _QUOTES.sub('', statement.params).strip()
                if cleaned:
                    module_refs.append(cleaned)

    return FileInventory(
        path=rel_path,
        properties=properties,
        blocks=blocks,
        functions=functions,
        module_refs=module_refs,
    )


def _extract_path(path: Path, project_root: Path) -> tuple:
    rel_path = relative_posix(path, project_root)
    with Timer() as timer:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                source = f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise StylesheetParseError(f"unreadable: {e}", path=rel_path) from e
        inventory = extract_file_tokens(source, rel_path)
    return inventory, timer.elapsed_ms


def build_baseline(
    root: Path,
    project_root: Optional[Path] = None,
    extensions: Sequence[str] = ExtractionDefaults.EXTENSIONS,
    max_workers: Optional[int] = None,
) -> ExtractionResult:
    """
    Scan every stylesheet under root into a Baseline.

    Files are parsed on a thread pool; completion order does not matter
    because the baseline is keyed and sorted by path. A file that fails
    to parse is reported and left out.

    Args:
        root: Source tree to walk
        project_root: Base for the relative paths stored in the baseline
            (defaults to the current directory)
        extensions: File suffixes treated as stylesheets
        max_workers: Thread pool size (defaults to PipelineConfig.MAX_WORKERS)

    Raises:
        InputError: root does not exist or is not a directory
    """
    root = Path(root)
    project_root = Path(project_root) if project_root is not None else Path.cwd()
    if not root.is_dir():
        raise InputError(f"Source root not found: {root}")

    paths = walk_stylesheets(root, extensions)
    workers = max(1, max_workers or PipelineConfig.MAX_WORKERS)
    timing = TimingMetrics('parse')

    inventories: List[FileInventory] = []
    failed: Dict[str, str] = {}

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(_extract_path, path, project_root): path for path in paths}
        for future in as_completed(futures):
            path = futures[future]
            try:
                inventory, elapsed_ms = future.result()
            except StylesheetParseError as e:
                rel_path = e.path or relative_posix(path, project_root)
                failed[rel_path] = e.reason
                print(f"Warning: Failed to parse {e}", file=sys.stderr)
                continue
            timing.record(elapsed_ms, inventory.path)
            inventories.append(inventory)
            if DEBUG:
                print(
                    f"DEBUG: parsed {inventory.path}: {inventory.token_count} tokens "
                    f"({elapsed_ms:.1f}ms)",
                    file=sys.stderr,
                )

    baseline = Baseline.from_inventories(inventories)
    return ExtractionResult(
        baseline=baseline,
        failed_files=dict(sorted(failed.items())),
        timing=timing,
    )


def render_baseline_csv(baseline: Baseline) -> str:
    """baseline.csv text: header `token,files`, one row per token."""
    out = io.StringIO()
    writer = csv.writer(out, lineterminator='\n')
    writer.writerow(['token', 'files'])
    for token, files in baseline.csv_rows():
        writer.writerow([token, files])
    return out.getvalue()


def write_baseline(baseline: Baseline, out_dir: Path) -> Dict[str, Path]:
    """
    Write baseline.json and baseline.csv, creating out_dir if needed.

    Both files are fully overwritten; identical baselines produce
    byte-identical files.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    json_path = out_dir / OutputDefaults.BASELINE_JSON
    csv_path = out_dir / OutputDefaults.BASELINE_CSV
    write_text_atomic(json_path, baseline.to_json())
    write_text_atomic(csv_path, render_baseline_csv(baseline))
    return {'json': json_path, 'csv': csv_path}


def load_baseline(path: Path) -> Baseline:
    """
    Read a persisted baseline.json.

    Raises:
        InputError: file missing or not a valid baseline
    """
    path = Path(path)
    if not path.is_file():
        raise InputError(f"Baseline not found: {path} (run token-audit-scan first)")
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InputError(f"Baseline is not valid JSON: {path}: {e}") from e
    if not isinstance(data, dict):
        raise InputError(f"Baseline must be a JSON object: {path}")
    return Baseline.from_dict(data)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='token-audit-scan',
        description='Extract stylesheet tokens into baseline.json / baseline.csv',
    )
    parser.add_argument('--root', default=PipelineConfig.SOURCE_ROOT,
                        help='Source tree to scan (default: %(default)s)')
    parser.add_argument('--out-dir', default=PipelineConfig.AUDIT_DIR,
                        help='Artifact directory (default: %(default)s)')
    parser.add_argument('--ext', action='append', dest='extensions',
                        help='Stylesheet extension, repeatable (default: .scss, .css)')
    parser.add_argument('--workers', type=int, default=PipelineConfig.MAX_WORKERS,
                        help='Parallel parse workers (default: %(default)s)')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main extraction stage
    """
    args = build_parser().parse_args(argv)
    extensions = tuple(args.extensions) if args.extensions else PipelineConfig.EXTENSIONS

    if DEBUG:
        PipelineConfig.print_config()

    try:
        result = build_baseline(
            Path(args.root),
            project_root=Path.cwd(),
            extensions=extensions,
            max_workers=args.workers,
        )
        written = write_baseline(result.baseline, Path(args.out_dir))
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error in extraction stage: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc(file=sys.stderr)
        return 1

    if DEBUG and result.timing is not None:
        result.timing.report()

    print(
        f"CSS audit baseline generated for {result.baseline.file_count} files "
        f"-> {relative_posix(written['json'].parent, Path.cwd())}"
    )
    print(f"Scanned {result.scanned_count} stylesheet(s)")
    if result.failed_files:
        print(f"Skipped {len(result.failed_files)} file(s) that failed to parse:")
        for path, reason in result.failed_files.items():
            print(f"  {path}: {reason}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
