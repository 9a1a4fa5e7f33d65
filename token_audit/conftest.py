"""Shared fixtures for token_audit tests."""
from __future__ import annotations

from pathlib import Path
from typing import Dict

import pytest


STYLESHEETS: Dict[str, str] = {
    'src/core/_tokens.scss': (
        ':root {\n'
        '  --spice-accent: #fff;\n'
        '  --accent-color: red;\n'
        '}\n'
        '@mixin card-shadow($depth) {\n'
        '  box-shadow: 0 0 $depth black;\n'
        '}\n'
    ),
    'src/features/_card.scss': (
        "@use 'core/tokens';\n"
        '.card {\n'
        '  --spice-accent: #eee;\n'
        '  --accent-colour: red;\n'
        '  color: var(--spice-accent);\n'
        '}\n'
    ),
    'src/sidebar/_panel.css': (
        '.panel {\n'
        '  --accent-hue: 10;\n'
        '  background: var(--accent-color);\n'
        '}\n'
    ),
}


def write_tree(base: Path, files: Dict[str, str]) -> Path:
    for rel_path, content in files.items():
        path = base / rel_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
    return base


@pytest.fixture
def stylesheet_tree(tmp_path: Path, monkeypatch) -> Path:
    """Project directory holding a small src/ tree; the cwd is set to it."""
    write_tree(tmp_path, STYLESHEETS)
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def make_tree(tmp_path: Path, monkeypatch):
    """Factory writing {relative path: content} under tmp_path, cwd set to it."""
    monkeypatch.chdir(tmp_path)

    def _make(files: Dict[str, str]) -> Path:
        return write_tree(tmp_path, files)

    return _make
