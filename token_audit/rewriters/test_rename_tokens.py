"""
Tests for the token rename codemod.

Run with: python -m pytest token_audit/rewriters/test_rename_tokens.py -v
"""

import json

import pytest

from token_audit.errors import InputError
from token_audit.rewriters import rename_tokens
from token_audit.rewriters.rename_tokens import load_mapping, main, rename_in_text, rename_tree

TREE = {
    'src/core/_tokens.scss': ':root {\n  --old-accent: #fff;\n}\n',
    'src/features/_card.scss': (
        '.card {\n'
        '  --old-accent: #eee;\n'
        '  color: var(--old-accent);\n'
        '  border-color: var(--old-accent-dark);\n'
        '}\n'
    ),
    'src/features/_plain.scss': '.plain {\n  color: red;\n}\n',
}
MAPPING = {'--old-accent': '--spice-accent'}


class TestRenameInText:
    """Tests for in-memory renaming."""

    def test_usages_and_declarations(self):
        """Test var() usages and declarations are both renamed."""
        text = 'a { --old: 1; color: var(--old); b: var( --old , x); }'
        updated, count = rename_in_text(text, {'--old': '--new'})
        assert count == 3
        assert updated == 'a { --new: 1; color: var(--new); b: var( --new , x); }'

    def test_whole_names_only(self):
        """Test a name never matches inside a longer name."""
        text = 'a { --old-x: 1; color: var(--old-x); }'
        updated, count = rename_in_text(text, {'--old': '--new'})
        assert count == 0
        assert updated == text

    def test_chained_mapping_renames_once(self):
        """Test a -> b, b -> c moves each occurrence one step."""
        updated, count = rename_in_text('x: var(--a) var(--b);', {'--a': '--b', '--b': '--c'})
        assert updated == 'x: var(--b) var(--c);'
        assert count == 2

    def test_mixins_and_functions(self):
        """Test mixin and function names are renamed at declaration and call sites."""
        text = (
            '@mixin old-shadow($d) { box-shadow: $d; }\n'
            '.a { @include old-shadow(1px); @include lib.old-shadow; width: old-rem(16px); }\n'
        )
        updated, count = rename_in_text(text, {'old-shadow': 'card-shadow', 'old-rem': 'rem'})
        assert count == 4
        assert 'old-' not in updated
        assert '@include lib.card-shadow;' in updated

    def test_idempotent(self):
        """Test a second pass finds nothing left to rename."""
        once, _ = rename_in_text(TREE['src/features/_card.scss'], MAPPING)
        twice, count = rename_in_text(once, MAPPING)
        assert count == 0
        assert twice == once

    def test_empty_mapping(self):
        """Test an empty mapping leaves text alone."""
        assert rename_in_text('a { --x: 1; }', {}) == ('a { --x: 1; }', 0)


class TestRenameTree:
    """Tests for tree-wide renaming."""

    def test_dry_run_touches_nothing(self, make_tree):
        """Test the default dry run reports changes without writing."""
        root = make_tree(TREE)
        before = {p: (root / p).read_bytes() for p in TREE}

        summary = rename_tree(root / 'src', MAPPING, project_root=root)
        assert summary.counts() == {'src/features/_card.scss': 2}
        assert not summary.written
        assert {p: (root / p).read_bytes() for p in TREE} == before

    def test_write_and_protected_dirs(self, make_tree):
        """Test --write renames outside core/ and leaves core/ alone."""
        root = make_tree(TREE)
        summary = rename_tree(root / 'src', MAPPING, write=True, project_root=root)

        card = (root / 'src/features/_card.scss').read_text(encoding='utf-8')
        assert '--spice-accent: #eee;' in card
        assert 'var(--spice-accent)' in card
        assert 'var(--old-accent-dark)' in card
        assert (root / 'src/core/_tokens.scss').read_text(encoding='utf-8') == TREE['src/core/_tokens.scss']
        assert summary.written
        assert summary.total_replacements == 2

    def test_unmatched_files_never_written(self, make_tree, monkeypatch):
        """Test only files with matches are opened for writing."""
        root = make_tree(TREE)
        written = []
        original = rename_tokens.write_text_atomic

        def recording_write(path, text):
            written.append(path.relative_to(root).as_posix())
            original(path, text)

        monkeypatch.setattr(rename_tokens, 'write_text_atomic', recording_write)
        rename_tree(root / 'src', MAPPING, write=True, project_root=root)
        assert written == ['src/features/_card.scss']

    def test_second_run_is_fixed_point(self, make_tree):
        """Test re-running after a write finds zero occurrences."""
        root = make_tree(TREE)
        rename_tree(root / 'src', MAPPING, write=True, project_root=root)
        again = rename_tree(root / 'src', MAPPING, write=True, project_root=root)
        assert again.changes == []

    def test_custom_protected_dirs(self, make_tree):
        """Test an empty protected list lets core/ be rewritten too."""
        root = make_tree(TREE)
        summary = rename_tree(root / 'src', MAPPING, protected_dirs=(), project_root=root)
        assert 'src/core/_tokens.scss' in summary.counts()

    def test_line_endings_preserved(self, make_tree):
        """Test CRLF files keep their line endings."""
        root = make_tree({})
        path = root / 'src' / 'a.scss'
        path.parent.mkdir(parents=True)
        path.write_bytes(b'a {\r\n  color: var(--old-accent);\r\n}\r\n')
        rename_tree(root / 'src', MAPPING, write=True, project_root=root)
        assert path.read_bytes() == b'a {\r\n  color: var(--spice-accent);\r\n}\r\n'

    def test_missing_root(self, tmp_path):
        """Test a missing tree is an input error."""
        with pytest.raises(InputError):
            rename_tree(tmp_path / 'src', MAPPING)


class TestLoadMapping:
    """Tests for replace-map.json loading."""

    def test_missing(self, tmp_path):
        """Test a missing mapping is an input error."""
        with pytest.raises(InputError, match='Mapping file not found'):
            load_mapping(tmp_path / 'replace-map.json')

    def test_not_an_object(self, tmp_path):
        """Test a JSON array is rejected."""
        path = tmp_path / 'replace-map.json'
        path.write_text('["--a"]', encoding='utf-8')
        with pytest.raises(InputError):
            load_mapping(path)

    def test_identity_pairs_dropped(self, tmp_path):
        """Test pairs that rename nothing are dropped on load."""
        path = tmp_path / 'replace-map.json'
        path.write_text(json.dumps({'--a': '--a', '--b': '--c'}), encoding='utf-8')
        assert dict(load_mapping(path).items()) == {'--b': '--c'}


class TestMain:
    """Tests for the token-audit-rename entry point."""

    def _mapping(self, root):
        path = root / 'replace-map.json'
        path.write_text(json.dumps(MAPPING), encoding='utf-8')
        return str(path)

    def test_dry_run_summary(self, make_tree, capsys):
        """Test the default run prints a summary and a dry-run hint."""
        root = make_tree(TREE)
        assert main(['--mapping', self._mapping(root), '--root', 'src']) == 0
        out = capsys.readouterr().out
        assert 'Codemod Summary:' in out
        assert 'src/features/_card.scss  ->  2 replacements' in out
        assert 'Dry run only' in out
        assert (root / 'src/features/_card.scss').read_text(encoding='utf-8') == TREE['src/features/_card.scss']

    def test_write_flag(self, make_tree, capsys):
        """Test -w commits the changes."""
        root = make_tree(TREE)
        assert main(['--mapping', self._mapping(root), '--root', 'src', '-w']) == 0
        assert 'var(--spice-accent)' in (root / 'src/features/_card.scss').read_text(encoding='utf-8')
        assert 'Files updated: 1.' in capsys.readouterr().out

    def test_no_matches(self, make_tree, capsys):
        """Test an aligned tree reports no matches."""
        root = make_tree({'src/features/_plain.scss': TREE['src/features/_plain.scss']})
        assert main(['--mapping', self._mapping(root), '--root', 'src']) == 0
        assert 'No matches' in capsys.readouterr().out

    def test_missing_mapping(self, make_tree, capsys):
        """Test a missing mapping exits 1."""
        root = make_tree(TREE)
        assert main(['--mapping', str(root / 'nope.json'), '--root', 'src']) == 1
        assert 'Mapping file not found' in capsys.readouterr().err
