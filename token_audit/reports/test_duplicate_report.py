"""
Tests for duplicate report rendering and parsing.

Run with: python -m pytest token_audit/reports/test_duplicate_report.py -v
"""

from pathlib import Path

import pytest

from token_audit.constants import ReportMarkers
from token_audit.errors import InputError
from token_audit.extractors import build_baseline, write_baseline
from token_audit.models import Disposition, MatchType, TokenKind
from token_audit.reports.duplicate_report import (
    load_report,
    main,
    parse_disposition,
    parse_report,
    render_report,
)
from token_audit.similarity import DuplicateAnalyzer


@pytest.fixture
def analysis(stylesheet_tree):
    baseline = build_baseline(Path('src'), project_root=stylesheet_tree).baseline
    return DuplicateAnalyzer().analyze(baseline)


class TestRenderReport:
    """Tests for report rendering."""

    def test_exact_group_block(self, analysis):
        """Test an exact group renders its files, canonical pick and placeholder."""
        report = render_report(analysis)
        assert report.startswith(ReportMarkers.TITLE + '\n')
        assert (
            '### Token: --spice-accent\n'
            'Defined in:\n'
            '- src/core/_tokens.scss\n'
            '- src/features/_card.scss\n'
            'Preferred source (auto-ranked): src/core/_tokens.scss\n'
            'Disposition: _merge | alias | ignore_\n'
        ) in report

    def test_near_group_block(self, analysis):
        """Test near-duplicate clusters list their variants."""
        report = render_report(analysis)
        assert '#### Variants: --accent-color, --accent-colour\n' in report

    def test_sections_per_kind(self, analysis):
        """Test every grouped kind has a section, empty ones noted."""
        report = render_report(analysis)
        for label in ('properties', 'blocks', 'functions'):
            assert f'## {label} Duplicates' in report
        assert ReportMarkers.NO_EXACT in report
        assert 'moduleRefs' not in report

    def test_deterministic(self, analysis):
        """Test rendering the same analysis twice gives identical text."""
        assert render_report(analysis) == render_report(analysis)


class TestParseReport:
    """Tests for reading groups back."""

    def test_round_trip(self, analysis):
        """Test parsing a rendered report recovers every group."""
        parsed = [g.model_dump() for g in parse_report(render_report(analysis))]
        assert parsed == [g.model_dump() for g in analysis.all_groups()]

    def test_reads_dispositions(self, analysis):
        """Test reviewer decisions are picked up."""
        report = render_report(analysis).replace(
            'Disposition: _merge | alias | ignore_', 'Disposition: merge', 1
        )
        groups = parse_report(report)
        assert groups[0].disposition == Disposition.MERGE
        assert groups[0].match_type == MatchType.EXACT
        assert groups[0].kind == TokenKind.PROPERTY
        assert groups[1].disposition == Disposition.UNSET

    def test_hand_edited_canonical(self):
        """Test a reviewer may move the preferred source to another member file."""
        report = (
            '## properties Duplicates\n'
            '\n'
            'Some notes from the review.\n'
            '### Token: --x\n'
            'Defined in:\n'
            '- a/core/x.scss\n'
            '- a/features/x.scss\n'
            'Preferred source (auto-ranked): a/features/x.scss\n'
            'Disposition: **merge**\n'
        )
        groups = parse_report(report)
        assert len(groups) == 1
        assert groups[0].canonical == 'a/features/x.scss'
        assert groups[0].disposition == Disposition.MERGE

    def test_malformed_group_skipped(self, capsys):
        """Test a group whose canonical file is not a member is skipped with a warning."""
        report = (
            '## properties Duplicates\n'
            '### Token: --x\n'
            'Defined in:\n'
            '- a/core/x.scss\n'
            '- a/features/x.scss\n'
            'Preferred source (auto-ranked): elsewhere.scss\n'
            'Disposition: merge\n'
        )
        assert parse_report(report) == []
        assert 'Warning' in capsys.readouterr().err

    def test_missing_report(self, tmp_path):
        """Test a missing report is an input error."""
        with pytest.raises(InputError):
            load_report(tmp_path / 'duplicate-report.md')

    def test_undecodable_report(self, tmp_path):
        """Test a report that is not UTF-8 is an input error."""
        path = tmp_path / 'duplicate-report.md'
        path.write_bytes(b'### Token: --x\n\xff\xfe\n')
        with pytest.raises(InputError, match='not valid UTF-8'):
            load_report(path)


class TestParseDisposition:
    """Tests for disposition values."""

    @pytest.mark.parametrize('raw,expected', [
        ('merge', Disposition.MERGE),
        ('Alias', Disposition.ALIAS),
        ('_ignore_', Disposition.IGNORE),
        ('_merge | alias | ignore_', Disposition.UNSET),
        ('', Disposition.UNSET),
        ('later', Disposition.UNSET),
    ])
    def test_values(self, raw, expected):
        """Test recognised values and everything else."""
        assert parse_disposition(raw) == expected


class TestMain:
    """Tests for the token-audit-report entry point."""

    def test_writes_report(self, stylesheet_tree, capsys):
        """Test the CLI reads the baseline and writes the report."""
        result = build_baseline(Path('src'), project_root=stylesheet_tree)
        paths = write_baseline(result.baseline, stylesheet_tree / 'build/css-audit')
        out = stylesheet_tree / 'build/css-audit/duplicate-report.md'

        code = main(['--baseline', str(paths['json']), '--out', str(out)])
        assert code == 0
        assert '### Token: --spice-accent' in out.read_text(encoding='utf-8')
        assert 'properties: 1 exact, 1 near-duplicate groups' in capsys.readouterr().out

    def test_missing_baseline(self, tmp_path, monkeypatch):
        """Test a missing baseline exits 1."""
        monkeypatch.chdir(tmp_path)
        assert main(['--baseline', 'nope.json', '--out', 'r.md']) == 1
