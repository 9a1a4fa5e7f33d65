"""
Centralized constants for the token consolidation pipeline.

Named defaults shared by the extractor, analyzer, report tooling and
rewrite engine. Organized by stage into namespace classes.
"""


class ExtractionDefaults:
    EXTENSIONS = ('.scss', '.css')
    SOURCE_ROOT = 'src'
    PROPERTY_SIGIL = '--'
    BLOCK_AT_RULES = ('mixin',)
    FUNCTION_AT_RULES = ('function',)
    MODULE_AT_RULES = ('use', 'forward', 'import')


class AnalysisDefaults:
    EDIT_DISTANCE_THRESHOLD = 3
    MIN_GROUP_FILES = 2
    MIN_CLUSTER_SIZE = 2
    # Most foundational directories first
    DIRECTORY_PRIORITY = (
        'core',
        'layout',
        'components',
        'systems',
        'features',
        'sidebar',
        'search',
    )


class OutputDefaults:
    AUDIT_DIR = 'build/css-audit'
    BASELINE_JSON = 'baseline.json'
    BASELINE_CSV = 'baseline.csv'
    DUPLICATE_REPORT = 'duplicate-report.md'
    REPLACE_MAP = 'replace-map.json'
    ALIAS_PLAN = 'short-term-aliases.json'
    JSON_INDENT = 2


class ReportMarkers:
    TITLE = '# Duplicate & Near-Duplicate Token Report'
    PLACEHOLDER = '_merge | alias | ignore_'
    NO_EXACT = '_No exact duplicates found._'
    NO_NEAR = '_No near-duplicate names found._'


class RewriteDefaults:
    PROTECTED_DIRS = ('core',)
