"""
Pipeline Configuration

Environment-driven settings shared by every stage: where sources live,
where audit artifacts are written, which files count as stylesheets,
and whether verbose diagnostics are printed.
"""

import json
import os
from pathlib import Path

from .constants import ExtractionDefaults, OutputDefaults, RewriteDefaults


def _env_list(name: str, default: tuple) -> tuple:
    raw = os.getenv(name, '')
    if not raw.strip():
        return default
    return tuple(part.strip() for part in raw.split(',') if part.strip())


class PipelineConfig:
    """Configuration for the extract / analyze / rewrite stages."""

    # Debug mode - set TOKEN_AUDIT_DEBUG=1 to enable verbose output
    DEBUG = os.environ.get('TOKEN_AUDIT_DEBUG', '').lower() in ('1', 'true', 'yes')

    # Inputs
    SOURCE_ROOT = os.getenv('TOKEN_AUDIT_ROOT', ExtractionDefaults.SOURCE_ROOT)
    EXTENSIONS = _env_list('TOKEN_AUDIT_EXTENSIONS', ExtractionDefaults.EXTENSIONS)

    # Outputs
    AUDIT_DIR = os.getenv('TOKEN_AUDIT_DIR', OutputDefaults.AUDIT_DIR)

    # Rewrite engine
    PROTECTED_DIRS = _env_list('TOKEN_AUDIT_PROTECTED', RewriteDefaults.PROTECTED_DIRS)

    # Worker pool for per-file work
    MAX_WORKERS = int(os.getenv('TOKEN_AUDIT_WORKERS', str(os.cpu_count() or 1)))

    @classmethod
    def audit_path(cls, filename: str) -> Path:
        """Path of an artifact inside the audit directory."""
        return Path(cls.AUDIT_DIR) / filename

    @classmethod
    def baseline_json_path(cls) -> Path:
        return cls.audit_path(OutputDefaults.BASELINE_JSON)

    @classmethod
    def report_path(cls) -> Path:
        return cls.audit_path(OutputDefaults.DUPLICATE_REPORT)

    @classmethod
    def replace_map_path(cls) -> Path:
        return cls.audit_path(OutputDefaults.REPLACE_MAP)

    @classmethod
    def alias_plan_path(cls) -> Path:
        return cls.audit_path(OutputDefaults.ALIAS_PLAN)

    @classmethod
    def to_dict(cls) -> dict:
        """Export configuration as dictionary."""
        return {
            'source_root': cls.SOURCE_ROOT,
            'extensions': list(cls.EXTENSIONS),
            'audit_dir': cls.AUDIT_DIR,
            'protected_dirs': list(cls.PROTECTED_DIRS),
            'max_workers': cls.MAX_WORKERS,
            'debug': cls.DEBUG,
        }

    @classmethod
    def print_config(cls):
        """Print current configuration."""
        print("=== Token Audit Configuration ===")
        print(json.dumps(cls.to_dict(), indent=2))
        print("=" * 33)
