"""
Duplicate Analyzer Configuration

Threshold and directory ranking used by the analyzer. Passed in at
construction so callers and tests can swap rankings without touching
module state.
"""

import json
import os
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..constants import AnalysisDefaults


class AnalyzerConfig(BaseModel):
    """Configuration for exact and near-duplicate grouping."""

    model_config = ConfigDict(frozen=True)

    # Near-duplicate clustering: max edit distance between two names
    threshold: int = Field(
        AnalysisDefaults.EDIT_DISTANCE_THRESHOLD,
        ge=0,
        description="Maximum edit distance for two names to be near-duplicates",
    )

    # Canonical selection: directories ranked most foundational first
    directory_priority: Tuple[str, ...] = Field(
        AnalysisDefaults.DIRECTORY_PRIORITY,
        description="Directory names, most preferred first; unmatched paths rank last",
    )

    @field_validator('directory_priority')
    @classmethod
    def normalize_priority(cls, v):
        cleaned = tuple(d.strip().strip('/') for d in v if d and d.strip().strip('/'))
        if len(set(cleaned)) != len(cleaned):
            raise ValueError('directory_priority entries must be unique')
        return cleaned

    @classmethod
    def from_env(cls) -> 'AnalyzerConfig':
        """Defaults overridden by TOKEN_AUDIT_THRESHOLD / TOKEN_AUDIT_PRIORITY."""
        values = {}
        threshold = os.getenv('TOKEN_AUDIT_THRESHOLD')
        if threshold:
            values['threshold'] = int(threshold)
        priority = os.getenv('TOKEN_AUDIT_PRIORITY')
        if priority:
            values['directory_priority'] = tuple(priority.split(','))
        return cls(**values)

    def to_dict(self) -> dict:
        """Export configuration as dictionary."""
        return {
            'near_duplicates': {
                'threshold': self.threshold,
            },
            'canonical': {
                'directory_priority': list(self.directory_priority),
                'unmatched_rank': len(self.directory_priority),
            },
        }

    def print_config(self):
        """Print current configuration."""
        print("=== Duplicate Analyzer Configuration ===")
        print(json.dumps(self.to_dict(), indent=2))
        print("=" * 40)
