"""
Rewrite Models - Inputs and outputs of the rewrite engine

- ReplaceMap: old token name -> new token name, driving rename runs
- AliasPlan: file -> token names removed by a prune run
- RewriteSummary: per-file change counts of a rename or prune run
"""

import json
from typing import Dict, List

from pydantic import BaseModel, Field, computed_field, field_validator

from ..constants import OutputDefaults


class ReplaceMap(BaseModel):
    """
    Old -> new token names

    Pairs whose old and new names are equal are dropped; entries are
    kept sorted by old name for deterministic diffs.
    """

    mapping: Dict[str, str] = Field(default_factory=dict, description="old name -> new name")

    @field_validator('mapping')
    @classmethod
    def drop_identity_pairs(cls, v):
        return {
            old: v[old]
            for old in sorted(v)
            if old and v[old] and old != v[old]
        }

    @classmethod
    def from_pairs(cls, pairs) -> 'ReplaceMap':
        """Collapse (old, new) pairs; the last pair for an old name wins"""
        collected: Dict[str, str] = {}
        for old, new in pairs:
            collected[old] = new
        return cls(mapping=collected)

    def to_json(self) -> str:
        return json.dumps(self.mapping, indent=OutputDefaults.JSON_INDENT) + '\n'

    def items(self):
        return self.mapping.items()

    def __len__(self) -> int:
        return len(self.mapping)


class AliasPlan(BaseModel):
    """
    Declarations removed by a prune run, grouped by file

    Kept for review so temporary backward-compatible aliases can be
    added by hand; never applied automatically.
    """

    removed: Dict[str, List[str]] = Field(
        default_factory=dict,
        description="file path -> removed token names",
    )

    def record(self, path: str, token: str) -> None:
        names = self.removed.setdefault(path, [])
        if token not in names:
            names.append(token)

    def to_json(self) -> str:
        ordered = {path: sorted(self.removed[path]) for path in sorted(self.removed)}
        return json.dumps(ordered, indent=OutputDefaults.JSON_INDENT) + '\n'

    @computed_field
    @property
    def total_removed(self) -> int:
        return sum(len(names) for names in self.removed.values())


class FileChange(BaseModel):
    """Changes found in one file"""
    path: str = Field(..., description="File path as reported to the user")
    replacements: int = Field(..., ge=1, description="Number of substitutions or deletions")


class RewriteSummary(BaseModel):
    """Outcome of a rewrite run across a tree"""

    changes: List[FileChange] = Field(default_factory=list, description="Files with at least one change")
    scanned_files: int = Field(0, ge=0, description="Files examined")
    written: bool = Field(False, description="Whether changes were committed to disk")

    @computed_field
    @property
    def total_replacements(self) -> int:
        return sum(c.replacements for c in self.changes)

    @computed_field
    @property
    def changed_files(self) -> int:
        return len(self.changes)

    def counts(self) -> Dict[str, int]:
        return {c.path: c.replacements for c in self.changes}
