"""
DuplicateGroup Model - Tokens declared in more than one stylesheet

A group is either an exact-name collision (one name, several files) or a
near-duplicate cluster (several similar names). Each group carries the
canonical file chosen to keep the declaration and a disposition deciding
whether the rewrite engine acts on it.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field, computed_field, field_validator, model_validator

from .tokens import TokenKind


class MatchType(str, Enum):
    """How the group members were matched"""
    EXACT = "exact"   # Same name in several files
    NEAR = "near"     # Names within the edit-distance threshold


class Disposition(str, Enum):
    """Decision recorded in the report for a group"""
    MERGE = "merge"
    ALIAS = "alias"
    IGNORE = "ignore"
    UNSET = "unset"

    @classmethod
    def choices(cls) -> List[str]:
        """Values a reviewer may assign"""
        return [d.value for d in cls if d is not cls.UNSET]


class DuplicateGroup(BaseModel):
    """
    Group of token declarations that should share one canonical source

    Derived from a baseline on every analyzer run; never stored apart
    from the report it is rendered into.
    """

    kind: TokenKind = Field(..., description="Kind shared by every member name")
    match_type: MatchType = Field(..., description="Exact collision or near-duplicate cluster")
    names: List[str] = Field(
        ...,
        min_length=1,
        description="Member names; exactly one for exact groups",
    )
    files: List[str] = Field(
        ...,
        min_length=2,
        description="Declaring files in sorted order",
    )
    canonical: str = Field(..., description="File kept as the authoritative declaration site")
    disposition: Disposition = Field(
        Disposition.UNSET,
        description="Reviewer decision gating the rewrite engine",
    )

    model_config = {
        'json_schema_extra': {
            'example': {
                'kind': 'property',
                'match_type': 'exact',
                'names': ['--spice-accent'],
                'files': ['src/core/_tokens.scss', 'src/features/_card.scss'],
                'canonical': 'src/core/_tokens.scss',
                'disposition': 'merge',
            }
        }
    }

    @field_validator('files')
    @classmethod
    def validate_distinct_files(cls, v):
        """A file appears once; single-file tokens never form a group"""
        if len(set(v)) != len(v):
            raise ValueError('files must not repeat')
        if len(v) < 2:
            raise ValueError('A duplicate group must span at least 2 files')
        return v

    @model_validator(mode='after')
    def validate_shape(self):
        if self.canonical not in self.files:
            raise ValueError('canonical must be one of files')
        if self.match_type == MatchType.EXACT and len(self.names) != 1:
            raise ValueError('An exact duplicate group has exactly one name')
        if self.match_type == MatchType.NEAR and len(set(self.names)) < 2:
            raise ValueError('A near-duplicate group needs at least 2 distinct names')
        return self

    @computed_field
    @property
    def representative_name(self) -> str:
        return self.names[0]

    @computed_field
    @property
    def redundant_files(self) -> List[str]:
        """Member files other than the canonical one"""
        return [f for f in self.files if f != self.canonical]

    @property
    def is_actionable(self) -> bool:
        """True when the prune pass should delete the redundant declarations"""
        return (
            self.disposition == Disposition.MERGE
            and self.match_type == MatchType.EXACT
            and self.kind == TokenKind.PROPERTY
        )
