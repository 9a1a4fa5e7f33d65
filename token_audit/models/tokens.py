"""
Token Models - Declared stylesheet symbols and per-file inventories

A Baseline is the persisted snapshot of one extractor run: every scanned
stylesheet mapped to the sorted names it declares, grouped by kind.
"""

import json
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from ..constants import OutputDefaults


class TokenKind(str, Enum):
    """Kind of declared symbol"""
    PROPERTY = "property"      # --custom-property
    BLOCK = "block"            # @mixin name
    FUNCTION = "function"      # @function name
    MODULE_REF = "moduleRef"   # @use "path"

    @property
    def baseline_key(self) -> str:
        """Key under which this kind is serialized in baseline.json"""
        return _BASELINE_KEYS[self]

    @classmethod
    def from_baseline_key(cls, key: str) -> 'TokenKind':
        for kind, value in _BASELINE_KEYS.items():
            if value == key:
                return kind
        raise ValueError(f"Unknown token kind: {key}")


_BASELINE_KEYS = {
    TokenKind.PROPERTY: 'properties',
    TokenKind.BLOCK: 'blocks',
    TokenKind.FUNCTION: 'functions',
    TokenKind.MODULE_REF: 'moduleRefs',
}

# Kinds that participate in duplicate analysis
GROUPED_KINDS = (TokenKind.PROPERTY, TokenKind.BLOCK, TokenKind.FUNCTION)


class Token(BaseModel):
    """A named symbol declared in one stylesheet"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Token name including its sigil")
    kind: TokenKind = Field(..., description="Declaration kind")
    declaring_file: str = Field(..., description="File path relative to the project root")


def _sorted_unique(values: List[str]) -> List[str]:
    return sorted(set(values))


class FileInventory(BaseModel):
    """
    Tokens declared by a single stylesheet

    Each list is de-duplicated and sorted on construction so two
    inventories of the same source always serialize identically.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path: str = Field(..., description="File path relative to the project root")
    properties: List[str] = Field(default_factory=list, description="Custom properties")
    blocks: List[str] = Field(default_factory=list, description="Reusable block (mixin) names")
    functions: List[str] = Field(default_factory=list, description="Function names")
    module_refs: List[str] = Field(
        default_factory=list,
        alias='moduleRefs',
        description="Module reference arguments, de-quoted",
    )

    @field_validator('properties', 'blocks', 'functions', 'module_refs')
    @classmethod
    def normalize_names(cls, v):
        """Drop duplicates and sort"""
        return _sorted_unique(v)

    def names(self, kind: TokenKind) -> List[str]:
        """Sorted names of one kind"""
        return {
            TokenKind.PROPERTY: self.properties,
            TokenKind.BLOCK: self.blocks,
            TokenKind.FUNCTION: self.functions,
            TokenKind.MODULE_REF: self.module_refs,
        }[kind]

    def tokens(self, kind: Optional[TokenKind] = None) -> List[Token]:
        """Declared tokens as Token models, optionally of one kind only"""
        kinds = [kind] if kind is not None else list(TokenKind)
        return [
            Token(name=name, kind=k, declaring_file=self.path)
            for k in kinds
            for name in self.names(k)
        ]

    @computed_field
    @property
    def token_count(self) -> int:
        return sum(len(self.names(kind)) for kind in TokenKind)

    def to_entry(self) -> Dict[str, List[str]]:
        """Serialized form used inside baseline.json"""
        return {kind.baseline_key: list(self.names(kind)) for kind in TokenKind}


class Baseline(BaseModel):
    """
    Per-file token inventory for a whole source tree

    Serialized as baseline.json (file -> lists) and flattened into
    baseline.csv (token -> pipe-separated files).
    """

    files: Dict[str, FileInventory] = Field(
        default_factory=dict,
        description="Inventories keyed by relative file path",
    )

    @field_validator('files')
    @classmethod
    def validate_keys_match_paths(cls, v):
        for key, inventory in v.items():
            if key != inventory.path:
                raise ValueError(f"Inventory key {key!r} does not match its path {inventory.path!r}")
        return v

    @classmethod
    def from_inventories(cls, inventories: List[FileInventory]) -> 'Baseline':
        return cls(files={inv.path: inv for inv in sorted(inventories, key=lambda i: i.path)})

    @classmethod
    def from_dict(cls, data: Dict[str, Dict[str, List[str]]]) -> 'Baseline':
        """Build from the nested mapping stored in baseline.json"""
        inventories = [
            FileInventory(
                path=path,
                properties=entry.get('properties', []),
                blocks=entry.get('blocks', []),
                functions=entry.get('functions', []),
                module_refs=entry.get('moduleRefs', []),
            )
            for path, entry in data.items()
        ]
        return cls.from_inventories(inventories)

    def to_dict(self) -> Dict[str, Dict[str, List[str]]]:
        return {path: self.files[path].to_entry() for path in sorted(self.files)}

    def to_json(self) -> str:
        """Deterministic JSON text (sorted paths, fixed indent, trailing newline)"""
        return json.dumps(self.to_dict(), indent=OutputDefaults.JSON_INDENT) + '\n'

    def invert(self, kind: TokenKind) -> Dict[str, List[str]]:
        """Index one kind as name -> sorted list of declaring files"""
        index: Dict[str, List[str]] = {}
        for path in sorted(self.files):
            for token in self.files[path].tokens(kind):
                index.setdefault(token.name, []).append(token.declaring_file)
        return {name: index[name] for name in sorted(index)}

    def csv_rows(self) -> List[tuple]:
        """(token, files) rows for baseline.csv across grouped kinds"""
        index: Dict[str, set] = {}
        for kind in GROUPED_KINDS:
            for name, files in self.invert(kind).items():
                index.setdefault(name, set()).update(files)
        return [(name, '|'.join(sorted(index[name]))) for name in sorted(index)]

    @computed_field
    @property
    def file_count(self) -> int:
        return len(self.files)
