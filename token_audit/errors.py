"""Error taxonomy for the token consolidation pipeline."""

from __future__ import annotations


class TokenAuditError(Exception):
    """Base class for pipeline errors."""


class InputError(TokenAuditError):
    """A required input (root directory, report, mapping) is missing or unreadable."""


class StylesheetParseError(TokenAuditError):
    """A single stylesheet could not be scanned.

    The extractor catches this per file, reports it and leaves the file
    out of the baseline.
    """

    def __init__(self, reason: str, path: str | None = None, line: int | None = None) -> None:
        self.reason = reason
        self.path = path
        self.line = line
        super().__init__(self._format())

    def _format(self) -> str:
        location = self.path or '<string>'
        if self.line is not None:
            location = f"{location}:{self.line}"
        return f"{location}: {self.reason}"

    def with_path(self, path: str) -> StylesheetParseError:
        """Return a copy of this error bound to a file path."""
        return StylesheetParseError(self.reason, path=path, line=self.line)
