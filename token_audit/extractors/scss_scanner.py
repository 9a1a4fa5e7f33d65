"""
SCSS Structural Scanner

Splits SCSS/CSS source into statements and nested blocks without
evaluating anything. Produces a flat list of declarations and at-rules
found at every nesting depth, which is all the token extractor needs.

Handles:
- block comments and // line comments (outside strings and parentheses)
- quoted strings with backslash escapes
- #{...} interpolation, whose braces never open or close a block
- declarations without a trailing semicolon before a closing brace
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union

from ..errors import StylesheetParseError


@dataclass(frozen=True)
class Declaration:
    """A `prop: value` statement."""
    prop: str
    value: str
    line: int


@dataclass(frozen=True)
class AtRule:
    """An `@name params` statement or block header."""
    name: str
    params: str
    line: int
    has_block: bool = False


Statement = Union[Declaration, AtRule]


class _StatementBuffer:
    """Accumulates the characters of the statement being read."""

    def __init__(self) -> None:
        self.chars: list[str] = []
        self.line: int | None = None

    def add(self, ch: str, line: int) -> None:
        if self.line is None and not ch.isspace():
            self.line = line
        self.chars.append(ch)

    def ends_with(self, word: str) -> bool:
        """True when the buffered text ends in word, case-insensitively"""
        tail = self.chars[-len(word):]
        return len(tail) == len(word) and ''.join(tail).lower() == word

    def take(self) -> tuple[str, int]:
        text = ''.join(self.chars).strip()
        line = self.line or 0
        self.chars = []
        self.line = None
        return text, line


def _classify(text: str, line: int, has_block: bool) -> Statement | None:
    """Turn raw statement text into a Declaration, AtRule or nothing."""
    if not text:
        return None

    if text.startswith('@'):
        body = text[1:]
        name_end = 0
        while name_end < len(body) and (body[name_end].isalnum() or body[name_end] in '-_'):
            name_end += 1
        name = body[:name_end].lower()
        if not name:
            return None
        return AtRule(name=name, params=body[name_end:].strip(), line=line, has_block=has_block)

    # Block headers that are not at-rules are selectors
    if has_block:
        return None

    colon = text.find(':')
    if colon <= 0:
        return None
    prop = text[:colon].strip()
    if not prop or any(ch.isspace() for ch in prop):
        return None
    return Declaration(prop=prop, value=text[colon + 1:].strip(), line=line)


def scan_statements(source: str) -> List[Statement]:
    """
    Scan stylesheet source into declarations and at-rules.

    Args:
        source: Full text of one SCSS or CSS file

    Returns:
        Statements in source order, from every nesting depth

    Raises:
        StylesheetParseError: unterminated comment or string, a closing
            brace without an opening one, or a block left open at EOF
    """
    statements: List[Statement] = []
    buf = _StatementBuffer()
    open_blocks: list[int] = []
    interpolation_depth = 0
    paren_depth = 0
    # Paren depth of the open url(...), 0 outside one
    url_depth = 0

    line = 1
    i = 0
    n = len(source)

    def emit(has_block: bool) -> None:
        text, start_line = buf.take()
        statement = _classify(text, start_line, has_block)
        if statement is not None:
            statements.append(statement)

    while i < n:
        ch = source[i]
        nxt = source[i + 1] if i + 1 < n else ''

        # Block comment
        if ch == '/' and nxt == '*':
            start_line = line
            end = source.find('*/', i + 2)
            if end == -1:
                raise StylesheetParseError('unterminated comment', line=start_line)
            line += source.count('\n', i, end)
            i = end + 2
            continue

        # Line comment (SCSS); `//` inside url(...) is part of the value
        if ch == '/' and nxt == '/' and not url_depth:
            end = source.find('\n', i)
            i = n if end == -1 else end
            continue

        # Quoted string
        if ch in ('"', "'"):
            start_line = line
            j = i + 1
            while j < n and source[j] != ch:
                if source[j] == '\\':
                    j += 1
                elif source[j] == '\n':
                    line += 1
                j += 1
            if j >= n:
                raise StylesheetParseError('unterminated string', line=start_line)
            for k in range(i, j + 1):
                buf.add(source[k], start_line)
            i = j + 1
            continue

        if ch == '\n':
            line += 1
            buf.add(ch, line)
            i += 1
            continue

        if ch == '#' and nxt == '{':
            interpolation_depth += 1
            buf.add(ch, line)
            buf.add(nxt, line)
            i += 2
            continue

        if ch == '(':
            paren_depth += 1
            if not url_depth and buf.ends_with('url'):
                url_depth = paren_depth
        elif ch == ')' and paren_depth > 0:
            if paren_depth == url_depth:
                url_depth = 0
            paren_depth -= 1

        if interpolation_depth > 0:
            if ch == '{':
                interpolation_depth += 1
            elif ch == '}':
                interpolation_depth -= 1
            buf.add(ch, line)
            i += 1
            continue

        if ch == ';' and paren_depth == 0:
            emit(has_block=False)
        elif ch == '{':
            open_blocks.append(line)
            emit(has_block=True)
            paren_depth = url_depth = 0
        elif ch == '}':
            if not open_blocks:
                raise StylesheetParseError("unexpected '}'", line=line)
            emit(has_block=False)
            open_blocks.pop()
            paren_depth = url_depth = 0
        else:
            buf.add(ch, line)
        i += 1

    if interpolation_depth > 0:
        raise StylesheetParseError('unterminated interpolation', line=line)
    if open_blocks:
        raise StylesheetParseError(f"unclosed block opened at line {open_blocks[-1]}", line=line)

    emit(has_block=False)
    return statements
