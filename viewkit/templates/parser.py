# viewkit — dual-dialect markup templates with component expansion
# Copyright (C) 2024-2026 Dr Horst Herb
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program.  If not, see <https://www.gnu.org/licenses/>.

"""Tokenizer and tree builder for both template dialects.

Handlebars-style::

    {{ key }}
    {{#if path}} … {{else if path}} … {{else}} … {{/if}}
    {{#each key}} … {{/each}}

XML-style::

    <text data="key" />
    <if data="path"> … <elseif data="path" /> … <else /> … </if>
    <each data="key"> … </each>

Each dialect contributes its own token table; the two tables are merged
into one scanner so that the dialects can be mixed freely in a document.
Openers only pair with closers of the same dialect and kind, and else /
else-if markers only attach to the innermost open block when that block is
a conditional of their own dialect.

Malformed input never raises.  An opener without a matching closer, a
stray closer, and a marker outside a conditional of its dialect are all
kept as literal text.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum

from viewkit.templates.nodes import (
    Branch,
    Conditional,
    Dialect,
    Loop,
    Node,
    Text,
    Variable,
)

_KEY = r"(\w+)"
_PATH = r"(\w+(?:\.\w+)*)"


class TokenKind(str, Enum):
    VARIABLE = "variable"
    IF_OPEN = "if_open"
    ELSE_IF = "else_if"
    ELSE = "else"
    IF_CLOSE = "if_close"
    EACH_OPEN = "each_open"
    EACH_CLOSE = "each_close"


_HANDLEBARS_TOKENS: list[tuple[TokenKind, str]] = [
    (TokenKind.IF_OPEN, r"\{\{\s*#if\s+" + _PATH + r"\s*\}\}"),
    (TokenKind.ELSE_IF, r"\{\{\s*else\s+if\s+" + _PATH + r"\s*\}\}"),
    (TokenKind.ELSE, r"\{\{\s*else\s*\}\}"),
    (TokenKind.IF_CLOSE, r"\{\{\s*/if\s*\}\}"),
    (TokenKind.EACH_OPEN, r"\{\{\s*#each\s+" + _KEY + r"\s*\}\}"),
    (TokenKind.EACH_CLOSE, r"\{\{\s*/each\s*\}\}"),
    (TokenKind.VARIABLE, r"\{\{\s*(?!(?:if|each|else)\s*\}\})" + _KEY + r"\s*\}\}"),
]

_XML_TOKENS: list[tuple[TokenKind, str]] = [
    (TokenKind.IF_OPEN, r'<if\s+data="' + _PATH + r'"\s*>'),
    (TokenKind.ELSE_IF, r'<elseif\s+data="' + _PATH + r'"\s*/?>'),
    (TokenKind.ELSE, r"<else\s*/?>"),
    (TokenKind.IF_CLOSE, r"</if\s*>"),
    (TokenKind.EACH_OPEN, r'<each\s+data="' + _KEY + r'"\s*>'),
    (TokenKind.EACH_CLOSE, r"</each\s*>"),
    (TokenKind.VARIABLE, r'<text\s+data="' + _KEY + r'"\s*/>'),
]

_DIALECT_TOKENS = {
    Dialect.XML: _XML_TOKENS,
    Dialect.HANDLEBARS: _HANDLEBARS_TOKENS,
}

_OPENER_FOR = {
    TokenKind.IF_CLOSE: TokenKind.IF_OPEN,
    TokenKind.EACH_CLOSE: TokenKind.EACH_OPEN,
}


def _build_scanner() -> tuple[re.Pattern[str], dict[str, tuple[Dialect, TokenKind]]]:
    alternatives = []
    groups: dict[str, tuple[Dialect, TokenKind]] = {}
    for dialect, table in _DIALECT_TOKENS.items():
        for kind, pattern in table:
            name = f"{dialect.value}_{kind.value}"
            alternatives.append(f"(?P<{name}>{pattern})")
            groups[name] = (dialect, kind)
    return re.compile("|".join(alternatives)), groups


_SCANNER, _GROUPS = _build_scanner()

# Group numbers shift inside the merged scanner, so arguments are re-read
# with the token's own pattern.
_ARG_PATTERNS = {
    (dialect, kind): re.compile(pattern)
    for dialect, table in _DIALECT_TOKENS.items()
    for kind, pattern in table
}


@dataclass
class Token:
    kind: TokenKind
    dialect: Dialect
    source: str
    arg: str | None = None


def tokenize(source: str) -> list[Token | str]:
    """Split *source* into literal strings and directive tokens."""
    items: list[Token | str] = []
    pos = 0
    for match in _SCANNER.finditer(source):
        name = match.lastgroup
        dialect, kind = _GROUPS[name]
        raw = match.group(name)
        if match.start() > pos:
            items.append(source[pos:match.start()])
        arg_match = _ARG_PATTERNS[(dialect, kind)].fullmatch(raw)
        arg = arg_match.group(1) if arg_match and arg_match.groups() else None
        items.append(Token(kind=kind, dialect=dialect, source=raw, arg=arg))
        pos = match.end()
    if pos < len(source):
        items.append(source[pos:])
    return items


# ---------------------------------------------------------------------------
# Tree building
# ---------------------------------------------------------------------------


@dataclass
class _Frame:
    """An open block waiting for its closer."""

    opener: Token | None
    segments: list[Branch] = field(default_factory=list)

    @property
    def nodes(self) -> list[Node]:
        return self.segments[-1].body

    def accepts_marker(self, token: Token) -> bool:
        return (
            self.opener is not None
            and self.opener.kind is TokenKind.IF_OPEN
            and self.opener.dialect is token.dialect
        )

    def matches_closer(self, token: Token) -> bool:
        return (
            self.opener is not None
            and self.opener.kind is _OPENER_FOR[token.kind]
            and self.opener.dialect is token.dialect
        )


def _append(nodes: list[Node], node: Node) -> None:
    if isinstance(node, Text) and nodes and isinstance(nodes[-1], Text):
        nodes[-1] = Text(nodes[-1].text + node.text)
    else:
        nodes.append(node)


def _open_frame(token: Token) -> _Frame:
    return _Frame(opener=token, segments=[Branch(condition=token.arg, marker=token.source)])


def _close_frame(frame: _Frame, closer: Token) -> Node:
    opener = frame.opener
    if opener.kind is TokenKind.EACH_OPEN:
        return Loop(
            key=opener.arg,
            dialect=opener.dialect,
            opener=opener.source,
            closer=closer.source,
            body=frame.segments[0].body,
        )
    return Conditional(dialect=opener.dialect, segments=frame.segments, closer=closer.source)


def _abandon_frame(frame: _Frame, into: list[Node]) -> None:
    """Spill an unclosed block into its parent as literal markers plus children."""
    for seg in frame.segments:
        _append(into, Text(seg.marker))
        for node in seg.body:
            _append(into, node)


def parse(source: str) -> list[Node]:
    """Parse template *source* into a list of nodes."""
    stack: list[_Frame] = [_Frame(opener=None, segments=[Branch(condition=None, marker="")])]

    for item in tokenize(source):
        top = stack[-1]
        if isinstance(item, str):
            _append(top.nodes, Text(item))
            continue

        kind = item.kind
        if kind is TokenKind.VARIABLE:
            _append(top.nodes, Variable(key=item.arg, dialect=item.dialect, source=item.source))
        elif kind in (TokenKind.IF_OPEN, TokenKind.EACH_OPEN):
            stack.append(_open_frame(item))
        elif kind in (TokenKind.ELSE_IF, TokenKind.ELSE):
            if top.accepts_marker(item):
                top.segments.append(Branch(condition=item.arg, marker=item.source))
            else:
                _append(top.nodes, Text(item.source))
        else:
            depth = next(
                (i for i in range(len(stack) - 1, 0, -1) if stack[i].matches_closer(item)),
                None,
            )
            if depth is None:
                _append(top.nodes, Text(item.source))
                continue
            while len(stack) - 1 > depth:
                orphan = stack.pop()
                _abandon_frame(orphan, stack[-1].nodes)
            frame = stack.pop()
            _append(stack[-1].nodes, _close_frame(frame, item))

    while len(stack) > 1:
        orphan = stack.pop()
        _abandon_frame(orphan, stack[-1].nodes)

    return stack[0].nodes
