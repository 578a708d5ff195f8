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

"""Syntax tree produced by the template parser.

Both dialects parse into the same four node types.  Every node keeps the
raw text of its own tokens, so :meth:`raw` reproduces the original source
for any subtree a pass leaves untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class Dialect(str, Enum):
    """Concrete syntax a directive was written in."""

    XML = "xml"
    HANDLEBARS = "handlebars"


class Directive(str, Enum):
    """Directive kinds, in the order they are expanded."""

    LOOP = "loop"
    CONDITIONAL = "conditional"
    VARIABLE = "variable"


@dataclass
class Text:
    """Literal markup copied to the output unchanged."""

    text: str

    def raw(self) -> str:
        return self.text


@dataclass
class Variable:
    key: str
    dialect: Dialect
    source: str

    def raw(self) -> str:
        return self.source


@dataclass
class Branch:
    """One segment of a conditional.

    Attributes:
        condition: Path to test, or ``None`` for an else segment.
        marker: Raw text of the opening tag or else/else-if marker.
        body: Nodes between this marker and the next one.
    """

    condition: str | None
    marker: str
    body: list[Node] = field(default_factory=list)

    @property
    def is_else(self) -> bool:
        return self.condition is None


@dataclass
class Conditional:
    """An if / else-if / else chain.

    ``segments`` keeps branches in textual order, else segments included,
    so the source can be reproduced exactly.
    """

    dialect: Dialect
    segments: list[Branch]
    closer: str

    @property
    def branches(self) -> list[Branch]:
        """Conditional branches in evaluation order."""
        return [seg for seg in self.segments if not seg.is_else]

    @property
    def default(self) -> Branch | None:
        """The last else segment, if any."""
        for seg in reversed(self.segments):
            if seg.is_else:
                return seg
        return None

    def raw(self) -> str:
        parts = []
        for seg in self.segments:
            parts.append(seg.marker)
            parts.append(raw_source(seg.body))
        parts.append(self.closer)
        return "".join(parts)


@dataclass
class Loop:
    key: str
    dialect: Dialect
    opener: str
    closer: str
    body: list[Node] = field(default_factory=list)

    def raw(self) -> str:
        return self.opener + raw_source(self.body) + self.closer


Node = Union[Text, Variable, Conditional, Loop]


def raw_source(nodes: list[Node]) -> str:
    """Reassemble the source text of a node list."""
    return "".join(node.raw() for node in nodes)
