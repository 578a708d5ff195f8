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

"""Evaluate a parsed template against a context.

Expansion order:

1. Loops.  A loop body is rendered once per element with the element as
   the only scope, so conditionals and variables inside the body see the
   element's fields and nothing else.
2. Conditionals.  Branches are tested in textual order and the first
   truthy one is rendered; otherwise the else content, or nothing.
3. Variables.  Replaced by the text form of the resolved value.

:func:`render_string` does all three in a single walk over one parse.
:func:`expand_loops`, :func:`expand_conditionals` and
:func:`substitute_variables` each handle only their own directive kind
and leave everything else as source text, so chaining them in that order
yields the same result for templates whose context values contain no
directive syntax.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from viewkit.templates.errors import TemplateValueError
from viewkit.templates.nodes import (
    Conditional,
    Directive,
    Loop,
    Node,
    Text,
    Variable,
)
from viewkit.templates.parser import parse
from viewkit.templates.paths import (
    is_missing,
    is_sequence,
    is_truthy,
    resolve_path,
    stringify,
)

logger = logging.getLogger(__name__)

ALL_DIRECTIVES = frozenset(Directive)


class Evaluator:
    """Render node trees against a scope.

    Args:
        directives: Directive kinds to expand.  Nodes of any other kind are
            written back as their source text (loops verbatim, conditionals
            with their bodies still evaluated).
        strict: Raise :class:`TemplateValueError` instead of substituting
            empty content for missing variables and invalid loop sources.
    """

    def __init__(
        self,
        directives: frozenset[Directive] = ALL_DIRECTIVES,
        *,
        strict: bool = False,
    ) -> None:
        self.directives = frozenset(directives)
        self.strict = strict

    def render(self, nodes: list[Node], scope: Any) -> str:
        return "".join(self._render_node(node, scope) for node in nodes)

    def _render_node(self, node: Node, scope: Any) -> str:
        if isinstance(node, Text):
            return node.text
        if isinstance(node, Variable):
            if Directive.VARIABLE not in self.directives:
                return node.raw()
            return self._substitute(node, scope)
        if isinstance(node, Conditional):
            if Directive.CONDITIONAL not in self.directives:
                return "".join(
                    seg.marker + self.render(seg.body, scope) for seg in node.segments
                ) + node.closer
            return self._choose_branch(node, scope)
        if isinstance(node, Loop):
            if Directive.LOOP not in self.directives:
                return node.raw()
            return self._expand_loop(node, scope)
        raise TypeError(f"Unknown template node: {node!r}")

    # --- Directives ---------------------------------------------------------

    def _substitute(self, node: Variable, scope: Any) -> str:
        value = resolve_path(scope, node.key)
        if is_missing(value) and self.strict:
            raise TemplateValueError(f"Missing value for variable {node.key!r}")
        return stringify(value, strict=self.strict, path=node.key)

    def _choose_branch(self, node: Conditional, scope: Any) -> str:
        for branch in node.branches:
            if is_truthy(resolve_path(scope, branch.condition)):
                return self.render(branch.body, scope)
        default = node.default
        if default is None:
            return ""
        return self.render(default.body, scope)

    def _expand_loop(self, node: Loop, scope: Any) -> str:
        items = resolve_path(scope, node.key)
        if not is_sequence(items):
            if self.strict:
                raise TemplateValueError(f"Loop source {node.key!r} is not a sequence")
            logger.warning("%r is not a sequence or is undefined", node.key)
            return ""
        # The element is the whole scope of the body, at every directive kind.
        body = Evaluator(ALL_DIRECTIVES, strict=self.strict)
        return "".join(
            body.render(node.body, item if isinstance(item, Mapping) else {})
            for item in items
        )


def render_nodes(nodes: list[Node], context: Mapping[str, Any] | None = None, *, strict: bool = False) -> str:
    """Render an already-parsed template."""
    return Evaluator(strict=strict).render(nodes, context or {})


def render_string(source: str, context: Mapping[str, Any] | None = None, *, strict: bool = False) -> str:
    """Resolve every directive in *source* against *context*."""
    return render_nodes(parse(source), context, strict=strict)


def expand_loops(source: str, context: Mapping[str, Any] | None = None, *, strict: bool = False) -> str:
    """Expand loop directives of both dialects; leave everything else as source."""
    evaluator = Evaluator(frozenset({Directive.LOOP}), strict=strict)
    return evaluator.render(parse(source), context or {})


def expand_conditionals(source: str, context: Mapping[str, Any] | None = None, *, strict: bool = False) -> str:
    """Expand conditional directives of both dialects.

    Loops still present in *source* are copied through untouched, since
    their bodies belong to per-element scopes.
    """
    evaluator = Evaluator(frozenset({Directive.CONDITIONAL}), strict=strict)
    return evaluator.render(parse(source), context or {})


def substitute_variables(source: str, context: Mapping[str, Any] | None = None, *, strict: bool = False) -> str:
    """Replace bare variable directives of both dialects with their values."""
    evaluator = Evaluator(frozenset({Directive.VARIABLE}), strict=strict)
    return evaluator.render(parse(source), context or {})
