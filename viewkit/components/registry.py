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

"""Custom-tag component registry.

Components are registered under a custom tag name and expanded inside a
rendered fragment.  A component is any callable taking a props dict and
returning either a :class:`bs4.Tag` or a markup string::

    def card(props, /):
        return f'<div class="card"><h3>{props.get("title", "")}</h3></div>'

    registry = ComponentRegistry()
    registry.register("c-card", card)
    registry.render_components(fragment)

Props are parsed from the tag's attributes: JSON objects and arrays are
decoded, ``"true"``/``"false"`` become booleans, numeric strings become
numbers, and kebab-case names become camelCase.  Non-blank inner markup is
passed as ``children``.

Registries are plain instances; the template engine receives one (or just
its :meth:`ComponentRegistry.get`) rather than consulting global state.
"""

from __future__ import annotations

import json
import logging
import math
import re
from collections.abc import Callable
from typing import Any

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)

Component = Callable[[dict[str, Any]], "Tag | str"]
ComponentLookup = Callable[[str], "Component | None"]

_KEBAB = re.compile(r"-([a-z])")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
_INTEGER = re.compile(r"[+-]?[0-9]+")
_RADIX = re.compile(r"0([xXoObB])([0-9a-fA-F]+)")
_RADIX_BASES = {"x": 16, "o": 8, "b": 2}
_INFINITY = re.compile(r"([+-]?)Infinity")


def parse_markup(markup: str) -> BeautifulSoup:
    """Parse an HTML fragment, keeping every attribute value a plain string."""
    return BeautifulSoup(markup, "html.parser", multi_valued_attributes=None)


def _coerce_number(value: str) -> int | float | None:
    """Read *value* the way a JavaScript ``Number()`` call would, or ``None``."""
    text = value.strip()
    if not text:
        return None
    if _DECIMAL.fullmatch(text):
        if _INTEGER.fullmatch(text):
            return int(text)
        return float(text)
    radix = _RADIX.fullmatch(text)
    if radix:
        try:
            return int(radix.group(2), _RADIX_BASES[radix.group(1).lower()])
        except ValueError:
            return None
    infinity = _INFINITY.fullmatch(text)
    if infinity:
        return -math.inf if infinity.group(1) == "-" else math.inf
    return None


def _coerce_attribute(value: str) -> Any:
    if value.startswith(("{", "[")):
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            return value
    if value in ("true", "false"):
        return value == "true"
    number = _coerce_number(value)
    return value if number is None else number


def parse_props(element: Tag) -> dict[str, Any]:
    """Convert a custom tag's attributes and inner markup into props."""
    props: dict[str, Any] = {}
    for name, value in element.attrs.items():
        if isinstance(value, list):
            value = " ".join(value)
        prop_name = _KEBAB.sub(lambda m: m.group(1).upper(), name)
        props[prop_name] = _coerce_attribute(value)

    children = element.decode_contents()
    if children.strip():
        props["children"] = children
    return props


def _as_nodes(rendered: Tag | str) -> list[Any]:
    if isinstance(rendered, Tag):
        return [rendered]
    return list(parse_markup(str(rendered)).contents)


def expand_components(container: Tag, lookup: ComponentLookup) -> None:
    """Replace every registered custom tag inside *container*.

    Tags are expanded innermost first, so a component receiving
    ``children`` sees them already expanded.  Output of a component is not
    scanned again.
    """
    candidates = container.find_all(lambda tag: "-" in tag.name)
    for element in reversed(candidates):
        component = lookup(element.name)
        if component is None:
            continue
        nodes = _as_nodes(component(parse_props(element)))
        if not nodes:
            element.decompose()
            continue
        element.replace_with(*nodes)


class ComponentRegistry:
    """Maps custom tag names to components."""

    def __init__(self) -> None:
        self._components: dict[str, Component] = {}

    def register(self, tag_name: str, component: Component) -> None:
        """Register *component* under *tag_name*.

        Raises :class:`ValueError` if the name lacks a hyphen, as custom
        element names must contain one.
        """
        if "-" not in tag_name:
            raise ValueError(
                f"Invalid component tag name {tag_name!r}. "
                "Custom element names must contain a hyphen (-)."
            )
        tag_name = tag_name.lower()
        if tag_name in self._components:
            logger.warning("Component %r is already registered. Overwriting...", tag_name)
        self._components[tag_name] = component

    def has(self, tag_name: str) -> bool:
        return tag_name.lower() in self._components

    def get(self, tag_name: str) -> Component | None:
        return self._components.get(tag_name.lower())

    def tags(self) -> list[str]:
        """Return registered tag names in registration order."""
        return list(self._components)

    def create(self, tag_name: str, props: dict[str, Any]) -> Tag | str | None:
        """Render a component directly, or return ``None`` if unregistered."""
        component = self.get(tag_name)
        if component is None:
            logger.error("Component %r is not registered", tag_name)
            return None
        return component(props)

    def render_components(self, container: Tag) -> None:
        """Expand all registered components inside *container*."""
        expand_components(container, self.get)
