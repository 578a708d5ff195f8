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

"""Turn rendered markup into a single root element."""

from __future__ import annotations

import logging

from bs4 import NavigableString, Tag

from viewkit.components.registry import ComponentLookup, expand_components, parse_markup
from viewkit.templates.errors import TemplateStructureError

logger = logging.getLogger(__name__)


def _first_element(container: Tag) -> Tag | None:
    for child in container.children:
        if isinstance(child, Tag):
            return child
    return None


def materialize(markup: str, components: ComponentLookup | None = None) -> Tag:
    """Parse *markup* and return its first top-level element.

    Leading and trailing whitespace is trimmed first.  Other top-level
    content is discarded with a warning.  When a component
    lookup is given, registered custom tags in the fragment (the root
    included) are expanded before returning.

    Raises :class:`TemplateStructureError` if the markup contains no
    element at all.
    """
    soup = parse_markup(markup.strip())
    root = _first_element(soup)
    if root is None:
        raise TemplateStructureError("Rendered template has no root element")

    extra = [
        child for child in soup.children
        if child is not root
        and not (isinstance(child, NavigableString) and not child.strip())
    ]
    if extra:
        logger.warning(
            "Discarding %d top-level node(s) beside root <%s>", len(extra), root.name,
        )

    if components is not None:
        expand_components(soup, components)
        root = _first_element(soup)
        if root is None:
            raise TemplateStructureError("Component expansion left no root element")

    return root.extract()
