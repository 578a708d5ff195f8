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

"""Template engine: load, render, materialize.

A render loads the template source (the only awaited step), resolves all
directives against the context, parses the result into one root element
and expands registered components inside it.  Nothing is cached between
renders and the context is never modified, so concurrent renders are
independent of each other.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from bs4 import Tag

from viewkit.components.registry import ComponentRegistry
from viewkit.templates.evaluator import render_string
from viewkit.templates.loader import FileSystemTemplateLoader, TemplateLoader
from viewkit.templates.materializer import materialize

logger = logging.getLogger(__name__)


class TemplateEngine:
    """Render dual-dialect templates into markup elements.

    Args:
        loader: Source of template text.  Defaults to a
            :class:`FileSystemTemplateLoader` over *user_dir* and
            *default_dir*.
        user_dir: User override directory (checked first).
        default_dir: Package default directory (fallback).
        components: Registry whose custom tags are expanded in every
            rendered fragment.
        strict: Fail on missing variables and invalid loop sources instead
            of rendering them as empty content.
    """

    def __init__(
        self,
        loader: TemplateLoader | None = None,
        *,
        user_dir: Path | str | None = None,
        default_dir: Path | str | None = None,
        components: ComponentRegistry | None = None,
        strict: bool = False,
    ) -> None:
        self.loader = loader if loader is not None else FileSystemTemplateLoader(
            user_dir=user_dir, default_dir=default_dir,
        )
        self.components = components
        self.strict = strict

    async def render(self, template_name: str, context: Mapping[str, Any] | None = None) -> Tag:
        """Load *template_name* and render it into a single root element.

        Raises ``TemplateNotFoundError`` if no loader has the template and
        ``TemplateStructureError`` if the rendered markup has no element.
        """
        source = await self.loader.load(template_name)
        return self.render_fragment(source, context)

    def render_markup(self, source: str, context: Mapping[str, Any] | None = None) -> str:
        """Resolve all directives in *source* and return the markup string."""
        return render_string(source, context, strict=self.strict)

    def render_fragment(self, source: str, context: Mapping[str, Any] | None = None) -> Tag:
        markup = self.render_markup(source, context)
        lookup = self.components.get if self.components is not None else None
        return materialize(markup, lookup)

    async def has_template(self, template_name: str) -> bool:
        """Check whether the loader can supply *template_name*."""
        return await self.loader.exists(template_name)

    def install_defaults(self) -> None:
        """Copy default templates into the user directory, if supported."""
        install = getattr(self.loader, "install_defaults", None)
        if install is None:
            logger.debug("Loader %s has no default templates to install", type(self.loader).__name__)
            return
        install()
