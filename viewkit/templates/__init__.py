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

"""Dual-dialect template engine.

Templates may mix Handlebars-style directives (``{{ name }}``,
``{{#if}}``, ``{{#each}}``) and XML-style tags (``<text data="name" />``,
``<if data="…">``, ``<each data="…">``) freely.

Usage::

    from viewkit.templates import TemplateEngine

    engine = TemplateEngine(
        user_dir=Path("~/.myapp/views"),
        default_dir=Path(__file__).parent / "views",
    )
    element = await engine.render("home.html", {"name": "Ada"})
"""

from viewkit.templates.engine import TemplateEngine
from viewkit.templates.errors import (
    TemplateError,
    TemplateNotFoundError,
    TemplateStructureError,
    TemplateValueError,
)
from viewkit.templates.evaluator import (
    expand_conditionals,
    expand_loops,
    render_string,
    substitute_variables,
)
from viewkit.templates.loader import (
    DictTemplateLoader,
    FileSystemTemplateLoader,
    HttpTemplateLoader,
    TemplateLoader,
)
from viewkit.templates.materializer import materialize
from viewkit.templates.paths import resolve_path

__all__ = [
    "DictTemplateLoader",
    "FileSystemTemplateLoader",
    "HttpTemplateLoader",
    "TemplateEngine",
    "TemplateError",
    "TemplateLoader",
    "TemplateNotFoundError",
    "TemplateStructureError",
    "TemplateValueError",
    "expand_conditionals",
    "expand_loops",
    "materialize",
    "render_string",
    "resolve_path",
    "substitute_variables",
]
