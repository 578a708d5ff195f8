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

"""Dual-dialect markup templates with component expansion.

Usage::

    from viewkit import ComponentRegistry, TemplateEngine

    components = ComponentRegistry()
    components.register("c-card", card)

    engine = TemplateEngine(default_dir=Path("views"), components=components)
    element = await engine.render("home.html", {"name": "Ada", "users": [...]})
"""

from viewkit.components import ComponentRegistry
from viewkit.templates import (
    TemplateEngine,
    TemplateError,
    TemplateNotFoundError,
    TemplateStructureError,
    TemplateValueError,
    render_string,
)

__all__ = [
    "ComponentRegistry",
    "TemplateEngine",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateStructureError",
    "TemplateValueError",
    "render_string",
]
