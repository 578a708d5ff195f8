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

"""Exceptions raised while loading and rendering templates."""

from __future__ import annotations


class TemplateError(Exception):
    """Base class for all template errors."""


class TemplateNotFoundError(TemplateError, LookupError):
    """No loader could supply source for the requested template name."""

    def __init__(self, name: str, searched: list[str] | None = None) -> None:
        self.name = name
        self.searched = list(searched or [])
        message = f"Template not found: {name}"
        if self.searched:
            message += f" (searched: {', '.join(self.searched)})"
        super().__init__(message)


class TemplateStructureError(TemplateError):
    """Rendered markup has no element to act as the fragment root."""


class TemplateValueError(TemplateError, ValueError):
    """A context value cannot be used where a directive needs it.

    Only raised in strict mode; the default lenient mode logs a warning
    and substitutes empty content instead.
    """
