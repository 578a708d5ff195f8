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

"""Context lookups and value coercion shared by all directive kinds.

Paths are dot-separated key chains (``user.profile.name``).  A lookup that
hits an absent key, or tries to descend into something that is not a
mapping, resolves to :data:`MISSING` rather than raising.  ``None`` values
are treated exactly like absent keys.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Mapping, Sequence
from typing import Any

from viewkit.templates.errors import TemplateValueError

logger = logging.getLogger(__name__)

_EXPONENT = re.compile(r"e([+-])0*(\d)")


class _Missing:
    """Sentinel for a path that did not resolve."""

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


def resolve_path(context: Any, path: str) -> Any:
    """Look up a dot-separated *path* in *context*.

    Returns :data:`MISSING` if any segment is absent, ``None``, or if an
    intermediate value is not a mapping.
    """
    value = context
    for segment in path.split("."):
        if not isinstance(value, Mapping) or segment not in value:
            return MISSING
        value = value[segment]
        if value is None:
            return MISSING
    return value


def is_missing(value: Any) -> bool:
    return value is MISSING or value is None


def is_sequence(value: Any) -> bool:
    """True for list-like values; strings, bytes and mappings do not count."""
    if isinstance(value, (str, bytes, bytearray, Mapping)):
        return False
    return isinstance(value, Sequence)


def is_truthy(value: Any) -> bool:
    """Dynamic-language truthiness.

    Falsy: missing, ``None``, ``False``, zero, NaN and the empty string.
    Everything else is truthy, including empty sequences and empty
    mappings.
    """
    if is_missing(value) or value is False:
        return False
    if isinstance(value, str):
        return value != ""
    if isinstance(value, (int, float)):
        return value != 0 and not math.isnan(value)
    return True


def stringify(value: Any, *, strict: bool = False, path: str = "") -> str:
    """Render a resolved value as text.

    Booleans render lowercase, integral floats below 1e21 drop the
    fractional part, and exponents are written without zero padding.
    Sequences and mappings have no defined text form: in lenient mode they
    fall back to ``str()`` with a warning, in strict mode they raise
    :class:`TemplateValueError`.
    """
    if is_missing(value):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        if value.is_integer() and abs(value) < 1e21:
            return str(int(value))
        return _EXPONENT.sub(r"e\1\2", str(value))
    if isinstance(value, (str, int)):
        return str(value)
    if is_sequence(value) or isinstance(value, Mapping):
        if strict:
            raise TemplateValueError(
                f"Cannot substitute {type(value).__name__} value for {path!r}"
            )
        logger.warning(
            "Substituting %s value for %r has no defined text form",
            type(value).__name__, path,
        )
    return str(value)
