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

"""Template source loaders.

Resolution order for :class:`FileSystemTemplateLoader` when loading
``"home.html"``:

1. ``<user_dir>/home.html``: user's customised version
2. ``<default_dir>/home.html``: package-shipped default

Filesystem and in-memory lookups go through Jinja2's loader protocol
(``get_source``), which also rejects names escaping the search directory.
:class:`HttpTemplateLoader` fetches templates with ``httpx``.

Loading is the only step of a render that awaits.  Loaders never cache;
every call reads the source again.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from pathlib import Path

import httpx
from jinja2 import BaseLoader, DictLoader, Environment, TemplateNotFound
from jinja2.loaders import split_template_path

from viewkit.templates.errors import TemplateNotFoundError

logger = logging.getLogger(__name__)

TIMEOUT = 30.0
TEMPLATE_SUFFIXES = (".html", ".htm", ".hbs", ".xml")


class TemplateLoader(ABC):
    """Supplies raw template source by name."""

    @abstractmethod
    async def load(self, name: str) -> str:
        """Return the source of *name*.

        Raises :class:`TemplateNotFoundError` if it does not exist.
        """

    async def exists(self, name: str) -> bool:
        try:
            await self.load(name)
        except TemplateNotFoundError:
            return False
        return True


class _FallbackLoader(BaseLoader):
    """Jinja2 loader that checks user dir first, then default dir."""

    def __init__(
        self,
        user_dir: Path | None = None,
        default_dir: Path | None = None,
    ) -> None:
        self.user_dir = user_dir
        self.default_dir = default_dir

    @property
    def search_path(self) -> list[Path]:
        return [d for d in (self.user_dir, self.default_dir) if d is not None]

    def get_source(
        self, environment: Environment, template: str,
    ) -> tuple[str, str, Callable[[], bool]]:
        pieces = split_template_path(template)
        for directory in self.search_path:
            path = directory.joinpath(*pieces)
            if path.is_file():
                source = path.read_text(encoding="utf-8")
                mtime = path.stat().st_mtime
                return source, str(path), lambda: path.stat().st_mtime == mtime
        raise TemplateNotFound(template)


class _JinjaSourceLoader(TemplateLoader):
    """Adapts a synchronous Jinja2 loader to :class:`TemplateLoader`."""

    def __init__(self, loader: BaseLoader) -> None:
        self._env = Environment(loader=loader, autoescape=False)

    def _searched(self) -> list[str]:
        return []

    def _get_source(self, name: str) -> str:
        try:
            source, filename, _ = self._env.loader.get_source(self._env, name)
        except TemplateNotFound:
            logger.warning("Failed to load template: %s", name)
            raise TemplateNotFoundError(name, self._searched()) from None
        logger.debug("Loaded template %s from %s", name, filename or "<memory>")
        return source

    async def load(self, name: str) -> str:
        return await asyncio.to_thread(self._get_source, name)


class FileSystemTemplateLoader(_JinjaSourceLoader):
    """Load templates from disk with a user override directory.

    Args:
        user_dir: User override directory (checked first).
        default_dir: Package default directory (fallback).
    """

    def __init__(
        self,
        user_dir: Path | str | None = None,
        default_dir: Path | str | None = None,
    ) -> None:
        self.user_dir = Path(user_dir).expanduser() if user_dir else None
        self.default_dir = Path(default_dir).expanduser() if default_dir else None
        self._fallback = _FallbackLoader(self.user_dir, self.default_dir)
        super().__init__(self._fallback)

    def _searched(self) -> list[str]:
        return [str(d) for d in self._fallback.search_path]

    def install_defaults(self) -> None:
        """Copy all default templates to the user directory.

        Skips templates that already exist in the user directory.
        """
        if self.user_dir is None or self.default_dir is None:
            return
        if not self.default_dir.is_dir():
            return

        self.user_dir.mkdir(parents=True, exist_ok=True)
        for src in self.default_dir.iterdir():
            if src.is_file() and src.suffix in TEMPLATE_SUFFIXES:
                dest = self.user_dir / src.name
                if not dest.exists():
                    dest.write_text(src.read_text(encoding="utf-8"), encoding="utf-8")
                    logger.info("Installed default template: %s", dest)


class DictTemplateLoader(_JinjaSourceLoader):
    """Serve templates from an in-memory mapping of name to source."""

    def __init__(self, templates: Mapping[str, str]) -> None:
        super().__init__(DictLoader(dict(templates)))


class HttpTemplateLoader(TemplateLoader):
    """Fetch templates over HTTP relative to *base_url*.

    Any non-success status is reported as a missing template; transport
    failures propagate as :class:`httpx.HTTPError`.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def url_for(self, name: str) -> str:
        return f"{self.base_url}/{name.lstrip('/')}"

    async def _http_get(self, url: str) -> httpx.Response:
        """HTTP GET with timeout. Separated for testability."""
        async with httpx.AsyncClient(
            timeout=self.timeout, follow_redirects=True, transport=self.transport,
        ) as client:
            return await client.get(url)

    async def load(self, name: str) -> str:
        url = self.url_for(name)
        response = await self._http_get(url)
        if not response.is_success:
            logger.warning(
                "Failed to load template: %s (HTTP %d)", name, response.status_code,
            )
            raise TemplateNotFoundError(name, [url])
        logger.debug("Loaded template %s from %s", name, url)
        return response.text
