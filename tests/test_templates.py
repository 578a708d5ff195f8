"""Tests for viewkit.templates loaders and engine."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from viewkit.components import ComponentRegistry
from viewkit.templates import (
    DictTemplateLoader,
    FileSystemTemplateLoader,
    HttpTemplateLoader,
    TemplateEngine,
    TemplateNotFoundError,
    TemplateStructureError,
    TemplateValueError,
)


@pytest.mark.asyncio
async def test_render_from_default_dir(tmp_path):
    default_dir = tmp_path / "defaults"
    default_dir.mkdir()
    (default_dir / "test.html").write_text("<p>Hello {{ name }}!</p>")

    engine = TemplateEngine(default_dir=default_dir)
    element = await engine.render("test.html", {"name": "World"})
    assert str(element) == "<p>Hello World!</p>"


@pytest.mark.asyncio
async def test_user_dir_overrides_default(tmp_path):
    default_dir = tmp_path / "defaults"
    default_dir.mkdir()
    (default_dir / "test.html").write_text("<p>default: {{ x }}</p>")

    user_dir = tmp_path / "user"
    user_dir.mkdir()
    (user_dir / "test.html").write_text("<p>custom: {{ x }}</p>")

    engine = TemplateEngine(user_dir=user_dir, default_dir=default_dir)
    element = await engine.render("test.html", {"x": "val"})
    assert str(element) == "<p>custom: val</p>"


@pytest.mark.asyncio
async def test_fallback_to_default(tmp_path):
    default_dir = tmp_path / "defaults"
    default_dir.mkdir()
    (default_dir / "only_default.html").write_text("<p>from default</p>")

    user_dir = tmp_path / "user"
    user_dir.mkdir()

    engine = TemplateEngine(user_dir=user_dir, default_dir=default_dir)
    element = await engine.render("only_default.html")
    assert element.get_text() == "from default"


@pytest.mark.asyncio
async def test_subdirectory_template(tmp_path):
    (tmp_path / "pages").mkdir()
    (tmp_path / "pages" / "about.html").write_text("<main>about</main>")

    engine = TemplateEngine(default_dir=tmp_path)
    element = await engine.render("pages/about.html")
    assert element.name == "main"


@pytest.mark.asyncio
async def test_missing_template_raises(tmp_path, caplog):
    engine = TemplateEngine(default_dir=tmp_path)
    with pytest.raises(TemplateNotFoundError) as excinfo:
        await engine.render("nonexistent.html")
    assert excinfo.value.name == "nonexistent.html"
    assert str(tmp_path) in str(excinfo.value)
    assert isinstance(excinfo.value, LookupError)
    assert "Failed to load template: nonexistent.html" in caplog.text


@pytest.mark.asyncio
async def test_path_outside_directory_not_found(tmp_path):
    views = tmp_path / "views"
    views.mkdir()
    (tmp_path / "secret.html").write_text("<p>secret</p>")

    engine = TemplateEngine(default_dir=views)
    with pytest.raises(TemplateNotFoundError):
        await engine.render("../secret.html")


@pytest.mark.asyncio
async def test_has_template(tmp_path):
    default_dir = tmp_path / "defaults"
    default_dir.mkdir()
    (default_dir / "exists.html").write_text("<p>yes</p>")

    engine = TemplateEngine(default_dir=default_dir)
    assert await engine.has_template("exists.html")
    assert not await engine.has_template("nope.html")


def test_install_defaults(tmp_path):
    default_dir = tmp_path / "defaults"
    default_dir.mkdir()
    (default_dir / "a.html").write_text("<p>alpha</p>")
    (default_dir / "b.hbs").write_text("<p>beta</p>")
    (default_dir / "notes.md").write_text("skip me")

    user_dir = tmp_path / "user"
    # User dir does not exist yet, install_defaults creates it
    engine = TemplateEngine(user_dir=user_dir, default_dir=default_dir)
    engine.install_defaults()

    assert (user_dir / "a.html").read_text() == "<p>alpha</p>"
    assert (user_dir / "b.hbs").read_text() == "<p>beta</p>"
    assert not (user_dir / "notes.md").exists()

    # Existing files are not overwritten
    (user_dir / "a.html").write_text("modified")
    engine.install_defaults()
    assert (user_dir / "a.html").read_text() == "modified"


def test_install_defaults_without_directory_support():
    engine = TemplateEngine(DictTemplateLoader({}))
    engine.install_defaults()


class TestFileSystemLoader:
    @pytest.mark.asyncio
    async def test_reads_fresh_source_each_time(self, tmp_path):
        (tmp_path / "page.html").write_text("<p>one</p>")
        loader = FileSystemTemplateLoader(default_dir=str(tmp_path))
        assert await loader.load("page.html") == "<p>one</p>"

        (tmp_path / "page.html").write_text("<p>two</p>")
        assert await loader.load("page.html") == "<p>two</p>"

    @pytest.mark.asyncio
    async def test_no_directories(self):
        loader = FileSystemTemplateLoader()
        with pytest.raises(TemplateNotFoundError):
            await loader.load("page.html")


class TestDictLoader:
    @pytest.mark.asyncio
    async def test_load(self):
        loader = DictTemplateLoader({"home.html": "<div/>"})
        assert await loader.load("home.html") == "<div/>"

    @pytest.mark.asyncio
    async def test_missing(self):
        loader = DictTemplateLoader({})
        with pytest.raises(TemplateNotFoundError):
            await loader.load("home.html")


class TestHttpLoader:
    @staticmethod
    def _transport():
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/views/home.html":
                return httpx.Response(200, text="<h1>Hi {{ name }}</h1>")
            return httpx.Response(404, text="not found")

        return httpx.MockTransport(handler)

    def test_url_for(self):
        loader = HttpTemplateLoader("https://example.org/views/")
        assert loader.url_for("/home.html") == "https://example.org/views/home.html"

    @pytest.mark.asyncio
    async def test_render_over_http(self):
        loader = HttpTemplateLoader("https://example.org/views", transport=self._transport())
        engine = TemplateEngine(loader)
        element = await engine.render("home.html", {"name": "Ada"})
        assert str(element) == "<h1>Hi Ada</h1>"

    @pytest.mark.asyncio
    async def test_not_found_status(self):
        loader = HttpTemplateLoader("https://example.org/views", transport=self._transport())
        with pytest.raises(TemplateNotFoundError) as excinfo:
            await loader.load("missing.html")
        assert "https://example.org/views/missing.html" in excinfo.value.searched

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        loader = HttpTemplateLoader("https://example.org", transport=httpx.MockTransport(handler))
        with pytest.raises(httpx.ConnectError):
            await loader.load("home.html")


class TestEngine:
    @staticmethod
    def _engine(templates, **kwargs):
        return TemplateEngine(DictTemplateLoader(templates), **kwargs)

    @pytest.mark.asyncio
    async def test_full_render(self):
        engine = self._engine({
            "about.html": (
                "<div><h1>{{ name }}</h1>"
                '<if data="user.isAdmin">Admin<else/>Guest</if>'
                "<ul>{{#each users}}<li><text data=\"name\"/></li>{{/each}}</ul></div>"
            ),
        })
        element = await engine.render("about.html", {
            "name": "Safi",
            "user": {"isAdmin": True},
            "users": [{"name": "John"}, {"name": "Jane"}],
        })
        assert str(element) == (
            "<div><h1>Safi</h1>Admin<ul><li>John</li><li>Jane</li></ul></div>"
        )

    @pytest.mark.asyncio
    async def test_structure_error(self):
        engine = self._engine({"text.html": "{{#if show}}<p>x</p>{{else}}plain{{/if}}"})
        with pytest.raises(TemplateStructureError):
            await engine.render("text.html", {"show": False})

    @pytest.mark.asyncio
    async def test_components_expanded(self):
        components = ComponentRegistry()
        components.register("c-greeting", lambda props: f"<strong>Hello {props['who']}</strong>")
        engine = self._engine(
            {"page.html": '<div><c-greeting who="{{ name }}"></c-greeting></div>'},
            components=components,
        )
        element = await engine.render("page.html", {"name": "Ada"})
        assert str(element) == "<div><strong>Hello Ada</strong></div>"

    @pytest.mark.asyncio
    async def test_strict_mode(self):
        engine = self._engine({"page.html": "<p>{{ missing }}</p>"}, strict=True)
        with pytest.raises(TemplateValueError):
            await engine.render("page.html", {})

    @pytest.mark.asyncio
    async def test_concurrent_renders_are_independent(self):
        engine = self._engine({"page.html": "<p>{{#each xs}}{{v}}{{/each}}</p>"})
        results = await asyncio.gather(*(
            engine.render("page.html", {"xs": [{"v": i}] * 3}) for i in range(5)
        ))
        assert [str(el) for el in results] == [f"<p>{i}{i}{i}</p>" for i in range(5)]

    def test_render_markup_sync(self):
        engine = self._engine({})
        assert engine.render_markup("{{#if a}}yes{{/if}}", {"a": []}) == "yes"

    def test_render_fragment_sync(self):
        engine = self._engine({})
        assert engine.render_fragment("  <b>{{ n }}</b> ", {"n": 1}).get_text() == "1"
