"""Integration tests for rendering pages through Passepartout.

These tests exercise the whole chain: store, partial resolution, assembly,
caching and execution.
"""

import io

import pytest
from jinja2 import Environment, TemplateNotFound

from passepartout import (
    DirectoryStore,
    FragmentNotFoundError,
    MappingStore,
    Passepartout,
    TemplateCreationError,
    load_from,
    without_prefix,
)
from passepartout.assembler import CompiledUnit
from passepartout.cache import CachedLoader
from passepartout.loader import Loader


class TestRender:
    """Tests for Passepartout.render."""

    def test_single_page(self) -> None:
        """Test a page with no partials or layout."""
        pp = load_from(MappingStore({"templates/index.tmpl": "body"}))
        out = io.StringIO()

        pp.render(out, "templates/index.tmpl")

        assert out.getvalue() == "body"

    def test_partial_in_page_folder(self) -> None:
        """Test that a partial in the folder named after the page is usable."""
        pp = load_from(
            MappingStore(
                {
                    "templates/index.tmpl": 'body\n {% include "templates/index/_item.tmpl" %}',
                    "templates/index/_item.tmpl": "item partial",
                }
            )
        )
        out = io.StringIO()

        pp.render(out, "templates/index.tmpl")

        assert out.getvalue() == "body\n item partial"

    def test_partial_in_other_folder_fails_at_execution(self) -> None:
        """Test that partials of other pages aren't visible."""
        pp = load_from(
            MappingStore(
                {
                    "templates/index.tmpl": 'body\n {% include "_item.tmpl" %}',
                    "templates/show/_item.tmpl": "item partial",
                }
            )
        )

        with pytest.raises(TemplateNotFound, match="_item.tmpl"):
            pp.render(io.StringIO(), "templates/index.tmpl")

    def test_missing_page(self) -> None:
        """Test that a missing page fails before writing anything."""
        pp = load_from(MappingStore({}))
        out = io.StringIO()

        with pytest.raises(FragmentNotFoundError, match="failed to read template: templates/index.tmpl"):
            pp.render(out, "templates/index.tmpl")

        assert out.getvalue() == ""

    def test_page_outside_template_root(self, tmp_path) -> None:
        """Test that a page name can't reach files above the template root."""
        (tmp_path / "secret.txt").write_text("secret")
        (tmp_path / "templates").mkdir()
        pp = load_from(DirectoryStore(tmp_path / "templates"))

        with pytest.raises(FragmentNotFoundError, match="failed to read template: ../secret.txt"):
            pp.render_to_string("../secret.txt")

    def test_data_is_available(self) -> None:
        """Test that data keys become template variables."""
        pp = load_from(MappingStore({"hello.tmpl": "Hello, {{ name }}!"}))

        assert pp.render_to_string("hello.tmpl", {"name": "world"}) == "Hello, world!"

    def test_syntax_error_is_a_load_error(self) -> None:
        """Test that invalid template source fails while loading."""
        pp = load_from(MappingStore({"broken.tmpl": "{% for x in items %}"}))
        out = io.StringIO()

        with pytest.raises(TemplateCreationError, match="broken.tmpl"):
            pp.render(out, "broken.tmpl")

        assert out.getvalue() == ""

    def test_base_environment_filters(self, base_env: Environment) -> None:
        """Test that custom filters from the base are usable in pages."""
        pp = load_from(MappingStore({"a.tmpl": "{{ 'hi' | shout }}"}), base=base_env)

        assert pp.render_to_string("a.tmpl") == "HI"


class TestRenderInLayout:
    """Tests for Passepartout.render_in_layout."""

    def test_page_fills_content_block(self) -> None:
        """Test that the page replaces the layout's default content."""
        pp = load_from(
            MappingStore(
                {
                    "layouts/default.tmpl": "HEAD {% block content %}DEFAULT{% endblock %} FOOT",
                    "index.tmpl": "body",
                }
            )
        )
        out = io.StringIO()

        pp.render_in_layout(out, "layouts/default.tmpl", "index.tmpl")

        assert out.getvalue() == "HEAD body FOOT"

    def test_layout_with_partials(self) -> None:
        """Test that the page's partials work inside the layout."""
        pp = load_from(
            MappingStore(
                {
                    "templates/layouts/default.tmpl": (
                        "HEAD\n {% block content %}DEFAULT CONTENT{% endblock %} \nFOOT"
                    ),
                    "templates/index.tmpl": 'body\n {% include "templates/index/_item.tmpl" %}',
                    "templates/index/_item.tmpl": "item partial",
                }
            )
        )

        result = pp.render_in_layout_to_string("templates/layouts/default.tmpl", "templates/index.tmpl")

        assert result == "HEAD\n body\n item partial \nFOOT"

    def test_multiple_layouts(self, site_store: MappingStore) -> None:
        """Test that one page renders independently in two layouts."""
        loader = CachedLoader(Loader.with_defaults(site_store))
        pp = Passepartout(loader)

        default = pp.render_in_layout_to_string("layouts/default.tmpl", "index.tmpl")
        secondary = pp.render_in_layout_to_string("layouts/secondary.tmpl", "index.tmpl")

        assert default == "HEAD body item partial FOOT"
        assert secondary == "HEADER body item partial FOOTER"
        assert len(loader) == 2

    def test_new_pair_triggers_one_load(self, site_store: MappingStore) -> None:
        """Test that each page/layout pair is computed exactly once."""
        calls: list[tuple[str, str]] = []

        class CountingLoader(Loader):
            def in_layout(self, name: str, layout: str) -> CompiledUnit:
                calls.append((name, layout))
                return super().in_layout(name, layout)

        inner = CountingLoader.with_defaults(site_store)
        pp = Passepartout(CachedLoader(inner))

        for _ in range(3):
            pp.render_in_layout_to_string("layouts/default.tmpl", "index.tmpl")
        pp.render_in_layout_to_string("layouts/secondary.tmpl", "index.tmpl")

        assert calls == [
            ("index.tmpl", "layouts/default.tmpl"),
            ("index.tmpl", "layouts/secondary.tmpl"),
        ]

    def test_page_named_like_a_layout_pair(self) -> None:
        """Test that a page whose name contains | gets its own unit."""
        pp = load_from(
            MappingStore(
                {
                    "p": "page",
                    "layouts/l": "L[{% block content %}{% endblock %}]",
                    "p|layouts/l": "odd page",
                }
            )
        )

        assert pp.render_in_layout_to_string("layouts/l", "p") == "L[page]"
        assert pp.render_to_string("p|layouts/l") == "odd page"

    def test_missing_page(self) -> None:
        """Test that a missing page is reported before the layout."""
        pp = load_from(MappingStore({}))
        out = io.StringIO()

        with pytest.raises(FragmentNotFoundError, match="failed to read template: templates/index.tmpl"):
            pp.render_in_layout(out, "templates/layouts/default.tmpl", "templates/index.tmpl")

        assert out.getvalue() == ""

    def test_missing_layout(self, site_store: MappingStore) -> None:
        """Test that a missing layout names the layout."""
        pp = load_from(site_store)

        with pytest.raises(FragmentNotFoundError, match="failed to read layout template: layouts/none.tmpl"):
            pp.render_in_layout(io.StringIO(), "layouts/none.tmpl", "index.tmpl")

    def test_page_overrides_title_section(self) -> None:
        """Test that the page's declaration of a shared section wins."""
        pp = load_from(
            MappingStore(
                {
                    "layouts/default.tmpl": (
                        "<title>{% block title %}Site{% endblock %}</title>"
                        "<main>{% block content %}{% endblock %}</main>"
                    ),
                    "about.tmpl": "{% block title %}About{% endblock %}",
                    "home.tmpl": "Welcome",
                }
            )
        )

        about = pp.render_in_layout_to_string("layouts/default.tmpl", "about.tmpl")
        home = pp.render_in_layout_to_string("layouts/default.tmpl", "home.tmpl")

        assert about == "<title>About</title><main>About</main>"
        assert home == "<title>Site</title><main>Welcome</main>"


class TestDirectoryTemplates:
    """Tests against the template tree in tests/fixtures/templates."""

    def test_page_in_layout_from_disk(self, directory_store: DirectoryStore) -> None:
        """Test a page with a loop over its own partial inside an HTML layout."""
        pp = load_from(directory_store)

        html = pp.render_in_layout_to_string(
            "layouts/default.html",
            "reviews/index.html",
            {"reviews": ["great", "fine"]},
        )

        assert html == (
            "<html><head><title>Site</title></head>"
            "<body><ul><li>great</li><li>fine</li></ul></body></html>"
        )

    def test_common_partials(self, directory_store: DirectoryStore, base_env: Environment) -> None:
        """Test that the common folder is only searched when configured."""
        with_common = load_from(directory_store, base=base_env, common_dir="partials")
        folder_only = load_from(directory_store, base=base_env)

        assert with_common.render_to_string("about.html") == "About us<footer>Example</footer>"
        with pytest.raises(TemplateNotFound, match="partials/_footer.html"):
            folder_only.render_to_string("about.html")

    def test_prefix_stripped_store(self, fixtures_dir) -> None:
        """Test addressing templates relative to a sub-directory."""
        pp = load_from(without_prefix(DirectoryStore(fixtures_dir), "templates"))

        assert pp.render_in_layout_to_string("layouts/plain.txt", "reviews/index.html", {"reviews": ["x"]}) == (
            "HEAD <ul><li>x</li></ul> FOOT"
        )

    def test_pages_and_layouts(self, directory_store: DirectoryStore) -> None:
        """Test listing the store by fragment kind."""
        pp = load_from(directory_store)

        assert pp.pages() == ["about.html", "reviews/index.html"]
        assert pp.layouts() == ["layouts/default.html", "layouts/plain.txt"]

    def test_listing_requires_store(self, site_store: MappingStore) -> None:
        """Test that a facade built from a bare loader can't list pages."""
        pp = Passepartout(Loader.with_defaults(site_store))

        with pytest.raises(ValueError, match="without a fragment store"):
            pp.pages()
