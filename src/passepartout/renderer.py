"""Rendering pages by name.

Passepartout is the entry point most callers need:

    pp = load_from(DirectoryStore("templates"))
    pp.render(sys.stdout, "reviews/show.tmpl", {"review": review})
    pp.render_in_layout(sys.stdout, "layouts/default.tmpl", "reviews/show.tmpl", data)

Templates follow this hierarchy inside the store:

    layouts/<layout>.<ext>          # layouts pages are rendered within
    partials/<name>.<ext>           # shared partials (only with common_dir)
    <domain>/<page>.<ext>           # a page, e.g. "reviews/index.tmpl"
    <domain>/<page>/_<name>.<ext>   # partials of that page

Each template is named after its path inside the store, so the partial
"reviews/index/_item.tmpl" is included with
``{% include "reviews/index/_item.tmpl" %}``.
"""

import io
import logging
from collections.abc import Mapping
from typing import Any, TextIO

from jinja2 import Environment

from passepartout.cache import CachedLoader
from passepartout.fragments import is_layout, is_page
from passepartout.loader import Loader, UnitSource
from passepartout.store import FragmentStore

logger = logging.getLogger(__name__)


class Passepartout:
    """Renders pages, alone or within a layout, to a writer.

    Args:
        loader: Produces compiled units (a Loader, CachedLoader or any object
            with standalone/in_layout)
        store: Store the templates come from, used to list pages and layouts
    """

    def __init__(self, loader: UnitSource, store: FragmentStore | None = None) -> None:
        self.loader = loader
        self.store = store

    def render(self, out: TextIO, name: str, data: Mapping[str, Any] | None = None) -> None:
        """Render a page to out.

        Nothing is written if the page fails to load. Errors raised while the
        template executes come from Jinja2 unchanged, and whatever was
        rendered before the error has already been written.
        """
        unit = self.loader.standalone(name)
        logger.debug("Rendering %s", name)
        unit.stream(out, name, data)

    def render_in_layout(
        self,
        out: TextIO,
        layout: str,
        name: str,
        data: Mapping[str, Any] | None = None,
    ) -> None:
        """Render a page inside a layout to out."""
        unit = self.loader.in_layout(name, layout)
        logger.debug("Rendering %s in layout %s", name, layout)
        unit.stream(out, layout, data)

    def render_to_string(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        buf = io.StringIO()
        self.render(buf, name, data)
        return buf.getvalue()

    def render_in_layout_to_string(
        self,
        layout: str,
        name: str,
        data: Mapping[str, Any] | None = None,
    ) -> str:
        buf = io.StringIO()
        self.render_in_layout(buf, layout, name, data)
        return buf.getvalue()

    def _templates(self) -> list[str]:
        if self.store is None:
            raise ValueError("Passepartout was created without a fragment store")
        return self.store.walk("")

    def pages(self) -> list[str]:
        """Return every renderable page (not a partial, not a layout)."""
        return [name for name in self._templates() if is_page(name)]

    def layouts(self) -> list[str]:
        """Return every layout in the store."""
        return [name for name in self._templates() if is_layout(name)]


def load_from(
    store: FragmentStore,
    base: Environment | None = None,
    common_dir: str | None = None,
    cache: bool = True,
) -> Passepartout:
    """Create a Passepartout for the templates in store.

    Args:
        store: Where the templates live
        base: Environment with shared filters, globals and options
        common_dir: Folder with partials available to every page
        cache: Keep compiled units between renders

    Returns:
        Configured Passepartout
    """
    loader: UnitSource = Loader.with_defaults(store, base=base, common_dir=common_dir)
    if cache:
        loader = CachedLoader(loader)
    return Passepartout(loader, store=store)
