"""Loading pages, alone or inside a layout, into compiled units.

The loader glues the pieces together:

1. a PartialResolver finds the partials of the page
2. a TemplateLoader reads the page (and layout) fragments
3. an assembler compiles everything into one CompiledUnit

For a layouted page the page source is wrapped in a ``content`` block and
the layout is compiled *before* the page, so any block the page declares
replaces the layout's default.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from typing import Protocol

from jinja2 import Environment

from passepartout.assembler import CompiledUnit, assemble
from passepartout.exceptions import (
    FragmentNotFoundError,
    FragmentReadError,
    PartialCollectionError,
    TemplateCreationError,
)
from passepartout.fragments import Fragment
from passepartout.partials import PartialResolver, PartialsInFolderOnly, PartialsWithCommon
from passepartout.store import FragmentStore

logger = logging.getLogger(__name__)

CONTENT_BLOCK = "content"

Templater = Callable[[Environment | None, Sequence[Fragment]], CompiledUnit]


class UnitSource(Protocol):
    """Anything able to produce compiled units for pages."""

    def standalone(self, name: str) -> CompiledUnit: ...

    def in_layout(self, name: str, layout: str) -> CompiledUnit: ...


def wrap_content(content: str, block: str = CONTENT_BLOCK) -> str:
    """Turn page source into the body of a named block."""
    return f"{{% block {block} %}}{content}{{% endblock %}}"


class TemplateLoader(ABC):
    """Reads the page fragments and knows how a page is put in a layout."""

    @abstractmethod
    def standalone(self, name: str) -> list[Fragment]:
        """Return the fragments making up a page on its own."""
        pass

    @abstractmethod
    def in_layout(self, name: str, layout: str) -> list[Fragment]:
        """Return the layout and page fragments, layout first."""
        pass


class TemplateByNameLoader(TemplateLoader):
    """Reads pages and layouts from the store by their exact name."""

    def __init__(self, store: FragmentStore) -> None:
        self.store = store

    def _read(self, name: str, kind: str) -> Fragment:
        try:
            content = self.store.read(name)
        except FileNotFoundError as e:
            raise FragmentNotFoundError(name, kind) from e
        except OSError as e:
            raise FragmentReadError(name, e, kind) from e
        return Fragment(name=name, content=content)

    def standalone(self, name: str) -> list[Fragment]:
        return [self._read(name, "template")]

    def in_layout(self, name: str, layout: str) -> list[Fragment]:
        page = self._read(name, "template")
        wrapped = Fragment(name=page.name, content=wrap_content(page.content))
        layout_fragment = self._read(layout, "layout template")

        # The layout goes first so the page's blocks are declared last and win
        return [layout_fragment, wrapped]


class Loader:
    """Produces a compiled unit for a page, standalone or in a layout.

    Usage:
        loader = Loader.with_defaults(DirectoryStore("templates"))
        unit = loader.in_layout("reviews/show.tmpl", "layouts/default.tmpl")
        unit.render("layouts/default.tmpl", {"review": review})
    """

    def __init__(
        self,
        partials: PartialResolver,
        templates: TemplateLoader,
        base: Environment | None = None,
        create_template: Templater = assemble,
    ) -> None:
        """Initialize the loader.

        Args:
            partials: Policy for finding a page's partials
            templates: Reads page and layout fragments
            base: Shared environment every unit is derived from
            create_template: Compiles fragments into a unit
        """
        self.partials = partials
        self.templates = templates
        self.base = base
        self.create_template = create_template

    @classmethod
    def with_defaults(
        cls,
        store: FragmentStore,
        base: Environment | None = None,
        common_dir: str | None = None,
    ) -> "Loader":
        """Build a loader using the standard conventions.

        Args:
            store: Store holding the templates
            base: Shared environment (filters, globals, options)
            common_dir: Folder of partials shared by every page, if any

        Returns:
            Loader reading pages by name and partials from the page folder
            (and common_dir when given)
        """
        partials: PartialResolver
        if common_dir:
            partials = PartialsWithCommon(store, common_dir)
        else:
            partials = PartialsInFolderOnly(store)

        return cls(partials=partials, templates=TemplateByNameLoader(store), base=base)

    def _partials_for(self, name: str) -> list[Fragment]:
        try:
            return self.partials.resolve(name)
        except Exception as e:
            raise PartialCollectionError(name, e) from e

    def standalone(self, name: str) -> CompiledUnit:
        """Compile a page with its partials; the entry point is name.

        Raises:
            PartialCollectionError: If the partial folders can't be walked
            FragmentNotFoundError: If the page doesn't exist
            FragmentReadError: If the page exists but can't be read
            TemplateCreationError: If the fragments don't compile
        """
        files = [*self._partials_for(name), *self.templates.standalone(name)]

        try:
            unit = self.create_template(self.base, files)
        except Exception as e:
            raise TemplateCreationError(name, e) from e

        logger.debug("Loaded %s from %d fragments", name, len(files))
        return unit

    def in_layout(self, name: str, layout: str) -> CompiledUnit:
        """Compile a page inside a layout; the entry point is layout.

        Raises:
            PartialCollectionError: If the partial folders can't be walked
            FragmentNotFoundError: If the page or layout doesn't exist
            FragmentReadError: If the page or layout can't be read
            TemplateCreationError: If the fragments don't compile
        """
        files = [*self._partials_for(name), *self.templates.in_layout(name, layout)]

        try:
            unit = self.create_template(self.base, files)
        except Exception as e:
            raise TemplateCreationError(name, e, layout=layout) from e

        logger.debug("Loaded %s in layout %s from %d fragments", name, layout, len(files))
        return unit
