"""Fragments and the naming rules that classify them.

A fragment is one named unit of raw template source. Its name is the path
inside the fragment store, always separated with ``/``:

- partials have a base filename starting with ``_``
- layouts live below a ``layouts`` path segment
- everything else is a page
"""

import posixpath
from dataclasses import dataclass

PARTIAL_MARKER = "_"
LAYOUTS_SEGMENT = "layouts"


@dataclass(frozen=True)
class Fragment:
    """A named piece of unparsed template source.

    Attributes:
        name: Logical path of the fragment, e.g. "reviews/show/_item.tmpl"
        content: Raw template source
    """

    name: str
    content: str


def is_partial(name: str) -> bool:
    """Return True if the fragment is only meant to be referenced by others."""
    return posixpath.basename(name).startswith(PARTIAL_MARKER)


def is_layout(name: str) -> bool:
    """Return True if any directory segment of the name is ``layouts``."""
    return LAYOUTS_SEGMENT in name.split("/")[:-1]


def is_page(name: str) -> bool:
    """Return True if the fragment can be rendered on its own."""
    return not is_partial(name) and not is_layout(name)


def partial_dir(page: str) -> str:
    """Return the folder holding a page's partials.

    Only the last extension is removed, so "test.tmpl.html" keeps its
    partials in "test.tmpl/".
    """
    root, _ext = posixpath.splitext(page)
    return root
