"""Passepartout - filesystem-convention template composition for Jinja2.

Pages, their partials and the layouts they render in are found by where they
sit in a template folder rather than by registration:

- a page "reviews/show.tmpl" can use every fragment under "reviews/show/"
- a page can be rendered inside any layout, filling its "content" block
- compiled pages are cached per page and layout

Usage:
    from passepartout import DirectoryStore, load_from

    pp = load_from(DirectoryStore("templates"))
    html = pp.render_in_layout_to_string("layouts/default.html", "reviews/show.html", data)
"""

from passepartout.assembler import CompiledUnit, assemble, copy_environment
from passepartout.cache import CachedLoader
from passepartout.config import PassepartoutConfig, load_config, load_from_config
from passepartout.exceptions import (
    ConfigError,
    FragmentNotFoundError,
    FragmentParseError,
    FragmentReadError,
    PartialCollectionError,
    PassepartoutError,
    TemplateCreationError,
)
from passepartout.fragments import Fragment, is_layout, is_page, is_partial
from passepartout.loader import Loader, TemplateByNameLoader, TemplateLoader, wrap_content
from passepartout.partials import PartialResolver, PartialsInFolderOnly, PartialsWithCommon
from passepartout.renderer import Passepartout, load_from
from passepartout.store import (
    DirectoryStore,
    FragmentStore,
    MappingStore,
    without_prefix,
)

__version__ = "0.1.0"

__all__ = [
    "CachedLoader",
    "CompiledUnit",
    "ConfigError",
    "DirectoryStore",
    "Fragment",
    "FragmentNotFoundError",
    "FragmentParseError",
    "FragmentReadError",
    "FragmentStore",
    "Loader",
    "MappingStore",
    "PartialCollectionError",
    "PartialResolver",
    "PartialsInFolderOnly",
    "PartialsWithCommon",
    "Passepartout",
    "PassepartoutConfig",
    "PassepartoutError",
    "TemplateByNameLoader",
    "TemplateCreationError",
    "TemplateLoader",
    "assemble",
    "copy_environment",
    "is_layout",
    "is_page",
    "is_partial",
    "load_config",
    "load_from",
    "load_from_config",
    "without_prefix",
    "wrap_content",
]
