"""Assembling fragments into compiled units.

A compiled unit is a set of Jinja2 templates sharing one private environment.
Each fragment is compiled under its own name, so every fragment is an entry
point and can reach the others with ``{% include %}``, ``{% import %}`` or
``{% extends %}``.

Blocks are shared across the whole unit: when several fragments declare the
same ``{% block %}``, the fragment compiled last provides it wherever the
block is rendered, including inside fragments pulled in with ``{% include %}``,
and ``{{ super() }}`` reaches the earlier declaration. That is what lets a
page override the sections of its layout.
"""

import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any, TextIO

from jinja2 import BaseLoader, Environment, Template, TemplateNotFound, TemplateSyntaxError
from jinja2.runtime import Context

from passepartout.exceptions import FragmentParseError
from passepartout.fragments import Fragment

logger = logging.getLogger(__name__)


def copy_environment(base: Environment | None = None) -> Environment:
    """Return an environment that can be changed without touching base.

    Filters, tests and globals are copied; everything else is shared with base
    through :meth:`jinja2.Environment.overlay`.

    Args:
        base: Shared environment carrying filters, globals and options

    Returns:
        A fresh environment, or an empty one if base is None
    """
    if base is None:
        return Environment(cache_size=0)

    env = base.overlay(cache_size=0)
    env.filters = dict(base.filters)
    env.tests = dict(base.tests)
    env.globals = dict(base.globals)
    return env


class UnitTemplate(Template):
    """Template whose contexts see the blocks of the whole unit.

    Jinja2 gives included templates a fresh context holding only their own
    blocks; installing the unit table in every new context keeps overrides
    in effect there too.
    """

    unit_blocks: Mapping[str, list[Callable[..., Iterator[str]]]] = {}

    def new_context(
        self,
        vars: dict[str, Any] | None = None,
        shared: bool = False,
        locals: Mapping[str, Any] | None = None,
    ) -> Context:
        context = super().new_context(vars, shared, locals)
        context.blocks.update({block: list(funcs) for block, funcs in self.unit_blocks.items()})
        return context


class UnitLoader(BaseLoader):
    """Hands out the already compiled templates of one unit."""

    def __init__(self, templates: Mapping[str, Template]) -> None:
        self.templates = templates

    def load(
        self,
        environment: Environment,
        name: str,
        globals: Mapping[str, Any] | None = None,
    ) -> Template:
        try:
            return self.templates[name]
        except KeyError:
            raise TemplateNotFound(name) from None

    def list_templates(self) -> list[str]:
        return sorted(self.templates)


class CompiledUnit:
    """Parsed, cross-referenceable set of fragments.

    Usage:
        unit = assemble(None, [Fragment("a.tmpl", "Hello {{ name }}")])
        unit.render("a.tmpl", {"name": "world"})  # "Hello world"
    """

    def __init__(
        self,
        environment: Environment,
        templates: dict[str, Template],
    ) -> None:
        self._environment = environment
        self._templates = templates

    def __repr__(self) -> str:
        return f"CompiledUnit({self.names()!r})"

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    @property
    def environment(self) -> Environment:
        return self._environment

    def names(self) -> list[str]:
        """Return the names of every entry point in the unit."""
        return sorted(self._templates)

    def generate(self, name: str, data: Mapping[str, Any] | None = None) -> Iterator[str]:
        """Render an entry point piece by piece.

        Args:
            name: Entry point to execute
            data: Template variables

        Yields:
            Rendered output chunks

        Raises:
            jinja2.TemplateNotFound: If name (or something it references)
                isn't part of the unit
        """
        template = self._environment.get_template(name)
        context = template.new_context(dict(data or {}))

        try:
            yield from template.root_render_func(context)
        except Exception:
            yield self._environment.handle_exception()

    def render(self, name: str, data: Mapping[str, Any] | None = None) -> str:
        """Render an entry point to a string."""
        return "".join(self.generate(name, data))

    def stream(self, out: TextIO, name: str, data: Mapping[str, Any] | None = None) -> None:
        """Write an entry point to out as it renders."""
        for chunk in self.generate(name, data):
            out.write(chunk)


def assemble(base: Environment | None, fragments: Sequence[Fragment]) -> CompiledUnit:
    """Compile fragments, in order, into one unit.

    Args:
        base: Environment to copy the configuration from (never modified)
        fragments: Fragments to compile; a later fragment replaces an earlier
            one with the same name

    Returns:
        The compiled unit

    Raises:
        FragmentParseError: If any fragment isn't valid template source
    """
    env = copy_environment(base)
    templates: dict[str, Template] = {}
    blocks: dict[str, list[Callable[..., Iterator[str]]]] = {}

    for fragment in fragments:
        try:
            code = env.compile(fragment.content, name=fragment.name, filename=fragment.name)
        except TemplateSyntaxError as e:
            raise FragmentParseError(fragment.name, e) from e

        template = UnitTemplate.from_code(env, code, env.make_globals(None))
        template.unit_blocks = blocks
        templates[fragment.name] = template

        # Later declarations go first; super() walks towards earlier ones
        for block, func in template.blocks.items():
            blocks.setdefault(block, []).insert(0, func)

    env.loader = UnitLoader(templates)
    logger.debug("Assembled %d fragments into %d templates", len(fragments), len(templates))

    return CompiledUnit(env, templates)
