"""Exceptions raised while loading and assembling templates.

Every load-time failure is raised with the page, layout or fragment that was
involved, and chained to the underlying cause. Errors raised while a compiled
unit executes come straight from Jinja2 and are not wrapped.
"""


class PassepartoutError(Exception):
    """Base class for all passepartout errors."""


class FragmentNotFoundError(PassepartoutError, FileNotFoundError):
    """Raised when a page or layout does not exist in the fragment store."""

    def __init__(self, name: str, kind: str = "template") -> None:
        self.name = name
        self.kind = kind
        self.message = f"failed to read {kind}: {name}: no such fragment"
        super().__init__(self.message)


class FragmentReadError(PassepartoutError, OSError):
    """Raised when a page or layout exists but can't be read."""

    def __init__(self, name: str, cause: OSError, kind: str = "template") -> None:
        self.name = name
        self.kind = kind
        super().__init__(f"failed to read {kind}: {name}: {cause.strerror or cause}")


class PartialCollectionError(PassepartoutError):
    """Raised when walking the partial folders of a page fails."""

    def __init__(self, page: str, cause: BaseException) -> None:
        self.page = page
        super().__init__(f"failed to collect partials for {page!r}: {cause}")


class FragmentParseError(PassepartoutError):
    """Raised when a fragment is not valid template source."""

    def __init__(self, fragment: str, cause: BaseException) -> None:
        self.fragment = fragment
        super().__init__(f"failed to parse {fragment!r} into the template: {cause}")


class TemplateCreationError(PassepartoutError):
    """Raised when the fragments of a page can't be assembled into a unit."""

    def __init__(
        self,
        page: str,
        cause: BaseException,
        layout: str | None = None,
    ) -> None:
        self.page = page
        self.layout = layout
        where = f"{page!r}" if layout is None else f"{page!r} in layout {layout!r}"
        super().__init__(f"failed to create template for {where}: {cause}")


class ConfigError(PassepartoutError, ValueError):
    """Raised for invalid configuration values."""
