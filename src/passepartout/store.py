"""Read-only fragment stores.

A fragment store knows how to read one fragment by name and how to list the
fragments below a directory. Names are ``/`` separated paths relative to the
root of the store; ``""`` is the root itself.

Walks are lexical: entries of a directory are visited in name order and
sub-directories are descended where they sort, so ``a/b/x`` comes before
``a/b.txt``.
"""

import errno
import os
import posixpath
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol


class FragmentStore(Protocol):
    """Capability to read fragments and walk directories of fragments."""

    def read(self, name: str) -> str:
        """Return the content of a fragment.

        Raises:
            FileNotFoundError: If no fragment has that name
        """
        ...

    def walk(self, directory: str) -> list[str]:
        """Return the names of every fragment below a directory, recursively.

        Raises:
            FileNotFoundError: If the directory does not exist
        """
        ...


def clean_name(name: str) -> str:
    """Normalise a fragment name, mapping the root to ""."""
    if not name:
        return ""
    cleaned = posixpath.normpath(name).lstrip("/")
    return "" if cleaned == "." else cleaned


def escapes_root(cleaned: str) -> bool:
    """Return True if a cleaned name points above the root of its store."""
    return cleaned == ".." or cleaned.startswith("../")


def _not_found(name: str) -> FileNotFoundError:
    return FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), name)


def _resolve(name: str) -> str:
    cleaned = clean_name(name)
    if escapes_root(cleaned):
        raise _not_found(name)
    return cleaned


class DirectoryStore:
    """Fragment store backed by a directory on disk.

    Usage:
        store = DirectoryStore("templates")
        store.read("reviews/show.tmpl")  # reads templates/reviews/show.tmpl
    """

    def __init__(self, root: str | Path, encoding: str = "utf-8") -> None:
        """Initialize the store.

        Args:
            root: Directory the fragment names are relative to
            encoding: Text encoding of the fragment files
        """
        self.root = Path(root)
        self.encoding = encoding

    def __repr__(self) -> str:
        return f"DirectoryStore({str(self.root)!r})"

    def read(self, name: str) -> str:
        path = self.root / _resolve(name)
        if path.is_dir():
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), name)
        return path.read_text(encoding=self.encoding)

    def walk(self, directory: str) -> list[str]:
        directory = _resolve(directory)
        path = self.root / directory
        if path.is_file():
            return [directory]
        if not path.is_dir():
            raise _not_found(directory)

        names: list[str] = []
        self._walk(path, names)
        return names

    def _walk(self, path: Path, names: list[str]) -> None:
        for entry in sorted(path.iterdir(), key=lambda p: p.name):
            if entry.is_dir():
                self._walk(entry, names)
            else:
                names.append(entry.relative_to(self.root).as_posix())


class MappingStore:
    """In-memory fragment store; directories are implied by the names.

    Usage:
        store = MappingStore({
            "index.tmpl": "{% include 'index/_item.tmpl' %}",
            "index/_item.tmpl": "item",
        })
    """

    def __init__(self, files: Mapping[str, str]) -> None:
        self._files = {clean_name(name): content for name, content in files.items()}

    def __repr__(self) -> str:
        return f"MappingStore({len(self._files)} fragments)"

    def read(self, name: str) -> str:
        try:
            return self._files[_resolve(name)]
        except KeyError:
            raise _not_found(name) from None

    def walk(self, directory: str) -> list[str]:
        directory = _resolve(directory)
        if directory in self._files:
            return [directory]

        prefix = f"{directory}/" if directory else ""
        names = [name for name in self._files if name.startswith(prefix)]
        if not names and directory:
            raise _not_found(directory)

        return sorted(names, key=lambda name: name.split("/"))


class PrefixedStore:
    """View of another store rooted at a sub-directory.

    Names read through the view have the prefix stripped, so with a prefix of
    "templates" the fragment "templates/reviews/show.tmpl" is addressed as
    "reviews/show.tmpl".
    """

    def __init__(self, store: FragmentStore, prefix: str) -> None:
        self.store = store
        self.prefix = prefix

    def __repr__(self) -> str:
        return f"PrefixedStore({self.store!r}, {self.prefix!r})"

    def _full(self, name: str) -> str:
        return posixpath.join(self.prefix, _resolve(name)).rstrip("/")

    def read(self, name: str) -> str:
        return self.store.read(self._full(name))

    def walk(self, directory: str) -> list[str]:
        cut = len(self.prefix) + 1
        return [name[cut:] for name in self.store.walk(self._full(directory))]


def without_prefix(store: FragmentStore, prefix: str) -> FragmentStore:
    """Return a view of store with prefix removed from every fragment name.

    Useful when templates live in ``templates/`` but should be referenced as
    ``page/index.tmpl`` rather than ``templates/page/index.tmpl``.

    Args:
        store: Store to wrap
        prefix: Relative directory inside the store

    Returns:
        A store addressing fragments relative to prefix

    Raises:
        ValueError: If prefix is absolute or escapes the store
    """
    cleaned = clean_name(prefix)
    if prefix.startswith("/") or escapes_root(cleaned):
        raise ValueError(f"invalid prefix for fragment store: {prefix!r}")
    if not cleaned:
        return store
    return PrefixedStore(store, cleaned)
