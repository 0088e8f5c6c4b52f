"""Partial resolution policies.

A partial resolver maps a page name to the fragments that page may reference
as partials. Two policies exist:

- PartialsInFolderOnly: the folder named after the page, minus its last
  extension ("reviews/show.tmpl" -> "reviews/show/")
- PartialsWithCommon: the same folder, then a shared folder such as
  "partials/"

A folder that doesn't exist contributes no partials. Any other store error
is raised to the caller.
"""

import logging
from abc import ABC, abstractmethod

from passepartout.fragments import Fragment, partial_dir
from passepartout.store import FragmentStore

logger = logging.getLogger(__name__)


def collect(store: FragmentStore, directory: str) -> list[Fragment]:
    """Read every fragment below a directory.

    Args:
        store: Store to read from
        directory: Directory to walk recursively

    Returns:
        Fragments named by their full path, in walk order; empty if the
        directory does not exist
    """
    try:
        names = store.walk(directory)
    except FileNotFoundError:
        return []

    return [Fragment(name=name, content=store.read(name)) for name in names]


class PartialResolver(ABC):
    """Interface for finding the partials available to a page."""

    @abstractmethod
    def resolve(self, page: str) -> list[Fragment]:
        """Return the partials for a page.

        Args:
            page: Page name, e.g. "reviews/show.tmpl"

        Returns:
            Partial fragments in the order they should be assembled
        """
        pass


class PartialsInFolderOnly(PartialResolver):
    """Loads the partials from the folder named after the page."""

    def __init__(self, store: FragmentStore) -> None:
        self.store = store

    def resolve(self, page: str) -> list[Fragment]:
        directory = partial_dir(page)
        partials = collect(self.store, directory)
        logger.debug("Found %d partials for %s in %s/", len(partials), page, directory)
        return partials


class PartialsWithCommon(PartialResolver):
    """Loads the page's folder partials followed by a shared partials folder.

    Fragments are not de-duplicated. The common folder is walked last, so when
    both folders hold a fragment with the same name the common one is parsed
    last and takes precedence.
    """

    def __init__(self, store: FragmentStore, common_dir: str = "partials") -> None:
        self.store = store
        self.common_dir = common_dir

    def resolve(self, page: str) -> list[Fragment]:
        partials: list[Fragment] = []
        for directory in (partial_dir(page), self.common_dir):
            found = collect(self.store, directory)
            logger.debug("Found %d partials for %s in %s/", len(found), page, directory)
            partials.extend(found)
        return partials
