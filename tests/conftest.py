"""Shared pytest fixtures for passepartout tests.

Fixtures are organized by category:
- Path fixtures: the on-disk template tree under tests/fixtures/templates
- Store fixtures: in-memory stores for composition tests
- Environment fixtures: a shared base environment with custom filters
"""

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
from jinja2 import Environment

from passepartout import DirectoryStore, MappingStore

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def templates_dir(fixtures_dir: Path) -> Path:
    """Return the path to the sample template tree."""
    return fixtures_dir / "templates"


@pytest.fixture
def directory_store(templates_dir: Path) -> DirectoryStore:
    """Return a store reading the sample template tree."""
    return DirectoryStore(templates_dir)


# =============================================================================
# Store Fixtures
# =============================================================================


@pytest.fixture
def site_store() -> MappingStore:
    """Return an in-memory site with a page, its partial and two layouts."""
    return MappingStore(
        {
            "layouts/default.tmpl": "HEAD {% block content %}DEFAULT{% endblock %} FOOT",
            "layouts/secondary.tmpl": "HEADER {% block content %}DEFAULT{% endblock %} FOOTER",
            "index.tmpl": 'body {% include "index/_item.tmpl" %}',
            "index/_item.tmpl": "item partial",
        }
    )


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture
def base_env() -> Environment:
    """Return a shared environment carrying a custom filter and global."""
    env = Environment()
    env.filters["shout"] = lambda value: f"{value}".upper()
    env.globals["site"] = "Example"
    return env


# =============================================================================
# Logging Fixtures
# =============================================================================


@pytest.fixture
def reset_passepartout_logger() -> Iterator[None]:
    """Restore the passepartout logger after a test configures it."""
    logger = logging.getLogger("passepartout")
    level, handlers = logger.level, list(logger.handlers)
    yield
    logger.setLevel(level)
    logger.handlers[:] = handlers
