"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest
from tree_sitter import Parser
from tree_sitter_language_pack import get_parser

from no_unsafe_any.testing import NodeFactory, StaticTypeResolver

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to the TypeScript fixture files."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def nodes() -> NodeFactory:
    """Return a factory for synthetic ESTree nodes with unique spans."""
    return NodeFactory()


@pytest.fixture
def resolver() -> StaticTypeResolver:
    """Return an empty span-keyed type resolver; every position starts out concrete."""
    return StaticTypeResolver()


@pytest.fixture
def typescript_parser() -> Parser:
    """Return a tree-sitter parser for TypeScript."""
    return get_parser("typescript")
