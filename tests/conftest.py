"""
Shared fixtures for the filter builder tests.
"""

import pytest

from odata_filter import FilterBuilder


@pytest.fixture
def builder() -> FilterBuilder:
    """Fresh builder with the default 'and' condition."""
    return FilterBuilder("and")


@pytest.fixture
def tree_document() -> dict:
    """Stored rule tree for (a eq 1 and b eq 2) or (c eq 3 or d eq 4)."""
    return {
        "condition": "or",
        "rules": [
            {"condition": "and", "rules": ["a eq 1", "b eq 2"]},
            {"text": "c eq 3 or d eq 4", "grouped": True},
        ],
    }
