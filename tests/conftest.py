"""
Shared fixtures: the packaged registry and a helper to evaluate a calculator by slug.
"""

import pytest

from calc_catalog.catalog import build_registry


@pytest.fixture(scope="session")
def registry():
    """Registry built once from the packaged content files."""
    return build_registry()


@pytest.fixture
def evaluate(registry):
    """
    Evaluate a calculator by slug over raw keyword inputs.

    Usage: evaluate("bmi-calculator", height=170, weight=70)
    """
    def _evaluate(slug, **values):
        return registry.lookup(slug).evaluate(values)

    return _evaluate
