"""Conformance tests for matchtree.

Loads YAML fixtures from tests/fixtures/ and runs every search case
through a tree built via the config loading path.

Run with: uv run pytest tests/test_conformance.py -v
"""

from __future__ import annotations

import pytest

from conftest import FixtureCase, load_fixtures

_cases = load_fixtures()
_ids = [f"{c.fixture_name}::{c.case_name}" for c in _cases]


@pytest.mark.parametrize("case", _cases, ids=_ids)
def test_conformance(case: FixtureCase) -> None:
    actual = case.tree.search(case.keys)
    assert actual == case.expect, (
        f"Fixture '{case.fixture_name}' case '{case.case_name}': "
        f"expected {case.expect!r}, got {actual!r}"
    )


def test_fixtures_loaded() -> None:
    assert len(_cases) > 0
