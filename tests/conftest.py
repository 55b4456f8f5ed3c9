"""Conformance fixture loader for matchtree.

Loads YAML fixtures from tests/fixtures/ and converts them to matchtree
types for parametrized testing. Each document describes one tree (kinds
and rules in the config shape) plus search cases against it.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from matchtree import AddRuleOptions, Key, MatchTree, load_tree, parse_keys, parse_tree_config

FIXTURE_DIR = Path(__file__).resolve().parent / "fixtures"


@dataclass
class FixtureCase:
    """A single search case from a conformance fixture."""

    fixture_name: str
    case_name: str
    tree: MatchTree[Any]
    keys: list[Key]
    expect: list[Any]


def load_fixtures() -> list[FixtureCase]:
    """Load every conformance fixture file."""
    cases: list[FixtureCase] = []
    for yaml_file in sorted(FIXTURE_DIR.glob("*.yaml")):
        cases.extend(_load_file(yaml_file))
    return cases


def _load_file(path: Path) -> list[FixtureCase]:
    """Load a single fixture YAML file (may contain multiple documents)."""
    cases: list[FixtureCase] = []
    with path.open() as f:
        for doc in yaml.safe_load_all(f):
            if doc is None:
                continue
            fixture_name = f"{path.stem}::{doc['name']}"
            options = AddRuleOptions(
                treat_empty_pattern_as_any=doc.get("treat_empty_pattern_as_any", False)
            )
            tree = load_tree(parse_tree_config(doc["tree"]), options)
            for case in doc["cases"]:
                cases.append(
                    FixtureCase(
                        fixture_name=fixture_name,
                        case_name=case["name"],
                        tree=tree,
                        keys=parse_keys(case["keys"]),
                        expect=case["expect"],
                    )
                )
    return cases
