"""Shared fixtures for the sunburst engine tests."""

from pathlib import Path

import pytest

from sunburst import Node, parse_tree_json

DATA_DIR = Path(__file__).parent.parent / "data"


@pytest.fixture
def store_tree():
    """Two root categories, one with children, one with a value."""
    return (
        Node(
            "Electronics",
            children=(Node("Laptops", 120), Node("Desktops", 80)),
        ),
        Node("Furniture", 90),
    )


@pytest.fixture
def company_sales():
    return parse_tree_json((DATA_DIR / "company_sales.json").read_text(encoding="utf-8"))
