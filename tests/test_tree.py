"""Tests for the node model and tree construction."""

import json
import math

import numpy as np
import pandas as pd
import pytest

from sunburst import (
    InvalidNodeError,
    Node,
    TreeFormatError,
    aggregate,
    has_children,
    node_to_record,
    nodes_from_dataframe,
    nodes_from_records,
    parse_tree_json,
)


class TestNode:
    def test_children_normalised_to_tuple(self):
        node = Node("a", children=[Node("b", 1)])
        assert isinstance(node.children, tuple)

    def test_has_children(self):
        assert Node("a", children=(Node("b", 1),)).has_children
        assert not Node("a", 3).has_children
        assert has_children(Node("a", children=(Node("b"),)))
        assert not has_children(Node("a"))

    def test_negative_value_accepted(self):
        assert Node("refund", -5).value == -5

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_value_rejected(self, bad):
        with pytest.raises(InvalidNodeError):
            Node("x", bad)

    @pytest.mark.parametrize("bad", ["12", True, [1]])
    def test_non_numeric_value_rejected(self, bad):
        with pytest.raises(InvalidNodeError):
            Node("x", bad)

    def test_non_string_name_rejected(self):
        with pytest.raises(InvalidNodeError):
            Node(42)

    def test_source_defaults_to_self(self):
        node = Node("a", 1)
        assert node.source is node

    def test_origin_ignored_by_equality(self):
        original = Node("a", 1)
        assert Node("a", 1, origin=original) == original


class TestAggregate:
    def test_explicit_value_wins(self):
        node = Node("a", 10, children=(Node("b", 1), Node("c", 2)))
        assert aggregate(node) == 10

    def test_sum_of_children(self, store_tree):
        electronics = store_tree[0]
        assert aggregate(electronics) == 200
        assert aggregate(electronics) == sum(aggregate(c) for c in electronics.children)

    def test_empty_leaf_is_zero(self):
        assert aggregate(Node("empty")) == 0

    def test_nested(self, company_sales):
        assert aggregate(company_sales[0]) == 640

    def test_negative_values_propagate(self):
        node = Node("net", children=(Node("sales", 100), Node("refunds", -30)))
        assert aggregate(node) == 70

    def test_idempotent(self, company_sales):
        assert aggregate(company_sales[0]) == aggregate(company_sales[0])


class TestRecords:
    def test_nested_records(self):
        nodes = nodes_from_records(
            [{"name": "a", "children": [{"name": "b", "value": 2}, {"name": "c"}]}]
        )
        assert nodes == (Node("a", children=(Node("b", 2), Node("c"))),)

    def test_missing_name(self):
        with pytest.raises(TreeFormatError) as exc:
            nodes_from_records([{"name": "a", "children": [{"value": 1}]}])
        assert exc.value.details["path"] == "[0]/a[0]"

    def test_children_must_be_list(self):
        with pytest.raises(TreeFormatError):
            nodes_from_records([{"name": "a", "children": {"name": "b"}}])

    def test_bad_value_reported_as_format_error(self):
        with pytest.raises(TreeFormatError) as exc:
            nodes_from_records([{"name": "a", "value": "lots"}])
        assert exc.value.details["path"] == "[0]/a"

    def test_top_level_must_be_list(self):
        with pytest.raises(TreeFormatError):
            nodes_from_records({"name": "a"})

    def test_round_trip_through_record(self, company_sales):
        record = node_to_record(company_sales[0])
        assert nodes_from_records([record]) == company_sales

    def test_record_omits_unset_fields(self):
        assert node_to_record(Node("a")) == {"name": "a"}


class TestParseTreeJson:
    def test_object_is_single_root(self):
        nodes = parse_tree_json(json.dumps({"name": "root", "value": 3}))
        assert nodes == (Node("root", 3),)

    def test_array_is_root_level(self):
        nodes = parse_tree_json('[{"name": "a", "value": 1}, {"name": "b", "value": 2}]')
        assert [n.name for n in nodes] == ["a", "b"]

    def test_utf8_bytes(self):
        nodes = parse_tree_json('[{"name": "Caf\u00e9", "value": 1}]'.encode("utf-8"))
        assert nodes == (Node("Caf\u00e9", 1),)

    def test_bytes_with_bom(self):
        nodes = parse_tree_json(b"\xef\xbb\xbf{\"name\": \"root\"}")
        assert nodes == (Node("root"),)

    def test_invalid_utf8_bytes(self):
        with pytest.raises(TreeFormatError) as exc:
            parse_tree_json(b'[{"name": "\xff\xfe"}]')
        assert exc.value.details["position"] == "11"

    def test_invalid_json(self):
        with pytest.raises(TreeFormatError) as exc:
            parse_tree_json("{not json")
        assert "line" in exc.value.details


class TestDataFrame:
    @pytest.fixture
    def sales(self):
        return pd.DataFrame(
            {
                "Category": ["Electronics", "Electronics", "Electronics", "Furniture"],
                "Product": ["Laptops", "Laptops", "Desktops", "Chairs"],
                "Revenue": [100, 20, 80, 90],
            }
        )

    def test_sum_by_value_column(self, sales):
        nodes = nodes_from_dataframe(sales, ["Category", "Product"], "Revenue")
        assert [n.name for n in nodes] == ["Electronics", "Furniture"]
        electronics = nodes[0]
        assert electronics.value is None
        assert [(c.name, c.value) for c in electronics.children] == [("Desktops", 80), ("Laptops", 120)]
        assert aggregate(electronics) == 200

    def test_leaf_values_are_python_numbers(self, sales):
        nodes = nodes_from_dataframe(sales, ["Category"], "Revenue")
        assert not isinstance(nodes[0].value, np.generic)

    def test_count_without_value_column(self, sales):
        nodes = nodes_from_dataframe(sales, ["Category"])
        assert [(n.name, n.value) for n in nodes] == [("Electronics", 3), ("Furniture", 1)]

    def test_missing_labels_become_no_data(self):
        df = pd.DataFrame({"Region": ["North", None], "Sales": [1, 2]})
        nodes = nodes_from_dataframe(df, ["Region"], "Sales")
        assert sorted(n.name for n in nodes) == ["No Data", "North"]

    def test_non_numeric_values_count_as_zero(self):
        df = pd.DataFrame({"Region": ["North", "North"], "Sales": ["5", "n/a"]})
        nodes = nodes_from_dataframe(df, ["Region"], "Sales")
        assert aggregate(nodes[0]) == 5

    def test_empty_hierarchy(self, sales):
        assert nodes_from_dataframe(sales, []) == ()

    def test_unknown_column(self, sales):
        with pytest.raises(TreeFormatError) as exc:
            nodes_from_dataframe(sales, ["Category", "Brand"])
        assert "Brand" in str(exc.value)
