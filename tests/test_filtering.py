"""Tests for keyword filtering."""

from sunburst import Node, aggregate, filter_by_keyword


def names(nodes):
    return [n.name for n in nodes]


class TestFilterByKeyword:
    def test_blank_keyword_is_identity(self, store_tree):
        assert filter_by_keyword(store_tree, "") is store_tree
        assert filter_by_keyword(store_tree, "   ") is store_tree

    def test_ancestor_of_match_is_kept(self, store_tree):
        result = filter_by_keyword(store_tree, "lap")
        assert names(result) == ["Electronics"]
        assert names(result[0].children) == ["Laptops"]

    def test_rebuilt_node_keeps_explicit_value_rule(self, store_tree):
        # Electronics has no explicit value, so the rebuilt node sums only Laptops
        result = filter_by_keyword(store_tree, "lap")
        assert aggregate(result[0]) == 120

    def test_case_insensitive(self, store_tree):
        assert names(filter_by_keyword(store_tree, "FURN")) == ["Furniture"]

    def test_own_match_keeps_full_subtree(self, store_tree):
        result = filter_by_keyword(store_tree, "electro")
        assert result[0] is store_tree[0]
        assert names(result[0].children) == ["Laptops", "Desktops"]

    def test_sibling_order_preserved(self):
        level = (Node("b-x", 1), Node("a"), Node("c-x", 2))
        assert names(filter_by_keyword(level, "x")) == ["b-x", "c-x"]

    def test_no_match(self, store_tree):
        assert filter_by_keyword(store_tree, "garden") == ()

    def test_deep_match_keeps_every_ancestor(self, company_sales):
        result = filter_by_keyword(company_sales, "tablet")
        assert names(result) == ["Company Sales"]
        electronics = result[0].children
        assert names(electronics) == ["Electronics"]
        assert names(electronics[0].children) == ["Mobile Devices"]
        assert names(electronics[0].children[0].children) == ["Tablets"]

    def test_idempotent(self, company_sales):
        once = filter_by_keyword(company_sales, "o")
        assert filter_by_keyword(once, "o") == once

    def test_source_not_mutated(self, store_tree):
        before = store_tree[0].children
        filter_by_keyword(store_tree, "lap")
        assert store_tree[0].children is before
        assert names(store_tree[0].children) == ["Laptops", "Desktops"]

    def test_rebuilt_node_points_at_source(self, company_sales):
        result = filter_by_keyword(company_sales, "tablet")
        assert result[0].origin is company_sales[0]
        again = filter_by_keyword(result, "tablet")
        assert again[0].source is company_sales[0]

    def test_keyword_spaces_are_significant(self):
        level = (Node("Mac", 1), Node("Big Mac", 2))
        assert names(filter_by_keyword(level, " mac")) == ["Big Mac"]
