"""Keyword filtering that keeps the ancestors of every match."""

import logging
from dataclasses import replace
from typing import Sequence

from .tree import Node

logger = logging.getLogger(__name__)


def _matches(node: Node, needle: str) -> bool:
    return needle in node.name.lower()


def filter_by_keyword(level_nodes: Sequence[Node], keyword: str) -> Sequence[Node]:
    """Keep nodes whose name contains ``keyword`` or that have a matching descendant.

    A node matching on its own name keeps its whole subtree.  A node kept
    only for a descendant is rebuilt with just the filtered children.  A
    blank keyword returns ``level_nodes`` unchanged.
    """
    if not keyword.strip():
        return level_nodes
    return _filter(level_nodes, keyword.lower())


def _filter(nodes, needle):
    filtered = []
    for node in nodes:
        if _matches(node, needle):
            filtered.append(node)
        elif node.children:
            children = _filter(node.children, needle)
            if children:
                filtered.append(replace(node, children=children, origin=node.source))
    return tuple(filtered)
