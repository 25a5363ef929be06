#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/ast/utils.py
"""Utility functions for working with structured text trees.

Functions
---------
walk : Iterate over a tree depth-first in document order
extract_text : Extract plain text from a node or list of nodes
collect_resource_links : List every resource link node in a tree
find_unresolved_links : List the link targets still unresolved

Examples
--------
    >>> from richtext.ast import Paragraph, Text
    >>> from richtext.ast.utils import extract_text
    >>> extract_text(Paragraph(content=[Text(value="Hello "), Text(value="world")]))
    'Hello world'

"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Union

from richtext.ast.nodes import (
    Node,
    ResourceLinkBlock,
    ResourceLinkInline,
    ResourceLinkNode,
    UnresolvedLink,
    get_node_children,
)
from richtext.ast.visitors import TextCollector


def walk(node_or_nodes: Union[Node, list[Node]]) -> Iterator[Node]:
    """Yield every node depth-first, parents before children.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        Root node, or a list of sibling nodes

    """
    stack = list(reversed(node_or_nodes)) if isinstance(node_or_nodes, list) else [node_or_nodes]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(get_node_children(node)))


def extract_text(node_or_nodes: Union[Node, list[Node]], joiner: str = "\n") -> str:
    """Extract plain text from a node or list of nodes.

    Text within a paragraph or heading is concatenated as-is; separate blocks
    are joined with ``joiner``.

    Parameters
    ----------
    node_or_nodes : Node or list of Node
        A single node or list of nodes to extract text from
    joiner : str, default = "\\n"
        String placed between blocks

    Returns
    -------
    str
        The extracted text

    """
    collector = TextCollector()
    nodes = node_or_nodes if isinstance(node_or_nodes, list) else [node_or_nodes]
    for node in nodes:
        node.accept(collector)
    return joiner.join(collector.blocks)


def collect_resource_links(node_or_nodes: Union[Node, list[Node]]) -> list[ResourceLinkNode]:
    """Return every resource link node in document order."""
    return [node for node in walk(node_or_nodes) if isinstance(node, (ResourceLinkBlock, ResourceLinkInline))]


def find_unresolved_links(node_or_nodes: Union[Node, list[Node]]) -> list[UnresolvedLink]:
    """Return the targets of resource links that are still unresolved."""
    return [
        node.data.target
        for node in collect_resource_links(node_or_nodes)
        if isinstance(node.data.target, UnresolvedLink)
    ]


__all__ = ["walk", "extract_text", "collect_resource_links", "find_unresolved_links"]
