#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/ast/visitors.py
"""Visitor pattern implementation for structured text traversal.

Every node implements ``accept(visitor)``, which calls the visitor's
``visit_<shape>`` method for that node's concrete class. The base
``NodeVisitor`` routes every ``visit_*`` method to ``generic_visit``, which
visits the node's children in document order, so subclasses only override the
shapes they care about.

Examples
--------
Count headings in a document:

    >>> class HeadingCounter(NodeVisitor):
    ...     def __init__(self):
    ...         self.count = 0
    ...
    ...     def visit_heading(self, node):
    ...         self.count += 1
    ...         self.generic_visit(node)
    ...
    >>> counter = HeadingCounter()
    >>> document.accept(counter)
    >>> counter.count

"""

from __future__ import annotations

from typing import Any

from richtext.ast.nodes import (
    BlockQuote,
    Document,
    Heading,
    HorizontalRule,
    Hyperlink,
    ListItem,
    Node,
    OrderedList,
    Paragraph,
    ResourceLinkBlock,
    ResourceLinkInline,
    Text,
    UnorderedList,
    get_node_children,
)


class NodeVisitor:
    """Base class for structured text visitors.

    Each ``visit_*`` method defaults to ``generic_visit``.
    """

    def generic_visit(self, node: Node) -> Any:
        """Visit every child of ``node`` in order.

        Parameters
        ----------
        node : Node
            The node whose children to visit

        """
        for child in get_node_children(node):
            child.accept(self)

    def visit_document(self, node: Document) -> Any:
        return self.generic_visit(node)

    def visit_paragraph(self, node: Paragraph) -> Any:
        return self.generic_visit(node)

    def visit_heading(self, node: Heading) -> Any:
        return self.generic_visit(node)

    def visit_block_quote(self, node: BlockQuote) -> Any:
        return self.generic_visit(node)

    def visit_horizontal_rule(self, node: HorizontalRule) -> Any:
        return self.generic_visit(node)

    def visit_ordered_list(self, node: OrderedList) -> Any:
        return self.generic_visit(node)

    def visit_unordered_list(self, node: UnorderedList) -> Any:
        return self.generic_visit(node)

    def visit_list_item(self, node: ListItem) -> Any:
        return self.generic_visit(node)

    def visit_hyperlink(self, node: Hyperlink) -> Any:
        return self.generic_visit(node)

    def visit_resource_link_block(self, node: ResourceLinkBlock) -> Any:
        return self.generic_visit(node)

    def visit_resource_link_inline(self, node: ResourceLinkInline) -> Any:
        return self.generic_visit(node)

    def visit_text(self, node: Text) -> Any:
        return self.generic_visit(node)


class TextCollector(NodeVisitor):
    """Visitor that gathers plain text, one entry per block.

    Inline text is concatenated within its enclosing paragraph or heading;
    each such block becomes one entry of ``blocks``.

    """

    def __init__(self) -> None:
        """Initialize with no collected text."""
        self.blocks: list[str] = []
        self._current: list[str] | None = None

    def _visit_block(self, node: Node) -> None:
        outer = self._current
        self._current = []
        self.generic_visit(node)
        text = "".join(self._current)
        self._current = outer
        if outer is not None:
            outer.append(text)
        elif text:
            self.blocks.append(text)

    def visit_paragraph(self, node: Paragraph) -> None:
        self._visit_block(node)

    def visit_heading(self, node: Heading) -> None:
        self._visit_block(node)

    def visit_text(self, node: Text) -> None:
        if self._current is None:
            if node.value:
                self.blocks.append(node.value)
        else:
            self._current.append(node.value)


__all__ = ["NodeVisitor", "TextCollector"]
