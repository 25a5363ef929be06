#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/ast/__init__.py
"""Typed node model for structured text documents.

The module consists of several components:

- nodes: node classes, discriminator tags and link types
- registry: discriminator registry mapping tags to handlers
- serialization: decoding from and encoding to wire JSON
- visitors: visitor pattern implementation for traversal
- utils: tree walking and text extraction helpers

Examples
--------
    >>> from richtext.ast import Document, Heading, Paragraph, Text, encode_node
    >>> doc = Document(content=[
    ...     Heading(level=1, content=[Text(value="Title")]),
    ...     Paragraph(content=[Text(value="Hello world")]),
    ... ])
    >>> encode_node(doc)["content"][0]["nodeType"]
    'heading-1'

"""

from __future__ import annotations

from richtext.ast.nodes import (
    HEADING_NODE_TYPES,
    RESOURCE_LINK_BLOCK_TYPES,
    RESOURCE_LINK_INLINE_TYPES,
    BlockQuote,
    ContainerNode,
    Document,
    Heading,
    HorizontalRule,
    Hyperlink,
    Link,
    ListItem,
    MarkType,
    Node,
    NodeType,
    OrderedList,
    Paragraph,
    ResolvedLink,
    ResourceLinkBlock,
    ResourceLinkData,
    ResourceLinkInline,
    ResourceLinkNode,
    Text,
    UnorderedList,
    UnresolvedLink,
    get_node_children,
    heading_level,
    heading_node_type,
)
from richtext.ast.registry import NodeHandler, NodeRegistry
from richtext.ast.serialization import (
    DecodeResult,
    decode,
    decode_content,
    decode_document,
    document_to_json,
    encode_content,
    encode_node,
    json_to_document,
    registry,
)
from richtext.ast.utils import collect_resource_links, extract_text, find_unresolved_links, walk
from richtext.ast.visitors import NodeVisitor, TextCollector

__all__ = [
    # Nodes
    "Node",
    "NodeType",
    "MarkType",
    "Document",
    "Paragraph",
    "Heading",
    "BlockQuote",
    "HorizontalRule",
    "OrderedList",
    "UnorderedList",
    "ListItem",
    "Hyperlink",
    "ResourceLinkBlock",
    "ResourceLinkInline",
    "Text",
    "ContainerNode",
    "ResourceLinkNode",
    "HEADING_NODE_TYPES",
    "RESOURCE_LINK_BLOCK_TYPES",
    "RESOURCE_LINK_INLINE_TYPES",
    "heading_level",
    "heading_node_type",
    "get_node_children",
    # Links
    "Link",
    "UnresolvedLink",
    "ResolvedLink",
    "ResourceLinkData",
    # Registry
    "NodeHandler",
    "NodeRegistry",
    "registry",
    # Serialization
    "DecodeResult",
    "decode",
    "decode_content",
    "decode_document",
    "json_to_document",
    "encode_node",
    "encode_content",
    "document_to_json",
    # Traversal
    "NodeVisitor",
    "TextCollector",
    "walk",
    "extract_text",
    "collect_resource_links",
    "find_unresolved_links",
]
