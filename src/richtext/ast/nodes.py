#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/ast/nodes.py
"""Node classes for structured text documents.

This module defines the typed in-memory model of a structured text tree. Every
node carries a discriminator (``node_type``) whose value is the wire tag; the
tag decides both the node's shape and how its children are decoded.

Node Shapes
-----------
Container nodes hold an ordered ``content`` list of child nodes:
    - Document (root only), Paragraph, Heading, BlockQuote, HorizontalRule
    - OrderedList, UnorderedList, ListItem
    - Hyperlink, ResourceLinkBlock, ResourceLinkInline

Leaf nodes:
    - Text

Resource link nodes reference an entry or asset through a ``ResourceLinkData``
whose ``target`` starts out as an ``UnresolvedLink`` and may be swapped, once,
for a ``ResolvedLink`` by the link resolution engine.

"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from richtext.exceptions import InvariantViolationError


class NodeType(str, Enum):
    """Discriminator tags of the structured text format.

    The member value is the tag as it appears in the ``nodeType`` field.
    """

    DOCUMENT = "document"
    PARAGRAPH = "paragraph"
    TEXT = "text"
    HEADING_1 = "heading-1"
    HEADING_2 = "heading-2"
    HEADING_3 = "heading-3"
    HEADING_4 = "heading-4"
    HEADING_5 = "heading-5"
    HEADING_6 = "heading-6"
    BLOCKQUOTE = "blockquote"
    HORIZONTAL_RULE = "hr"
    ORDERED_LIST = "ordered-list"
    UNORDERED_LIST = "unordered-list"
    LIST_ITEM = "list-item"
    EMBEDDED_ENTRY_BLOCK = "embedded-entry-block"
    EMBEDDED_ASSET_BLOCK = "embedded-asset-block"
    EMBEDDED_ENTRY_INLINE = "embedded-entry-inline"
    HYPERLINK = "hyperlink"
    ENTRY_HYPERLINK = "entry-hyperlink"
    ASSET_HYPERLINK = "asset-hyperlink"


class MarkType(str, Enum):
    """Styling marks that may be applied to a text node."""

    BOLD = "bold"
    ITALIC = "italic"
    UNDERLINE = "underline"
    CODE = "code"


_HEADING_LEVELS: dict[NodeType, int] = {
    NodeType.HEADING_1: 1,
    NodeType.HEADING_2: 2,
    NodeType.HEADING_3: 3,
    NodeType.HEADING_4: 4,
    NodeType.HEADING_5: 5,
    NodeType.HEADING_6: 6,
}
_HEADING_TAGS: dict[int, NodeType] = {level: tag for tag, level in _HEADING_LEVELS.items()}

HEADING_NODE_TYPES = frozenset(_HEADING_LEVELS)
RESOURCE_LINK_BLOCK_TYPES = frozenset({NodeType.EMBEDDED_ENTRY_BLOCK, NodeType.EMBEDDED_ASSET_BLOCK})
RESOURCE_LINK_INLINE_TYPES = frozenset(
    {NodeType.EMBEDDED_ENTRY_INLINE, NodeType.ENTRY_HYPERLINK, NodeType.ASSET_HYPERLINK}
)


def _tag_value(node_type: Any) -> str:
    return getattr(node_type, "value", str(node_type))


def heading_level(node_type: NodeType) -> int:
    """Return the heading level encoded in a heading tag.

    Parameters
    ----------
    node_type : NodeType
        One of the six ``heading-N`` tags

    Returns
    -------
    int
        The level, 1 through 6

    Raises
    ------
    InvariantViolationError
        If ``node_type`` is not a heading tag

    Examples
    --------
    >>> heading_level(NodeType.HEADING_3)
    3

    """
    try:
        return _HEADING_LEVELS[node_type]
    except KeyError:
        raise InvariantViolationError(f"'{_tag_value(node_type)}' is not a heading node type") from None


def heading_node_type(level: int) -> NodeType:
    """Return the ``heading-N`` tag for a heading level.

    Raises
    ------
    InvariantViolationError
        If ``level`` is outside 1..6

    """
    try:
        return _HEADING_TAGS[level]
    except (KeyError, TypeError):
        raise InvariantViolationError(f"Heading level must be 1-6, got {level!r}") from None


# ============================================================================
# Links
# ============================================================================


@dataclass(frozen=True)
class UnresolvedLink:
    """A reference to an entry or asset that has not been resolved.

    Parameters
    ----------
    link_type : str
        Kind of linked resource, e.g. ``Entry`` or ``Asset``
    id : str
        Identifier of the linked resource

    """

    link_type: str
    id: str

    @property
    def is_resolved(self) -> bool:
        return False

    def resolved_with(self, entity: Any) -> ResolvedLink:
        """Return the resolved counterpart of this link."""
        return ResolvedLink(link_type=self.link_type, id=self.id, entity=entity)


@dataclass(frozen=True)
class ResolvedLink:
    """A link whose target entity is known.

    The entity either came from a resolver, replacing a reference, or was
    embedded in the input in place of a reference. ``link_type`` and ``id``
    keep the link's identity in both cases.

    Parameters
    ----------
    link_type : str
        Kind of linked resource
    id : str
        Identifier of the linked resource
    entity : Any
        The object returned by the resolver, or the embedded entity JSON
    embedded : bool, default = False
        True when the input carried the entity itself rather than a reference.
        Embedded links are always written back as their entity. Not part of
        equality: the same entity reached either way is the same link.

    """

    link_type: str
    id: str
    entity: Any
    embedded: bool = field(default=False, compare=False)

    @property
    def is_resolved(self) -> bool:
        return True


Link = Union[UnresolvedLink, ResolvedLink]


@dataclass(eq=True)
class ResourceLinkData:
    """Link information owned by a resource link node.

    ``target`` is the only mutable part of a decoded tree. It starts as an
    ``UnresolvedLink`` and is rewritten at most once, through
    ``apply_resolution``, before the decode call that built it returns.

    Parameters
    ----------
    target : UnresolvedLink or ResolvedLink
        The linked entry or asset
    title : str or None, default = None
        Optional title to display for the linked resource

    """

    target: Link
    title: Optional[str] = None

    def apply_resolution(self, entity: Any) -> bool:
        """Swap an unresolved target for its resolved entity.

        Parameters
        ----------
        entity : Any
            Object supplied by the resolver

        Returns
        -------
        bool
            True if the target was rewritten, False if it was already resolved

        """
        if isinstance(self.target, ResolvedLink):
            return False
        self.target = self.target.resolved_with(entity)
        return True


# ============================================================================
# Nodes
# ============================================================================


class Node(ABC):
    """Base class for all structured text nodes.

    Every node exposes ``node_type``, its discriminator tag. Nothing else is
    guaranteed at this level; concrete shapes add their own fields.

    """

    node_type: NodeType

    @abstractmethod
    def accept(self, visitor: Any) -> Any:
        """Accept a visitor for processing this node.

        Parameters
        ----------
        visitor : Any
            A visitor object with visit_* methods

        Returns
        -------
        Any
            Result from the visitor's processing

        """
        pass


@dataclass
class Document(Node):
    """Root node of a structured text tree.

    Exactly one per tree and never nested inside another node.

    Parameters
    ----------
    content : list of Node, default = empty list
        Top-level block nodes

    """

    node_type: ClassVar[NodeType] = NodeType.DOCUMENT

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_document(self)


@dataclass
class Paragraph(Node):
    """A block of inline content."""

    node_type: ClassVar[NodeType] = NodeType.PARAGRAPH

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_paragraph(self)


@dataclass
class Heading(Node):
    """Heading node (heading-1 through heading-6).

    The tag is derived from ``level`` so the two can never disagree.

    Parameters
    ----------
    level : int
        Heading level, 1 through 6
    content : list of Node, default = empty list
        Inline nodes representing heading text

    """

    level: int
    content: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate heading level is between 1 and 6."""
        heading_node_type(self.level)

    @property
    def node_type(self) -> NodeType:  # type: ignore[override]
        return heading_node_type(self.level)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_heading(self)


@dataclass
class BlockQuote(Node):
    """A block quotation."""

    node_type: ClassVar[NodeType] = NodeType.BLOCKQUOTE

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_block_quote(self)


@dataclass
class HorizontalRule(Node):
    """A rule or break between sections.

    No children are expected, but ``content`` is kept so that any children
    present on the wire survive a round trip.

    """

    node_type: ClassVar[NodeType] = NodeType.HORIZONTAL_RULE

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_horizontal_rule(self)


@dataclass
class OrderedList(Node):
    """An ordered list whose children are list items."""

    node_type: ClassVar[NodeType] = NodeType.ORDERED_LIST

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_ordered_list(self)


@dataclass
class UnorderedList(Node):
    """An unordered list whose children are list items."""

    node_type: ClassVar[NodeType] = NodeType.UNORDERED_LIST

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_unordered_list(self)


@dataclass
class ListItem(Node):
    """An item of an ordered or unordered list."""

    node_type: ClassVar[NodeType] = NodeType.LIST_ITEM

    content: list[Node] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_list_item(self)


@dataclass
class Hyperlink(Node):
    """An inline hyperlink to a URI.

    Parameters
    ----------
    uri : str
        The URI the hyperlink points to
    content : list of Node, default = empty list
        Inline nodes representing the link text
    title : str or None, default = None
        Optional link title

    """

    node_type: ClassVar[NodeType] = NodeType.HYPERLINK

    uri: str
    content: list[Node] = field(default_factory=list)
    title: Optional[str] = None

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_hyperlink(self)


@dataclass
class ResourceLinkBlock(Node):
    """A block embedding a linked entry or asset.

    Parameters
    ----------
    node_type : NodeType
        ``embedded-entry-block`` or ``embedded-asset-block``
    data : ResourceLinkData
        The link to the embedded resource
    content : list of Node, default = empty list
        Child nodes, usually empty

    """

    node_type: NodeType
    data: ResourceLinkData
    content: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the tag belongs to the block resource link family."""
        if self.node_type not in RESOURCE_LINK_BLOCK_TYPES:
            raise InvariantViolationError(
                f"ResourceLinkBlock cannot carry node type '{_tag_value(self.node_type)}'"
            )

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_resource_link_block(self)


@dataclass
class ResourceLinkInline(Node):
    """An inline element linking to an entry or asset.

    Parameters
    ----------
    node_type : NodeType
        ``embedded-entry-inline``, ``entry-hyperlink`` or ``asset-hyperlink``
    data : ResourceLinkData
        The link to the referenced resource
    content : list of Node, default = empty list
        Inline nodes representing the link text, if any

    """

    node_type: NodeType
    data: ResourceLinkData
    content: list[Node] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate the tag belongs to the inline resource link family."""
        if self.node_type not in RESOURCE_LINK_INLINE_TYPES:
            raise InvariantViolationError(
                f"ResourceLinkInline cannot carry node type '{_tag_value(self.node_type)}'"
            )

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_resource_link_inline(self)


@dataclass
class Text(Node):
    """A run of text with optional marks.

    Parameters
    ----------
    value : str
        The text
    marks : list of MarkType, default = empty list
        Marks applied to the text, in input order; duplicates are kept

    """

    node_type: ClassVar[NodeType] = NodeType.TEXT

    value: str
    marks: list[MarkType] = field(default_factory=list)

    def accept(self, visitor: Any) -> Any:
        return visitor.visit_text(self)


ContainerNode = Union[
    Document,
    Paragraph,
    Heading,
    BlockQuote,
    HorizontalRule,
    OrderedList,
    UnorderedList,
    ListItem,
    Hyperlink,
    ResourceLinkBlock,
    ResourceLinkInline,
]
ResourceLinkNode = Union[ResourceLinkBlock, ResourceLinkInline]


def get_node_children(node: Node) -> list[Node]:
    """Get the child nodes of a node.

    Parameters
    ----------
    node : Node
        The node to get children from

    Returns
    -------
    list of Node
        The node's ``content`` (empty for text nodes)

    """
    if isinstance(node, Text):
        return []
    return list(getattr(node, "content", []))


__all__ = [
    "NodeType",
    "MarkType",
    "HEADING_NODE_TYPES",
    "RESOURCE_LINK_BLOCK_TYPES",
    "RESOURCE_LINK_INLINE_TYPES",
    "heading_level",
    "heading_node_type",
    "UnresolvedLink",
    "ResolvedLink",
    "Link",
    "ResourceLinkData",
    "Node",
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
    "get_node_children",
]
