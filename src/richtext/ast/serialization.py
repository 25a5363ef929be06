#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/ast/serialization.py
"""JSON decoding and encoding of structured text trees.

A ``content`` array mixes objects of different shapes. Each element is decoded
by looking up its ``nodeType`` in the discriminator registry and handing the
element to that tag's handler, which decodes its own fields and recurses into
its own ``content``. Encoding runs the same dispatch in reverse, keyed by the
node's ``node_type``.

Every top-level decode call is one decode pass: resource links found while
building the tree are queued and resolved through the caller's resolver
before the call returns. Any decode failure aborts the whole pass.

Examples
--------
Decode a single text node:

    >>> from richtext.ast.serialization import decode_content
    >>> nodes = decode_content([{"nodeType": "text", "value": "hi", "marks": [{"type": "bold"}]}])
    >>> nodes[0].value, nodes[0].marks
    ('hi', [<MarkType.BOLD: 'bold'>])

Decode a document and resolve its embedded entries:

    >>> from richtext.resolution import MappingResolver
    >>> resolver = MappingResolver({("Entry", "X"): {"title": "Embedded"}})
    >>> doc = decode_document(body_json, resolver=resolver)

Encode it back:

    >>> encode_node(doc)["nodeType"]
    'document'

"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union, cast

from richtext.ast.nodes import (
    BlockQuote,
    Document,
    Heading,
    HorizontalRule,
    Hyperlink,
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
    Text,
    UnorderedList,
    UnresolvedLink,
    heading_level,
)
from richtext.ast.registry import NodeHandler, NodeRegistry
from richtext.constants import (
    CONTENT_KEY,
    DATA_KEY,
    LINK_SYS_TYPE,
    MARK_TYPE_KEY,
    MARKS_KEY,
    NODE_TYPE_KEY,
    SYS_ID_KEY,
    SYS_KEY,
    SYS_LINK_TYPE_KEY,
    SYS_TYPE_KEY,
    VALUE_KEY,
)
from richtext.exceptions import (
    InvariantViolationError,
    MalformedDocumentError,
    ShapeMismatchError,
    UnknownNodeKindError,
    ValidationError,
)
from richtext.options import DecodeOptions, EncodeOptions
from richtext.resolution import LinkResolutionQueue, ResolutionReport, Resolver

logger = logging.getLogger(__name__)

JSONObject = dict[str, Any]


@dataclass
class DecodeContext:
    """State shared by every handler during one decode pass."""

    options: DecodeOptions
    links: LinkResolutionQueue = field(default_factory=LinkResolutionQueue)
    depth: int = 0


@dataclass
class EncodeContext:
    """State shared by every handler while encoding."""

    options: EncodeOptions


@dataclass
class DecodeResult:
    """Outcome of a decode pass.

    Parameters
    ----------
    content : list of Node
        Decoded nodes, in input order (the document's content for documents)
    document : Document or None
        The root node when a document object was decoded
    report : ResolutionReport
        Which links were resolved and which were left unresolved

    """

    content: list[Node]
    document: Optional[Document]
    report: ResolutionReport


# ============================================================================
# Field helpers
# ============================================================================


def _require_object(data: Mapping[str, Any], key: str, node_type: NodeType, path: str) -> Mapping[str, Any]:
    value = data.get(key)
    if not isinstance(value, Mapping):
        raise ShapeMismatchError(node_type.value, key, path=path)
    return value


def _require_str(data: Mapping[str, Any], key: str, node_type: NodeType, path: str, field_name: str = "") -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise ShapeMismatchError(node_type.value, field_name or key, path=path)
    return value


def _optional_str(
    data: Mapping[str, Any], key: str, node_type: NodeType, path: str, field_name: str = ""
) -> Optional[str]:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ShapeMismatchError(node_type.value, field_name or key, path=path)
    return value


# ============================================================================
# Content decoding
# ============================================================================


def _decode_element(element: Any, context: DecodeContext, path: str, allow_document: bool = False) -> Node:
    """Decode one element of a content array via the registry."""
    if not isinstance(element, Mapping):
        raise MalformedDocumentError(
            f"Content element must be a JSON object, got {type(element).__name__}", path=path
        )

    tag = element.get(NODE_TYPE_KEY)
    if not isinstance(tag, str) or not tag:
        raise MalformedDocumentError(f"Content element is missing a string '{NODE_TYPE_KEY}' field", path=path)

    handler = registry.lookup(tag, path=path)
    node_type = NodeType(tag)
    if node_type is NodeType.DOCUMENT and not allow_document:
        raise MalformedDocumentError("A document node can only appear at the root of a tree", path=path)

    return handler.decode(element, node_type, context, path)


def _decode_content(items: list[Any], context: DecodeContext, path: str) -> list[Node]:
    """Decode a content array in order, failing on the first bad element."""
    return [_decode_element(element, context, f"{path}[{index}]") for index, element in enumerate(items)]


def _decode_children(data: Mapping[str, Any], node_type: NodeType, context: DecodeContext, path: str) -> list[Node]:
    """Decode the ``content`` field of a container element.

    A missing ``content`` field decodes as no children.
    """
    items = data.get(CONTENT_KEY, [])
    if not isinstance(items, list):
        raise ShapeMismatchError(node_type.value, CONTENT_KEY, path=path)

    context.depth += 1
    try:
        if context.depth > context.options.max_depth:
            raise MalformedDocumentError(
                f"Content nesting exceeds the maximum depth of {context.options.max_depth}", path=path
            )
        return _decode_content(items, context, f"{path}.{CONTENT_KEY}" if path else CONTENT_KEY)
    finally:
        context.depth -= 1


def _decode_container(node_class: type) -> Callable[[Mapping[str, Any], NodeType, DecodeContext, str], Node]:
    def decode(data: Mapping[str, Any], node_type: NodeType, context: DecodeContext, path: str) -> Node:
        return node_class(content=_decode_children(data, node_type, context, path))

    return decode


def _decode_heading(data: Mapping[str, Any], node_type: NodeType, context: DecodeContext, path: str) -> Heading:
    """Decode a heading; the level comes from the tag, never from the payload."""
    return Heading(level=heading_level(node_type), content=_decode_children(data, node_type, context, path))


def _decode_hyperlink(data: Mapping[str, Any], node_type: NodeType, context: DecodeContext, path: str) -> Hyperlink:
    link_data = _require_object(data, DATA_KEY, node_type, path)
    return Hyperlink(
        uri=_require_str(link_data, "uri", node_type, path, field_name="data.uri"),
        title=_optional_str(link_data, "title", node_type, path, field_name="data.title"),
        content=_decode_children(data, node_type, context, path),
    )


def _decode_link_target(target: Any, node_type: NodeType, path: str) -> Union[UnresolvedLink, ResolvedLink]:
    """Decode a link target.

    ``{"sys": {"type": "Link", "linkType": ..., "id": ...}}`` is an unresolved
    reference. Any other object carrying ``sys.type`` and ``sys.id`` is an
    entity that was embedded in place of the reference and is taken as
    already resolved.
    """
    if not isinstance(target, Mapping):
        raise ShapeMismatchError(node_type.value, "data.target", path=path)
    sys_info = target.get(SYS_KEY)
    if not isinstance(sys_info, Mapping):
        raise ShapeMismatchError(node_type.value, "data.target.sys", path=path)

    sys_type = _require_str(sys_info, SYS_TYPE_KEY, node_type, path, field_name="data.target.sys.type")
    link_id = _require_str(sys_info, SYS_ID_KEY, node_type, path, field_name="data.target.sys.id")
    if sys_type != LINK_SYS_TYPE:
        return ResolvedLink(link_type=sys_type, id=link_id, entity=target, embedded=True)

    link_type = _require_str(sys_info, SYS_LINK_TYPE_KEY, node_type, path, field_name="data.target.sys.linkType")
    return UnresolvedLink(link_type=link_type, id=link_id)


def _decode_resource_link_data(
    data: Mapping[str, Any], node_type: NodeType, context: DecodeContext, path: str
) -> ResourceLinkData:
    """Decode ``data`` of a resource link and queue its target for resolution."""
    link_data = _require_object(data, DATA_KEY, node_type, path)
    resource = ResourceLinkData(
        target=_decode_link_target(link_data.get("target"), node_type, path),
        title=_optional_str(link_data, "title", node_type, path, field_name="data.title"),
    )
    if isinstance(resource.target, UnresolvedLink):
        context.links.register(resource.target, resource.apply_resolution)
    return resource


def _decode_resource_link(node_class: type) -> Callable[[Mapping[str, Any], NodeType, DecodeContext, str], Node]:
    def decode(data: Mapping[str, Any], node_type: NodeType, context: DecodeContext, path: str) -> Node:
        return node_class(
            node_type=node_type,
            data=_decode_resource_link_data(data, node_type, context, path),
            content=_decode_children(data, node_type, context, path),
        )

    return decode


def _decode_text(data: Mapping[str, Any], node_type: NodeType, context: DecodeContext, path: str) -> Text:
    raw_marks = data.get(MARKS_KEY)
    if not isinstance(raw_marks, list):
        raise ShapeMismatchError(node_type.value, MARKS_KEY, path=path)

    marks = []
    for mark in raw_marks:
        mark_type = mark.get(MARK_TYPE_KEY) if isinstance(mark, Mapping) else None
        try:
            marks.append(MarkType(mark_type))
        except ValueError:
            raise ShapeMismatchError(
                node_type.value, MARKS_KEY, message=f"Unknown mark type: {mark_type!r}", path=path
            ) from None

    return Text(value=_require_str(data, VALUE_KEY, node_type, path), marks=marks)


# ============================================================================
# Content encoding
# ============================================================================


def _encode_children(nodes: list[Node], context: EncodeContext) -> list[JSONObject]:
    result = []
    for node in nodes:
        if isinstance(node, Document):
            raise InvariantViolationError("A document node cannot be nested inside another node")
        result.append(_encode_node(node, context))
    return result


def _encode_node(node: Node, context: EncodeContext) -> JSONObject:
    """Encode one node through the handler registered for its tag."""
    node_type = getattr(node, "node_type", None)
    if not isinstance(node_type, str):
        raise InvariantViolationError(f"Cannot encode {type(node).__name__}: it has no node type")

    try:
        handler = registry.lookup(node_type)
    except UnknownNodeKindError as e:
        raise InvariantViolationError(f"Cannot encode node with unregistered type '{node_type}'") from e

    if not isinstance(node, handler.node_class):
        raise InvariantViolationError(
            f"Node type '{NodeType(node_type).value}' requires {handler.node_class.__name__}, "
            f"got {type(node).__name__}"
        )
    return handler.encode(node, context)


def _encode_container(node: Any, context: EncodeContext) -> JSONObject:
    return {
        NODE_TYPE_KEY: NodeType(node.node_type).value,
        CONTENT_KEY: _encode_children(node.content, context),
    }


def _encode_hyperlink(node: Hyperlink, context: EncodeContext) -> JSONObject:
    data: JSONObject = {"uri": node.uri}
    if node.title is not None:
        data["title"] = node.title
    return {
        NODE_TYPE_KEY: NodeType(node.node_type).value,
        DATA_KEY: data,
        CONTENT_KEY: _encode_children(node.content, context),
    }


def _encode_link_reference(link_type: str, link_id: str) -> JSONObject:
    return {SYS_KEY: {SYS_TYPE_KEY: LINK_SYS_TYPE, SYS_LINK_TYPE_KEY: link_type, SYS_ID_KEY: link_id}}


def _embedded_entity(target: ResolvedLink, context: EncodeContext) -> JSONObject:
    """Return the entity JSON to write in place of a link reference.

    The entity must carry the link's own ``sys.type`` and ``sys.id`` so the
    output decodes back to the same link.
    """
    entity = target.entity
    if not isinstance(entity, Mapping):
        problem = f"entity of type {type(entity).__name__} is not a JSON object"
    elif not isinstance(entity.get(SYS_KEY), Mapping):
        problem = f"entity has no '{SYS_KEY}' object"
    else:
        sys_type = entity[SYS_KEY].get(SYS_TYPE_KEY)
        sys_id = entity[SYS_KEY].get(SYS_ID_KEY)
        if sys_type == target.link_type and sys_id == target.id and sys_type != LINK_SYS_TYPE:
            return dict(entity)
        problem = f"entity sys ({sys_type!r}, {sys_id!r}) does not identify the link"

    raise ValidationError(
        f"Cannot embed resolved {target.link_type} '{target.id}': {problem}",
        parameter_name="resolved_link_mode",
        parameter_value=context.options.resolved_link_mode,
    )


def _encode_link_target(target: Any, context: EncodeContext) -> JSONObject:
    if isinstance(target, UnresolvedLink):
        return _encode_link_reference(target.link_type, target.id)

    if isinstance(target, ResolvedLink):
        # Links that arrived embedded have no reference form to go back to
        if target.embedded or context.options.resolved_link_mode == "entity":
            return _embedded_entity(target, context)
        return _encode_link_reference(target.link_type, target.id)

    raise InvariantViolationError(f"Resource link target must be a link, got {type(target).__name__}")


def _encode_resource_link(node: Any, context: EncodeContext) -> JSONObject:
    data: JSONObject = {"target": _encode_link_target(node.data.target, context)}
    if node.data.title is not None:
        data["title"] = node.data.title
    return {
        NODE_TYPE_KEY: NodeType(node.node_type).value,
        DATA_KEY: data,
        CONTENT_KEY: _encode_children(node.content, context),
    }


def _encode_text(node: Text, context: EncodeContext) -> JSONObject:
    try:
        marks = [{MARK_TYPE_KEY: MarkType(mark).value} for mark in node.marks]
    except ValueError:
        raise InvariantViolationError(f"Text node has an unknown mark type in {node.marks!r}") from None
    return {
        NODE_TYPE_KEY: NodeType(node.node_type).value,
        VALUE_KEY: node.value,
        MARKS_KEY: marks,
    }



# ============================================================================
# Registry
# ============================================================================


def _container_handler(node_class: type) -> NodeHandler:
    return NodeHandler(node_class=node_class, decode=_decode_container(node_class), encode=_encode_container)


_HEADING_HANDLER = NodeHandler(node_class=Heading, decode=_decode_heading, encode=_encode_container)
_RESOURCE_LINK_BLOCK_HANDLER = NodeHandler(
    node_class=ResourceLinkBlock, decode=_decode_resource_link(ResourceLinkBlock), encode=_encode_resource_link
)
_RESOURCE_LINK_INLINE_HANDLER = NodeHandler(
    node_class=ResourceLinkInline, decode=_decode_resource_link(ResourceLinkInline), encode=_encode_resource_link
)

# Dispatch table mapping every tag of the format to its handler
_HANDLERS: dict[NodeType, NodeHandler] = {
    NodeType.DOCUMENT: _container_handler(Document),
    NodeType.PARAGRAPH: _container_handler(Paragraph),
    NodeType.TEXT: NodeHandler(node_class=Text, decode=_decode_text, encode=_encode_text),
    NodeType.HEADING_1: _HEADING_HANDLER,
    NodeType.HEADING_2: _HEADING_HANDLER,
    NodeType.HEADING_3: _HEADING_HANDLER,
    NodeType.HEADING_4: _HEADING_HANDLER,
    NodeType.HEADING_5: _HEADING_HANDLER,
    NodeType.HEADING_6: _HEADING_HANDLER,
    NodeType.BLOCKQUOTE: _container_handler(BlockQuote),
    NodeType.HORIZONTAL_RULE: _container_handler(HorizontalRule),
    NodeType.ORDERED_LIST: _container_handler(OrderedList),
    NodeType.UNORDERED_LIST: _container_handler(UnorderedList),
    NodeType.LIST_ITEM: _container_handler(ListItem),
    NodeType.EMBEDDED_ENTRY_BLOCK: _RESOURCE_LINK_BLOCK_HANDLER,
    NodeType.EMBEDDED_ASSET_BLOCK: _RESOURCE_LINK_BLOCK_HANDLER,
    NodeType.EMBEDDED_ENTRY_INLINE: _RESOURCE_LINK_INLINE_HANDLER,
    NodeType.HYPERLINK: NodeHandler(node_class=Hyperlink, decode=_decode_hyperlink, encode=_encode_hyperlink),
    NodeType.ENTRY_HYPERLINK: _RESOURCE_LINK_INLINE_HANDLER,
    NodeType.ASSET_HYPERLINK: _RESOURCE_LINK_INLINE_HANDLER,
}

registry = NodeRegistry()
for _node_type, _handler in _HANDLERS.items():
    registry.register(_node_type, _handler)


# ============================================================================
# Public API
# ============================================================================


def decode(
    data: Union[list[Any], Mapping[str, Any]],
    resolver: Optional[Resolver] = None,
    options: Optional[DecodeOptions] = None,
) -> DecodeResult:
    """Run one decode pass over a content array or a document object.

    The tree is built first; the links queued while building it are then
    resolved through ``resolver`` before this function returns.

    The only object accepted at the root is a ``document``. Any other node,
    such as a lone ``{"nodeType": "heading-2", ...}``, must be passed inside a
    content array:

        >>> decode([{"nodeType": "heading-2", "content": []}]).content[0].level
        2

    Parameters
    ----------
    data : list or dict
        A ``content`` array, or a ``document`` object
    resolver : Resolver, optional
        Catalog used to resolve entry and asset links
    options : DecodeOptions, optional
        Decode configuration

    Returns
    -------
    DecodeResult
        The decoded nodes and the link resolution report

    Raises
    ------
    MalformedDocumentError
        If the root object is not a document, an element is not an object or
        lacks a tag, or a document is nested
    UnknownNodeKindError
        If an element's tag is not registered
    ShapeMismatchError
        If a shape-specific field is missing or mistyped
    LinkResolutionError
        If the resolver raises

    """
    options = options or DecodeOptions()
    context = DecodeContext(options=options)

    document: Optional[Document] = None
    if isinstance(data, list):
        content = _decode_content(data, context, CONTENT_KEY)
    elif isinstance(data, Mapping):
        if data.get(NODE_TYPE_KEY) != NodeType.DOCUMENT.value:
            raise MalformedDocumentError(
                f"Root object must have {NODE_TYPE_KEY} '{NodeType.DOCUMENT.value}', got {data.get(NODE_TYPE_KEY)!r}"
            )
        document = _decode_element(data, context, "", allow_document=True)  # type: ignore[assignment]
        content = document.content  # type: ignore[union-attr]
    else:
        raise MalformedDocumentError(f"Expected a JSON array or object, got {type(data).__name__}")

    logger.debug(f"Decoded {len(content)} top-level nodes with {len(context.links)} pending links")
    report = context.links.drain(resolver if options.resolve_links else None)
    if report.unresolved:
        logger.debug(f"{len(report.unresolved)} links left unresolved")

    return DecodeResult(content=content, document=document, report=report)


def decode_content(
    data: list[Any],
    resolver: Optional[Resolver] = None,
    options: Optional[DecodeOptions] = None,
) -> list[Node]:
    """Decode a ``content`` array into an ordered list of nodes.

    Parameters
    ----------
    data : list
        JSON array of node objects
    resolver : Resolver, optional
        Catalog used to resolve entry and asset links
    options : DecodeOptions, optional
        Decode configuration

    Returns
    -------
    list of Node
        One node per input element, in input order

    """
    if not isinstance(data, list):
        raise MalformedDocumentError(f"Content must be a JSON array, got {type(data).__name__}")
    return decode(data, resolver=resolver, options=options).content


def decode_document(
    data: Mapping[str, Any],
    resolver: Optional[Resolver] = None,
    options: Optional[DecodeOptions] = None,
) -> Document:
    """Decode a ``document`` object into a Document node.

    Parameters
    ----------
    data : dict
        JSON object whose ``nodeType`` is ``document``
    resolver : Resolver, optional
        Catalog used to resolve entry and asset links
    options : DecodeOptions, optional
        Decode configuration

    Returns
    -------
    Document
        The root of the decoded tree

    """
    if not isinstance(data, Mapping):
        raise MalformedDocumentError(f"Document must be a JSON object, got {type(data).__name__}")
    return cast(Document, decode(data, resolver=resolver, options=options).document)


def json_to_document(
    json_str: str,
    resolver: Optional[Resolver] = None,
    options: Optional[DecodeOptions] = None,
) -> Document:
    """Parse a JSON string and decode it as a document.

    Raises
    ------
    MalformedDocumentError
        If the string is not valid JSON, or any of the errors of ``decode``

    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise MalformedDocumentError(f"Invalid JSON: {e.msg}", original_error=e) from e
    return decode_document(data, resolver=resolver, options=options)


def encode_node(node: Node, options: Optional[EncodeOptions] = None) -> JSONObject:
    """Encode a single node, including a Document, to its wire JSON object.

    Raises
    ------
    InvariantViolationError
        If a node's tag and concrete class disagree
    ValidationError
        If ``resolved_link_mode="entity"`` meets an entity that is not a mapping

    """
    return _encode_node(node, EncodeContext(options=options or EncodeOptions()))


def encode_content(nodes: list[Node], options: Optional[EncodeOptions] = None) -> list[JSONObject]:
    """Encode an ordered list of nodes to a ``content`` array.

    This is the inverse of ``decode_content``: for any list decoded from
    well-formed input, ``decode_content(encode_content(nodes)) == nodes``.
    """
    return _encode_children(nodes, EncodeContext(options=options or EncodeOptions()))


def document_to_json(document: Document, indent: Optional[int] = None, options: Optional[EncodeOptions] = None) -> str:
    """Serialize a document to a JSON string.

    Unicode characters are written as-is rather than escaped.
    """
    return json.dumps(encode_node(document, options=options), indent=indent, ensure_ascii=False)


__all__ = [
    "DecodeContext",
    "EncodeContext",
    "DecodeResult",
    "registry",
    "decode",
    "decode_content",
    "decode_document",
    "json_to_document",
    "encode_node",
    "encode_content",
    "document_to_json",
]
