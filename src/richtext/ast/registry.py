#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/ast/registry.py
"""Discriminator registry mapping node tags to their handlers.

Each registered tag maps to a ``NodeHandler`` bundling the concrete node class
with the functions that decode and encode that shape. Several tags may share
one handler: the six heading tags all use the heading handler, and the entry
and asset tags share the resource link block and inline handlers.

The registry is keyed by tag alone. The shared instance built by
``richtext.ast.serialization`` is complete for every tag of the format, so a
failed lookup means the input uses an unsupported node kind.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

from richtext.ast.nodes import Node, NodeType
from richtext.exceptions import UnknownNodeKindError

if TYPE_CHECKING:
    from richtext.ast.serialization import DecodeContext, EncodeContext

logger = logging.getLogger(__name__)

DecodeFunc = Callable[[Dict[str, Any], NodeType, "DecodeContext", str], Node]
EncodeFunc = Callable[[Any, "EncodeContext"], Dict[str, Any]]


@dataclass(frozen=True)
class NodeHandler:
    """Decode/encode logic for one node shape.

    Parameters
    ----------
    node_class : type
        Concrete node class produced by ``decode`` and accepted by ``encode``
    decode : callable
        ``decode(data, node_type, context, path) -> Node``. Receives the tag it
        was looked up with, so shared handlers can specialize on it.
    encode : callable
        ``encode(node, context) -> dict``

    """

    node_class: type
    decode: DecodeFunc
    encode: EncodeFunc


class NodeRegistry:
    """Registry of node handlers keyed by discriminator tag.

    Examples
    --------
    >>> handler = registry.lookup("paragraph")
    >>> handler.node_class.__name__
    'Paragraph'

    """

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._handlers: Dict[str, NodeHandler] = {}

    def register(self, node_type: NodeType | str, handler: NodeHandler) -> None:
        """Register a handler for a tag.

        Parameters
        ----------
        node_type : NodeType or str
            Tag to register
        handler : NodeHandler
            Handler for that tag

        """
        tag = NodeType(node_type).value
        if tag in self._handlers:
            logger.debug(f"Replacing handler for node type '{tag}'")
        self._handlers[tag] = handler

    def lookup(self, node_type: NodeType | str, path: Optional[str] = None) -> NodeHandler:
        """Return the handler registered for a tag.

        Parameters
        ----------
        node_type : NodeType or str
            Tag to look up
        path : str, optional
            Location of the element being decoded, used in the error message

        Returns
        -------
        NodeHandler
            The registered handler

        Raises
        ------
        UnknownNodeKindError
            If no handler is registered for the tag

        """
        tag = node_type.value if isinstance(node_type, NodeType) else node_type
        handler = self._handlers.get(tag)
        if handler is None:
            raise UnknownNodeKindError(tag, path=path)
        return handler

    def is_registered(self, node_type: NodeType | str) -> bool:
        """Check whether a tag has a handler."""
        tag = node_type.value if isinstance(node_type, NodeType) else node_type
        return tag in self._handlers

    def list_tags(self) -> List[str]:
        """List registered tags in registration order."""
        return list(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def __contains__(self, node_type: object) -> bool:
        return isinstance(node_type, str) and self.is_registered(node_type)


__all__ = ["NodeHandler", "NodeRegistry"]
