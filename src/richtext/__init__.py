"""richtext - Typed decoding and encoding of structured text documents.

Structured text is a JSON tree in which every node carries a ``nodeType``
discriminator that decides its shape and how its children are parsed. This
package decodes that JSON into typed node classes, encodes it back, and
resolves the entries and assets that embedded nodes link to.

Key Features
------------
- Discriminator-driven decoding of heterogeneous ``content`` arrays
- Lossless re-encoding of decoded trees
- Deferred, in-place link resolution through a caller-supplied resolver
- Precise errors locating the offending element

Requirements
------------
- Python 3.10+

Examples
--------
Decode a document and resolve its links from a delivery API response:

    >>> from richtext import MappingResolver, decode_document
    >>> resolver = MappingResolver.from_includes(response["includes"])
    >>> doc = decode_document(response["fields"]["body"], resolver=resolver)
    >>> doc.content[0].node_type
    <NodeType.PARAGRAPH: 'paragraph'>

Encode it back to JSON:

    >>> from richtext import document_to_json
    >>> json_str = document_to_json(doc, indent=2)

See Also
--------
richtext.ast : node definitions, registry and serialization
richtext.resolution : link resolution engine

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "richtext requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "1.0.0"

from richtext.ast import (
    BlockQuote,
    DecodeResult,
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
    decode,
    decode_content,
    decode_document,
    document_to_json,
    encode_content,
    encode_node,
    json_to_document,
)
from richtext.exceptions import (
    DecodeError,
    InvariantViolationError,
    LinkResolutionError,
    MalformedDocumentError,
    RichTextError,
    ShapeMismatchError,
    UnknownNodeKindError,
    ValidationError,
)
from richtext.options import DecodeOptions, EncodeOptions
from richtext.resolution import MappingResolver, ResolutionReport, Resolver

__all__ = [
    "__version__",
    # Decoding and encoding
    "decode",
    "decode_content",
    "decode_document",
    "json_to_document",
    "encode_node",
    "encode_content",
    "document_to_json",
    "DecodeResult",
    "DecodeOptions",
    "EncodeOptions",
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
    "ResourceLinkData",
    "UnresolvedLink",
    "ResolvedLink",
    # Resolution
    "Resolver",
    "MappingResolver",
    "ResolutionReport",
    # Exceptions
    "RichTextError",
    "ValidationError",
    "DecodeError",
    "MalformedDocumentError",
    "UnknownNodeKindError",
    "ShapeMismatchError",
    "InvariantViolationError",
    "LinkResolutionError",
]
