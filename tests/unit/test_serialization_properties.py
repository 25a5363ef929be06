"""Property-based tests for structured text decoding and encoding.

This test module uses Hypothesis to generate random wire JSON trees and
validate the laws the decoder and encoder must obey for any well-formed input.

Test Coverage:
- Property: encode(decode(x)) reproduces the wire JSON
- Property: decode(encode(decode(x))) == decode(x)
- Property: both laws hold for embedded entities and resolver-resolved links
- Property: entity mode output decodes back to the resolved tree
- Property: sibling order is preserved
- Property: heading level always comes from the tag
- Property: an unknown tag anywhere fails the whole decode
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st
from utils import entity_json, link_json

from richtext.ast import Heading, MarkType, NodeType, walk
from richtext.ast.serialization import decode_content, decode_document, encode_content, encode_node
from richtext.exceptions import UnknownNodeKindError
from richtext.options import EncodeOptions

_CONTAINER_TAGS = [
    "paragraph",
    "heading-1",
    "heading-2",
    "heading-3",
    "heading-4",
    "heading-5",
    "heading-6",
    "blockquote",
    "hr",
    "ordered-list",
    "unordered-list",
    "list-item",
]
_RESOURCE_LINK_TAGS = [
    "embedded-entry-block",
    "embedded-asset-block",
    "embedded-entry-inline",
    "entry-hyperlink",
    "asset-hyperlink",
]
_KNOWN_TAGS = {node_type.value for node_type in NodeType}

identifiers = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789-", min_size=1, max_size=12)
optional_titles = st.one_of(st.none(), st.text(max_size=20))
link_types = st.sampled_from(["Entry", "Asset"])

# A reference stub, or the entity itself embedded in its place
link_targets = st.one_of(
    st.builds(link_json, link_types, identifiers),
    st.builds(
        lambda link_type, link_id, label: entity_json(link_type, link_id, {"label": label}),
        link_types,
        identifiers,
        st.text(max_size=10),
    ),
)


class EntryCatalog:
    """Resolves every Entry link to an entity carrying its own sys; assets stay unresolved."""

    def resolve(self, link_type, link_id):
        if link_type == "Entry":
            return entity_json(link_type, link_id, {"resolved": True})
        return None


@st.composite
def text_nodes(draw):
    marks = draw(st.lists(st.sampled_from([mark.value for mark in MarkType]), max_size=4))
    return {"nodeType": "text", "value": draw(st.text(max_size=30)), "marks": [{"type": mark} for mark in marks]}


def _with_title(data, title):
    if title is not None:
        data["title"] = title
    return data


def _extend(children):
    containers = st.builds(
        lambda tag, content: {"nodeType": tag, "content": content},
        st.sampled_from(_CONTAINER_TAGS),
        children,
    )
    hyperlinks = st.builds(
        lambda uri, title, content: {
            "nodeType": "hyperlink",
            "data": _with_title({"uri": uri}, title),
            "content": content,
        },
        st.text(min_size=1, max_size=30),
        optional_titles,
        children,
    )
    resource_links = st.builds(
        lambda tag, target, title, content: {
            "nodeType": tag,
            "data": _with_title({"target": target}, title),
            "content": content,
        },
        st.sampled_from(_RESOURCE_LINK_TAGS),
        link_targets,
        optional_titles,
        children,
    )
    return st.one_of(containers, hyperlinks, resource_links)


wire_nodes = st.recursive(text_nodes(), lambda children: _extend(st.lists(children, max_size=4)), max_leaves=25)
wire_content = st.lists(wire_nodes, max_size=6)
unknown_tags = st.text(min_size=1, max_size=20).filter(lambda tag: tag not in _KNOWN_TAGS)


def _insert_unknown(content, tag, position):
    """Insert an unknown element into a copy of the deepest first-child chain."""
    bad = {"nodeType": tag, "content": []}
    if not content:
        return [bad]
    first = dict(content[0])
    if "content" in first and position % 2:
        first["content"] = _insert_unknown(list(first["content"]), tag, position // 2)
        return [first, *content[1:]]
    index = position % (len(content) + 1)
    return [*content[:index], bad, *content[index:]]


@pytest.mark.unit
@pytest.mark.fuzzing
class TestSerializationProperties:
    """Property-based tests for the decode/encode laws."""

    @given(wire_content)
    def test_encode_reproduces_wire_json(self, content):
        """Property: encoding a decoded content array gives back the input."""
        assert encode_content(decode_content(content)) == content

    @given(wire_content)
    def test_round_trip_is_stable(self, content):
        """Property: decode . encode is the identity on decoded trees."""
        nodes = decode_content(content)
        assert decode_content(encode_content(nodes)) == nodes

    @given(wire_content)
    def test_document_round_trip(self, content):
        """Property: documents round-trip like bare content arrays."""
        doc = decode_document({"nodeType": "document", "content": content})
        assert decode_document(encode_node(doc)) == doc

    @given(wire_content)
    def test_sibling_order_preserved(self, content):
        """Property: the i-th output node comes from the i-th input element."""
        nodes = decode_content(content)
        assert [NodeType(node.node_type).value for node in nodes] == [element["nodeType"] for element in content]

    @given(st.integers(min_value=1, max_value=6), st.dictionaries(st.sampled_from(["level", "data"]), st.integers()))
    def test_heading_level_from_tag(self, level, extra):
        """Property: heading-N decodes to level N whatever else the payload holds."""
        nodes = decode_content([{**extra, "nodeType": f"heading-{level}", "content": []}])

        assert isinstance(nodes[0], Heading)
        assert nodes[0].level == level
        assert encode_node(nodes[0]) == {"nodeType": f"heading-{level}", "content": []}

    @given(wire_content)
    def test_unresolved_without_resolver(self, content):
        """Property: without a resolver only embedded entities are resolved."""
        for node in walk(decode_content(content)):
            data = getattr(node, "data", None)
            if data is not None and hasattr(data, "target"):
                assert data.target.is_resolved == getattr(data.target, "embedded", False)

    @given(wire_content)
    def test_resolved_tree_encodes_to_input(self, content):
        """Property: reference mode writes back stubs and embedded entities as they arrived."""
        assert encode_content(decode_content(content, resolver=EntryCatalog())) == content

    @given(wire_content)
    def test_resolved_round_trip(self, content):
        """Property: a resolved tree decodes back to itself with the same resolver."""
        nodes = decode_content(content, resolver=EntryCatalog())
        assert decode_content(encode_content(nodes), resolver=EntryCatalog()) == nodes

    @given(wire_content)
    def test_entity_mode_round_trip(self, content):
        """Property: entity mode output decodes to the resolved tree without a resolver."""
        nodes = decode_content(content, resolver=EntryCatalog())
        options = EncodeOptions(resolved_link_mode="entity")

        encoded = encode_content(nodes, options)

        assert decode_content(encoded) == nodes
        assert encode_content(decode_content(encoded), options) == encoded

    @given(wire_content, unknown_tags, st.integers(min_value=0, max_value=64))
    def test_unknown_tag_rejected_anywhere(self, content, tag, position):
        """Property: one unknown tag at any position fails the decode."""
        with pytest.raises(UnknownNodeKindError) as exc_info:
            decode_content(_insert_unknown(content, tag, position))
        assert exc_info.value.node_type == tag
