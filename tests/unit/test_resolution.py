#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Tests for deferred link resolution."""

import pytest
from utils import RecordingResolver, container_json, resource_link_json

from richtext.ast import ResolvedLink, ResourceLinkData, UnresolvedLink
from richtext.ast.serialization import decode, decode_content, decode_document
from richtext.ast.utils import collect_resource_links, find_unresolved_links
from richtext.exceptions import LinkResolutionError, RichTextError, ValidationError
from richtext.options import DecodeOptions
from richtext.resolution import LinkResolutionQueue, MappingResolver, Resolver


@pytest.mark.unit
class TestMappingResolver:
    """Tests for the in-memory resolver."""

    def test_resolve(self):
        """Known keys return their entity, unknown keys return None."""
        resolver = MappingResolver({("Entry", "X"): {"title": "Hello"}})

        assert resolver.resolve("Entry", "X") == {"title": "Hello"}
        assert resolver.resolve("Asset", "X") is None
        assert len(resolver) == 1

    def test_add(self):
        """Entities can be added after construction."""
        resolver = MappingResolver()
        resolver.add("Asset", "a", {"file": {}})
        assert resolver.resolve("Asset", "a") == {"file": {}}

    def test_satisfies_protocol(self):
        """MappingResolver and duck-typed resolvers are Resolvers."""
        assert isinstance(MappingResolver(), Resolver)
        assert isinstance(RecordingResolver(), Resolver)

    def test_from_includes(self, includes_json):
        """Includes are keyed by link type and sys.id."""
        resolver = MappingResolver.from_includes(includes_json)

        assert len(resolver) == 3
        assert resolver.resolve("Entry", "author-1")["fields"]["name"] == "Ada"
        assert resolver.resolve("Asset", "logo") is not None
        assert resolver.resolve("Asset", "author-1") is None

    @pytest.mark.parametrize(
        "includes",
        [
            [],
            {"Entry": {"sys": {"id": "x"}}},
            {"Entry": [{"fields": {}}]},
            {"Entry": [{"sys": {"id": 5}}]},
            {"Entry": ["x"]},
        ],
    )
    def test_from_includes_rejects_bad_input(self, includes):
        """Malformed includes blocks are validation errors."""
        with pytest.raises(ValidationError) as exc_info:
            MappingResolver.from_includes(includes)
        assert exc_info.value.parameter_name == "includes"


@pytest.mark.unit
class TestLinkResolutionQueue:
    """Tests for the per-pass queue."""

    def test_drain_applies_entities(self):
        """Each registered holder receives its entity."""
        queue = LinkResolutionQueue()
        first = ResourceLinkData(target=UnresolvedLink("Entry", "a"))
        second = ResourceLinkData(target=UnresolvedLink("Asset", "b"))
        queue.register(first.target, first.apply_resolution)
        queue.register(second.target, second.apply_resolution)
        assert len(queue) == 2

        report = queue.drain(MappingResolver({("Entry", "a"): "A"}))

        assert first.target == ResolvedLink("Entry", "a", "A")
        assert second.target == UnresolvedLink("Asset", "b")
        assert report.resolved == [ResolvedLink("Entry", "a", "A")]
        assert report.unresolved == [UnresolvedLink("Asset", "b")]
        assert len(queue) == 0

    def test_drain_without_resolver(self):
        """With no resolver every link is reported unresolved."""
        queue = LinkResolutionQueue()
        data = ResourceLinkData(target=UnresolvedLink("Entry", "a"))
        queue.register(data.target, data.apply_resolution)

        report = queue.drain(None)

        assert report.unresolved == [UnresolvedLink("Entry", "a")]
        assert report.resolved == []
        assert not report.complete

    def test_empty_queue_report_is_complete(self):
        """Nothing pending means a complete report."""
        assert LinkResolutionQueue().drain(MappingResolver()).complete

    def test_drain_only_once(self):
        """A queue belongs to one pass and cannot be reused."""
        queue = LinkResolutionQueue()
        queue.drain(None)

        with pytest.raises(RichTextError, match="already been drained"):
            queue.drain(None)
        with pytest.raises(RichTextError, match="drained"):
            queue.register(UnresolvedLink("Entry", "a"), lambda entity: True)

    def test_already_resolved_holder_not_reported(self):
        """A holder that refuses the write is not counted as resolved."""
        queue = LinkResolutionQueue()
        queue.register(UnresolvedLink("Entry", "a"), lambda entity: False)

        report = queue.drain(MappingResolver({("Entry", "a"): "A"}))

        assert report.resolved == []
        assert report.unresolved == []

    def test_resolver_failure_is_wrapped(self):
        """Exceptions from the resolver surface as LinkResolutionError."""

        class BrokenResolver:
            def resolve(self, link_type, link_id):
                raise KeyError(link_id)

        queue = LinkResolutionQueue()
        queue.register(UnresolvedLink("Entry", "a"), lambda entity: True)

        with pytest.raises(LinkResolutionError) as exc_info:
            queue.drain(BrokenResolver())

        assert exc_info.value.link_type == "Entry"
        assert exc_info.value.link_id == "a"
        assert isinstance(exc_info.value.original_error, KeyError)


@pytest.mark.unit
class TestDecodeResolution:
    """Tests for resolution as part of a decode pass."""

    def test_no_pending_links_after_decode(self, article_json, includes_json):
        """Only links the resolver has no entity for remain unresolved."""
        doc = decode_document(article_json, resolver=MappingResolver.from_includes(includes_json))

        assert find_unresolved_links(doc) == [UnresolvedLink("Asset", "missing-asset")]
        resolved = [node.data.target for node in collect_resource_links(doc) if node.data.target.is_resolved]
        assert [(link.link_type, link.id) for link in resolved] == [
            ("Entry", "author-1"),
            ("Entry", "promo-7"),
            ("Entry", "author-1"),
            ("Asset", "logo"),
        ]

    def test_resolved_entity_is_the_resolver_object(self, article_json, includes_json):
        """The entity stored is exactly what the resolver returned."""
        resolver = MappingResolver.from_includes(includes_json)
        doc = decode_document(article_json, resolver=resolver)

        promo = doc.content[2]
        assert promo.data.target.entity is resolver.resolve("Entry", "promo-7")
        assert promo.data.title == "Promo"

    def test_resolver_called_once_per_key(self):
        """Duplicate links share one lookup and one answer."""
        resolver = RecordingResolver({("Entry", "X"): {"id": "X"}})
        data = [
            resource_link_json("embedded-entry-block", "Entry", "X"),
            container_json("paragraph", resource_link_json("entry-hyperlink", "Entry", "X")),
            resource_link_json("embedded-asset-block", "Asset", "X"),
        ]

        nodes = decode_content(data, resolver=resolver)

        assert resolver.calls == [("Entry", "X"), ("Asset", "X")]
        assert nodes[0].data.target.entity is nodes[1].content[0].data.target.entity
        assert nodes[2].data.target == UnresolvedLink("Asset", "X")

    def test_separate_passes_query_again(self):
        """Memoization does not outlive a decode pass."""
        resolver = RecordingResolver({("Entry", "X"): 1})
        data = [resource_link_json("embedded-entry-block", "Entry", "X")]

        decode_content(data, resolver=resolver)
        decode_content(data, resolver=resolver)

        assert resolver.calls == [("Entry", "X"), ("Entry", "X")]

    def test_resolver_not_called_for_malformed_input(self):
        """A failed decode never reaches the resolver."""
        resolver = RecordingResolver({("Entry", "X"): 1})
        data = [resource_link_json("embedded-entry-block", "Entry", "X"), {"nodeType": "text"}]

        with pytest.raises(RichTextError):
            decode_content(data, resolver=resolver)
        assert resolver.calls == []

    def test_resolve_links_disabled(self, article_json, includes_json):
        """resolve_links=False ignores the resolver."""
        resolver = RecordingResolver({("Entry", "author-1"): {}})

        result = decode(article_json, resolver=resolver, options=DecodeOptions(resolve_links=False))

        assert resolver.calls == []
        assert len(result.report.unresolved) == 5
        assert len(find_unresolved_links(result.document)) == 5

    def test_resolver_error_aborts_decode(self):
        """A failing resolver fails the whole decode call."""

        class BrokenResolver:
            def resolve(self, link_type, link_id):
                raise RuntimeError("catalog offline")

        with pytest.raises(LinkResolutionError, match="catalog offline"):
            decode_content([resource_link_json("entry-hyperlink", "Entry", "e")], resolver=BrokenResolver())

    def test_embedded_entities_are_not_queued(self):
        """Targets decoded as entities never reach the resolver."""
        resolver = RecordingResolver()
        entity = {"sys": {"type": "Entry", "id": "e"}}

        decode_content(
            [{"nodeType": "embedded-entry-block", "data": {"target": entity}, "content": []}], resolver=resolver
        )

        assert resolver.calls == []
