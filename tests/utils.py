"""Test utilities for the richtext test suite.

Helpers for building wire JSON by hand.
"""

from typing import Any


def link_json(link_type: str, link_id: str) -> dict[str, Any]:
    """Wire JSON of an unresolved link reference."""
    return {"sys": {"type": "Link", "linkType": link_type, "id": link_id}}


def entity_json(link_type: str, link_id: str, fields: dict[str, Any] | None = None) -> dict[str, Any]:
    """Wire JSON of an entity embedded in place of a link reference."""
    return {"sys": {"type": link_type, "id": link_id}, "fields": dict(fields or {})}


def text_json(value: str, *marks: str) -> dict[str, Any]:
    """Wire JSON of a text node."""
    return {"nodeType": "text", "value": value, "marks": [{"type": mark} for mark in marks]}


def container_json(node_type: str, *children: dict[str, Any]) -> dict[str, Any]:
    """Wire JSON of a plain container node."""
    return {"nodeType": node_type, "content": list(children)}


def resource_link_json(
    node_type: str, link_type: str, link_id: str, title: str | None = None, *children: dict[str, Any]
) -> dict[str, Any]:
    """Wire JSON of a resource link node."""
    data: dict[str, Any] = {"target": link_json(link_type, link_id)}
    if title is not None:
        data["title"] = title
    return {"nodeType": node_type, "data": data, "content": list(children)}


class RecordingResolver:
    """Resolver that records every lookup it receives."""

    def __init__(self, entities: dict[tuple[str, str], Any] | None = None):
        self.entities = dict(entities or {})
        self.calls: list[tuple[str, str]] = []

    def resolve(self, link_type: str, link_id: str) -> Any:
        self.calls.append((link_type, link_id))
        return self.entities.get((link_type, link_id))
