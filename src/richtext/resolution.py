#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richtext/resolution.py
"""Deferred resolution of entry and asset links.

Resource link nodes are decoded with an ``UnresolvedLink`` target. While the
``ResourceLinkData`` holding that target is decoded, it registers itself with
the pass's ``LinkResolutionQueue``. After the structural decode is complete,
the top-level decode call drains the queue: each pending link is looked up
through the caller's ``Resolver`` and, if an entity comes back, written into
the exact ``ResourceLinkData`` instance that registered it. No tree walk is
needed and nothing is left pending once the decode call returns.

The queue belongs to a single decode pass. Within a pass the resolver is asked
once per distinct ``(link_type, id)`` pair and its answer is applied to every
occurrence of that pair.

Examples
--------
Resolve links from a delivery API ``includes`` block:

    >>> from richtext import decode_document
    >>> from richtext.resolution import MappingResolver
    >>> resolver = MappingResolver.from_includes(response["includes"])
    >>> doc = decode_document(response["fields"]["body"], resolver=resolver)

"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Protocol, runtime_checkable

from richtext.ast.nodes import ResolvedLink, UnresolvedLink
from richtext.constants import SYS_ID_KEY, SYS_KEY
from richtext.exceptions import LinkResolutionError, RichTextError, ValidationError

logger = logging.getLogger(__name__)

ApplyResolution = Callable[[Any], bool]


@runtime_checkable
class Resolver(Protocol):
    """Catalog capable of mapping a link to the entity it references.

    ``resolve`` is called synchronously during a decode pass and must return
    ``None`` when it has nothing for the link. It must not mutate the tree.
    """

    def resolve(self, link_type: str, link_id: str) -> Optional[Any]:
        """Return the entity for ``(link_type, link_id)`` or None."""
        ...


class MappingResolver:
    """Resolver backed by an in-memory catalog.

    Parameters
    ----------
    entities : mapping, optional
        Catalog keyed by ``(link_type, id)`` tuples

    Examples
    --------
    >>> resolver = MappingResolver({("Entry", "X"): {"title": "Hello"}})
    >>> resolver.resolve("Entry", "X")
    {'title': 'Hello'}
    >>> resolver.resolve("Asset", "X") is None
    True

    """

    def __init__(self, entities: Optional[Mapping[tuple[str, str], Any]] = None) -> None:
        """Initialize the resolver with an optional catalog."""
        self._entities: dict[tuple[str, str], Any] = dict(entities or {})

    @classmethod
    def from_includes(cls, includes: Mapping[str, Iterable[Mapping[str, Any]]]) -> MappingResolver:
        """Build a resolver from a delivery API style ``includes`` block.

        Parameters
        ----------
        includes : mapping
            Link type to list of entities, e.g. ``{"Entry": [...], "Asset": [...]}``.
            Each entity is keyed by its ``sys.id``.

        Returns
        -------
        MappingResolver
            Resolver over every included entity

        Raises
        ------
        ValidationError
            If the block is not a mapping of lists or an entity has no ``sys.id``

        """
        if not isinstance(includes, Mapping):
            raise ValidationError(
                "includes must be an object mapping link types to entity lists",
                parameter_name="includes",
                parameter_value=type(includes).__name__,
            )

        resolver = cls()
        for link_type, entities in includes.items():
            if not isinstance(entities, list):
                raise ValidationError(
                    f"includes['{link_type}'] must be a list of entities",
                    parameter_name="includes",
                    parameter_value=link_type,
                )
            for entity in entities:
                sys_info = entity.get(SYS_KEY) if isinstance(entity, Mapping) else None
                entity_id = sys_info.get(SYS_ID_KEY) if isinstance(sys_info, Mapping) else None
                if not isinstance(entity_id, str):
                    raise ValidationError(
                        f"Included {link_type} entity is missing sys.id",
                        parameter_name="includes",
                        parameter_value=link_type,
                    )
                resolver.add(link_type, entity_id, entity)
        return resolver

    def add(self, link_type: str, link_id: str, entity: Any) -> None:
        """Add or replace an entity in the catalog."""
        self._entities[(link_type, link_id)] = entity

    def resolve(self, link_type: str, link_id: str) -> Optional[Any]:
        """Return the catalogued entity or None."""
        return self._entities.get((link_type, link_id))

    def __len__(self) -> int:
        return len(self._entities)


@dataclass
class PendingResolution:
    """A link waiting to be resolved and the write-back for its holder."""

    link: UnresolvedLink
    apply: ApplyResolution


@dataclass
class ResolutionReport:
    """Outcome of draining a pass's resolution queue.

    Parameters
    ----------
    resolved : list of ResolvedLink
        Links that received an entity, in registration order
    unresolved : list of UnresolvedLink
        Links left unresolved, in registration order

    """

    resolved: list[ResolvedLink] = field(default_factory=list)
    unresolved: list[UnresolvedLink] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        """True when no link was left unresolved."""
        return not self.unresolved


class LinkResolutionQueue:
    """Per-pass list of links awaiting resolution.

    A queue is created by the top-level decode call, filled while the tree is
    built and drained exactly once before that call returns.
    """

    def __init__(self) -> None:
        """Initialize an empty queue."""
        self._pending: list[PendingResolution] = []
        self._drained = False

    def register(self, link: UnresolvedLink, apply: ApplyResolution) -> None:
        """Register a link and the callback that writes its entity back.

        Parameters
        ----------
        link : UnresolvedLink
            The link as decoded
        apply : callable
            Called with the entity if the resolver supplies one; returns
            whether the write happened

        """
        if self._drained:
            raise RichTextError("Cannot register a link on a drained resolution queue")
        self._pending.append(PendingResolution(link=link, apply=apply))

    def __len__(self) -> int:
        return len(self._pending)

    def drain(self, resolver: Optional[Resolver]) -> ResolutionReport:
        """Resolve every pending link and apply the results.

        Parameters
        ----------
        resolver : Resolver or None
            Catalog to consult. With no resolver every link stays unresolved.

        Returns
        -------
        ResolutionReport
            Which links were resolved and which were not

        Raises
        ------
        LinkResolutionError
            If the resolver raises

        """
        if self._drained:
            raise RichTextError("Resolution queue has already been drained")
        self._drained = True

        pending, self._pending = self._pending, []
        report = ResolutionReport()
        answers: dict[tuple[str, str], Any] = {}

        for item in pending:
            link = item.link
            key = (link.link_type, link.id)
            if resolver is None:
                report.unresolved.append(link)
                continue

            if key not in answers:
                try:
                    answers[key] = resolver.resolve(link.link_type, link.id)
                except Exception as e:
                    raise LinkResolutionError(link.link_type, link.id, original_error=e) from e

            entity = answers[key]
            if entity is None:
                logger.debug(f"No entity for {link.link_type} '{link.id}', leaving unresolved")
                report.unresolved.append(link)
            elif item.apply(entity):
                logger.debug(f"Resolved {link.link_type} '{link.id}'")
                report.resolved.append(link.resolved_with(entity))

        return report


__all__ = [
    "Resolver",
    "MappingResolver",
    "PendingResolution",
    "ResolutionReport",
    "LinkResolutionQueue",
]
