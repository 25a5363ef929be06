#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Options for decoding and encoding structured text.

Both option classes are frozen dataclasses; use ``create_updated`` to derive
a modified copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any, get_args

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from richtext.constants import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_RESOLVE_LINKS,
    DEFAULT_RESOLVED_LINK_MODE,
    ResolvedLinkMode,
)
from richtext.exceptions import ValidationError


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning capabilities."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class DecodeOptions(CloneFrozenMixin):
    """Configuration for a decode pass.

    Parameters
    ----------
    max_depth : int
        Maximum nesting depth of ``content`` arrays. Deeper input is rejected
        as malformed instead of exhausting the interpreter stack.
    resolve_links : bool, default=True
        Whether to consult the resolver at the end of the pass. When False,
        every resource link is left unresolved even if a resolver is given.

    """

    max_depth: int = field(
        default=DEFAULT_MAX_DEPTH,
        metadata={"help": "Maximum nesting depth of content arrays", "type": int},
    )
    resolve_links: bool = field(
        default=DEFAULT_RESOLVE_LINKS,
        metadata={"help": "Resolve entry and asset links through the supplied resolver"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges.

        Raises
        ------
        ValidationError
            If ``max_depth`` is not a positive integer.

        """
        if self.max_depth <= 0:
            raise ValidationError(
                f"max_depth must be positive, got {self.max_depth}",
                parameter_name="max_depth",
                parameter_value=self.max_depth,
            )


@dataclass(frozen=True)
class EncodeOptions(CloneFrozenMixin):
    """Configuration for encoding nodes back to wire JSON.

    Parameters
    ----------
    resolved_link_mode : {"reference", "entity"}, default="reference"
        How a resolved link target is written. ``reference`` writes the
        ``{"sys": {"type": "Link", ...}}`` stub it was decoded from, so the
        output decodes to the same tree. ``entity`` writes the resolved
        entity's own JSON, which must be a mapping.

    """

    resolved_link_mode: ResolvedLinkMode = field(
        default=DEFAULT_RESOLVED_LINK_MODE,
        metadata={"help": "Write resolved links as references or as embedded entities"},
    )

    def __post_init__(self) -> None:
        """Validate the resolved link mode."""
        allowed = get_args(ResolvedLinkMode)
        if self.resolved_link_mode not in allowed:
            raise ValidationError(
                f"resolved_link_mode must be one of {allowed}, got {self.resolved_link_mode!r}",
                parameter_name="resolved_link_mode",
                parameter_value=self.resolved_link_mode,
            )


__all__ = ["CloneFrozenMixin", "DecodeOptions", "EncodeOptions"]
