"""Paginated result container shared by group and membership listings."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from device_registry.domain.errors import MalformedPayloadError

T = TypeVar("T")


@dataclass(frozen=True)
class PageRequest:
    """A validated offset/limit pair."""

    offset: int
    limit: int

    @classmethod
    def build(
        cls, offset: int | None, limit: int | None, default_limit: int, max_limit: int
    ) -> "PageRequest":
        """Apply defaults and bounds to caller supplied paging values.

        An omitted limit becomes ``default_limit``; a limit above
        ``max_limit`` is clamped so a single page stays bounded.

        Raises:
            MalformedPayloadError: If offset or limit is negative.
        """
        if offset is not None and offset < 0:
            raise MalformedPayloadError(f"offset must be non-negative, got {offset}")
        if limit is not None and limit < 0:
            raise MalformedPayloadError(f"limit must be non-negative, got {limit}")

        return cls(
            offset=offset or 0,
            limit=default_limit if limit is None else min(limit, max_limit),
        )


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of results plus the total size of the unpaginated result."""

    total: int
    offset: int
    limit: int
    values: list[T] = field(default_factory=list)
