"""Pagination over list operations.

Every list response satisfies the Paginated protocol. fetch_all_pages
is the generic driver: it requests successive pages and folds each of
them, the first included, into an empty accumulator with `append`.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Awaitable, Callable
from typing import Protocol, TypeVar, runtime_checkable

from .observability.logger import logger

_log = logger.bind(component="pagination")


@runtime_checkable
class Paginated(Protocol):
    total_count: int

    def append(self, other: object) -> int:
        """Fold `other` into this response. Internal use only."""
        ...

    def __len__(self) -> int: ...


R = TypeVar("R")
P = TypeVar("P", bound=Paginated)


async def fetch_all_pages(
    fetch: Callable[[R], Awaitable[P]],
    request: R,
) -> P:
    """Fetch every page of `request` and return them folded into one response.

    Walking starts at the request's page (1 when unset) and stops on an
    empty page, or once the accumulated `total_count` reaches the total
    reported by the last page fetched. Since the accumulator starts
    empty, its `total_count` ends up equal to the number of items fetched.

    Args:
        fetch: Coroutine function fetching a single page for a request.
        request: A list request dataclass with a `page` field.
    """
    page = getattr(request, "page", None) or 1
    accumulator: P | None = None

    while True:
        response = await fetch(dataclasses.replace(request, page=page))  # type: ignore[type-var]
        if accumulator is None:
            accumulator = type(response)()
        added = accumulator.append(response)
        _log.debug(
            "Page {page}: {added} items, {count}/{total}",
            page=page, added=added, count=accumulator.total_count, total=response.total_count,
        )
        if added == 0 or accumulator.total_count >= response.total_count:
            return accumulator
        page += 1
