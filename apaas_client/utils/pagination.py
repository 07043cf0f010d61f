"""
Drives cursor-based pagination for record queries until the server runs out of pages.
"""

import logging
import math
from collections.abc import Awaitable, Callable
from typing import Any, Optional

from apaas_client.exceptions import PaginationLimitError
from apaas_client.models.results import AggregatedResult, extract_items

log = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100


async def paginate(
    fetch_page: Callable[[dict[str, Any]], Awaitable[dict[str, Any]]],
    query: dict[str, Any],
    *,
    max_pages: Optional[int] = None,
    label: str = "query",
) -> AggregatedResult:
    """
    Fetches every page of a query and accumulates the returned records.

    The caller's query is merged with the current cursor (empty on the first
    call) for each request. ``total`` is taken from the first page only. The
    loop ends when the server returns no ``next_page_token``.

    Args:
        fetch_page: Coroutine function issuing one rate-limited query and
            returning the response envelope.
        query: The query body, e.g. ``page_size``, ``filter``, ``order_by``.
        max_pages: Optional cap on the number of fetched pages.
        label: Operation name used in log messages.

    Raises:
        PaginationLimitError: If the server still reports more pages after
            ``max_pages`` fetches.
    """
    if max_pages is not None and max_pages < 1:
        raise ValueError("max_pages must be at least 1.")

    page_size = query.get("page_size") or DEFAULT_PAGE_SIZE
    items: list[dict[str, Any]] = []
    cursor = ""
    total = 0
    total_pages = 0
    page = 0

    while True:
        envelope = await fetch_page({**query, "page_token": cursor})
        page += 1

        page_items = extract_items(envelope)
        items.extend(page_items)
        data = envelope.get("data") or {}

        if page == 1:
            total = data.get("total") or 0
            total_pages = math.ceil(total / page_size)
            log.info(
                f"{label}: Starting paginated query: total={total}, pages={total_pages}"
            )

        cursor = data.get("next_page_token") or ""

        width = len(str(total_pages))
        log.info(f"{label}: Page completed: [{page:0{width}d}/{total_pages:0{width}d}]")
        log.debug(
            f"{label}: Page {page} details: items={len(page_items)}, "
            f"nextToken={cursor or 'none'}"
        )

        if not cursor:
            break

        if max_pages is not None and page >= max_pages:
            raise PaginationLimitError(
                f"{label}: Server still reports more data after {page} pages "
                f"(max_pages={max_pages})."
            )

    return AggregatedResult(total=total, items=items)
