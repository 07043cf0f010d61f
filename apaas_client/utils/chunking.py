"""
Splits oversized write batches into API-sized chunks and sends them one at a time.
"""

import logging
from collections.abc import Awaitable, Callable, Iterator, Sequence
from typing import TypeVar

from apaas_client.exceptions import BatchPartialFailureError

log = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Hard per-call batch ceiling of the platform API.
MAX_BATCH_SIZE = 100


def chunked(items: Sequence[T], size: int = MAX_BATCH_SIZE) -> Iterator[list[T]]:
    """Yields consecutive slices of at most ``size`` elements, in order."""
    if size < 1:
        raise ValueError("Chunk size must be at least 1.")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


async def run_chunked(
    items: Sequence[T],
    send_chunk: Callable[[list[T]], Awaitable[R]],
    *,
    size: int = MAX_BATCH_SIZE,
    label: str = "batch",
) -> list[R]:
    """
    Sends ``items`` in chunks, sequentially, and returns one result per chunk.

    Each chunk waits for the previous one to finish. If a chunk fails, the
    remaining chunks are never sent and chunks already sent stay applied on the
    remote side.

    Args:
        items: The records or identifiers to send.
        send_chunk: Coroutine function performing one rate-limited call.
        size: Maximum chunk length.
        label: Operation name used in log messages.

    Returns:
        The results of ``send_chunk`` in chunk order.

    Raises:
        BatchPartialFailureError: If a chunk after the first one fails. The
            original error is chained as ``__cause__``.
    """
    chunks = list(chunked(items, size))
    total_chunks = len(chunks)
    log.debug(
        f"{label}: Chunking {len(items)} items into {total_chunks} groups of {size}"
    )

    results: list[R] = []
    for index, chunk in enumerate(chunks, start=1):
        log.debug(f"{label}: Processing chunk {index}/{total_chunks}: {len(chunk)} items")
        try:
            result = await send_chunk(chunk)
        except Exception as e:
            if not results:
                raise
            log.error(
                f"[red]{label}: Chunk {index}/{total_chunks} failed after "
                f"{len(results)} applied chunk(s): {e}[/red]"
            )
            raise BatchPartialFailureError(index, total_chunks, results) from e
        results.append(result)
        log.info(f"{label}: Chunk {index}/{total_chunks} completed")

    return results

