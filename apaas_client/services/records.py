"""
Record read, create, update and delete operations on a namespace's objects.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

from apaas_client.models.results import AggregatedResult, extract_items
from apaas_client.utils.chunking import MAX_BATCH_SIZE, run_chunked
from apaas_client.utils.pagination import paginate

if TYPE_CHECKING:
    from apaas_client.api.client import Client

log = logging.getLogger(__name__)


def _check_batch(items: list[Any], kind: str) -> None:
    if len(items) > MAX_BATCH_SIZE:
        raise ValueError(
            f"At most {MAX_BATCH_SIZE} {kind} can be sent in one call, got {len(items)}. "
            "Use records_with_iterator() for larger batches."
        )


class SearchService:
    """Reads single records, single query pages, and whole query results."""

    def __init__(self, client: "Client"):
        self._client = client

    async def record(
        self, object_name: str, record_id: str, select: list[str]
    ) -> dict[str, Any]:
        """Fetches one record with the given fields."""
        log.info(f"Querying record: {object_name}.{record_id}")
        return await self._client.execute(
            "POST",
            self._client.records_path(object_name, record_id),
            payload={"select": select},
        )

    async def records(self, object_name: str, query: dict[str, Any]) -> dict[str, Any]:
        """
        Runs one page of a record query.

        Args:
            object_name: API name of the object.
            query: Query body, e.g. ``page_size``, ``page_token``, ``filter``,
                ``order_by``, ``select``, ``need_total_count``.
        """
        envelope = await self._client.execute(
            "POST",
            f"{self._client.object_path(object_name)}/records_query",
            payload=query,
        )
        data = envelope.get("data") or {}
        log.debug(f"Records queried: {object_name}, total={data.get('total', 'unknown')}")
        return envelope

    async def records_with_iterator(
        self,
        object_name: str,
        query: dict[str, Any],
        max_pages: Optional[int] = None,
    ) -> AggregatedResult:
        """
        Follows ``next_page_token`` until the query is exhausted.

        Returns:
            The server-reported total from the first page and every record,
            in response order. A failing page discards everything fetched so far.
        """

        async def fetch_page(page_query: dict[str, Any]) -> dict[str, Any]:
            return await self.records(object_name, page_query)

        return await paginate(
            fetch_page,
            query,
            max_pages=max_pages,
            label=f"search.records_with_iterator({object_name})",
        )


class CreateService:
    """Creates records, splitting large batches into API-sized chunks."""

    def __init__(self, client: "Client"):
        self._client = client

    async def record(self, object_name: str, record: dict[str, Any]) -> dict[str, Any]:
        log.info(f"Creating record in: {object_name}")
        return await self._client.execute(
            "POST", self._client.records_path(object_name), payload={"record": record}
        )

    async def records(
        self, object_name: str, records: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Creates up to 100 records in one call."""
        _check_batch(records, "records")
        log.info(f"Creating {len(records)} records in: {object_name}")
        return await self._client.execute(
            "POST",
            f"{self._client.object_path(object_name)}/records_batch",
            payload={"records": records},
        )

    async def records_with_iterator(
        self, object_name: str, records: list[dict[str, Any]]
    ) -> AggregatedResult:
        """
        Creates any number of records, 100 per call.

        Returns:
            ``total`` is the number of submitted records; ``items`` holds the
            created items of every chunk in submission order.
        """

        async def send_chunk(chunk: list[dict[str, Any]]) -> dict[str, Any]:
            return await self.records(object_name, chunk)

        envelopes = await run_chunked(
            records, send_chunk, label=f"create.records_with_iterator({object_name})"
        )
        items: list[dict[str, Any]] = []
        for envelope in envelopes:
            items.extend(extract_items(envelope))
        return AggregatedResult(total=len(records), items=items)


class UpdateService:
    """Updates records, splitting large batches into API-sized chunks."""

    def __init__(self, client: "Client"):
        self._client = client

    async def record(
        self, object_name: str, record_id: str, record: dict[str, Any]
    ) -> dict[str, Any]:
        log.info(f"Updating record: {object_name}.{record_id}")
        return await self._client.execute(
            "PATCH",
            self._client.records_path(object_name, record_id),
            payload={"record": record},
        )

    async def records(
        self, object_name: str, records: list[dict[str, Any]]
    ) -> dict[str, Any]:
        """Updates up to 100 records in one call. Each record carries its ``_id``."""
        _check_batch(records, "records")
        log.info(f"Updating {len(records)} records in: {object_name}")
        return await self._client.execute(
            "PATCH",
            f"{self._client.object_path(object_name)}/records_batch",
            payload={"records": records},
        )

    async def records_with_iterator(
        self, object_name: str, records: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Updates any number of records and returns one response per chunk."""

        async def send_chunk(chunk: list[dict[str, Any]]) -> dict[str, Any]:
            return await self.records(object_name, chunk)

        return await run_chunked(
            records, send_chunk, label=f"update.records_with_iterator({object_name})"
        )


class DeleteService:
    """Deletes records by ID."""

    def __init__(self, client: "Client"):
        self._client = client

    async def record(self, object_name: str, record_id: str) -> dict[str, Any]:
        log.info(f"Deleting record: {object_name}.{record_id}")
        return await self._client.execute(
            "DELETE", self._client.records_path(object_name, record_id)
        )

    async def records(self, object_name: str, ids: list[str]) -> dict[str, Any]:
        """Deletes up to 100 records in one call."""
        _check_batch(ids, "ids")
        log.info(f"Deleting {len(ids)} records from: {object_name}")
        return await self._client.execute(
            "DELETE",
            f"{self._client.object_path(object_name)}/records_batch",
            payload={"ids": ids},
        )

    async def records_with_iterator(
        self, object_name: str, ids: list[str]
    ) -> list[dict[str, Any]]:
        """
        Deletes any number of records and returns one response per chunk.

        If a chunk fails, the chunks before it stay deleted and the ones after
        it are never sent.
        """

        async def send_chunk(chunk: list[str]) -> dict[str, Any]:
            return await self.records(object_name, chunk)

        return await run_chunked(
            ids, send_chunk, label=f"delete.records_with_iterator({object_name})"
        )
