"""
Object (data table) listing and field metadata lookups.
"""

import logging
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from apaas_client.api.client import Client

log = logging.getLogger(__name__)


class ObjectService:
    """Lists a namespace's objects and describes their fields."""

    def __init__(self, client: "Client"):
        self._client = client

    def _meta_path(self, suffix: str) -> str:
        return f"/api/data/v1/namespaces/{self._client.namespace}/meta/objects{suffix}"

    async def list(
        self, offset: int = 0, limit: int = 100, filter: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Lists objects in the namespace.

        Args:
            offset: Index of the first object to return.
            limit: Maximum number of objects to return.
            filter: Optional ``{"type": ..., "quickQuery": ...}`` filter.
        """
        log.debug(f"Fetching objects list: offset={offset}, limit={limit}")
        payload: dict[str, Any] = {"offset": offset, "limit": limit}
        if filter:
            payload["filter"] = filter
        return await self._client.execute("POST", self._meta_path("/list"), payload=payload)

    async def field(self, object_name: str, field_name: str) -> dict[str, Any]:
        """Fetches the metadata of a single field."""
        log.debug(f"Fetching field metadata: {object_name}.{field_name}")
        return await self._client.execute(
            "GET", self._meta_path(f"/{object_name}/fields/{field_name}")
        )

    async def fields(self, object_name: str) -> dict[str, Any]:
        """Fetches the metadata of every field of an object."""
        log.debug(f"Fetching all fields metadata: {object_name}")
        return await self._client.execute("GET", self._meta_path(f"/{object_name}"))
