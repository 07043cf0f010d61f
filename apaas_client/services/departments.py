"""
Maps department identifiers between the platform and the external directory.
"""

import logging
from typing import TYPE_CHECKING, Any, Literal

from apaas_client.utils.chunking import run_chunked

if TYPE_CHECKING:
    from apaas_client.api.client import Client

log = logging.getLogger(__name__)

DEPARTMENTS_PATH = "/api/integration/v2/feishu/getDepartments"

# department_id: platform ID such as "1758534140403815"
# external_department_id: external directory ID, free-form
# external_open_department_id: open ID starting with "oc_"
DepartmentIdType = Literal[
    "department_id", "external_department_id", "external_open_department_id"
]


class DepartmentService:
    """Department ID exchange, one ID at a time or in chunks of 100."""

    def __init__(self, client: "Client"):
        self._client = client

    async def _lookup(
        self, department_id_type: DepartmentIdType, department_ids: list[str]
    ) -> list[dict[str, Any]]:
        envelope = await self._client.execute(
            "POST",
            DEPARTMENTS_PATH,
            payload={
                "department_id_type": department_id_type,
                "department_ids": department_ids,
            },
        )
        return list(envelope.get("data") or [])

    async def exchange(
        self, department_id_type: DepartmentIdType, department_id: str
    ) -> dict[str, Any] | None:
        """
        Looks up one department.

        Returns:
            The mapping entry, or None if the platform returned no match.
        """
        log.info(f"Exchanging department ID: {department_id}")
        mappings = await self._lookup(department_id_type, [department_id])
        return mappings[0] if mappings else None

    async def batch_exchange(
        self, department_id_type: DepartmentIdType, department_ids: list[str]
    ) -> list[dict[str, Any]]:
        """Looks up any number of departments and concatenates the mappings in order."""

        async def send_chunk(chunk: list[str]) -> list[dict[str, Any]]:
            return await self._lookup(department_id_type, chunk)

        results = await run_chunked(
            department_ids, send_chunk, label="departments.batch_exchange"
        )
        return [mapping for chunk_result in results for mapping in chunk_result]
