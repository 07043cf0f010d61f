"""
Cloud function invocation.
"""

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from apaas_client.api.client import Client

log = logging.getLogger(__name__)


class FunctionService:
    """Invokes cloud functions deployed in the namespace."""

    def __init__(self, client: "Client"):
        self._client = client

    async def invoke(self, name: str, params: Any = None) -> dict[str, Any]:
        log.info(f"Invoking cloud function: {name}")
        return await self._client.execute(
            "POST",
            f"/api/cloudfunction/v1/namespaces/{self._client.namespace}/invoke/{name}",
            payload={"params": params if params is not None else {}},
        )
