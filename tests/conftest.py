import asyncio
import time
from typing import Any, Optional

import pytest
from aiohttp import web

from apaas_client import Client, LimiterConfig

NAMESPACE = "app_test"


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.now += max(delay, 0.0)
        await asyncio.sleep(0)


class FakePlatform:
    """In-process stand-in for the platform OpenAPI."""

    def __init__(self):
        self.token_calls = 0
        self.token_code = "0"
        self.token_msg = "success"
        self.token_ttl_ms = 2 * 60 * 60 * 1000
        self.current_token: Optional[str] = None

        self.records: list[dict[str, Any]] = []
        self.reported_total: Optional[int] = None
        self.requests: list[dict[str, Any]] = []
        # Maps "METHOD path-suffix" to the 1-based call number that should fail.
        self.fail_on_call: dict[str, int] = {}
        self._call_counts: dict[str, int] = {}
        self._next_id = 0
        self.base_url = ""

    def calls(self, method: str, suffix: str) -> list[dict[str, Any]]:
        return [
            r for r in self.requests if r["method"] == method and r["path"].endswith(suffix)
        ]

    def _ok(self, data: Any = None) -> web.Response:
        return web.json_response({"code": "0", "msg": "success", "data": data})

    async def _record(self, request: web.Request, key: str) -> Optional[web.Response]:
        body = await request.json() if request.can_read_body else None
        self.requests.append(
            {
                "method": request.method,
                "path": request.path,
                "json": body,
                "authorization": request.headers.get("Authorization"),
            }
        )
        if request.headers.get("Authorization") != self.current_token:
            return web.json_response({"code": "k_ident_013000", "msg": "invalid token"})

        self._call_counts[key] = self._call_counts.get(key, 0) + 1
        if self.fail_on_call.get(key) == self._call_counts[key]:
            return web.json_response({"code": "k_ec_000004", "msg": "batch rejected"})
        return None

    async def app_token(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.token_calls += 1
        if self.token_code != "0":
            return web.json_response({"code": self.token_code, "msg": self.token_msg})
        assert body == {"clientId": "cid", "clientSecret": "secret"}
        self.current_token = f"T:{self.token_calls}"
        return self._ok(
            {
                "accessToken": self.current_token,
                "expireTime": int(time.time() * 1000) + self.token_ttl_ms,
            }
        )

    async def records_query(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, "POST records_query"):
            return failure
        query = self.requests[-1]["json"]
        offset = int(query.get("page_token") or 0)
        page_size = query.get("page_size", 100)
        page = self.records[offset : offset + page_size]
        next_offset = offset + len(page)
        return self._ok(
            {
                "items": page,
                "total": self.reported_total if self.reported_total is not None else len(self.records),
                "next_page_token": str(next_offset) if next_offset < len(self.records) else "",
            }
        )

    async def create_batch(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, "POST records_batch"):
            return failure
        created = []
        for record in self.requests[-1]["json"]["records"]:
            self._next_id += 1
            created.append({"_id": self._next_id, **record})
        return self._ok({"items": created})

    async def update_batch(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, "PATCH records_batch"):
            return failure
        records = self.requests[-1]["json"]["records"]
        return self._ok({"items": [{"_id": r["_id"], "success": True} for r in records]})

    async def delete_batch(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, "DELETE records_batch"):
            return failure
        ids = self.requests[-1]["json"]["ids"]
        return self._ok({"items": [{"_id": i, "success": True} for i in ids]})

    async def single_record(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, f"{request.method} record"):
            return failure
        record_id = request.match_info["record_id"]
        if request.method == "POST":
            return self._ok({"item": {"_id": record_id}})
        return self._ok(None)

    async def create_record(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, "POST records"):
            return failure
        self._next_id += 1
        return self._ok({"_id": self._next_id})

    async def meta(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, "meta"):
            return failure
        return self._ok({"object": request.match_info.get("object_name", "")})

    async def departments(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, "POST departments"):
            return failure
        ids = self.requests[-1]["json"]["department_ids"]
        return self._ok([{"department_id": i, "external_department_id": f"ext-{i}"} for i in ids])

    async def cloud_function(self, request: web.Request) -> web.Response:
        if failure := await self._record(request, "POST invoke"):
            return failure
        return self._ok({"echo": self.requests[-1]["json"]["params"]})

    def make_app(self) -> web.Application:
        app = web.Application()
        prefix = f"/v1/data/namespaces/{NAMESPACE}/objects/{{object_name}}"
        meta_prefix = f"/api/data/v1/namespaces/{NAMESPACE}/meta/objects"
        app.router.add_post("/auth/v1/appToken", self.app_token)
        app.router.add_post(f"{prefix}/records_query", self.records_query)
        app.router.add_post(f"{prefix}/records_batch", self.create_batch)
        app.router.add_patch(f"{prefix}/records_batch", self.update_batch)
        app.router.add_delete(f"{prefix}/records_batch", self.delete_batch)
        app.router.add_post(f"{prefix}/records", self.create_record)
        app.router.add_route("*", f"{prefix}/records/{{record_id}}", self.single_record)
        app.router.add_post(f"{meta_prefix}/list", self.meta)
        app.router.add_get(f"{meta_prefix}/{{object_name}}", self.meta)
        app.router.add_get(f"{meta_prefix}/{{object_name}}/fields/{{field_name}}", self.meta)
        app.router.add_post("/api/integration/v2/feishu/getDepartments", self.departments)
        app.router.add_post(
            f"/api/cloudfunction/v1/namespaces/{NAMESPACE}/invoke/{{name}}",
            self.cloud_function,
        )
        return app


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
async def platform(aiohttp_server):
    fake = FakePlatform()
    server = await aiohttp_server(fake.make_app())
    fake.base_url = str(server.make_url("/"))
    return fake


@pytest.fixture
async def make_client(platform):
    created: list[Client] = []

    def factory(**options: Any) -> Client:
        settings = {
            "client_id": "cid",
            "client_secret": "secret",
            "namespace": NAMESPACE,
            "base_url": platform.base_url,
            "limiter": LimiterConfig(min_time=0, reservoir=1000, refresh_amount=1000),
            **options,
        }
        client = Client(**settings)
        created.append(client)
        return client

    yield factory

    for client in created:
        await client.close()


@pytest.fixture
def client(make_client):
    return make_client()
