"""Supabase REST adapter for the identity and object storage probes."""

from __future__ import annotations

from typing import Any

import httpx


class SupabaseClient:
    """Thin httpx wrapper over the GoTrue and Storage REST endpoints.

    Both calls raise on transport errors and non-2xx responses; the
    health checks turn those into sub-check failures.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        service_role_key: str = "",
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.anon_key = anon_key
        self.service_role_key = service_role_key
        self.timeout = timeout
        self._transport = transport

    def _headers(self, privileged: bool = False) -> dict[str, str]:
        key = self.service_role_key if privileged and self.service_role_key else self.anon_key
        return {"apikey": self.anon_key, "Authorization": f"Bearer {key}"}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def check_session(self) -> None:
        async with self._client() as client:
            resp = await client.get("/auth/v1/health", headers=self._headers())
        resp.raise_for_status()

    async def list_objects(self, bucket: str, limit: int = 1) -> list[dict[str, Any]]:
        async with self._client() as client:
            resp = await client.post(
                f"/storage/v1/object/list/{bucket}",
                headers=self._headers(privileged=True),
                json={"prefix": "", "limit": limit, "offset": 0},
            )
        resp.raise_for_status()
        body = resp.json()
        return body if isinstance(body, list) else []
