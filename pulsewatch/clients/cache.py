"""Redis connectivity probe."""

from __future__ import annotations

import redis.asyncio as redis


class RedisPinger:
    """Opens a short-lived connection, sends PING and disconnects."""

    def __init__(self, url: str, connect_timeout: float = 5.0) -> None:
        self.url = url
        self.connect_timeout = connect_timeout

    async def ping(self) -> bool:
        client = redis.from_url(
            self.url,
            socket_connect_timeout=self.connect_timeout,
            socket_timeout=self.connect_timeout,
        )
        try:
            return bool(await client.ping())
        finally:
            await client.aclose()
