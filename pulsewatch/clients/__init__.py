"""Adapters for the services the health checker and alert channels depend on.

The checker and channels only rely on the small protocols below; the
concrete classes in this package implement them against Postgres, Redis,
the Supabase REST API and the Resend email API.
"""

from __future__ import annotations

from typing import Protocol, Sequence


class Datastore(Protocol):
    async def sample(self, table: str, limit: int = 1) -> int:
        """Bounded read from ``table``; returns the number of rows read."""
        ...

    async def existing_tables(self, schema: str, names: Sequence[str]) -> set[str]:
        """Return the subset of ``names`` that exist in ``schema``."""
        ...


class CachePinger(Protocol):
    async def ping(self) -> bool: ...


class IdentityService(Protocol):
    async def check_session(self) -> None:
        """Raise if the auth service cannot serve session requests."""
        ...


class ObjectStorage(Protocol):
    async def list_objects(self, bucket: str, limit: int = 1) -> list[dict]: ...


class EmailProvider(Protocol):
    async def send(self, to: list[str], subject: str, html: str, text: str) -> bool:
        """Send one message; True on accepted, False on rejected."""
        ...
