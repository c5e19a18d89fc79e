"""
REST key-value cache adapter (Upstash-compatible GET/SET endpoints).

Every failure mode is recorded on an explicit outcome object and collapsed
to "absent" / ``False`` by ``get`` / ``set``, so callers never see an error
from the cache.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import quote

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheStoreConfig:
    base_url: str = ""
    token: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.token)


@dataclass(frozen=True)
class CacheLookup:
    status: Literal["hit", "absent", "error"]
    value: dict[str, Any] | None = None
    reason: str | None = None

    @classmethod
    def hit(cls, value: dict[str, Any]) -> CacheLookup:
        return cls(status="hit", value=value)

    @classmethod
    def absent(cls, reason: str | None = None) -> CacheLookup:
        return cls(status="absent", reason=reason)

    @classmethod
    def error(cls, reason: str) -> CacheLookup:
        return cls(status="error", reason=reason)


@dataclass(frozen=True)
class CacheWrite:
    ok: bool
    reason: str | None = None


class RestCacheStore:
    def __init__(self, config: CacheStoreConfig, transport: httpx.AsyncBaseTransport | None = None) -> None:
        self.config = config
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return self.config.configured

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.config.token}"}

    def _key_url(self, action: str, key: str) -> str:
        return f"{self.config.base_url}/{action}/{quote(key, safe='')}"

    async def lookup(self, key: str) -> CacheLookup:
        if not self.enabled:
            return CacheLookup.absent("cache store not configured")

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(self._key_url("get", key), headers=self._headers())
        except httpx.HTTPError as exc:
            return CacheLookup.error(f"cache get failed: {exc!r}")

        if not response.is_success:
            return CacheLookup.error(f"cache get returned HTTP {response.status_code}")

        try:
            envelope = response.json()
        except ValueError:
            return CacheLookup.error("cache get returned a non-JSON envelope")

        result = envelope.get("result") if isinstance(envelope, dict) else None
        if result is None:
            return CacheLookup.absent()

        if isinstance(result, str):
            try:
                result = json.loads(result)
            except ValueError:
                return CacheLookup.error("stored value is not valid JSON")

        if not isinstance(result, dict):
            return CacheLookup.error(f"stored value is a {type(result).__name__}, expected an object")
        return CacheLookup.hit(result)

    async def get(self, key: str) -> dict[str, Any] | None:
        outcome = await self.lookup(key)
        if outcome.status == "error":
            logger.warning("Treating cache entry as absent: %s", outcome.reason)
        return outcome.value

    async def write(self, key: str, value: dict[str, Any], ttl_seconds: int) -> CacheWrite:
        if not self.enabled:
            return CacheWrite(ok=False, reason="cache store not configured")

        try:
            payload = quote(json.dumps(value, ensure_ascii=False, separators=(",", ":")), safe="")
        except (TypeError, ValueError) as exc:
            return CacheWrite(ok=False, reason=f"value is not JSON serializable: {exc}")

        url = f"{self._key_url('set', key)}/{payload}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(url, params={"EX": ttl_seconds}, headers=self._headers())
        except httpx.HTTPError as exc:
            return CacheWrite(ok=False, reason=f"cache set failed: {exc!r}")

        if not response.is_success:
            return CacheWrite(ok=False, reason=f"cache set returned HTTP {response.status_code}")
        return CacheWrite(ok=True)

    async def set(self, key: str, value: dict[str, Any], ttl_seconds: int) -> bool:
        outcome = await self.write(key, value, ttl_seconds)
        if not outcome.ok and self.enabled:
            logger.warning("Cache write skipped: %s", outcome.reason)
        return outcome.ok
