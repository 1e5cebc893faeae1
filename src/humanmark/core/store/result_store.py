"""HumanMark - Verdict store (by id, with a content-hash index)."""

from __future__ import annotations

import json
import logging
import secrets
import time
from collections import OrderedDict
from typing import Any

import redis

logger = logging.getLogger(__name__)

ID_BYTES = 12


def generate_id() -> str:
    """Random URL-safe id (24 hex chars)."""
    return secrets.token_hex(ID_BYTES)


def index_key(content_hash: str, content_type: str = "") -> str:
    """The same bytes classified differently are different results."""
    return f"{content_type}:{content_hash}"


class ResultStore:
    """Redis-backed when reachable; otherwise an in-process TTL map.

    In memory mode entries are kept in insertion order, so expired ones are
    always at the front and are evicted on every save and read.
    """

    def __init__(self, redis_url: str | None = None, ttl: int = 86400) -> None:
        self.ttl = ttl
        self._redis: redis.Redis | None = None
        self._results: OrderedDict[str, dict[str, Any]] = OrderedDict()  # id -> {"record", "_at"}
        self._by_hash: dict[str, str] = {}

        if redis_url:
            try:
                self._redis = redis.from_url(redis_url, decode_responses=True)
                self._redis.ping()
                logger.info("Result store connected to Redis")
            except redis.RedisError as exc:
                logger.warning("Redis unavailable (%s), keeping results in memory", exc)
                self._redis = None

    @property
    def backend(self) -> str:
        return "redis" if self._redis is not None else "memory"

    async def save(self, result: dict[str, Any]) -> dict[str, Any]:
        """Store a serialised verdict. Assigns an id if it has none."""
        record = dict(result)
        record.setdefault("id", generate_id())
        result_id = record["id"]
        content_hash = record.get("content_hash")
        key = index_key(content_hash, record.get("content_type", "")) if content_hash else None

        if self._redis is not None:
            try:
                pipe = self._redis.pipeline()
                pipe.setex(f"result:{result_id}", self.ttl, json.dumps(record, default=str))
                if key:
                    pipe.setex(f"hash:{key}", self.ttl, result_id)
                pipe.execute()
                return record
            except redis.RedisError as exc:
                logger.warning("Redis write failed for %s, keeping it in memory: %s", result_id, exc)

        self._evict_expired()
        self._results[result_id] = {"record": record, "_at": time.time(), "_key": key}
        self._results.move_to_end(result_id)
        if key:
            self._by_hash[key] = result_id
        return record

    async def get(self, result_id: str) -> dict[str, Any] | None:
        if self._redis is not None:
            try:
                raw = self._redis.get(f"result:{result_id}")
                if raw:
                    return json.loads(raw)
            except redis.RedisError as exc:
                logger.warning("Redis read failed for %s: %s", result_id, exc)
        self._evict_expired()
        entry = self._results.get(result_id)
        return entry["record"] if entry else None

    async def find_by_hash(self, content_hash: str, content_type: str = "") -> dict[str, Any] | None:
        key = index_key(content_hash, content_type)
        result_id: str | None = None
        if self._redis is not None:
            try:
                result_id = self._redis.get(f"hash:{key}")
            except redis.RedisError as exc:
                logger.warning("Redis hash lookup failed: %s", exc)
        if result_id is None:
            self._evict_expired()
            result_id = self._by_hash.get(key)
        return await self.get(result_id) if result_id else None

    def _evict_expired(self) -> None:
        cutoff = time.time() - self.ttl
        while self._results:
            result_id, entry = next(iter(self._results.items()))
            if entry["_at"] > cutoff:
                break
            del self._results[result_id]
            if entry["_key"] and self._by_hash.get(entry["_key"]) == result_id:
                del self._by_hash[entry["_key"]]

    def __len__(self) -> int:
        return len(self._results)

    async def ping(self) -> bool:
        if self._redis is None:
            return True
        try:
            return bool(self._redis.ping())
        except redis.RedisError as exc:
            logger.warning("Redis ping failed: %s", exc)
            return False

    def clear(self) -> None:
        self._results.clear()
        self._by_hash.clear()
