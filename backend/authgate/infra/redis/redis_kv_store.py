from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, cast

import redis  # type: ignore[import-untyped]

from authgate.services._shared.errors import StoreUnavailableError
from authgate.services._shared.ports import KeyValueStore

log = logging.getLogger(__name__)


@dataclass(slots=True)
class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed key-value store.

    Values are stored as JSON strings with ``SET key value EX ttl``; ``DEL``
    is atomic, so its integer reply tells exactly one concurrent caller that
    it removed the key.

    :param r: A Redis client (already connected).
    """

    r: redis.Redis

    def set_json(self, key: str, value: dict[str, Any], ttl: int | None = None) -> None:
        if ttl is not None and ttl <= 0:
            raise ValueError("ttl must be a positive number of seconds")
        try:
            self.r.set(key, json.dumps(value), ex=ttl)
        except redis.RedisError as exc:
            raise StoreUnavailableError() from exc

    def get_json(self, key: str) -> dict[str, Any] | None:
        try:
            raw = self.r.get(key)
        except redis.RedisError as exc:
            raise StoreUnavailableError() from exc
        if raw is None:
            return None
        try:
            if isinstance(raw, bytes | bytearray):
                raw = raw.decode()
            return cast(dict[str, Any], json.loads(raw))
        except ValueError as exc:
            log.error("Corrupt value in key-value store", extra={"code": "corrupt_value"})
            raise StoreUnavailableError() from exc

    def delete(self, key: str) -> bool:
        try:
            removed = cast(int, self.r.delete(key))
        except redis.RedisError as exc:
            raise StoreUnavailableError() from exc
        return removed == 1

    def ping(self) -> bool:
        try:
            return bool(self.r.ping())
        except redis.RedisError:
            log.warning("Redis ping failed", exc_info=True)
            return False
