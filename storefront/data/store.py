# storefront/data/store.py
import copy
import json
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Mapping

import redis
from sqlalchemy import select

from storefront.data.database import Base, create_session_factory
from storefront.data.models.kv_entry import KeyValueModel
from storefront.utils.retry import db_retry, redis_retry
from storefront.utils.settings import (
    DATABASE_URL,
    REDIS_KEY_PREFIX,
    REDIS_URL,
    STORE_BACKEND,
)
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class Store(ABC):
    """
    Key-value store na wartosci JSON.
    Kazda wartosc czytana i zapisywana w calosci, bez aktualizacji pojedynczych pol.
    """

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        self.set_many({key: value})

    @abstractmethod
    def set_many(self, values: Mapping[str, Any]) -> None:
        """Write every pair or none of them."""

    @staticmethod
    def _decode(raw: str | None, default: Any, key: str) -> Any:
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(f"Corrupted value under key {key!r}, using default")
            return default

    @staticmethod
    def _encode(value: Any) -> str:
        return json.dumps(value)


class MemoryStore(Store):
    """Process-local store keeping JSON text, like browser local storage."""

    def __init__(self, initial: Mapping[str, Any] | None = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self._data[key] = self._encode(value)

    def get(self, key: str, default: Any = None) -> Any:
        return self._decode(self._data.get(key), default, key)

    def set_many(self, values: Mapping[str, Any]) -> None:
        # encode everything first so a bad value leaves the store untouched
        encoded = {key: self._encode(value) for key, value in values.items()}
        self._data.update(encoded)

    def keys(self):
        return list(self._data)


class SqlStore(Store):
    """Store w bazie SQL (SQLAlchemy), jedna tabela kv_entries."""

    def __init__(self, url: str | None = None):
        self.url = url or DATABASE_URL
        self.engine, self.session_factory = create_session_factory(self.url)
        Base.metadata.create_all(bind=self.engine)

    @db_retry()
    def get(self, key: str, default: Any = None) -> Any:
        with self.session_factory() as db:
            row = db.get(KeyValueModel, key)
            return self._decode(row.value if row else None, default, key)

    @db_retry()
    def set_many(self, values: Mapping[str, Any]) -> None:
        encoded = {key: self._encode(value) for key, value in values.items()}
        now = datetime.now(timezone.utc)

        with self.session_factory() as db:
            try:
                existing = {
                    row.key: row
                    for row in db.execute(
                        select(KeyValueModel).where(KeyValueModel.key.in_(list(encoded)))
                    ).scalars()
                }
                for key, raw in encoded.items():
                    row = existing.get(key)
                    if row is None:
                        db.add(KeyValueModel(key=key, value=raw, updated_at=now))
                    else:
                        row.value = raw
                        row.updated_at = now
                db.commit()
            except Exception:
                db.rollback()
                raise

    def keys(self):
        with self.session_factory() as db:
            return list(db.execute(select(KeyValueModel.key)).scalars())


class RedisStore(Store):
    """Store w redisie, set_many przez MULTI/EXEC."""

    def __init__(self, url: str | None = None, prefix: str | None = None, client=None):
        self.prefix = REDIS_KEY_PREFIX if prefix is None else prefix
        self.redis = client or redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    @redis_retry()
    def get(self, key: str, default: Any = None) -> Any:
        return self._decode(self.redis.get(self._key(key)), default, key)

    @redis_retry()
    def set_many(self, values: Mapping[str, Any]) -> None:
        encoded = {self._key(key): self._encode(value) for key, value in values.items()}
        pipe = self.redis.pipeline(transaction=True)
        for key, raw in encoded.items():
            pipe.set(key, raw)
        pipe.execute()


class StoreSession:
    """
    Jednostka pracy na jedna operacje.
    Odczyty sa cache'owane, zapisy trzymane do commit() i zapisywane jednym set_many.
    """

    _MISSING = object()

    def __init__(self, store: Store):
        self.store = store
        self._cache: Dict[str, Any] = {}
        self._dirty: Dict[str, Any] = {}

    def get(self, key: str, default: Any = None) -> Any:
        if key in self._dirty:
            return copy.deepcopy(self._dirty[key])
        if key not in self._cache:
            self._cache[key] = self.store.get(key, self._MISSING)
        value = self._cache[key]
        if value is self._MISSING:
            return default
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        self._dirty[key] = copy.deepcopy(value)

    @property
    def pending(self) -> Dict[str, Any]:
        return dict(self._dirty)

    def commit(self) -> None:
        if not self._dirty:
            return
        logger.debug(f"Commit keys {sorted(self._dirty)}")
        self.store.set_many(self._dirty)
        self._cache.update(self._dirty)
        self._dirty = {}

    def rollback(self) -> None:
        if self._dirty:
            logger.debug(f"Rollback keys {sorted(self._dirty)}")
        self._dirty = {}


def create_store(backend: str | None = None) -> Store:
    backend = (backend or STORE_BACKEND).lower()
    if backend == "memory":
        return MemoryStore()
    if backend == "sql":
        return SqlStore()
    if backend == "redis":
        return RedisStore()
    raise ValueError(f"Unknown store backend: {backend}")
