# storefront/services/lock_service.py
import asyncio
from collections import defaultdict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class LockService:
    """
    -jeden asyncio.Lock na identity key (koszyk)
    -mutacje koszyka, kuponu i zamowienia tego samego klucza ida po kolei
    -tylko w obrebie jednego procesu i jednej petli zdarzen
    """

    def __init__(self):
        self._locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)

    def _name(self, cart_key: str) -> str:
        return f"cart:{cart_key}:lock"

    async def acquire_cart_lock(self, cart_key: str) -> None:
        name = self._name(cart_key)
        logger.debug(f"Acquire lock {name}")
        await self._locks[name].acquire()

    def release_cart_lock(self, cart_key: str) -> bool:
        name = self._name(cart_key)
        lock = self._locks.get(name)
        if lock is None or not lock.locked():
            return False
        logger.debug(f"Release lock {name}")
        lock.release()
        return True

    def is_locked(self, cart_key: str) -> bool:
        lock = self._locks.get(self._name(cart_key))
        return bool(lock and lock.locked())

    @asynccontextmanager
    async def cart_lock(self, cart_key: str) -> AsyncIterator[None]:
        await self.acquire_cart_lock(cart_key)
        try:
            yield
        finally:
            self.release_cart_lock(cart_key)
