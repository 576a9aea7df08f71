"""Anahtar bazlı kaynak kilidi - stok ve sipariş güncellemelerini serileştirir.

Her anahtar (ör. ``inventory:P1:WH001``, ``sales_order:SO-1A2B3C4D``) için
ayrı bir yeniden girilebilir kilit tutulur. Aynı thread iç içe çağrılarda
aynı anahtarı tekrar alabilir; transfer gibi çok anahtarlı işlemler
kilitleri sıralı alarak deadlock'u önler.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterator

from src.services.exceptions import LockTimeoutError

logger = logging.getLogger(__name__)


def inventory_key(product_id: str, warehouse_id: str) -> str:
    return f"inventory:{product_id}:{warehouse_id}"


def sales_order_key(order_id: str) -> str:
    return f"sales_order:{order_id}"


class KeyedLock:
    """Eşzamanlı kaynak erişim kontrolü.

    Bir anahtarın kilidi, tutan ve bekleyen thread kalmadığında tablodan silinir.
    """

    def __init__(self, timeout: float = 10.0) -> None:
        self.timeout = timeout
        self._locks: dict[str, threading.RLock] = {}
        # {anahtar: (thread_id, derinlik)}
        self._owners: dict[str, tuple[int, int]] = {}
        # {anahtar: bekleyen thread sayısı}
        self._waiters: dict[str, int] = {}
        self._master_lock = threading.Lock()

    def _discard_if_idle(self, resource_key: str) -> None:
        # _master_lock altında çağrılmalı
        if resource_key not in self._owners and not self._waiters.get(resource_key):
            self._locks.pop(resource_key, None)
            self._waiters.pop(resource_key, None)

    def acquire(self, resource_key: str) -> bool:
        """Bir kaynak için kilit alır."""
        with self._master_lock:
            lock = self._locks.setdefault(resource_key, threading.RLock())
            self._waiters[resource_key] = self._waiters.get(resource_key, 0) + 1

        acquired = lock.acquire(timeout=self.timeout)

        with self._master_lock:
            self._waiters[resource_key] -= 1
            if acquired:
                _, depth = self._owners.get(resource_key, (0, 0))
                self._owners[resource_key] = (threading.get_ident(), depth + 1)
            else:
                self._discard_if_idle(resource_key)

        if acquired:
            logger.debug("Kilit alındı: %s", resource_key)
        else:
            logger.warning("Kilit alınamadı: %s (timeout)", resource_key)
        return acquired

    def release(self, resource_key: str) -> None:
        """Bir kaynak kilidini serbest bırakır."""
        with self._master_lock:
            lock = self._locks[resource_key]
            owner, depth = self._owners.get(resource_key, (0, 0))
            if depth <= 1:
                self._owners.pop(resource_key, None)
                self._discard_if_idle(resource_key)
            else:
                self._owners[resource_key] = (owner, depth - 1)
            lock.release()

    def is_locked(self, resource_key: str) -> bool:
        """Kaynağın herhangi bir thread tarafından tutulup tutulmadığını döndürür."""
        with self._master_lock:
            return resource_key in self._owners

    def tracked_key_count(self) -> int:
        with self._master_lock:
            return len(self._locks)

    @contextmanager
    def hold(self, *resource_keys: str) -> Iterator[None]:
        """Verilen anahtarların hepsini sıralı alır, çıkışta ters sırada bırakır."""
        keys = sorted(set(resource_keys))
        acquired: list[str] = []
        try:
            for key in keys:
                if not self.acquire(key):
                    raise LockTimeoutError(
                        f"Kilit {self.timeout} saniye içinde alınamadı: {key}"
                    )
                acquired.append(key)
            yield
        finally:
            for key in reversed(acquired):
                self.release(key)
