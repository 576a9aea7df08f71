"""Envanter ve sipariş işlemlerinin hata sınıfları."""

from __future__ import annotations

from typing import Optional


class SupplyChainError(Exception):
    """Tüm envanter/sipariş hatalarının temel sınıfı."""
    pass


class InvalidArgumentError(SupplyChainError, ValueError):
    """Boş tanımlayıcı, pozitif olmayan miktar veya aynı kaynak/hedef depo."""
    pass


class InvalidQuantityError(InvalidArgumentError):
    """Stok ekleme/çıkarma işleminde pozitif olmayan miktar."""
    pass


class EntityNotFoundError(SupplyChainError, LookupError):
    """Stok kaydı, sipariş, ürün veya tedarikçi bulunamadı."""

    def __init__(
        self,
        message: str,
        entity: Optional[str] = None,
        entity_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.entity = entity
        self.entity_id = entity_id


class InsufficientStockError(SupplyChainError):
    """Talep edilen miktar mevcut stoğu aşıyor."""

    def __init__(self, product_id: str, warehouse_id: str, available: int, requested: int):
        super().__init__(
            f"Yetersiz stok: {warehouse_id}/{product_id} "
            f"mevcut={available}, istenen={requested}"
        )
        self.product_id = product_id
        self.warehouse_id = warehouse_id
        self.available = available
        self.requested = requested


class InvalidStateError(SupplyChainError):
    """Sipariş istenen işlem için uygun durumda değil."""

    def __init__(self, message: str, order_id: Optional[str] = None):
        super().__init__(message)
        self.order_id = order_id


class LockTimeoutError(SupplyChainError):
    """Kaynak kilidi zaman aşımı içinde alınamadı."""
    pass
