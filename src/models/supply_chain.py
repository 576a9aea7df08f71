"""Tedarik zinciri veri modelleri - ürün, depo, stok ve sipariş kayıtları."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SalesOrderStatus(str, Enum):
    CREATED = "CREATED"
    FULFILLED = "FULFILLED"


@dataclass
class Product:
    product_id: str
    name: str
    description: str = ""
    category: str = ""
    unit_price: float = 0.0


@dataclass
class Supplier:
    supplier_id: str
    name: str
    contact_info: str = ""


@dataclass
class Warehouse:
    warehouse_id: str
    name: str
    location: str = ""


@dataclass
class InventoryItem:
    """Bir (ürün, depo) çifti için stok kaydı. Miktar hiçbir zaman negatif olmaz."""

    product_id: str
    warehouse_id: str
    quantity: int = 0
    last_updated: str = field(default_factory=utc_now)


@dataclass
class SalesOrder:
    order_id: str
    product_id: str
    quantity: int
    customer_info: str
    status: SalesOrderStatus = SalesOrderStatus.CREATED
    created_at: str = field(default_factory=utc_now)
    fulfilled_at: Optional[str] = None

    def __post_init__(self) -> None:
        # Depodan okunan kayıtlarda durum düz string gelir
        self.status = SalesOrderStatus(self.status)


@dataclass
class PurchaseOrder:
    order_id: str
    supplier_id: str
    product_id: str
    quantity: int
    created_at: str = field(default_factory=utc_now)


@dataclass
class Shipment:
    shipment_id: str
    sales_order_id: str
    warehouse_id: str
    destination: str
    created_at: str = field(default_factory=utc_now)
