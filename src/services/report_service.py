"""Envanter ve sipariş özetleri (yalnızca veri; biçimlendirme CLI'da)."""

from __future__ import annotations

from collections import defaultdict
from typing import Any

from src.models.supply_chain import InventoryItem, SalesOrderStatus
from src.services.stock_audit import StockAuditLog, ValidationResult


class ReportService:
    def __init__(
        self,
        inventory_repository: Any,
        sales_order_repository: Any,
        purchase_order_repository: Any,
        shipment_repository: Any,
    ):
        self._inventory = inventory_repository
        self._sales_orders = sales_order_repository
        self._purchase_orders = purchase_order_repository
        self._shipments = shipment_repository

    def inventory_summary(self) -> dict[str, dict]:
        """Ürün bazında toplam stok ve depo kırılımı."""
        summary: dict[str, dict] = defaultdict(lambda: {"total": 0, "warehouses": {}})
        for item in self._inventory.find_all():
            entry = summary[item.product_id]
            entry["total"] += item.quantity
            entry["warehouses"][item.warehouse_id] = item.quantity
        return dict(summary)

    def warehouse_stock(self, warehouse_id: str) -> list[InventoryItem]:
        return sorted(
            self._inventory.find_by_warehouse(warehouse_id),
            key=lambda i: i.product_id,
        )

    def verify_inventory(self) -> ValidationResult:
        """Tüm stok kayıtlarında negatif miktar olmadığını doğrular."""
        levels = {(i.product_id, i.warehouse_id): i.quantity for i in self._inventory.find_all()}
        return StockAuditLog.check_no_negative_stock(levels)

    def low_stock(self, threshold: int) -> list[InventoryItem]:
        """Miktarı eşiğin altındaki stok kayıtları, en düşükten başlayarak."""
        items = [i for i in self._inventory.find_all() if i.quantity < threshold]
        items.sort(key=lambda i: (i.quantity, i.product_id, i.warehouse_id))
        return items

    def order_status_summary(self) -> dict[str, int]:
        counts = {status.value: 0 for status in SalesOrderStatus}
        for order in self._sales_orders.find_all():
            counts[order.status.value] += 1
        counts["purchase_orders"] = len(self._purchase_orders.find_all())
        counts["shipments"] = len(self._shipments.find_all())
        return counts
