"""Stok Tutarlılığı ve Audit Log - Stok değişikliklerinin kaydı.

- Her stok değişikliği için audit kaydı (önceki/sonraki miktar)
- Negatif stok kontrolü
- Transfer öncesi/sonrası toplam stok korunumu doğrulama
"""

from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import dataclass, field
from typing import Optional

from src.models.supply_chain import utc_now

logger = logging.getLogger(__name__)

# {(product_id, warehouse_id): quantity}
StockLevels = dict[tuple[str, str], int]


@dataclass
class StockAuditEntry:
    entry_id: str
    operation_type: str
    product_id: str
    warehouse_id: str
    quantity_before: int
    quantity_after: int
    change_amount: int
    triggered_by: str
    timestamp: str = field(default_factory=utc_now)
    reference_id: Optional[str] = None


@dataclass
class ValidationResult:
    is_valid: bool
    errors: list[str] = field(default_factory=list)


class StockAuditLog:
    """Stok değişikliklerini sırasıyla tutan audit log."""

    def __init__(self) -> None:
        self._entries: list[StockAuditEntry] = []
        self._lock = threading.Lock()

    def log_stock_change(
        self,
        operation_type: str,
        product_id: str,
        warehouse_id: str,
        quantity_before: int,
        quantity_after: int,
        triggered_by: str,
        reference_id: Optional[str] = None,
    ) -> StockAuditEntry:
        """Stok değişikliğini audit log'a kaydeder."""
        entry = StockAuditEntry(
            entry_id=str(uuid.uuid4()),
            operation_type=operation_type,
            product_id=product_id,
            warehouse_id=warehouse_id,
            quantity_before=quantity_before,
            quantity_after=quantity_after,
            change_amount=quantity_after - quantity_before,
            triggered_by=triggered_by,
            reference_id=reference_id,
        )
        with self._lock:
            self._entries.append(entry)
        return entry

    def get_audit_log(
        self,
        product_id: Optional[str] = None,
        warehouse_id: Optional[str] = None,
    ) -> list[StockAuditEntry]:
        """Audit log'u filtreli olarak döndürür."""
        with self._lock:
            entries = list(self._entries)
        if product_id:
            entries = [e for e in entries if e.product_id == product_id]
        if warehouse_id:
            entries = [e for e in entries if e.warehouse_id == warehouse_id]
        return entries

    @staticmethod
    def check_no_negative_stock(levels: StockLevels) -> ValidationResult:
        """Tüm stok seviyelerinin negatif olmadığını doğrular."""
        errors = [
            f"Negatif stok tespit edildi: {warehouse_id}/{product_id} = {quantity}"
            for (product_id, warehouse_id), quantity in levels.items()
            if quantity < 0
        ]
        return ValidationResult(is_valid=not errors, errors=errors)

    @staticmethod
    def verify_stock_conservation(
        product_id: str, before: StockLevels, after: StockLevels
    ) -> ValidationResult:
        """İşlem öncesi ve sonrası toplam stok korunumunu doğrular."""
        total_before = sum(qty for (p, _), qty in before.items() if p == product_id)
        total_after = sum(qty for (p, _), qty in after.items() if p == product_id)

        errors = []
        if total_before != total_after:
            errors.append(
                f"Stok korunumu ihlali: {product_id} "
                f"önceki toplam={total_before}, sonraki toplam={total_after}"
            )
        return ValidationResult(is_valid=not errors, errors=errors)
