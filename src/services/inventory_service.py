"""Envanter Defteri - depolar arası stok miktarlarının yönetimi.

- (ürün, depo) çifti bazında stok ekleme / çıkarma / sorgulama
- Negatif stok yasağı
- Depolar arası transfer (kaynaktan çıkar, hedefe ekle)
- Her değişiklik için audit kaydı
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from src.models.supply_chain import InventoryItem, utc_now
from src.services.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidArgumentError,
    InvalidQuantityError,
)
from src.services.locking import KeyedLock, inventory_key
from src.services.stock_audit import StockAuditLog, StockLevels
from src.services.validators import require_identifier, require_positive_quantity

logger = logging.getLogger(__name__)


class InventoryService:
    """(ürün, depo) çiftleri için stok defteri."""

    def __init__(
        self,
        inventory_repository: Any,
        lock: Optional[KeyedLock] = None,
        audit_log: Optional[StockAuditLog] = None,
    ):
        if inventory_repository is None:
            raise InvalidArgumentError("Stok deposu None olamaz")
        self._inventory_repository = inventory_repository
        self.lock = lock or KeyedLock()
        self.audit_log = audit_log or StockAuditLog()

    # --- Stok ekleme ---

    def add_stock(
        self,
        product_id: str,
        warehouse_id: str,
        amount: int,
        triggered_by: str = "add_stock",
        reference_id: Optional[str] = None,
    ) -> InventoryItem:
        """Depoya stok ekler; çift için kayıt yoksa sıfırdan oluşturur."""
        self._validate_identifiers(product_id, warehouse_id)
        require_positive_quantity(amount, "Eklenecek miktar pozitif olmalıdır", InvalidQuantityError)

        with self.lock.hold(inventory_key(product_id, warehouse_id)):
            return self._apply_add(product_id, warehouse_id, amount, triggered_by, reference_id)

    # --- Stok çıkarma ---

    def remove_stock(
        self,
        product_id: str,
        warehouse_id: str,
        amount: int,
        triggered_by: str = "remove_stock",
        reference_id: Optional[str] = None,
    ) -> InventoryItem:
        """Depodan stok çıkarır.

        Hiç stoklanmamış bir çift için her zaman EntityNotFoundError verir;
        kayıt varsa ve miktar yetmiyorsa InsufficientStockError verir.
        """
        self._validate_identifiers(product_id, warehouse_id)
        require_positive_quantity(amount, "Çıkarılacak miktar pozitif olmalıdır", InvalidQuantityError)

        with self.lock.hold(inventory_key(product_id, warehouse_id)):
            updated, _ = self._apply_remove(
                product_id, warehouse_id, amount, triggered_by, reference_id
            )
            return updated

    # --- Stok sorgulama ---

    def get_stock_level(self, product_id: str, warehouse_id: str) -> int:
        """Stok seviyesini döndürür; kayıt yoksa 0."""
        self._validate_identifiers(product_id, warehouse_id)
        item = self._inventory_repository.find_by_product_and_warehouse(product_id, warehouse_id)
        return item.quantity if item else 0

    def get_total_stock(self, product_id: str) -> int:
        """Bir ürünün tüm depolardaki toplam stok miktarını döndürür."""
        require_identifier(product_id, "Ürün tanımlayıcısı")
        return sum(i.quantity for i in self._inventory_repository.find_by_product(product_id))

    # --- Depolar arası transfer ---

    def transfer_stock(
        self,
        product_id: str,
        from_warehouse_id: str,
        to_warehouse_id: str,
        amount: int,
    ) -> tuple[InventoryItem, InventoryItem]:
        """Kaynak depodan çıkarıp hedef depoya ekler.

        İki depo kilidi işlem boyunca tutulur. Ekleme adımı hata verirse
        kaynak kayıt önceki miktarına geri yüklenir ve hata yeniden fırlatılır.
        """
        require_identifier(product_id, "Ürün tanımlayıcısı")
        require_identifier(from_warehouse_id, "Kaynak depo tanımlayıcısı")
        require_identifier(to_warehouse_id, "Hedef depo tanımlayıcısı")
        if from_warehouse_id == to_warehouse_id:
            raise InvalidArgumentError(
                f"Kaynak ve hedef depo aynı olamaz. Verilen: {from_warehouse_id}"
            )
        require_positive_quantity(amount, "Transfer miktarı pozitif olmalıdır", InvalidQuantityError)

        with self.lock.hold(
            inventory_key(product_id, from_warehouse_id),
            inventory_key(product_id, to_warehouse_id),
        ):
            before = self._levels(product_id, from_warehouse_id, to_warehouse_id)
            source, source_before = self._apply_remove(
                product_id, from_warehouse_id, amount, "transfer_out", to_warehouse_id
            )
            try:
                target = self._apply_add(
                    product_id, to_warehouse_id, amount, "transfer_in", from_warehouse_id
                )
            except Exception as e:
                logger.warning(
                    "Transfer rollback: %s/%s x%d (%s)",
                    from_warehouse_id, product_id, amount, e,
                )
                self._inventory_repository.save(
                    replace(source, quantity=source_before.quantity, last_updated=utc_now())
                )
                self.audit_log.log_stock_change(
                    "transfer_rollback", product_id, from_warehouse_id,
                    source.quantity, source_before.quantity, "transfer_stock", to_warehouse_id,
                )
                raise

            self._verify_conservation(product_id, before, from_warehouse_id, to_warehouse_id)

        logger.info(
            "Transfer tamamlandı: %s -> %s, %s x%d",
            from_warehouse_id, to_warehouse_id, product_id, amount,
        )
        return source, target

    # --- Kilit altında çalışan yardımcılar ---

    def _levels(self, product_id: str, *warehouse_ids: str) -> StockLevels:
        levels: StockLevels = {}
        for warehouse_id in warehouse_ids:
            item = self._inventory_repository.find_by_product_and_warehouse(product_id, warehouse_id)
            levels[(product_id, warehouse_id)] = item.quantity if item else 0
        return levels

    def _verify_conservation(
        self, product_id: str, before: StockLevels, *warehouse_ids: str
    ) -> None:
        """Transfer sonrası toplamı depodan yeniden okuyarak doğrular; ihlal yalnızca loglanır."""
        result = StockAuditLog.verify_stock_conservation(
            product_id, before, self._levels(product_id, *warehouse_ids)
        )
        for error in result.errors:
            logger.error("Transfer sonrası tutarsızlık: %s", error)

    def _apply_add(
        self,
        product_id: str,
        warehouse_id: str,
        amount: int,
        triggered_by: str,
        reference_id: Optional[str],
    ) -> InventoryItem:
        existing = self._inventory_repository.find_by_product_and_warehouse(
            product_id, warehouse_id
        ) or InventoryItem(product_id=product_id, warehouse_id=warehouse_id, quantity=0)

        updated = replace(existing, quantity=existing.quantity + amount, last_updated=utc_now())
        self._inventory_repository.save(updated)
        self.audit_log.log_stock_change(
            "add", product_id, warehouse_id,
            existing.quantity, updated.quantity, triggered_by, reference_id,
        )
        logger.info(
            "Stok eklendi: %s/%s +%d (yeni=%d)",
            warehouse_id, product_id, amount, updated.quantity,
        )
        return updated

    def _apply_remove(
        self,
        product_id: str,
        warehouse_id: str,
        amount: int,
        triggered_by: str,
        reference_id: Optional[str],
    ) -> tuple[InventoryItem, InventoryItem]:
        existing = self._inventory_repository.find_by_product_and_warehouse(product_id, warehouse_id)
        if existing is None:
            raise EntityNotFoundError(
                f"'{warehouse_id}' deposunda '{product_id}' ürünü için stok kaydı bulunamadı",
                entity="InventoryItem",
                entity_id=f"{product_id}/{warehouse_id}",
            )

        if existing.quantity < amount:
            logger.warning(
                "Yetersiz stok: %s/%s mevcut=%d, istenen=%d",
                warehouse_id, product_id, existing.quantity, amount,
            )
            raise InsufficientStockError(product_id, warehouse_id, existing.quantity, amount)

        updated = replace(existing, quantity=existing.quantity - amount, last_updated=utc_now())
        self._inventory_repository.save(updated)
        self.audit_log.log_stock_change(
            "remove", product_id, warehouse_id,
            existing.quantity, updated.quantity, triggered_by, reference_id,
        )
        logger.info(
            "Stok çıkarıldı: %s/%s -%d (yeni=%d)",
            warehouse_id, product_id, amount, updated.quantity,
        )
        return updated, existing

    @staticmethod
    def _validate_identifiers(product_id: str, warehouse_id: str) -> None:
        require_identifier(product_id, "Ürün tanımlayıcısı")
        require_identifier(warehouse_id, "Depo tanımlayıcısı")
