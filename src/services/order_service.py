"""Sipariş Akışı - satış ve satın alma siparişlerinin yönetimi.

- Stok kontrolü ile satış siparişi oluşturma
- Satış siparişi karşılama: stok düşümü + sevkiyat + durum geçişi (CREATED -> FULFILLED)
- Ürün ve tedarikçi varlık kontrolü ile satın alma siparişi oluşturma
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from src.models.supply_chain import (
    PurchaseOrder,
    SalesOrder,
    SalesOrderStatus,
    Shipment,
    utc_now,
)
from src.services.exceptions import (
    EntityNotFoundError,
    InsufficientStockError,
    InvalidArgumentError,
    InvalidStateError,
)
from src.services.id_generator import (
    PURCHASE_ORDER_PREFIX,
    SALES_ORDER_PREFIX,
    SHIPMENT_PREFIX,
    IdGenerator,
    generate_id,
)
from src.services.inventory_service import InventoryService
from src.services.locking import inventory_key, sales_order_key
from src.services.validators import require_identifier, require_positive_quantity

logger = logging.getLogger(__name__)


class OrderService:
    """Satış ve satın alma siparişlerini yöneten servis."""

    def __init__(
        self,
        inventory_service: InventoryService,
        sales_order_repository: Any,
        purchase_order_repository: Any,
        shipment_repository: Any,
        product_repository: Any,
        supplier_repository: Any,
        id_generator: Optional[IdGenerator] = None,
    ):
        dependencies = {
            "Envanter servisi": inventory_service,
            "Satış siparişi deposu": sales_order_repository,
            "Satın alma siparişi deposu": purchase_order_repository,
            "Sevkiyat deposu": shipment_repository,
            "Ürün deposu": product_repository,
            "Tedarikçi deposu": supplier_repository,
        }
        for name, dependency in dependencies.items():
            if dependency is None:
                raise InvalidArgumentError(f"{name} None olamaz")

        self._inventory = inventory_service
        self._sales_orders = sales_order_repository
        self._purchase_orders = purchase_order_repository
        self._shipments = shipment_repository
        self._products = product_repository
        self._suppliers = supplier_repository
        self._generate_id = id_generator or generate_id
        # Stok ve sipariş kilitleri aynı KeyedLock üzerinden alınır
        self._lock = inventory_service.lock

    # --- Satış siparişi oluşturma ---

    def create_sales_order(
        self,
        product_id: str,
        quantity: int,
        customer_info: str,
        warehouse_id: str,
    ) -> SalesOrder:
        """Stok yeterliyse CREATED durumunda satış siparişi oluşturur."""
        require_identifier(product_id, "Ürün tanımlayıcısı")
        require_identifier(customer_info, "Müşteri bilgisi")
        require_positive_quantity(quantity, "Sipariş miktarı pozitif olmalıdır")
        require_identifier(warehouse_id, "Depo tanımlayıcısı")

        # Kontrol ve kayıt aynı stok kilidi altında
        with self._lock.hold(inventory_key(product_id, warehouse_id)):
            available = self._inventory.get_stock_level(product_id, warehouse_id)
            if available < quantity:
                logger.warning(
                    "Sipariş reddedildi, yetersiz stok: %s/%s mevcut=%d, istenen=%d",
                    warehouse_id, product_id, available, quantity,
                )
                raise InsufficientStockError(product_id, warehouse_id, available, quantity)

            order = SalesOrder(
                order_id=self._generate_id(SALES_ORDER_PREFIX),
                product_id=product_id,
                quantity=quantity,
                customer_info=customer_info,
            )
            self._sales_orders.save(order)

        logger.info("Satış siparişi oluşturuldu: %s (%s x%d)", order.order_id, product_id, quantity)
        return order

    # --- Satış siparişi karşılama ---

    def fulfill_sales_order(self, order_id: str, warehouse_id: str, destination: str) -> Shipment:
        """Siparişi karşılar: stoğu düşer, siparişi FULFILLED yapar, sevkiyat oluşturur.

        Stok düşümünden sonraki adımlardan biri hata verirse sipariş CREATED
        durumuna, stok önceki miktarına döndürülür ve hata yeniden fırlatılır.
        """
        require_identifier(order_id, "Sipariş tanımlayıcısı")
        require_identifier(warehouse_id, "Depo tanımlayıcısı")
        require_identifier(destination, "Teslimat adresi")

        with self._lock.hold(sales_order_key(order_id)):
            order = self.get_sales_order(order_id)

            if order.status == SalesOrderStatus.FULFILLED:
                raise InvalidStateError(
                    f"'{order_id}' siparişi zaten karşılandı, tekrar işlenemez",
                    order_id=order_id,
                )

            # InsufficientStockError / EntityNotFoundError olduğu gibi yükselir
            self._inventory.remove_stock(
                order.product_id, warehouse_id, order.quantity,
                triggered_by="fulfill_sales_order", reference_id=order_id,
            )

            shipment = Shipment(
                shipment_id=self._generate_id(SHIPMENT_PREFIX),
                sales_order_id=order_id,
                warehouse_id=warehouse_id,
                destination=destination,
            )
            try:
                self._sales_orders.save(
                    replace(order, status=SalesOrderStatus.FULFILLED, fulfilled_at=utc_now())
                )
                self._shipments.save(shipment)
            except Exception as e:
                logger.warning("Karşılama rollback: %s (%s)", order_id, e)
                self._rollback_fulfillment(order, shipment, warehouse_id)
                raise

        logger.info(
            "Sipariş karşılandı: %s, sevkiyat=%s, depo=%s",
            order_id, shipment.shipment_id, warehouse_id,
        )
        return shipment

    def _rollback_fulfillment(self, order: SalesOrder, shipment: Shipment, warehouse_id: str) -> None:
        """Stok iadesi önce yapılır; her adım bağımsızdır, biri başarısız olsa da diğerleri denenir."""
        try:
            self._inventory.add_stock(
                order.product_id, warehouse_id, order.quantity,
                triggered_by="fulfillment_rollback", reference_id=order.order_id,
            )
        except Exception:
            logger.exception("Rollback stok iadesi başarısız: %s", order.order_id)
        try:
            self._sales_orders.save(order)
        except Exception:
            logger.exception("Rollback sipariş geri yükleme başarısız: %s", order.order_id)
        try:
            self._shipments.delete(shipment.shipment_id)
        except Exception:
            logger.exception("Rollback sevkiyat silme başarısız: %s", shipment.shipment_id)

    # --- Satın alma siparişi ---

    def create_purchase_order(self, product_id: str, quantity: int, supplier_id: str) -> PurchaseOrder:
        """Ürün ve tedarikçi mevcutsa satın alma siparişi oluşturur."""
        require_identifier(product_id, "Ürün tanımlayıcısı")
        require_identifier(supplier_id, "Tedarikçi tanımlayıcısı")
        require_positive_quantity(quantity, "Satın alma miktarı pozitif olmalıdır")

        if self._products.find_by_id(product_id) is None:
            raise EntityNotFoundError(
                f"'{product_id}' ürünü sistemde bulunamadı",
                entity="Product",
                entity_id=product_id,
            )
        if self._suppliers.find_by_id(supplier_id) is None:
            raise EntityNotFoundError(
                f"'{supplier_id}' tedarikçisi sistemde bulunamadı",
                entity="Supplier",
                entity_id=supplier_id,
            )

        order = PurchaseOrder(
            order_id=self._generate_id(PURCHASE_ORDER_PREFIX),
            supplier_id=supplier_id,
            product_id=product_id,
            quantity=quantity,
        )
        self._purchase_orders.save(order)
        logger.info(
            "Satın alma siparişi oluşturuldu: %s (%s x%d, tedarikçi=%s)",
            order.order_id, product_id, quantity, supplier_id,
        )
        return order

    # --- Sorgular ---

    def get_sales_order(self, order_id: str) -> SalesOrder:
        order = self._sales_orders.find_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(
                f"Satış siparişi bulunamadı: {order_id}",
                entity="SalesOrder",
                entity_id=order_id,
            )
        return order

    def find_shipments_for_order(self, order_id: str) -> list[Shipment]:
        return [s for s in self._shipments.find_all() if s.sales_order_id == order_id]
