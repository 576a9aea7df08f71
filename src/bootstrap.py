"""Depo ve servislerin ayarlara göre birbirine bağlanması."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

import boto3

from src.config import Settings
from src.models.supply_chain import (
    Product,
    PurchaseOrder,
    SalesOrder,
    Shipment,
    Supplier,
    Warehouse,
)
from src.repositories import (
    DynamoDBInventoryRepository,
    DynamoDBRepository,
    InMemoryInventoryRepository,
    InMemoryRepository,
)
from src.repositories.dynamodb_setup import table_name
from src.services import (
    InventoryService,
    KeyedLock,
    OrderService,
    ReportService,
    StockAuditLog,
)
from src.services.id_generator import IdGenerator

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    products: Any
    suppliers: Any
    warehouses: Any
    inventory: Any
    sales_orders: Any
    purchase_orders: Any
    shipments: Any
    inventory_service: InventoryService
    order_service: OrderService
    report_service: ReportService


def _memory_repositories() -> dict[str, Any]:
    return {
        "products": InMemoryRepository("product_id"),
        "suppliers": InMemoryRepository("supplier_id"),
        "warehouses": InMemoryRepository("warehouse_id"),
        "inventory": InMemoryInventoryRepository(),
        "sales_orders": InMemoryRepository("order_id"),
        "purchase_orders": InMemoryRepository("order_id"),
        "shipments": InMemoryRepository("shipment_id"),
    }


def _dynamodb_repositories(settings: Settings, dynamodb_resource: Optional[Any]) -> dict[str, Any]:
    # dependency injection destekli
    dynamodb = dynamodb_resource or boto3.resource("dynamodb", region_name=settings.region_name)

    def table(base_name: str) -> Any:
        return dynamodb.Table(table_name(base_name, settings.table_prefix))

    return {
        "products": DynamoDBRepository(table("Products"), "product_id", Product),
        "suppliers": DynamoDBRepository(table("Suppliers"), "supplier_id", Supplier),
        "warehouses": DynamoDBRepository(table("Warehouses"), "warehouse_id", Warehouse),
        "inventory": DynamoDBInventoryRepository(table("Inventory")),
        "sales_orders": DynamoDBRepository(table("SalesOrders"), "order_id", SalesOrder),
        "purchase_orders": DynamoDBRepository(table("PurchaseOrders"), "order_id", PurchaseOrder),
        "shipments": DynamoDBRepository(table("Shipments"), "shipment_id", Shipment),
    }


def build_container(
    settings: Optional[Settings] = None,
    dynamodb_resource: Optional[Any] = None,
    id_generator: Optional[IdGenerator] = None,
) -> ServiceContainer:
    settings = settings or Settings()
    if settings.storage_backend == "dynamodb":
        repos = _dynamodb_repositories(settings, dynamodb_resource)
    else:
        repos = _memory_repositories()

    inventory_service = InventoryService(
        repos["inventory"],
        lock=KeyedLock(timeout=settings.lock_timeout),
        audit_log=StockAuditLog(),
    )
    order_service = OrderService(
        inventory_service,
        repos["sales_orders"],
        repos["purchase_orders"],
        repos["shipments"],
        repos["products"],
        repos["suppliers"],
        id_generator=id_generator,
    )
    report_service = ReportService(
        repos["inventory"], repos["sales_orders"], repos["purchase_orders"], repos["shipments"]
    )
    logger.info("Servisler hazır (depolama: %s)", settings.storage_backend)

    return ServiceContainer(
        settings=settings,
        inventory_service=inventory_service,
        order_service=order_service,
        report_service=report_service,
        **repos,
    )
