from src.services.inventory_service import InventoryService
from src.services.locking import KeyedLock
from src.services.order_service import OrderService
from src.services.report_service import ReportService
from src.services.stock_audit import StockAuditLog

__all__ = [
    "InventoryService",
    "KeyedLock",
    "OrderService",
    "ReportService",
    "StockAuditLog",
]
