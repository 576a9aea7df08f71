"""DynamoDB tablo oluşturma ve silme.

7 tablo: Products, Suppliers, Warehouses, Inventory, SalesOrders, PurchaseOrders, Shipments
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)


def _single_key_table(name: str, key_attr: str) -> dict:
    return {
        "TableName": name,
        "KeySchema": [
            {"AttributeName": key_attr, "KeyType": "HASH"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": key_attr, "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    }


TABLE_DEFINITIONS = [
    _single_key_table("Products", "product_id"),
    _single_key_table("Suppliers", "supplier_id"),
    _single_key_table("Warehouses", "warehouse_id"),
    {
        "TableName": "Inventory",
        "KeySchema": [
            {"AttributeName": "product_id", "KeyType": "HASH"},
            {"AttributeName": "warehouse_id", "KeyType": "RANGE"},
        ],
        "AttributeDefinitions": [
            {"AttributeName": "product_id", "AttributeType": "S"},
            {"AttributeName": "warehouse_id", "AttributeType": "S"},
        ],
        "BillingMode": "PAY_PER_REQUEST",
    },
    _single_key_table("SalesOrders", "order_id"),
    _single_key_table("PurchaseOrders", "order_id"),
    _single_key_table("Shipments", "shipment_id"),
]


def table_name(base_name: str, prefix: str = "") -> str:
    return f"{prefix}{base_name}"


def create_tables(client: Any, prefix: str = "") -> list[str]:
    """Eksik tabloları oluşturur, mevcut olanları atlar. Oluşturulan tablo adlarını döndürür."""
    created = []
    for table_def in TABLE_DEFINITIONS:
        definition = copy.deepcopy(table_def)
        name = table_name(definition["TableName"], prefix)
        definition["TableName"] = name
        try:
            client.describe_table(TableName=name)
            logger.info("%s zaten mevcut, atlanıyor", name)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceNotFoundException":
                raise
            logger.info("%s oluşturuluyor...", name)
            client.create_table(**definition)
            # Tablonun aktif olmasını bekle
            client.get_waiter("table_exists").wait(TableName=name)
            created.append(name)
    return created


def delete_tables(client: Any, prefix: str = "") -> None:
    """Tüm tabloları siler (dikkatli kullan)."""
    for table_def in TABLE_DEFINITIONS:
        name = table_name(table_def["TableName"], prefix)
        try:
            client.delete_table(TableName=name)
            logger.info("%s silindi", name)
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceNotFoundException":
                raise
            logger.info("%s bulunamadı, atlanıyor", name)


if __name__ == "__main__":
    import sys

    import boto3

    from src.config import configure_logging, load_settings

    settings = load_settings()
    configure_logging(settings.log_level)
    dynamodb_client = boto3.client("dynamodb", region_name=settings.region_name)

    if len(sys.argv) > 1 and sys.argv[1] == "--delete":
        delete_tables(dynamodb_client, settings.table_prefix)
    else:
        create_tables(dynamodb_client, settings.table_prefix)
