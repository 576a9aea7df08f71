"""DynamoDB tabanlı depolar - boto3 Table kaynağı üzerinden aynı depo sözleşmesi."""

from __future__ import annotations

import logging
from dataclasses import asdict, fields
from decimal import Decimal
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, get_type_hints

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from src.models.supply_chain import InventoryItem

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _to_dynamo(obj: Any) -> Any:
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, float):
        return Decimal(str(obj))
    if isinstance(obj, dict):
        return {k: _to_dynamo(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list):
        return [_to_dynamo(i) for i in obj]
    return obj


def _decimal_to_native(obj: Any) -> Any:
    if isinstance(obj, Decimal):
        return int(obj) if obj == int(obj) else float(obj)
    if isinstance(obj, dict):
        return {k: _decimal_to_native(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_decimal_to_native(i) for i in obj]
    return obj


def to_item(entity: Any) -> dict:
    """Dataclass'ı DynamoDB item'ına çevirir."""
    return _to_dynamo(asdict(entity))


def from_item(model_cls: type[T], item: dict) -> T:
    """DynamoDB item'ını dataclass'a çevirir; bilinmeyen alanlar atlanır.

    Decimal değerler alanın tipine göre çevrilir: float alanlar
    tam sayı görünümlü olsa bile float kalır.
    """
    hints = get_type_hints(model_cls)
    values = {}
    for f in fields(model_cls):
        if f.name not in item:
            continue
        value = item[f.name]
        if isinstance(value, Decimal) and hints.get(f.name) is float:
            values[f.name] = float(value)
        else:
            values[f.name] = _decimal_to_native(value)
    return model_cls(**values)


class DynamoDBRepository(Generic[T]):
    """Tek anahtarlı DynamoDB tablosu üzerinde depo."""

    def __init__(self, table: Any, key_attr: str, model_cls: type[T]) -> None:
        self.table = table
        self.key_attr = key_attr
        self.model_cls = model_cls

    def find_by_id(self, entity_id: str) -> Optional[T]:
        try:
            response = self.table.get_item(Key={self.key_attr: entity_id})
        except ClientError as e:
            logger.error("DynamoDB okuma hatası [%s=%s]: %s", self.key_attr, entity_id, e)
            raise
        item = response.get("Item")
        return from_item(self.model_cls, item) if item else None

    def save(self, entity: T) -> T:
        try:
            self.table.put_item(Item=to_item(entity))
        except ClientError as e:
            logger.error("DynamoDB yazma hatası [%s]: %s", getattr(entity, self.key_attr), e)
            raise
        return entity

    def find_all(self) -> list[T]:
        items: list[dict] = []
        kwargs: dict[str, Any] = {}
        try:
            while True:
                response = self.table.scan(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error("DynamoDB scan hatası: %s", e)
            raise
        return [from_item(self.model_cls, item) for item in items]

    def delete(self, entity_id: str) -> None:
        # DynamoDB olmayan anahtarda delete_item için hata vermez
        try:
            self.table.delete_item(Key={self.key_attr: entity_id})
        except ClientError as e:
            logger.error("DynamoDB silme hatası [%s=%s]: %s", self.key_attr, entity_id, e)
            raise


class DynamoDBInventoryRepository:
    """Inventory tablosu: product_id (HASH) + warehouse_id (RANGE)."""

    def __init__(self, table: Any) -> None:
        self.table = table

    def find_by_product_and_warehouse(
        self, product_id: str, warehouse_id: str
    ) -> Optional[InventoryItem]:
        try:
            response = self.table.get_item(
                Key={"product_id": product_id, "warehouse_id": warehouse_id}
            )
        except ClientError as e:
            logger.error("Stok okuma hatası [%s/%s]: %s", warehouse_id, product_id, e)
            raise
        item = response.get("Item")
        return from_item(InventoryItem, item) if item else None

    def save(self, item: InventoryItem) -> InventoryItem:
        try:
            self.table.put_item(Item=to_item(item))
        except ClientError as e:
            logger.error("Stok yazma hatası [%s/%s]: %s", item.warehouse_id, item.product_id, e)
            raise
        return item

    def find_all(self) -> list[InventoryItem]:
        return self._collect(self.table.scan)

    def find_by_product(self, product_id: str) -> list[InventoryItem]:
        return self._collect(
            self.table.query, KeyConditionExpression=Key("product_id").eq(product_id)
        )

    def find_by_warehouse(self, warehouse_id: str) -> list[InventoryItem]:
        return [i for i in self.find_all() if i.warehouse_id == warehouse_id]

    def _collect(self, operation: Any, **kwargs: Any) -> list[InventoryItem]:
        items: list[dict] = []
        try:
            while True:
                response = operation(**kwargs)
                items.extend(response.get("Items", []))
                last_key = response.get("LastEvaluatedKey")
                if not last_key:
                    break
                kwargs["ExclusiveStartKey"] = last_key
        except ClientError as e:
            logger.error("Stok listeleme hatası: %s", e)
            raise
        return [from_item(InventoryItem, item) for item in items]
