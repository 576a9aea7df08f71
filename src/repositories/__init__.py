from src.repositories.dynamodb import DynamoDBInventoryRepository, DynamoDBRepository
from src.repositories.memory import InMemoryInventoryRepository, InMemoryRepository

__all__ = [
    "DynamoDBInventoryRepository",
    "DynamoDBRepository",
    "InMemoryInventoryRepository",
    "InMemoryRepository",
]
