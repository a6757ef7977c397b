"""
Record store abstraction layer for plug-and-play database support.
Supports DynamoDB, JSON (file-based) and Memory (in-memory) backends.
"""
from .base import DatabaseInterface
from .dynamodb_adapter import DynamoDBAdapter
from .memory_adapter import MemoryAdapter
from .json_adapter import JSONAdapter
from .factory import DatabaseFactory

__all__ = [
    "DatabaseInterface",
    "DynamoDBAdapter",
    "MemoryAdapter",
    "JSONAdapter",
    "DatabaseFactory"
]
