"""
In-memory adapter implementing DatabaseInterface.
For demos and testing - stores all records in a Python dict.
Data is lost on restart.
"""
import copy
from typing import Any, Dict, Optional

from .base import DatabaseInterface


class MemoryAdapter(DatabaseInterface):
    """
    In-memory database adapter using a Python dictionary.
    Data is lost when the application restarts.
    """

    def __init__(self):
        self._records: Dict[str, Dict[str, Any]] = {}

    async def initialize(self):
        """Initialize database (clears any existing data)."""
        self._records.clear()

    async def close(self):
        """Close database connection (no-op for in-memory)."""
        pass

    async def put_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        record_id = record.get("id")
        if not record_id:
            raise ValueError("Record must have an 'id' field")

        # Deep copy to avoid reference issues
        self._records[record_id] = copy.deepcopy(record)
        return copy.deepcopy(self._records[record_id])

    async def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        record = self._records.get(record_id)
        return copy.deepcopy(record) if record else None

    async def update_record(self, record_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        record = self._records.get(record_id)
        if record is None:
            return None

        for key, value in updates.items():
            record[key] = copy.deepcopy(value)

        return copy.deepcopy(record)

    async def delete_record(self, record_id: str) -> bool:
        return self._records.pop(record_id, None) is not None

    def count(self) -> int:
        return len(self._records)
