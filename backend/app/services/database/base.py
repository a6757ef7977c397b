"""
Abstract base class for record store adapters.
All database implementations must inherit from this class.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class DatabaseInterface(ABC):
    """
    Abstract interface for file record operations.
    Records are flat dicts keyed by ``id``.
    This allows plug-and-play database support without changing business logic.
    """

    @abstractmethod
    async def put_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """Insert or replace a record."""
        pass

    @abstractmethod
    async def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Get a record by ID."""
        pass

    @abstractmethod
    async def update_record(self, record_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Set the given top-level fields on an existing record.

        Returns:
            The updated record, or None if no record exists (none is created)
        """
        pass

    @abstractmethod
    async def delete_record(self, record_id: str) -> bool:
        """Delete a record. Returns False if it did not exist."""
        pass

    @abstractmethod
    async def initialize(self):
        """Initialize database (create tables, verify connections, etc.)."""
        pass

    @abstractmethod
    async def close(self):
        """Close database connection."""
        pass
