"""
JSON file-based adapter implementing DatabaseInterface.
For local development - stores all records in one JSON file.
Data persists between restarts, no database setup needed.
"""
import asyncio
import copy
import json
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional

from .base import DatabaseInterface
from ...api.exceptions import UpstreamFailureError
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class JSONAdapter(DatabaseInterface):
    """
    JSON file-based database adapter.
    Records are held in memory and written through to ``records.json``.
    """

    def __init__(self, data_dir: Path):
        """
        Initialize JSON adapter.

        Args:
            data_dir: Directory to store the JSON file
        """
        self.data_dir = Path(data_dir)
        self.records_file = self.data_dir / "records.json"
        self._records: Dict[str, Dict[str, Any]] = {}

        # Lock for thread-safe file operations
        self._lock = Lock()
        # Saves run in executor threads; keep them in write order
        self._save_lock = asyncio.Lock()

    async def initialize(self):
        """Initialize database - load records from the JSON file."""
        self.data_dir.mkdir(parents=True, exist_ok=True)
        self._load_data()

    async def close(self):
        """Close database - flush records to the JSON file."""
        await self._save_data()

    def _load_data(self):
        if not self.records_file.exists():
            self._records = {}
            return
        try:
            with open(self.records_file, 'r', encoding='utf-8') as f:
                self._records = json.load(f)
        except (json.JSONDecodeError, IOError) as e:
            logger.warning(f"Could not load {self.records_file}: {e}")
            self._records = {}
        logger.info(f"Loaded {len(self._records)} records from {self.records_file}")

    async def _save_data(self):
        async with self._save_lock:
            await self._write_snapshot(copy.deepcopy(self._records))

    async def _write_snapshot(self, snapshot: Dict[str, Dict[str, Any]]):
        def _save():
            with self._lock:
                tmp_file = self.records_file.with_suffix(".json.tmp")
                with open(tmp_file, 'w', encoding='utf-8') as f:
                    json.dump(snapshot, f, indent=2, ensure_ascii=False)
                tmp_file.replace(self.records_file)

        # Run in executor to avoid blocking
        loop = asyncio.get_event_loop()
        try:
            await loop.run_in_executor(None, _save)
        except OSError as e:
            logger.error(f"Error saving {self.records_file}: {e}")
            raise UpstreamFailureError(f"Failed to persist records: {e}") from e

    async def put_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        record_id = record.get("id")
        if not record_id:
            raise ValueError("Record must have an 'id' field")

        self._records[record_id] = copy.deepcopy(record)
        await self._save_data()
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

        await self._save_data()
        return copy.deepcopy(record)

    async def delete_record(self, record_id: str) -> bool:
        if self._records.pop(record_id, None) is None:
            return False
        await self._save_data()
        return True
