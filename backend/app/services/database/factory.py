"""
Database Factory for creating record store adapters.
Implements Factory Pattern for plug-and-play database support.
"""
from pathlib import Path

from .base import DatabaseInterface
from .dynamodb_adapter import DynamoDBAdapter
from .json_adapter import JSONAdapter
from .memory_adapter import MemoryAdapter
from ...core.config import Settings
from ...core.logging_config import get_logger

logger = get_logger(__name__)


class DatabaseFactory:
    """
    Factory for creating database adapters.
    Supports DynamoDB, JSON (file-based) and Memory (in-memory) backends.
    """

    @staticmethod
    def create(settings: Settings) -> DatabaseInterface:
        """
        Create a database adapter instance.

        Args:
            settings: Application settings (``database_type`` selects the backend)

        Returns:
            DatabaseInterface instance
        """
        database_type = settings.database_type.lower()

        if database_type == "dynamodb":
            return DatabaseFactory._create_dynamodb(settings)
        elif database_type == "json":
            return JSONAdapter(data_dir=Path(settings.json_db_path))
        elif database_type == "memory":
            return MemoryAdapter()
        else:
            raise ValueError(
                f"Unsupported database type: {database_type}. "
                f"Supported types: 'dynamodb', 'json', 'memory'"
            )

    @staticmethod
    def _create_dynamodb(settings: Settings) -> DynamoDBAdapter:
        if not settings.dynamodb_table:
            raise ValueError("DynamoDB table name is required")
        return DynamoDBAdapter(
            table_name=settings.dynamodb_table,
            region_name=settings.aws_region,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            endpoint_url=settings.aws_endpoint_url,
            create_table=settings.dynamodb_create_table
        )

    @staticmethod
    async def create_and_initialize(settings: Settings) -> DatabaseInterface:
        """
        Create database adapter and initialize it.

        Args:
            settings: Application settings

        Returns:
            Initialized DatabaseInterface instance
        """
        db = DatabaseFactory.create(settings)
        await db.initialize()
        return db
