"""
DynamoDB adapter implementing DatabaseInterface.
Stores one item per file record, keyed by ``id``.
"""
import asyncio
from decimal import Decimal
from typing import Any, Dict, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import BotoCoreError, ClientError

from .base import DatabaseInterface
from ...api.exceptions import UpstreamFailureError
from ...core.logging_config import get_logger

logger = get_logger(__name__)

_serializer = TypeSerializer()
_deserializer = TypeDeserializer()


def _to_dynamo_value(value: Any) -> Any:
    """DynamoDB has no float type; numbers travel as Decimal."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, dict):
        return {k: _to_dynamo_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dynamo_value(v) for v in value]
    return value


def _from_dynamo_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, dict):
        return {k: _from_dynamo_value(v) for k, v in value.items()}
    if isinstance(value, (list, set)):
        return [_from_dynamo_value(v) for v in value]
    return value


def serialize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return {key: _serializer.serialize(_to_dynamo_value(value)) for key, value in item.items()}


def deserialize_item(item: Dict[str, Any]) -> Dict[str, Any]:
    return {key: _from_dynamo_value(_deserializer.deserialize(value)) for key, value in item.items()}


class DynamoDBAdapter(DatabaseInterface):
    """
    DynamoDB record store.
    Partial updates are conditional so an update never resurrects a deleted record.
    """

    def __init__(
        self,
        table_name: str,
        region_name: str = "us-east-1",
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        create_table: bool = False,
        client=None
    ):
        """
        Initialize DynamoDB adapter.

        Args:
            table_name: Table holding file records
            region_name: AWS region
            aws_access_key_id: AWS access key (or use IAM role)
            aws_secret_access_key: AWS secret key (or use IAM role)
            endpoint_url: Optional custom endpoint (LocalStack)
            create_table: Create the table on initialize if it is missing
            client: Pre-built boto3 DynamoDB client (tests)
        """
        self.table_name = table_name
        self.create_table = create_table
        self.client = client or boto3.client(
            "dynamodb",
            region_name=region_name,
            aws_access_key_id=aws_access_key_id,
            aws_secret_access_key=aws_secret_access_key,
            endpoint_url=endpoint_url
        )

    async def _run(self, func):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, func)

    async def initialize(self):
        """Verify the table exists, creating it when configured to."""
        try:
            await self._run(lambda: self.client.describe_table(TableName=self.table_name))
            logger.info(f"DynamoDB table '{self.table_name}' is reachable")
            return
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") != "ResourceNotFoundException":
                raise ValueError(f"Error accessing DynamoDB table: {e}")
            if not self.create_table:
                raise ValueError(f"DynamoDB table '{self.table_name}' does not exist")

        logger.info(f"Creating DynamoDB table '{self.table_name}'")

        def _create():
            self.client.create_table(
                TableName=self.table_name,
                AttributeDefinitions=[{"AttributeName": "id", "AttributeType": "S"}],
                KeySchema=[{"AttributeName": "id", "KeyType": "HASH"}],
                BillingMode="PAY_PER_REQUEST"
            )
            self.client.get_waiter("table_exists").wait(TableName=self.table_name)

        await self._run(_create)

    async def close(self):
        """Close database connection (no-op for boto3)."""
        pass

    async def put_record(self, record: Dict[str, Any]) -> Dict[str, Any]:
        if not record.get("id"):
            raise ValueError("Record must have an 'id' field")

        try:
            item = serialize_item(record)
        except TypeError as e:
            logger.error(f"Record {record.get('id')} has values DynamoDB cannot store: {e}")
            raise UpstreamFailureError(f"Failed to save metadata to DynamoDB: {e}") from e

        try:
            await self._run(lambda: self.client.put_item(
                TableName=self.table_name,
                Item=item
            ))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to save record {record.get('id')}: {e}")
            raise UpstreamFailureError(f"Failed to save metadata to DynamoDB: {e}") from e
        return dict(record)

    async def get_record(self, record_id: str) -> Optional[Dict[str, Any]]:
        try:
            response = await self._run(lambda: self.client.get_item(
                TableName=self.table_name,
                Key={"id": {"S": record_id}},
                ConsistentRead=True
            ))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get record {record_id}: {e}")
            raise UpstreamFailureError(f"Failed to get metadata from DynamoDB: {e}") from e

        item = response.get("Item")
        return deserialize_item(item) if item else None

    async def update_record(self, record_id: str, updates: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        if not updates:
            return await self.get_record(record_id)

        names = {"#pk": "id"}
        values = {}
        assignments = []
        for index, (key, value) in enumerate(updates.items()):
            names[f"#attr{index}"] = key
            values[f":val{index}"] = _serializer.serialize(_to_dynamo_value(value))
            assignments.append(f"#attr{index} = :val{index}")

        def _update():
            return self.client.update_item(
                TableName=self.table_name,
                Key={"id": {"S": record_id}},
                UpdateExpression="SET " + ", ".join(assignments),
                ConditionExpression="attribute_exists(#pk)",
                ExpressionAttributeNames=names,
                ExpressionAttributeValues=values,
                ReturnValues="ALL_NEW"
            )

        try:
            response = await self._run(_update)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                return None
            logger.error(f"Failed to update record {record_id}: {e}")
            raise UpstreamFailureError(f"Failed to update metadata in DynamoDB: {e}") from e
        except BotoCoreError as e:
            logger.error(f"Failed to update record {record_id}: {e}")
            raise UpstreamFailureError(f"Failed to update metadata in DynamoDB: {e}") from e

        return deserialize_item(response.get("Attributes", {}))

    async def delete_record(self, record_id: str) -> bool:
        try:
            response = await self._run(lambda: self.client.delete_item(
                TableName=self.table_name,
                Key={"id": {"S": record_id}},
                ReturnValues="ALL_OLD"
            ))
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete record {record_id}: {e}")
            raise UpstreamFailureError(f"Failed to delete metadata from DynamoDB: {e}") from e
        return bool(response.get("Attributes"))
