"""
AWS S3 storage adapter implementing FileStorageInterface.
Stores files in AWS S3 (or LocalStack/MinIO through a custom endpoint).
"""
import asyncio
from typing import Any, Dict, Optional
from urllib.parse import quote

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .base import FileStorageInterface
from ...api.exceptions import UpstreamFailureError
from ...core.logging_config import get_logger

logger = get_logger(__name__)

_MISSING_CODES = ("404", "NoSuchKey", "NotFound")


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def _ascii_metadata(metadata: Optional[Dict[str, str]]) -> Dict[str, str]:
    # S3 user metadata travels as HTTP headers
    return {key: quote(str(value), safe=" -_.@") for key, value in (metadata or {}).items()}


class S3FileStorage(FileStorageInterface):
    """
    AWS S3 storage adapter.
    Stores files in S3 buckets - for production and LocalStack deployments.
    """

    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        region_name: str = "us-east-1",
        endpoint_url: Optional[str] = None,  # For S3-compatible services (LocalStack, MinIO)
        client=None
    ):
        """
        Initialize S3 storage.

        Args:
            bucket_name: S3 bucket name
            aws_access_key_id: AWS access key (or use IAM role)
            aws_secret_access_key: AWS secret key (or use IAM role)
            region_name: AWS region
            endpoint_url: Optional custom endpoint (for S3-compatible services)
            client: Pre-built boto3 S3 client (tests)
        """
        self.bucket_name = bucket_name
        self.region_name = region_name

        if client is None:
            config = Config(
                signature_version='s3v4',
                retries={'max_attempts': 3},
                # Path-style addressing is required for LocalStack
                s3={'addressing_style': 'path'} if endpoint_url else None
            )
            client = boto3.client(
                's3',
                aws_access_key_id=aws_access_key_id,
                aws_secret_access_key=aws_secret_access_key,
                region_name=region_name,
                endpoint_url=endpoint_url,
                config=config
            )
        self.s3_client = client

    @property
    def container_name(self) -> str:
        return self.bucket_name

    async def _run(self, func):
        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, func)

    async def initialize(self):
        """Initialize storage - verify bucket exists and is accessible."""
        try:
            await self._run(lambda: self.s3_client.head_bucket(Bucket=self.bucket_name))
        except ClientError as e:
            error_code = _error_code(e)
            if error_code == '404':
                raise ValueError(f"S3 bucket '{self.bucket_name}' does not exist")
            elif error_code == '403':
                raise ValueError(f"Access denied to S3 bucket '{self.bucket_name}'")
            else:
                raise ValueError(f"Error accessing S3 bucket: {e}")
        logger.info(f"S3 bucket '{self.bucket_name}' is reachable")

    async def close(self):
        """Close storage connection (no-op for boto3, but included for interface)."""
        pass

    async def save_bytes(
        self,
        file_path: str,
        data: bytes,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> str:
        """Write a blob to S3."""
        def _upload():
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=file_path,
                Body=data,
                ContentType=content_type or 'application/octet-stream',
                Metadata=_ascii_metadata(metadata)
            )

        try:
            await self._run(_upload)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to upload {file_path} to S3: {e}")
            raise UpstreamFailureError(f"Failed to upload file to S3: {e}") from e

        return file_path

    async def get_file(self, file_path: str) -> bytes:
        """Retrieve a blob from S3."""
        def _download():
            try:
                response = self.s3_client.get_object(Bucket=self.bucket_name, Key=file_path)
                return response['Body'].read()
            except ClientError as e:
                if _error_code(e) in _MISSING_CODES:
                    raise FileNotFoundError(f"File not found in S3: {file_path}")
                raise

        try:
            return await self._run(_download)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to get {file_path} from S3: {e}")
            raise UpstreamFailureError(f"Failed to get file from S3: {e}") from e

    async def delete_file(self, file_path: str) -> bool:
        """Delete a blob from S3."""
        def _delete():
            try:
                self.s3_client.delete_object(Bucket=self.bucket_name, Key=file_path)
                return True
            except ClientError as e:
                if _error_code(e) in _MISSING_CODES:
                    return False
                raise

        try:
            return await self._run(_delete)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete {file_path} from S3: {e}")
            raise UpstreamFailureError(f"Failed to delete file from S3: {e}") from e

    async def file_exists(self, file_path: str) -> bool:
        """Check if a blob exists in S3."""
        return await self.get_file_metadata(file_path) is not None

    async def get_file_metadata(self, file_path: str) -> Optional[Dict[str, Any]]:
        """Head a blob in S3."""
        def _head():
            try:
                return self.s3_client.head_object(Bucket=self.bucket_name, Key=file_path)
            except ClientError as e:
                if _error_code(e) in _MISSING_CODES:
                    return None
                raise

        try:
            result = await self._run(_head)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to head {file_path} in S3: {e}")
            raise UpstreamFailureError(f"Failed to get file metadata: {e}") from e

        if result is None:
            return None
        last_modified = result.get('LastModified')
        return {
            'size': result.get('ContentLength'),
            'contentType': result.get('ContentType'),
            'lastModified': last_modified.isoformat() if last_modified else None,
            'etag': result.get('ETag'),
            'metadata': result.get('Metadata', {}),
        }

    async def get_file_url(self, file_path: str, expires_in: int = 3600) -> str:
        """
        Get a presigned URL to read the blob.

        Args:
            file_path: S3 key of the file
            expires_in: URL expiration time in seconds (default: 1 hour)

        Returns:
            Presigned URL string
        """
        def _generate_url():
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': file_path},
                ExpiresIn=expires_in
            )

        try:
            return await self._run(_generate_url)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to presign {file_path}: {e}")
            raise UpstreamFailureError(f"Failed to generate presigned URL: {e}") from e
