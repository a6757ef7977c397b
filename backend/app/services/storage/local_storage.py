"""
Local filesystem storage adapter implementing FileStorageInterface.
Stores files on the local filesystem - for development and demos.

Blob metadata lives in JSON sidecar files under ``.meta/``. Download URLs
are signed with HMAC and served by the files router.
"""
import asyncio
import hashlib
import hmac
import json
import mimetypes
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import quote, urlencode

from .base import FileStorageInterface
from ...core.logging_config import get_logger

logger = get_logger(__name__)

META_DIR = ".meta"


class LocalFileStorage(FileStorageInterface):
    """
    Local filesystem storage adapter.
    Stores files in a local directory - for development and demos.
    """

    def __init__(self, base_dir: Path, signing_secret: str, container: Optional[str] = None):
        """
        Initialize local file storage.

        Args:
            base_dir: Base directory for file storage
            signing_secret: Key used to sign download URLs
            container: Container name reported on records (defaults to the directory name)
        """
        self.base_dir = Path(base_dir)
        self.signing_secret = signing_secret.encode("utf-8")
        self._container = container or self.base_dir.name

    @property
    def container_name(self) -> str:
        return self._container

    async def initialize(self):
        """Initialize storage - ensure base directory exists."""
        self.base_dir.mkdir(parents=True, exist_ok=True)

    async def close(self):
        """Close storage (no-op for local filesystem)."""
        pass

    def _get_full_path(self, file_path: str) -> Path:
        """Get full filesystem path from storage key."""
        normalized = Path(file_path).as_posix().lstrip('/')
        full_path = (self.base_dir / normalized).resolve()
        # Prevent directory traversal
        if not full_path.is_relative_to(self.base_dir.resolve()):
            raise ValueError(f"Invalid storage key: {file_path}")
        return full_path

    def _get_meta_path(self, file_path: str) -> Path:
        return self._get_full_path(f"{META_DIR}/{Path(file_path).as_posix().lstrip('/')}.json")

    async def save_bytes(
        self,
        file_path: str,
        data: bytes,
        content_type: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> str:
        """Write a blob to the local filesystem."""
        full_path = self._get_full_path(file_path)
        meta_path = self._get_meta_path(file_path)
        sidecar = {
            "contentType": content_type or "application/octet-stream",
            "metadata": dict(metadata or {}),
        }

        def _save():
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(data)
            meta_path.parent.mkdir(parents=True, exist_ok=True)
            meta_path.write_text(json.dumps(sidecar), encoding="utf-8")

        # Run in executor to avoid blocking
        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, _save)

        return file_path

    async def get_file(self, file_path: str) -> bytes:
        """Retrieve a blob from the local filesystem."""
        full_path = self._get_full_path(file_path)

        if not full_path.is_file():
            raise FileNotFoundError(f"File not found: {file_path}")

        loop = asyncio.get_event_loop()
        return await loop.run_in_executor(None, full_path.read_bytes)

    async def delete_file(self, file_path: str) -> bool:
        """Delete a blob (and its sidecar) from the local filesystem."""
        full_path = self._get_full_path(file_path)
        meta_path = self._get_meta_path(file_path)

        if not full_path.is_file():
            return False

        def _delete():
            full_path.unlink()
            meta_path.unlink(missing_ok=True)

        loop = asyncio.get_event_loop()
        await loop.run_in_executor(None, _delete)
        return True

    async def file_exists(self, file_path: str) -> bool:
        """Check if a blob exists in the local filesystem."""
        return self._get_full_path(file_path).is_file()

    async def get_file_metadata(self, file_path: str) -> Optional[Dict[str, Any]]:
        """Head a blob using its stat and sidecar."""
        full_path = self._get_full_path(file_path)
        if not full_path.is_file():
            return None

        meta_path = self._get_meta_path(file_path)
        sidecar: Dict[str, Any] = {}
        if meta_path.is_file():
            sidecar = json.loads(meta_path.read_text(encoding="utf-8"))

        stat = full_path.stat()
        content_type = sidecar.get("contentType") or mimetypes.guess_type(full_path.name)[0]
        return {
            "size": stat.st_size,
            "contentType": content_type or "application/octet-stream",
            "lastModified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
            "etag": hashlib.md5(full_path.read_bytes()).hexdigest(),
            "metadata": sidecar.get("metadata", {}),
        }

    def _sign(self, file_path: str, expires: int) -> str:
        message = f"{file_path}:{expires}".encode("utf-8")
        return hmac.new(self.signing_secret, message, hashlib.sha256).hexdigest()

    def verify_signature(self, file_path: str, expires: int, signature: str) -> bool:
        """Check a download URL signature and its expiry."""
        if expires < int(time.time()):
            return False
        return hmac.compare_digest(self._sign(file_path, expires), signature)

    async def get_file_url(self, file_path: str, expires_in: int = 3600) -> str:
        """
        Get a signed URL for the file.
        For local storage this is a path served by the files router.
        """
        expires = int(time.time()) + expires_in
        query = urlencode({"expires": expires, "signature": self._sign(file_path, expires)})
        return f"/files/{quote(file_path)}?{query}"
