"""
Application configuration.

Settings are read from the environment once, at process start, into a
frozen ``Settings`` value that is passed to every component that needs it.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent

MIB = 1024 * 1024

ALLOWED_MIME_TYPES: Tuple[str, ...] = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "text/plain",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return int(value)


@dataclass(frozen=True)
class Settings:
    """Immutable service configuration."""

    environment: str = "development"
    app_version: str = "1.0.0"

    # AWS (LocalStack compatible)
    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_endpoint_url: Optional[str] = None

    # Object storage
    storage_type: str = "local"  # Options: 's3', 'local'
    s3_bucket: str = "upload-test-bucket"
    local_storage_dir: Path = BASE_DIR / "uploads"
    local_url_secret: str = "dev-signing-secret"
    storage_key_prefix: str = "uploads"

    # Record storage
    database_type: str = "memory"  # Options: 'dynamodb', 'json', 'memory'
    dynamodb_table: str = "file-metadata"
    dynamodb_create_table: bool = False
    json_db_path: Path = BASE_DIR / "data" / "json_db"

    # Upload limits
    max_file_size: int = 50 * MIB
    allowed_mime_types: Tuple[str, ...] = ALLOWED_MIME_TYPES

    # Extraction
    text_excerpt_limit: int = 5000
    notification_mode: str = "background"  # Options: 'background', 'celery', 'external'

    # Downloads
    download_url_ttl: int = 3600

    # Celery
    celery_broker_url: str = "redis://localhost:6379/1"
    celery_result_backend: str = "redis://localhost:6379/2"

    # HTTP
    rate_limit_enabled: bool = True
    rate_limit_per_minute: int = 100
    cors_origins: Tuple[str, ...] = field(default=("*",))

    # Logging
    log_level: str = "INFO"
    log_file_enabled: bool = True

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def max_file_size_mb(self) -> int:
        return self.max_file_size // MIB

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables (and .env outside production)."""
        # In containers, environment variables are set directly
        if os.getenv("ENVIRONMENT") != "production":
            load_dotenv()

        allowed = os.getenv("ALLOWED_MIME_TYPES")
        cors = os.getenv("CORS_ORIGINS", "*")

        return cls(
            environment=os.getenv("ENVIRONMENT", "development"),
            app_version=os.getenv("APP_VERSION", "1.0.0"),
            aws_region=os.getenv("AWS_REGION", os.getenv("AWS_DEFAULT_REGION", "us-east-1")),
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
            aws_endpoint_url=os.getenv("AWS_ENDPOINT_URL") or None,
            storage_type=os.getenv("STORAGE_TYPE", "local").lower(),
            s3_bucket=os.getenv("S3_BUCKET", "upload-test-bucket"),
            local_storage_dir=Path(os.getenv("LOCAL_STORAGE_DIR", str(BASE_DIR / "uploads"))),
            local_url_secret=os.getenv("LOCAL_URL_SECRET", "dev-signing-secret"),
            storage_key_prefix=os.getenv("STORAGE_KEY_PREFIX", "uploads").strip("/"),
            database_type=os.getenv("DATABASE_TYPE", "memory").lower(),
            dynamodb_table=os.getenv("DYNAMODB_TABLE", "file-metadata"),
            dynamodb_create_table=_env_bool("DYNAMODB_CREATE_TABLE", False),
            json_db_path=Path(os.getenv("JSON_DB_PATH", str(BASE_DIR / "data" / "json_db"))),
            max_file_size=_env_int("MAX_FILE_SIZE", 50 * MIB),
            allowed_mime_types=tuple(t.strip() for t in allowed.split(",") if t.strip())
            if allowed else ALLOWED_MIME_TYPES,
            text_excerpt_limit=_env_int("TEXT_EXCERPT_LIMIT", 5000),
            notification_mode=os.getenv("NOTIFICATION_MODE", "background").lower(),
            download_url_ttl=_env_int("DOWNLOAD_URL_TTL", 3600),
            celery_broker_url=os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/1"),
            celery_result_backend=os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/2"),
            rate_limit_enabled=_env_bool("RATE_LIMIT_ENABLED", True),
            rate_limit_per_minute=_env_int("RATE_LIMIT_PER_MINUTE", 100),
            cors_origins=tuple(o.strip() for o in cors.split(",") if o.strip()),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_file_enabled=_env_bool("LOG_FILE_ENABLED", True),
        )
