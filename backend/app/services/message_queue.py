"""
Message Queue Service - Celery app for out-of-process metadata extraction.

Used when NOTIFICATION_MODE=celery: uploads enqueue an extraction task
instead of running it in the API process.
"""
from celery import Celery

from ..core.config import Settings


def create_celery_app(settings: Settings) -> Celery:
    app = Celery(
        "file_metadata",
        broker=settings.celery_broker_url,
        backend=settings.celery_result_backend,
        include=["app.services.tasks"]
    )

    app.conf.update(
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_track_started=True,
        task_time_limit=10 * 60,
        task_soft_time_limit=8 * 60,
        worker_prefetch_multiplier=4,
        task_acks_late=True,
        task_routes={
            "app.services.tasks.extract_metadata": {"queue": "extraction"},
        },
        task_default_queue="default",
    )
    return app


celery_app = create_celery_app(Settings.from_env())
