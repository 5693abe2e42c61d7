# slotbook/config/celery_config.py
"""Celery configuration and task routing"""
from celery import Celery
from celery.schedules import crontab
from kombu import Queue

from slotbook.config.settings import get_settings

settings = get_settings()


def create_celery_app() -> Celery:
    """Create and configure Celery application"""

    celery_app = Celery(
        "slotbook",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=[
            "slotbook.tasks.email_tasks",
            "slotbook.tasks.maintenance_tasks",
        ],
    )

    # Configure Celery
    celery_app.conf.update(
        task_serializer=settings.CELERY_TASK_SERIALIZER,
        accept_content=["json"],
        result_serializer="json",
        timezone="UTC",
        enable_utc=True,
        task_always_eager=settings.CELERY_TASK_ALWAYS_EAGER,

        # Task routing
        task_routes={
            "slotbook.tasks.email_tasks.*": {"queue": "emails"},
            "slotbook.tasks.maintenance_tasks.*": {"queue": "maintenance"},
        },

        # Queue definitions
        task_queues=(
            Queue("emails", routing_key="emails"),
            Queue("maintenance", routing_key="maintenance"),
        ),

        # Periodic maintenance
        beat_schedule={
            "cleanup-expired-modification-tokens": {
                "task": "slotbook.tasks.maintenance_tasks.cleanup_expired_modification_tokens",
                "schedule": crontab(minute=0),
            },
        },

        # Worker settings
        worker_max_tasks_per_child=1000,
        worker_prefetch_multiplier=1,
        task_acks_late=True,

        # Retry settings
        task_retry_max_retries=3,
        task_retry_delay=60,  # 1 minute

        broker_connection_retry_on_startup=True,
    )

    return celery_app


# Create the Celery app instance
celery_app = create_celery_app()
