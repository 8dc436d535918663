"""
Celery application configuration.

Celery handles the periodic contract status refresh; the broker is the
same Redis used for caching.
"""

import logging

from celery import Celery
from celery.schedules import crontab
from celery.signals import task_failure, task_success

from app.config import settings

logger = logging.getLogger(__name__)

celery_app = Celery(
    "multiloja",
    broker=str(settings.redis_url),
    backend=str(settings.redis_url),
    include=[
        "app.features.contracts.tasks",
    ]
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    task_routes={
        "app.features.contracts.tasks.*": {"queue": "contracts"},
    },

    result_expires=3600,

    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=300,
    task_soft_time_limit=240,

    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,

    task_default_max_retries=3,
    task_default_retry_delay=60,

    worker_send_task_events=True,
    task_send_sent_event=True,
)


@task_success.connect
def task_success_handler(sender=None, result=None, **kwargs):
    """Log successful task completion."""
    logger.info(f"Task succeeded: {sender.name}")


@task_failure.connect
def task_failure_handler(sender=None, exception=None, **kwargs):
    """Log task failures."""
    logger.error(f"Task failed: {sender.name} - {exception}")


celery_app.conf.beat_schedule = {
    "refresh-contract-statuses": {
        "task": "app.features.contracts.tasks.refresh_contract_statuses",
        "schedule": crontab(hour=3, minute=0),  # Daily, 03:00 UTC
    },
}
