"""Celery worker configuration.

Periodic booking sweeps:
- Cancel PENDING bookings whose payment was abandoned
- Complete CONFIRMED bookings once the dinner has taken place
"""

from celery import Celery
from celery.schedules import crontab

from minedine.config import settings

# Create Celery app
celery_app = Celery(
    "minedine_tasks",
    broker=settings.redis_url,
    backend=settings.redis_url,
    include=["minedine.tasks"],
)

# Celery configuration
celery_app.conf.update(
    # Task settings
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    task_time_limit=300,  # 5 minutes max
    task_soft_time_limit=240,

    # Worker settings
    worker_prefetch_multiplier=1,

    # Results expire after 1 hour
    result_expires=3600,

    # Beat schedule for periodic tasks
    beat_schedule={
        "expire-pending-bookings": {
            "task": "minedine.tasks.expire_pending_bookings",
            "schedule": crontab(minute="*/10"),
        },
        "complete-past-bookings": {
            "task": "minedine.tasks.complete_past_bookings",
            "schedule": crontab(minute=0),
        },
    },
)


if __name__ == "__main__":
    celery_app.start()
