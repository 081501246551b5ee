"""
Celery worker entry point
Sends booking confirmation and cancellation emails
"""
import logging
from celery.signals import task_failure, worker_ready, worker_shutdown

from app.config.celery_config import celery_app
from app.utils.my_logging import setup_logging

# Setup logging first
setup_logging()
logger = logging.getLogger(__name__)


@worker_ready.connect
def worker_ready_handler(sender=None, **kwargs):
    """Handle worker startup"""
    task_names = sorted(name for name in celery_app.tasks.keys() if name.startswith("app."))
    logger.info(f"Celery worker ready, registered tasks: {task_names}")


@worker_shutdown.connect
def worker_shutdown_handler(sender=None, **kwargs):
    """Handle worker shutdown"""
    logger.info("Celery worker shutting down")


@task_failure.connect
def task_failure_handler(sender=None, task_id=None, exception=None, args=None, kwargs=None, **extra):
    """A notification that exhausted its retries; the booking itself stands"""
    logger.error(
        f"Task {sender.name if sender else 'unknown'} [{task_id}] failed for good: {exception}",
        extra={"appointment_id": (kwargs or {}).get("appointment_id")},
    )


if __name__ == "__main__":
    # Run worker directly
    celery_app.start([
        'worker',
        '--loglevel=info',
        '--queues=notifications',
        '--concurrency=2',
        '--max-tasks-per-child=1000'
    ])
