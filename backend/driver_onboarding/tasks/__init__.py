"""
Celery application factory.
"""

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from driver_onboarding.core.config import settings
from driver_onboarding.core.logging import setup_logging

celery_app = Celery("driver_onboarding")
celery_app.config_from_object("celeryconfig")

# Auto-discover tasks in these modules
celery_app.autodiscover_tasks([
    "driver_onboarding.tasks.validation_tasks",
])


@celery_setup_logging.connect
def configure_worker_logging(**kwargs):
    """Route Celery's logging through structlog instead of its own handlers."""
    setup_logging("DEBUG" if settings.APP_ENV == "development" else "INFO")
