"""
Celery configuration for the driver validation worker and beat.

Loaded by `celery_app.config_from_object("celeryconfig")` in
driver_onboarding/tasks/__init__.py.  Broker/result-backend URLs come
from the application settings (environment variables), defaulting to
localhost for local dev.

Run:
    celery -A driver_onboarding.tasks worker -Q validation
    celery -A driver_onboarding.tasks beat
"""

from driver_onboarding.core.config import settings
from driver_onboarding.validation.scheduler import build_beat_schedule

# ═══════════════════════════════════════════════════════════
#  Broker & Result Backend
# ═══════════════════════════════════════════════════════════

broker_url = settings.CELERY_BROKER_URL
result_backend = settings.CELERY_RESULT_BACKEND

# ═══════════════════════════════════════════════════════════
#  Serialization: JSON only
# ═══════════════════════════════════════════════════════════

task_serializer = "json"
result_serializer = "json"
accept_content = ["json"]

# ═══════════════════════════════════════════════════════════
#  Timezone
# ═══════════════════════════════════════════════════════════

timezone = "UTC"
enable_utc = True

# ═══════════════════════════════════════════════════════════
#  Task Execution
# ═══════════════════════════════════════════════════════════

# A pass is not retried by Celery: drivers left pending are picked
# up by the next scheduled pass instead.
task_acks_late = False
worker_prefetch_multiplier = 1

# No task time limit: a pass runs until every dispatched driver settles

# ═══════════════════════════════════════════════════════════
#  Result Expiry: auto-clean after 24h
# ═══════════════════════════════════════════════════════════

result_expires = 86400

# ═══════════════════════════════════════════════════════════
#  Worker Settings
# ═══════════════════════════════════════════════════════════

# Restart worker after N tasks (LLM client libraries hold memory)
worker_max_tasks_per_child = 50

worker_send_task_events = False
task_send_sent_event = False

# ═══════════════════════════════════════════════════════════
#  Task Routes
# ═══════════════════════════════════════════════════════════

task_routes = {
    "driver_onboarding.tasks.validation_tasks.*": {"queue": "validation"},
}

task_default_queue = "default"

# ═══════════════════════════════════════════════════════════
#  Beat Schedule (periodic tasks)
# ═══════════════════════════════════════════════════════════

beat_schedule = build_beat_schedule(settings)
