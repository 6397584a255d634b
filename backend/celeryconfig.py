"""
Celery configuration for the PSC archive validation workers.

Loaded by `celery_app.config_from_object("celeryconfig")` in
psc_validator/tasks/__init__.py.  All broker/result-backend URLs come
from environment variables, defaulting to localhost for local dev.
"""

import os

# ═══════════════════════════════════════════════════════════
#  Broker & Result Backend
# ═══════════════════════════════════════════════════════════

broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/1")

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

# Acknowledge on receipt: a redelivered archive would be processed twice
task_acks_late = False

# Only prefetch 1 task at a time per worker process
worker_prefetch_multiplier = 1

# Deadline per archive.  A timed-out run skips every finalizer, so the only
# guarantee is "the source archive was not deleted".
task_soft_time_limit = 300    # 5 min: raises SoftTimeLimitExceeded
task_time_limit = 330         # 5.5 min: hard kill

# No automatic retries: validate_archive is declared with max_retries=0

# ═══════════════════════════════════════════════════════════
#  Result Expiry: 24h
# ═══════════════════════════════════════════════════════════

result_expires = 86400

# ═══════════════════════════════════════════════════════════
#  Worker Settings
# ═══════════════════════════════════════════════════════════

# Archives are buffered in memory; recycle workers periodically
worker_max_tasks_per_child = 200

worker_send_task_events = False
task_send_sent_event = False

# ═══════════════════════════════════════════════════════════
#  Task Routes
# ═══════════════════════════════════════════════════════════
# Run a dedicated worker:
#   celery -A psc_validator.tasks worker -Q validation

task_routes = {
    "psc_validator.tasks.validation_tasks.*": {"queue": "validation"},
}

task_default_queue = "default"
