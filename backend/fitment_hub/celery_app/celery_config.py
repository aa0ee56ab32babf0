"""
Celery configuration — broker, task queues, routes and rate limits.

Tag jobs that touch many products (bulk add/remove, full replacement) run
on the ``tagging`` queue so they do not hold up API requests.

Note: On Windows, Celery's prefork pool doesn't work properly.
Use --pool=solo or --pool=threads on Windows.

Running a worker:
    celery -A fitment_hub.celery_app worker --pool=solo -Q tagging,default -l info -n tagging@%h
"""
import logging
import platform

from celery import Celery
from kombu import Queue

from fitment_hub.core.config import settings

logger = logging.getLogger(__name__)

IS_WINDOWS = platform.system() == "Windows"

BROKER_URL = settings.celery_broker_url
RESULT_BACKEND = settings.celery_result_backend
SHOPIFY_RATE_LIMIT = settings.shopify_api_rate_limit

celery_app = Celery(
    "fitment_hub",
    broker=BROKER_URL,
    backend=RESULT_BACKEND,
    include=[
        "fitment_hub.celery_app.tasks.tagging",
    ]
)

celery_app.conf.update(
    # Serialization
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,

    # Task execution settings
    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,

    task_queues=(
        Queue("tagging"),
        Queue("default"),
    ),
    task_routes={
        "tasks.tagging.*": {"queue": "tagging"},
    },
    task_default_queue="default",

    # Whole-job rate limit; per-request pacing is done inside the job
    task_annotations={
        "tasks.tagging.replace_product_tags": {
            "rate_limit": SHOPIFY_RATE_LIMIT,
        },
    },

    # Result expiration
    result_expires=3600,  # 1 hour

    # Retry settings
    task_default_retry_delay=30,
    task_max_retries=3,

    worker_pool="solo" if IS_WINDOWS else "prefork",

    broker_transport_options={"visibility_timeout": 3600},

    worker_log_format="[%(asctime)s: %(levelname)s/%(processName)s] %(message)s",
    worker_task_log_format="[%(asctime)s: %(levelname)s/%(processName)s] [%(task_name)s] %(message)s",
)
