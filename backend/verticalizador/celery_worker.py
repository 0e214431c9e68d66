from celery import Celery
from kombu import Exchange, Queue

from verticalizador import models  # noqa: F401  registra os modelos antes da primeira task
from verticalizador.core.settings import settings

DEFAULT_QUEUE = "default"
DEAD_LETTER_QUEUE = "dead_letter"

editais_exchange = Exchange("editais", type="direct")

celery_app = Celery(
    "verticalizador",
    broker=settings.CELERY_BROKER_URL,
    backend=settings.CELERY_RESULT_BACKEND,
    include=["verticalizador.editais.tasks"],
)

celery_app.conf.update(
    task_queues=(
        Queue(DEFAULT_QUEUE, editais_exchange, routing_key=DEFAULT_QUEUE),
        # Mensagens que não puderam ser publicadas após as tentativas caem aqui
        Queue(DEAD_LETTER_QUEUE, editais_exchange, routing_key=DEAD_LETTER_QUEUE),
    ),
    task_default_queue=DEFAULT_QUEUE,
    task_default_exchange=editais_exchange.name,
    task_default_routing_key=DEFAULT_QUEUE,
    task_routes={"process_edital_task": {"queue": DEFAULT_QUEUE}},
    task_publish_retry=True,
    task_publish_retry_policy={
        "max_retries": 3,
        "interval_start": 0,
        "interval_step": 0.2,
        "interval_max": 0.2,
    },
    task_serializer="json",
    result_serializer="json",
    accept_content=["json"],
    result_expires=24 * 3600,
    task_acks_late=True,
    # Um edital por vez por processo: extração e prompt são pesados
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=50,
)
