import time

from verticalizador.celery_worker import celery_app
from verticalizador.core.constants import CeleryConstants
from verticalizador.core.database import SessionLocal
from verticalizador.core.logging import LogContext, elapsed_ms, set_edital_context
from verticalizador.editais.edital_processor import EditalProcessor


@celery_app.task(
    name="process_edital_task",
    bind=True,
    autoretry_for=(Exception,),
    max_retries=CeleryConstants.MAX_RETRIES,
    retry_backoff=CeleryConstants.RETRY_BACKOFF_SECONDS,
    soft_time_limit=CeleryConstants.SOFT_TIME_LIMIT_SECONDS,
    time_limit=CeleryConstants.HARD_TIME_LIMIT_SECONDS,
    acks_late=True,
)
def process_edital_task(self, edital_id: int):
    """Verticaliza um edital já salvo; toda a lógica fica no EditalProcessor."""
    start_time = time.time()
    attempt = self.request.retries + 1
    total_attempts = (self.max_retries or 0) + 1
    set_edital_context(edital_id)

    with LogContext("editais.tasks", task_id=self.request.id, attempt=attempt, max_attempts=total_attempts) as log:
        db = SessionLocal()
        try:
            result = EditalProcessor(db=db, edital_id=edital_id).process()
        except Exception as exc:
            log.error(
                "Edital task failed",
                error=str(exc),
                error_type=type(exc).__name__,
                will_retry=attempt < total_attempts,
                duration_ms=elapsed_ms(start_time),
            )
            raise self.retry(exc=exc)
        finally:
            db.close()
            set_edital_context(None)

        log.info("Edital task completed", duration_ms=elapsed_ms(start_time))
        return result
