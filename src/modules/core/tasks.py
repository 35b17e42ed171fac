"""Background tasks shared by every module."""

import structlog
from celery import shared_task
from django.conf import settings
from django.db.models import Q

from modules.core.models import EventStatus, OutboxEvent

logger = structlog.get_logger(__name__)


@shared_task(name="core.debug_task")
def debug_task():
    """Diagnostic task confirming that a worker is consuming the queue."""
    logger.info("debug_task.executed", status="ok")
    return {"status": "ok", "message": "Celery is working"}


def publish_outbox_event(event: OutboxEvent) -> None:
    """Hand one outbox row to downstream consumers (the structured log stream)."""
    logger.info(
        "outbox.relayed",
        event_type=event.event_type,
        topic=event.topic,
        aggregate_id=event.aggregate_id,
        payload=event.payload,
    )


@shared_task(name="core.relay_outbox_events")
def relay_outbox_events(batch_size: int = 100):
    """Publish pending outbox rows, and failed ones still under the retry limit.

    Each row is marked ``PUBLISHED`` or ``FAILED`` on its own, so one bad
    row never blocks the rest of the batch.
    """
    pending = OutboxEvent.objects.filter(
        Q(status=EventStatus.PENDING)
        | Q(status=EventStatus.FAILED, retry_count__lt=settings.OUTBOX_MAX_RETRIES)
    ).order_by("created_at")[:batch_size]

    published = failed = 0
    for event in pending:
        try:
            publish_outbox_event(event)
        except Exception as exc:
            logger.exception(
                "outbox.relay_failed",
                event_id=str(event.id),
                event_type=event.event_type,
                retry_count=event.retry_count + 1,
            )
            event.mark_as_failed(str(exc))
            failed += 1
            continue
        event.mark_as_published()
        published += 1
    return {"published": published, "failed": failed}
