"""Background tasks of the core module (transactional outbox dispatch)."""

import structlog
from celery import shared_task
from django.conf import settings
from django.db import transaction

from modules.core.models import EventStatus, OutboxEvent
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


@shared_task(name="core.dispatch_outbox_events")
def dispatch_outbox_events(batch_size: int = 100) -> dict:
    """Publish pending outbox events on the in-process event bus.

    Each row is locked while it is handled so two workers never publish
    the same event.  Events with no subscribed handler are marked as
    published.  A handler error marks the row FAILED; it is retried on a
    later run until ``OUTBOX_MAX_RETRIES`` is reached.
    """
    max_retries = getattr(settings, "OUTBOX_MAX_RETRIES", 5)
    event_ids = list(
        OutboxEvent.objects.dispatchable(max_retries).values_list("id", flat=True)[
            :batch_size
        ]
    )

    published = failed = 0
    for event_id in event_ids:
        with transaction.atomic():
            outbox = (
                OutboxEvent.objects.select_for_update().filter(id=event_id).first()
            )
            if outbox is None or outbox.status == EventStatus.PUBLISHED:
                continue
            log = logger.bind(
                outbox_id=str(outbox.id),
                event_type=outbox.event_type,
                aggregate_id=outbox.aggregate_id,
            )
            event_class = event_bus.event_class(outbox.event_type)
            try:
                if event_class is not None:
                    event_bus.publish(event_class.from_payload(outbox.payload))
            except Exception as exc:
                log.exception("outbox.dispatch_failed")
                outbox.mark_as_failed(str(exc))
                failed += 1
                continue
            outbox.mark_as_published()
            published += 1
            log.info("outbox.dispatched", has_handlers=event_class is not None)

    logger.info("outbox.batch_completed", published=published, failed=failed)
    return {"published": published, "failed": failed}
