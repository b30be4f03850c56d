"""Event handlers for Learning domain events."""

from __future__ import annotations

import structlog

from modules.learning.events import CertificateIssued, LessonCompleted
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class LessonCompletedHandler(IEventHandler[LessonCompleted]):
    def handle(self, event: LessonCompleted) -> None:
        logger.info(
            "learning.event.lesson_completed",
            course_id=event.course_id,
            session_id=event.session_id,
            progress_fraction=event.progress_fraction,
        )


class CertificateIssuedHandler(IEventHandler[CertificateIssued]):
    def handle(self, event: CertificateIssued) -> None:
        logger.info(
            "learning.event.certificate_issued",
            certificate_id=str(event.aggregate_id),
            certificate_number=event.certificate_number,
            session_id=event.session_id,
        )


lesson_completed_handler = LessonCompletedHandler()
certificate_issued_handler = CertificateIssuedHandler()

# (event class, handler) pairs wired onto the global bus by ``LearningConfig.ready``
SUBSCRIPTIONS = (
    (LessonCompleted, lesson_completed_handler),
    (CertificateIssued, certificate_issued_handler),
)
