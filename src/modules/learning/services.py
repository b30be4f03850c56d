"""Progress tracking service (ProgressTracker use cases).

Business rules enforced:
- Completing a lesson implicitly enrolls the session in the course.
- Progress saturates at the course's lesson count.
- When progress reaches 1.0 the certificate is issued in the same unit of
  work that records the completion, and never a second time.
- Every recorded completion updates the session's learning streak.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

import structlog

from modules.catalog.dtos import Course
from modules.catalog.repositories.interfaces import ICatalog
from modules.core.context import SessionContext
from modules.learning.certificates import CertificateIssuer
from modules.learning.domain import Certificate, EnrollmentProgress, LearningStreak
from modules.learning.events import CertificateIssued, LessonCompleted
from modules.learning.exceptions import (
    CourseNotFound,
    LessonNotFound,
    MixedLessonCompletion,
)
from modules.learning.repositories.interfaces import (
    ICertificateRepository,
    IProgressRepository,
    IStreakRepository,
)
from shared.domain.bus import IEventBus
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class ProgressService:
    """Application service for course progress and certificates.

    The three repositories must share one snapshot store.
    """

    def __init__(
        self,
        progress_repository: IProgressRepository,
        certificate_repository: ICertificateRepository,
        streak_repository: IStreakRepository,
        catalog: ICatalog,
        event_bus: IEventBus,
        issuer: Optional[CertificateIssuer] = None,
    ) -> None:
        self._progress_repo = progress_repository
        self._certificate_repo = certificate_repository
        self._streak_repo = streak_repository
        self._catalog = catalog
        self._event_bus = event_bus
        self._issuer = issuer or CertificateIssuer(
            is_number_taken=certificate_repository.number_exists
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def enroll(
        self, ctx: SessionContext, course_id: UUID, now: Optional[datetime] = None
    ) -> EnrollmentProgress:
        """Create the progress record for *course_id*, or return the existing one.

        Raises:
            CourseNotFound: the course is unknown to the catalog.
        """
        course = self._get_course(course_id)
        with self._progress_repo.atomic():
            progress = self._progress_repo.get(ctx.session_id, course.id, for_update=True)
            if progress is not None:
                return progress
            progress = EnrollmentProgress.start(
                ctx.session_id, course.id, course.lesson_count, now or _now()
            )
            self._progress_repo.save(progress)

        logger.info("learning.enrolled", course_id=str(course.id), **ctx.log_context)
        return progress

    def complete_lesson(
        self,
        ctx: SessionContext,
        course_id: UUID,
        lesson_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> EnrollmentProgress:
        """Record one completed lesson.

        Repeating an already-completed lesson, or completing past the
        lesson count, changes nothing and publishes nothing.

        Raises:
            CourseNotFound: the course is unknown to the catalog.
            LessonNotFound: *lesson_id* is not a lesson of the course.
            MixedLessonCompletion: named and anonymous completions were mixed.
        """
        course = self._get_course(course_id)
        if lesson_id is not None:
            lesson = self._catalog.get_lesson(lesson_id)
            if lesson is None or lesson.course_id != course.id:
                raise LessonNotFound(
                    f"Lesson {lesson_id} is not part of course {course.id}."
                )

        now = now or _now()
        log = logger.bind(course_id=str(course.id), **ctx.log_context)
        certificate: Optional[Certificate] = None

        with self._progress_repo.atomic():
            progress = self._progress_repo.get(
                ctx.session_id, course.id, for_update=True
            ) or EnrollmentProgress.start(
                ctx.session_id, course.id, course.lesson_count, now
            )
            try:
                updated = progress.with_lesson_completed(lesson_id, now)
            except MixedLessonCompletion:
                log.warning("learning.mixed_completion", lesson_id=str(lesson_id))
                raise
            if updated is progress:
                log.info("learning.lesson_already_recorded", lesson_id=str(lesson_id))
                return progress

            events: List[DomainEvent] = [
                LessonCompleted(
                    aggregate_id=course.id,
                    session_id=ctx.session_id,
                    course_id=str(course.id),
                    lesson_id=str(lesson_id) if lesson_id else None,
                    completed_lesson_count=updated.completed_lesson_count,
                    progress_fraction=updated.progress_fraction,
                )
            ]
            streak = self._streak_repo.get_for_session(
                ctx.session_id, for_update=True
            ).with_activity(now.date())

            if updated.is_complete and not updated.certificate_issued:
                certificate = self._issuer.issue(course, ctx.session_id, now)
                updated = updated.with_certificate(certificate.id)
                streak = streak.with_course_completed()
                issued = CertificateIssued(
                    aggregate_id=certificate.id,
                    session_id=ctx.session_id,
                    course_id=str(course.id),
                    certificate_number=certificate.certificate_number,
                )
                self._certificate_repo.save(certificate, events=[issued])
                events.append(issued)

            self._progress_repo.save(updated, events=events[:1])
            self._streak_repo.save(streak)

        log.info(
            "learning.lesson_completed",
            completed=updated.completed_lesson_count,
            total=updated.total_lesson_count,
            certificate_issued=certificate is not None,
        )
        for event in events:
            self._event_bus.publish(event)
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_progress(self, ctx: SessionContext, course_id: UUID) -> EnrollmentProgress:
        """Stored progress, or an unsaved zero-progress record when not enrolled.

        Raises:
            CourseNotFound: the course is unknown to the catalog.
        """
        course = self._get_course(course_id)
        progress = self._progress_repo.get(ctx.session_id, course.id)
        if progress is not None:
            return progress
        return EnrollmentProgress.start(
            ctx.session_id, course.id, course.lesson_count, _now()
        )

    def list_certificates(self, session_id: str) -> List[Certificate]:
        return self._certificate_repo.list_for_session(session_id)

    def get_streak(self, session_id: str) -> LearningStreak:
        return self._streak_repo.get_for_session(session_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_course(self, course_id: UUID) -> Course:
        course = self._catalog.get_course(course_id)
        if course is None:
            raise CourseNotFound(f"Course {course_id} not found.")
        return course


def _now() -> datetime:
    return datetime.now(timezone.utc)
