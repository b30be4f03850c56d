"""Snapshot-store implementations of the learning repositories."""

from __future__ import annotations

from typing import List, Optional, Sequence
from uuid import UUID

from modules.core.repositories.snapshot_repository import SnapshotRepository
from modules.learning.domain import Certificate, EnrollmentProgress, LearningStreak
from modules.learning.repositories.interfaces import (
    ICertificateRepository,
    IProgressRepository,
    IStreakRepository,
)
from shared.domain.events import DomainEvent


class ProgressSnapshotRepository(
    SnapshotRepository[EnrollmentProgress], IProgressRepository
):
    """Stores progress under ``enrollment:<session_id>:<course_id>``."""

    kind = "enrollment"
    record_class = EnrollmentProgress

    def _key(self, session_id: str, course_id: UUID) -> str:
        return self.key_for(f"{session_id}:{course_id}")

    def get(
        self, session_id: str, course_id: UUID, *, for_update: bool = False
    ) -> Optional[EnrollmentProgress]:
        return self._load(self._key(session_id, course_id), for_update=for_update)

    def list_for_session(self, session_id: str) -> List[EnrollmentProgress]:
        return self._list(session_id=session_id)

    def save(
        self, progress: EnrollmentProgress, events: Sequence[DomainEvent] = ()
    ) -> EnrollmentProgress:
        return self._write(
            self._key(progress.session_id, progress.course_id),
            progress,
            session_id=progress.session_id,
            status="completed" if progress.is_complete else "in_progress",
            reference=str(progress.course_id),
            events=events,
        )


class CertificateSnapshotRepository(
    SnapshotRepository[Certificate], ICertificateRepository
):
    """Stores certificates under ``certificate:<id>``; ``reference`` is the number."""

    kind = "certificate"
    record_class = Certificate

    def list_for_session(self, session_id: str) -> List[Certificate]:
        return self._list(session_id=session_id)

    def number_exists(self, certificate_number: str) -> bool:
        return self._find_by_reference(certificate_number) is not None

    def save(
        self, certificate: Certificate, events: Sequence[DomainEvent] = ()
    ) -> Certificate:
        return self._write(
            self.key_for(certificate.id),
            certificate,
            session_id=certificate.session_id,
            reference=certificate.certificate_number,
            events=events,
        )


class StreakSnapshotRepository(SnapshotRepository[LearningStreak], IStreakRepository):
    """Stores the streak under ``streak:<session_id>``."""

    kind = "streak"
    record_class = LearningStreak

    def get_for_session(
        self, session_id: str, *, for_update: bool = False
    ) -> LearningStreak:
        streak = self._load(self.key_for(session_id), for_update=for_update)
        return streak if streak is not None else LearningStreak(session_id=session_id)

    def save(self, streak: LearningStreak) -> LearningStreak:
        return self._write(
            self.key_for(streak.session_id), streak, session_id=streak.session_id
        )
