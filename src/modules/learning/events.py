"""Domain events for the Learning bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class LessonCompleted(DomainEvent):
    session_id: str
    course_id: str
    lesson_id: Optional[str]
    completed_lesson_count: int
    progress_fraction: float


@dataclass(frozen=True, kw_only=True)
class CertificateIssued(DomainEvent):
    session_id: str
    course_id: str
    certificate_number: str
