"""Learning records: enrollment progress, certificates and the streak.

Business rules implemented:
- ``completed_lesson_count`` saturates at ``total_lesson_count``.
- Completing a lesson that is already recorded is a no-op.
- A progress record counts either named lessons or anonymous completions,
  never both.
- ``certificate_issued`` flips to ``True`` once and never back.
- The streak counts consecutive days with at least one completed lesson.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Tuple
from uuid import UUID

import uuid6
from pydantic import BaseModel, ConfigDict, Field, computed_field

from modules.learning.exceptions import MixedLessonCompletion


class EnrollmentProgress(BaseModel):
    """Per-session, per-course lesson completion."""

    model_config = ConfigDict(frozen=True)

    session_id: str
    course_id: UUID
    total_lesson_count: int = Field(ge=1)
    completed_lesson_count: int = Field(default=0, ge=0)
    completed_lesson_ids: Tuple[UUID, ...] = ()
    certificate_issued: bool = False
    certificate_id: Optional[UUID] = None
    enrolled_at: datetime
    updated_at: datetime

    @computed_field
    @property
    def progress_fraction(self) -> float:
        return self.completed_lesson_count / self.total_lesson_count

    @property
    def is_complete(self) -> bool:
        return self.progress_fraction >= 1.0

    @classmethod
    def start(
        cls, session_id: str, course_id: UUID, lesson_count: int, now: datetime
    ) -> EnrollmentProgress:
        return cls(
            session_id=session_id,
            course_id=course_id,
            total_lesson_count=lesson_count,
            enrolled_at=now,
            updated_at=now,
        )

    def with_lesson_completed(
        self, lesson_id: Optional[UUID], now: datetime
    ) -> EnrollmentProgress:
        """Record one completion; returns ``self`` when nothing changes.

        Raises:
            MixedLessonCompletion: *lesson_id* is named while earlier
                completions were anonymous, or the other way round.
        """
        if self.completed_lesson_count >= self.total_lesson_count:
            return self
        if lesson_id is not None and lesson_id in self.completed_lesson_ids:
            return self
        anonymous = self.completed_lesson_count - len(self.completed_lesson_ids)
        if (lesson_id is None and self.completed_lesson_ids) or (
            lesson_id is not None and anonymous
        ):
            raise MixedLessonCompletion(
                f"Course {self.course_id} progress already uses "
                f"{'anonymous' if anonymous else 'named'} lesson completions."
            )
        completed_ids = self.completed_lesson_ids
        if lesson_id is not None:
            completed_ids = completed_ids + (lesson_id,)
        return self.model_copy(
            update={
                "completed_lesson_count": self.completed_lesson_count + 1,
                "completed_lesson_ids": completed_ids,
                "updated_at": now,
            }
        )

    def with_certificate(self, certificate_id: UUID) -> EnrollmentProgress:
        return self.model_copy(
            update={"certificate_issued": True, "certificate_id": certificate_id}
        )


class Certificate(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid6.uuid7)
    course_id: UUID
    course_title: str
    instructor_name: str
    session_id: str
    issued_at: datetime
    certificate_number: str


class LearningStreak(BaseModel):
    model_config = ConfigDict(frozen=True)

    session_id: str
    current_streak: int = 0
    longest_streak: int = 0
    lessons_completed: int = 0
    courses_completed: int = 0
    last_activity_date: Optional[date] = None

    def with_activity(self, day: date) -> LearningStreak:
        """Count one completed lesson on *day*."""
        if self.last_activity_date == day:
            current = self.current_streak
        elif self.last_activity_date == day - timedelta(days=1):
            current = self.current_streak + 1
        else:
            current = 1
        return self.model_copy(
            update={
                "current_streak": current,
                "longest_streak": max(self.longest_streak, current),
                "lessons_completed": self.lessons_completed + 1,
                "last_activity_date": day,
            }
        )

    def with_course_completed(self) -> LearningStreak:
        return self.model_copy(update={"courses_completed": self.courses_completed + 1})
