"""Unit tests for enrollment progress, certificates and streaks."""

from __future__ import annotations

from datetime import date, datetime, timezone
from uuid import uuid4

import pytest

from modules.learning.certificates import CertificateIssuer
from modules.learning.domain import EnrollmentProgress, LearningStreak
from modules.learning.exceptions import (
    CertificateNumberUnavailable,
    MixedLessonCompletion,
)
from tests.catalog_ids import SWIFTUI_COURSE

pytestmark = pytest.mark.unit

NOW = datetime(2026, 3, 2, 9, 30, tzinfo=timezone.utc)


@pytest.fixture()
def progress():
    return EnrollmentProgress.start("s", SWIFTUI_COURSE, 4, NOW)


class TestEnrollmentProgress:
    def test_starts_at_zero(self, progress):
        assert progress.progress_fraction == 0.0
        assert not progress.is_complete
        assert not progress.certificate_issued

    def test_each_completion_adds_one(self, progress):
        updated = progress.with_lesson_completed(uuid4(), NOW)

        assert updated.completed_lesson_count == 1
        assert updated.progress_fraction == 0.25
        assert progress.completed_lesson_count == 0

    def test_repeated_lesson_is_noop(self, progress):
        lesson = uuid4()
        once = progress.with_lesson_completed(lesson, NOW)

        assert once.with_lesson_completed(lesson, NOW) is once

    def test_saturates_at_lesson_count(self, progress):
        for _ in range(4):
            progress = progress.with_lesson_completed(None, NOW)

        assert progress.is_complete
        assert progress.with_lesson_completed(None, NOW) is progress
        assert progress.progress_fraction == 1.0

    def test_named_after_anonymous_is_refused(self, progress):
        anonymous = progress.with_lesson_completed(None, NOW)

        with pytest.raises(MixedLessonCompletion):
            anonymous.with_lesson_completed(uuid4(), NOW)

    def test_anonymous_after_named_is_refused(self, progress):
        named = progress.with_lesson_completed(uuid4(), NOW)

        with pytest.raises(MixedLessonCompletion):
            named.with_lesson_completed(None, NOW)

        assert named.completed_lesson_count == 1

    def test_progress_fraction_is_serialized(self, progress):
        assert progress.model_dump()["progress_fraction"] == 0.0


class TestLearningStreak:
    def test_first_activity(self):
        streak = LearningStreak(session_id="s").with_activity(date(2026, 3, 2))

        assert streak.current_streak == 1
        assert streak.longest_streak == 1
        assert streak.lessons_completed == 1

    def test_same_day_keeps_streak(self):
        streak = LearningStreak(session_id="s").with_activity(date(2026, 3, 2))

        streak = streak.with_activity(date(2026, 3, 2))

        assert streak.current_streak == 1
        assert streak.lessons_completed == 2

    def test_consecutive_days_extend_streak(self):
        streak = LearningStreak(session_id="s")
        for day in (1, 2, 3):
            streak = streak.with_activity(date(2026, 3, day))

        assert streak.current_streak == 3
        assert streak.longest_streak == 3

    def test_gap_resets_but_keeps_longest(self):
        streak = LearningStreak(session_id="s")
        for day in (1, 2, 3, 6):
            streak = streak.with_activity(date(2026, 3, day))

        assert streak.current_streak == 1
        assert streak.longest_streak == 3


class TestCertificateIssuer:
    def test_issue(self, catalog):
        course = catalog.get_course(SWIFTUI_COURSE)

        certificate = CertificateIssuer(number_generator=lambda: "ABCDEF123456").issue(
            course, "s", NOW
        )

        assert certificate.certificate_number == "ABCDEF123456"
        assert certificate.course_title == "SwiftUI Foundations"
        assert certificate.instructor_name == "Sarah Johnson"
        assert certificate.issued_at == NOW

    def test_gives_up_when_every_number_is_taken(self, catalog):
        issuer = CertificateIssuer(is_number_taken=lambda number: True)

        with pytest.raises(CertificateNumberUnavailable):
            issuer.issue(catalog.get_course(SWIFTUI_COURSE), "s", NOW)
