"""Unit tests for ProgressService.

Uses a ten-lesson course so the certificate threshold sits exactly on the
tenth completion.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from uuid import UUID, uuid4

import pytest

from modules.catalog.dtos import Course, Lesson
from modules.catalog.repositories import InMemoryCatalog
from modules.learning.events import CertificateIssued, LessonCompleted
from modules.learning.exceptions import (
    CourseNotFound,
    LessonNotFound,
    MixedLessonCompletion,
)
from modules.learning.repositories import (
    CertificateSnapshotRepository,
    ProgressSnapshotRepository,
    StreakSnapshotRepository,
)
from modules.learning.services import ProgressService
from tests.catalog_ids import SWIFTUI_COURSE, SWIFTUI_LESSONS

pytestmark = pytest.mark.unit

COURSE_ID = UUID("93000000-0000-4000-8000-000000000001")
LESSON_IDS = [UUID(f"94000000-0000-4000-8000-0000000000{n:02d}") for n in range(1, 11)]
NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture()
def ten_lesson_catalog():
    return InMemoryCatalog(
        courses=[
            Course(
                id=COURSE_ID,
                title="Advanced Concurrency",
                instructor_name="Alex Chen",
                lesson_count=10,
            )
        ],
        lessons=[
            Lesson(id=lesson_id, course_id=COURSE_ID, title=f"Part {n}", order=n)
            for n, lesson_id in enumerate(LESSON_IDS, start=1)
        ],
    )


def _service(store, catalog, bus):
    return ProgressService(
        ProgressSnapshotRepository(store),
        CertificateSnapshotRepository(store),
        StreakSnapshotRepository(store),
        catalog,
        bus,
    )


@pytest.fixture()
def service(store, ten_lesson_catalog, bus, recorder):
    bus.subscribe(LessonCompleted, recorder)
    bus.subscribe(CertificateIssued, recorder)
    return _service(store, ten_lesson_catalog, bus)


def _issued(recorder):
    return [e for e in recorder.events if isinstance(e, CertificateIssued)]


class TestCertificateThreshold:
    def test_nine_of_ten_issues_nothing(self, service, ctx, recorder):
        for lesson_id in LESSON_IDS[:9]:
            progress = service.complete_lesson(ctx, COURSE_ID, lesson_id, now=NOW)

        assert progress.progress_fraction == pytest.approx(0.9)
        assert not progress.certificate_issued
        assert service.list_certificates(ctx.session_id) == []
        assert _issued(recorder) == []

    def test_tenth_completion_issues_exactly_one(self, service, ctx, recorder):
        for lesson_id in LESSON_IDS:
            progress = service.complete_lesson(ctx, COURSE_ID, lesson_id, now=NOW)

        assert progress.progress_fraction == 1.0
        assert progress.certificate_issued
        certificates = service.list_certificates(ctx.session_id)
        assert len(certificates) == 1
        assert certificates[0].id == progress.certificate_id
        assert certificates[0].course_title == "Advanced Concurrency"
        assert len(_issued(recorder)) == 1

    def test_further_completions_do_not_reissue(self, service, ctx, recorder):
        for lesson_id in LESSON_IDS:
            service.complete_lesson(ctx, COURSE_ID, lesson_id, now=NOW)
        published = len(recorder.events)

        service.complete_lesson(ctx, COURSE_ID, now=NOW)
        service.complete_lesson(ctx, COURSE_ID, LESSON_IDS[0], now=NOW)

        assert len(service.list_certificates(ctx.session_id)) == 1
        assert len(recorder.events) == published

    def test_anonymous_completions_count(self, service, ctx):
        for _ in range(10):
            progress = service.complete_lesson(ctx, COURSE_ID, now=NOW)

        assert progress.certificate_issued

    def test_mixed_completion_changes_nothing(self, service, ctx, recorder):
        service.complete_lesson(ctx, COURSE_ID, now=NOW)
        published = len(recorder.events)

        with pytest.raises(MixedLessonCompletion):
            service.complete_lesson(ctx, COURSE_ID, LESSON_IDS[0], now=NOW)

        progress = service.get_progress(ctx, COURSE_ID)
        assert progress.completed_lesson_count == 1
        assert progress.completed_lesson_ids == ()
        assert service.get_streak(ctx.session_id).lessons_completed == 1
        assert len(recorder.events) == published


class TestCompleteLesson:
    def test_implicitly_enrolls(self, service, ctx, recorder):
        progress = service.complete_lesson(ctx, COURSE_ID, LESSON_IDS[0], now=NOW)

        assert progress.completed_lesson_count == 1
        assert progress.enrolled_at == NOW
        event = recorder.events[0]
        assert event.completed_lesson_count == 1
        assert event.progress_fraction == pytest.approx(0.1)

    def test_repeated_lesson_is_idempotent(self, service, ctx, recorder):
        service.complete_lesson(ctx, COURSE_ID, LESSON_IDS[0], now=NOW)

        progress = service.complete_lesson(ctx, COURSE_ID, LESSON_IDS[0], now=NOW)

        assert progress.completed_lesson_count == 1
        assert len(recorder.events) == 1
        assert service.get_streak(ctx.session_id).lessons_completed == 1

    def test_unknown_course(self, service, ctx):
        with pytest.raises(CourseNotFound):
            service.complete_lesson(ctx, uuid4())

    def test_lesson_of_another_course(self, store, catalog, bus, ctx):
        service = _service(store, catalog, bus)

        with pytest.raises(LessonNotFound):
            service.complete_lesson(ctx, SWIFTUI_COURSE, uuid4())

    def test_streak_tracks_days(self, service, ctx):
        service.complete_lesson(ctx, COURSE_ID, LESSON_IDS[0], now=NOW)
        service.complete_lesson(ctx, COURSE_ID, LESSON_IDS[1], now=NOW + timedelta(days=1))

        streak = service.get_streak(ctx.session_id)

        assert streak.current_streak == 2
        assert streak.lessons_completed == 2

    def test_course_completion_counts_in_streak(self, service, ctx):
        for lesson_id in LESSON_IDS:
            service.complete_lesson(ctx, COURSE_ID, lesson_id, now=NOW)

        assert service.get_streak(ctx.session_id).courses_completed == 1


class TestEnrollAndQueries:
    def test_enroll_is_idempotent(self, service, ctx):
        first = service.enroll(ctx, COURSE_ID, now=NOW)
        second = service.enroll(ctx, COURSE_ID, now=NOW + timedelta(hours=1))

        assert second == first

    def test_progress_without_enrollment_is_zero(self, service, ctx):
        progress = service.get_progress(ctx, COURSE_ID)

        assert progress.completed_lesson_count == 0
        assert progress.total_lesson_count == 10

    def test_sample_catalog_course(self, store, catalog, bus, ctx):
        service = _service(store, catalog, bus)

        for lesson_id in SWIFTUI_LESSONS:
            progress = service.complete_lesson(ctx, SWIFTUI_COURSE, lesson_id)

        assert progress.certificate_issued
