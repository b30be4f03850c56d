"""Learning API views: enrollment, lesson completion, certificates, streak."""

from __future__ import annotations

from uuid import UUID

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.catalog.provider import get_catalog
from modules.core.repositories import SnapshotDjangoRepository
from modules.core.views import SessionContextMixin, domain_error_response
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
from modules.learning.serializers import (
    CertificateSerializer,
    CompleteLessonSerializer,
    EnrollmentProgressSerializer,
    LearningStreakSerializer,
)
from modules.learning.services import ProgressService
from shared.domain.exceptions import DomainError
from shared.infrastructure.bus import event_bus

LEARNING_ERROR_STATUS = {
    CourseNotFound: status.HTTP_404_NOT_FOUND,
    LessonNotFound: status.HTTP_404_NOT_FOUND,
    MixedLessonCompletion: status.HTTP_409_CONFLICT,
}


def build_progress_service() -> ProgressService:
    store = SnapshotDjangoRepository()
    return ProgressService(
        progress_repository=ProgressSnapshotRepository(store),
        certificate_repository=CertificateSnapshotRepository(store),
        streak_repository=StreakSnapshotRepository(store),
        catalog=get_catalog(),
        event_bus=event_bus,
    )


class LearningViewSet(SessionContextMixin, ViewSet):
    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_progress_service()

    def enroll(self, request: Request, course_id: UUID) -> Response:
        """POST /api/v1/courses/{course_id}/enroll/"""
        ctx = self.get_session_context(request)
        try:
            progress = self._service.enroll(ctx, course_id)
        except DomainError as exc:
            return domain_error_response(exc, LEARNING_ERROR_STATUS)
        return Response(
            EnrollmentProgressSerializer(progress).data, status=status.HTTP_201_CREATED
        )

    def complete_lesson(self, request: Request, course_id: UUID) -> Response:
        """POST /api/v1/courses/{course_id}/lessons/complete/"""
        ctx = self.get_session_context(request)
        serializer = CompleteLessonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            progress = self._service.complete_lesson(
                ctx, course_id, serializer.validated_data["lesson_id"]
            )
        except DomainError as exc:
            return domain_error_response(exc, LEARNING_ERROR_STATUS)
        return Response(EnrollmentProgressSerializer(progress).data)

    def progress(self, request: Request, course_id: UUID) -> Response:
        """GET /api/v1/courses/{course_id}/progress/"""
        ctx = self.get_session_context(request)
        try:
            progress = self._service.get_progress(ctx, course_id)
        except DomainError as exc:
            return domain_error_response(exc, LEARNING_ERROR_STATUS)
        return Response(EnrollmentProgressSerializer(progress).data)

    def certificates(self, request: Request) -> Response:
        """GET /api/v1/certificates/"""
        ctx = self.get_session_context(request)
        certificates = self._service.list_certificates(ctx.session_id)
        return Response(CertificateSerializer(certificates, many=True).data)

    def streak(self, request: Request) -> Response:
        """GET /api/v1/streak/"""
        ctx = self.get_session_context(request)
        return Response(LearningStreakSerializer(self._service.get_streak(ctx.session_id)).data)
