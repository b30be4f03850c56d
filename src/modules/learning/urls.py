"""Learning URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.learning.views import LearningViewSet

urlpatterns = [
    path(
        "courses/<uuid:course_id>/enroll/",
        LearningViewSet.as_view({"post": "enroll"}),
        name="course-enroll",
    ),
    path(
        "courses/<uuid:course_id>/lessons/complete/",
        LearningViewSet.as_view({"post": "complete_lesson"}),
        name="course-lesson-complete",
    ),
    path(
        "courses/<uuid:course_id>/progress/",
        LearningViewSet.as_view({"get": "progress"}),
        name="course-progress",
    ),
    path(
        "certificates/",
        LearningViewSet.as_view({"get": "certificates"}),
        name="certificate-list",
    ),
    path("streak/", LearningViewSet.as_view({"get": "streak"}), name="streak"),
]
