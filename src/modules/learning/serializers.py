"""Learning DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers


class CompleteLessonSerializer(serializers.Serializer):
    lesson_id = serializers.UUIDField(required=False, allow_null=True, default=None)


class EnrollmentProgressSerializer(serializers.Serializer):
    session_id = serializers.CharField(read_only=True)
    course_id = serializers.UUIDField(read_only=True)
    total_lesson_count = serializers.IntegerField(read_only=True)
    completed_lesson_count = serializers.IntegerField(read_only=True)
    completed_lesson_ids = serializers.ListField(
        child=serializers.UUIDField(), read_only=True
    )
    progress_fraction = serializers.FloatField(read_only=True)
    certificate_issued = serializers.BooleanField(read_only=True)
    certificate_id = serializers.UUIDField(read_only=True, allow_null=True)
    enrolled_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)


class CertificateSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    certificate_number = serializers.CharField(read_only=True)
    course_id = serializers.UUIDField(read_only=True)
    course_title = serializers.CharField(read_only=True)
    instructor_name = serializers.CharField(read_only=True)
    session_id = serializers.CharField(read_only=True)
    issued_at = serializers.DateTimeField(read_only=True)


class LearningStreakSerializer(serializers.Serializer):
    session_id = serializers.CharField(read_only=True)
    current_streak = serializers.IntegerField(read_only=True)
    longest_streak = serializers.IntegerField(read_only=True)
    lessons_completed = serializers.IntegerField(read_only=True)
    courses_completed = serializers.IntegerField(read_only=True)
    last_activity_date = serializers.DateField(read_only=True, allow_null=True)
