"""Learning domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import DomainError


class CourseNotFound(DomainError):
    """The catalog collaborator does not know the requested course."""


class LessonNotFound(DomainError):
    """The lesson does not exist or belongs to another course."""


class CertificateNumberUnavailable(DomainError):
    """No unused certificate number could be generated within the retry budget."""


class MixedLessonCompletion(DomainError):
    """Named and anonymous lesson completions cannot share one progress record."""
