"""Certificate issuance.

A certificate number is 12 uppercase hex characters taken from a random
UUID, retried while ``is_number_taken`` reports a collision.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Callable, Optional

import structlog

from modules.catalog.dtos import Course
from modules.learning.domain import Certificate
from modules.learning.exceptions import CertificateNumberUnavailable

logger = structlog.get_logger(__name__)

CERTIFICATE_NUMBER_LENGTH = 12
CERTIFICATE_NUMBER_MAX_RETRIES = 5


def generate_certificate_number() -> str:
    return uuid.uuid4().hex[:CERTIFICATE_NUMBER_LENGTH].upper()


class CertificateIssuer:
    def __init__(
        self,
        is_number_taken: Optional[Callable[[str], bool]] = None,
        number_generator: Callable[[], str] = generate_certificate_number,
    ) -> None:
        self._is_number_taken = is_number_taken or (lambda number: False)
        self._generate_number = number_generator

    def issue(
        self, course: Course, session_id: str, now: Optional[datetime] = None
    ) -> Certificate:
        """Build the certificate for *session_id* completing *course*."""
        certificate = Certificate(
            course_id=course.id,
            course_title=course.title,
            instructor_name=course.instructor_name,
            session_id=session_id,
            issued_at=now or datetime.now(timezone.utc),
            certificate_number=self._unique_number(),
        )
        logger.info(
            "certificate.issued",
            certificate_number=certificate.certificate_number,
            course_id=str(course.id),
            session_id=session_id,
        )
        return certificate

    def _unique_number(self) -> str:
        for _ in range(CERTIFICATE_NUMBER_MAX_RETRIES):
            candidate = self._generate_number()
            if not self._is_number_taken(candidate):
                return candidate
        raise CertificateNumberUnavailable(
            f"Failed to generate unique certificate number after "
            f"{CERTIFICATE_NUMBER_MAX_RETRIES} attempts"
        )
