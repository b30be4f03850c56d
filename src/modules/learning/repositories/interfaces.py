"""Learning repository interfaces.

Progress, certificates and the streak are separate records; the service
saves them in one unit of work, so implementations must share a store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ContextManager, List, Optional, Sequence
from uuid import UUID

from modules.learning.domain import Certificate, EnrollmentProgress, LearningStreak
from shared.domain.events import DomainEvent


class IProgressRepository(ABC):
    @abstractmethod
    def atomic(self) -> ContextManager[Any]:
        """Unit of work for a progress command."""

    @abstractmethod
    def get(
        self, session_id: str, course_id: UUID, *, for_update: bool = False
    ) -> Optional[EnrollmentProgress]: ...

    @abstractmethod
    def list_for_session(self, session_id: str) -> List[EnrollmentProgress]: ...

    @abstractmethod
    def save(
        self, progress: EnrollmentProgress, events: Sequence[DomainEvent] = ()
    ) -> EnrollmentProgress: ...


class ICertificateRepository(ABC):
    @abstractmethod
    def list_for_session(self, session_id: str) -> List[Certificate]: ...

    @abstractmethod
    def number_exists(self, certificate_number: str) -> bool: ...

    @abstractmethod
    def save(
        self, certificate: Certificate, events: Sequence[DomainEvent] = ()
    ) -> Certificate: ...


class IStreakRepository(ABC):
    @abstractmethod
    def get_for_session(
        self, session_id: str, *, for_update: bool = False
    ) -> LearningStreak:
        """Return the session's streak, or an empty one."""

    @abstractmethod
    def save(self, streak: LearningStreak) -> LearningStreak: ...
