"""Learning repositories package."""

from modules.learning.repositories.interfaces import (
    ICertificateRepository,
    IProgressRepository,
    IStreakRepository,
)
from modules.learning.repositories.snapshot_repository import (
    CertificateSnapshotRepository,
    ProgressSnapshotRepository,
    StreakSnapshotRepository,
)

__all__ = [
    "ICertificateRepository",
    "IProgressRepository",
    "IStreakRepository",
    "CertificateSnapshotRepository",
    "ProgressSnapshotRepository",
    "StreakSnapshotRepository",
]
