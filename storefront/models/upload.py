"""
Ingestion result models.

Tallies and per-record outcomes reported by the uploader.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class UploadProgress:
    """Running tallies delivered to the progress callback after each attempted write."""
    uploaded: int
    total: int
    skipped: int
    errors: int
    current: str


@dataclass
class UploadResult:
    """Outcome of one attempted write."""
    success: bool
    name: str
    sku: str = ""
    id: str = ""
    error: str = ""


@dataclass
class UploadSummary:
    """Final tallies of an ingestion run."""
    uploaded: int = 0
    skipped: int = 0
    errors: int = 0
    total: int = 0
    results: List[UploadResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Tallies without per-record results."""
        return {
            "uploaded": self.uploaded,
            "skipped": self.skipped,
            "errors": self.errors,
            "total": self.total,
        }
