from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class AssessmentResult:
    """Externally recorded result of one member on one assessment (quiz/exam)."""

    member_id: str
    assessment_id: str
    class_id: str
    subject_id: str
    subject_name: str
    score: Optional[float]
    max_score: float
    percentage: float
    recorded_at: datetime


@dataclass(frozen=True)
class AssessmentFilter:
    class_id: str
    subject_id: Optional[str] = None
    member_id: Optional[str] = None


def normalize_percentage(value) -> float:
    """Missing percentages count as 0; out-of-range values are clamped to [0, 100]."""
    if value is None:
        return 0.0
    return min(100.0, max(0.0, float(value)))
