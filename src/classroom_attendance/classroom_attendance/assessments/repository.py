from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence

from .model import AssessmentFilter, AssessmentResult


class AssessmentRepository(Protocol):
    def find_assessments(self, flt: AssessmentFilter) -> Sequence[AssessmentResult]:
        """Results newest first."""

        raise NotImplementedError

    def count_defined(self, *, class_id: str, subject_id: Optional[str] = None) -> int:
        """How many assessments exist for the class (optionally one subject)."""

        raise NotImplementedError

    def count_defined_by_subject(self, *, class_id: str) -> Mapping[str, int]:
        """Assessments per subject name for the class."""

        raise NotImplementedError
