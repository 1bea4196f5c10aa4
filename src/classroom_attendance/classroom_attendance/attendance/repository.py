from __future__ import annotations

from typing import Protocol, Sequence

from .model import AttendanceFilter, AttendanceRecord


class AttendanceRepository(Protocol):
    def upsert(self, records: Sequence[AttendanceRecord]) -> None:
        """Write all records or none, keyed by (member, class, subject, date).

        Raises StoreError on failure.
        """

        raise NotImplementedError

    def find(self, flt: AttendanceFilter) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
