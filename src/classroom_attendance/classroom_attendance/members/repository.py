from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Cohort, Member


class EnrollmentRepository(Protocol):
    """Read-only view of who is enrolled where.

    Note (DIP): services depend on this interface, not on a concrete database.
    """

    def members_of(self, cohort: Cohort) -> Sequence[Member]:
        """Active members of the cohort, in roll order.

        Raises NotFound when the class (or class+subject pairing) does not exist.
        """

        raise NotImplementedError

    def cohorts_for(self, member_id: str) -> Sequence[Cohort]:
        raise NotImplementedError

    def get_member(self, member_id: str) -> Optional[Member]:
        raise NotImplementedError
