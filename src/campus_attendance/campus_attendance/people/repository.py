from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Profile


class PersonRepository(Protocol):
    """Repository interface for the profile collections (students, faculty, hods, ...)."""

    def get(self, role: Role, profile_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def find_by_uid(self, role: Role, uid: str) -> Optional[Profile]:
        raise NotImplementedError

    def find_by_email(self, role: Role, email: str) -> Optional[Profile]:
        raise NotImplementedError

    def find_by_barcode(self, role: Role, barcode_id: str) -> Optional[Profile]:
        raise NotImplementedError

    def list_all(self, role: Role) -> Sequence[Profile]:
        raise NotImplementedError

    def claim(self, role: Role, profile_id: str, *, uid: str, activated_at: datetime) -> bool:
        """Link a profile to an external account (one-time activation)."""

        raise NotImplementedError

    def set_blocked(self, role: Role, profile_id: str, *, blocked: bool) -> bool:
        raise NotImplementedError

    def upsert_many(self, role: Role, profiles: Sequence[Profile]) -> int:
        """Overwrite profiles keyed by domain ID in a single write batch.

        Returns the number of profiles written.
        """

        raise NotImplementedError
