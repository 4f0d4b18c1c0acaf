from __future__ import annotations

import logging
from typing import Optional

from ..core.constants import NOT_AVAILABLE
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..users.model import Account
from ..users.repository import AccountRepository
from .model import COLLECTIONS, Profile, ResolvedPerson
from .repository import PersonRepository

logger = logging.getLogger(__name__)

# Collections searched by direct key when no account matches, in order.
_DIRECT_LOOKUP_ROLES = (Role.STUDENT, Role.FACULTY)


class IdentityResolver:
    """Resolve an opaque scanned string (badge, roll number or account ID) to a person.

    Lookup chain, first match wins:

    1. ``users`` record keyed by the code -> its profile, found by key, then by
       linked account ID, then by the account's email.
    2. ``students`` by key.
    3. ``faculty`` by key.
    4. ``students`` / ``faculty`` by badge (barcode) ID.

    Read-only; raises :class:`NotFoundError` when nothing matches.
    """

    def __init__(self, accounts: AccountRepository, people: PersonRepository):
        self._accounts = accounts
        self._people = people

    def resolve(self, scanned: str) -> ResolvedPerson:
        code = (scanned or "").strip()
        if not code:
            raise NotFoundError("Invalid ID: Record not found.")

        account = self._accounts.get_by_id(code)
        if account:
            return self._resolve_account(code, account)

        for role in _DIRECT_LOOKUP_ROLES:
            profile = self._people.get(role, code)
            if profile:
                return self._from_profile(profile, source=COLLECTIONS[role])

        for role in _DIRECT_LOOKUP_ROLES:
            profile = self._people.find_by_barcode(role, code)
            if profile:
                return self._from_profile(profile, source="barcode")

        logger.info("Scanned code %r matched no record", code)
        raise NotFoundError("Invalid ID: Record not found.")

    def _resolve_account(self, code: str, account: Account) -> ResolvedPerson:
        profile_role = Role.FACULTY if account.role == Role.FACULTY else Role.STUDENT

        profile: Optional[Profile] = self._people.get(profile_role, code)
        if not profile:
            profile = self._people.find_by_uid(profile_role, code)
        if not profile and account.email:
            profile = self._people.find_by_email(profile_role, account.email)

        if profile:
            return ResolvedPerson(
                person_id=code,
                role=account.role,
                name=profile.name or account.name or "Unknown",
                dept=profile.dept or NOT_AVAILABLE,
                roll_number=profile.profile_id,
                source="users_linked",
                profile=profile,
            )

        return ResolvedPerson(
            person_id=code,
            role=account.role,
            name=account.name or "Unknown",
            dept=NOT_AVAILABLE,
            roll_number=NOT_AVAILABLE,
            source="users",
        )

    @staticmethod
    def _from_profile(profile: Profile, *, source: str) -> ResolvedPerson:
        return ResolvedPerson(
            person_id=profile.person_id,
            role=profile.role,
            name=profile.name or "Unknown",
            dept=profile.dept or NOT_AVAILABLE,
            roll_number=profile.profile_id,
            source=source,
            profile=profile,
        )
