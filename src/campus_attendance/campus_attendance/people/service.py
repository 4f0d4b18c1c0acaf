from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from ..users.model import Account
from ..users.repository import AccountRepository
from .model import Profile
from .repository import PersonRepository

logger = logging.getLogger(__name__)


class ActivationService:
    """Use case: claim a pre-imported profile for an identity-provider account."""

    def __init__(self, people: PersonRepository, accounts: AccountRepository):
        self._people = people
        self._accounts = accounts

    def activate(self, *, role: Role, unique_id: str, email: str, account_id: str) -> Profile:
        unique_id = require_non_empty(unique_id, "Roll No / Faculty ID")
        email = require_non_empty(email, "Email")
        account_id = require_non_empty(account_id, "Account ID")

        profile = self._people.get(role, unique_id)
        if not profile:
            raise NotFoundError("No record found with this ID. Please contact administration.")

        if (profile.email or "").lower() != email.lower():
            raise ValidationError("Email does not match the college record for this ID.")

        if profile.uid and profile.is_claimed:
            raise ValidationError("This account is already activated. Please log in.")

        if not self._people.claim(role, unique_id, uid=account_id, activated_at=now_local()):
            raise ValidationError("Activation failed")

        self._accounts.save(Account(account_id=account_id, role=role, email=email, name=profile.name))
        logger.info("Activated %s profile %s for account %s", role.value, unique_id, account_id)
        return profile


class ProfileService:
    """Use cases around existing profiles: own-profile lookup and access control."""

    def __init__(self, people: PersonRepository):
        self._people = people

    def get_for_account(self, *, role: Role, account_id: str, email: Optional[str] = None) -> Optional[Profile]:
        profile = self._people.find_by_uid(role, account_id)
        if not profile:
            profile = self._people.get(role, account_id)
        if not profile and email:
            profile = self._people.find_by_email(role, email)
        return profile

    def find_for_access_control(self, query: str) -> Tuple[Role, Profile]:
        query = require_non_empty(query, "Roll No / Faculty ID")
        for role in (Role.STUDENT, Role.FACULTY):
            profile = self._people.get(role, query)
            if profile:
                return role, profile
        raise NotFoundError("User not found. Check Roll No / Faculty ID.")

    def toggle_block(self, query: str) -> bool:
        """Flip the blocked flag of a student/faculty profile; returns the new value."""

        role, profile = self.find_for_access_control(query)
        blocked = not profile.is_blocked
        if not self._people.set_blocked(role, profile.profile_id, blocked=blocked):
            raise ValidationError("Failed to update status.")
        logger.info("%s %s is_blocked=%s", role.value, profile.profile_id, blocked)
        return blocked
