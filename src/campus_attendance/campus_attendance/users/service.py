from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthenticationError
from .repository import AccountRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionAccount:
    """What we store into the Flask session after the identity provider signs a user in."""

    account_id: str
    email: Optional[str]
    role: Role
    name: Optional[str]


class AuthService:
    """Use case: turn a verified identity-provider account into a session.

    Credentials are checked by the external identity provider; the only thing
    resolved here is account ID -> role through the ``users`` collection.
    """

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def resolve_session(self, account_id: str, email: Optional[str] = None) -> SessionAccount:
        account_id = (account_id or "").strip()
        if not account_id:
            raise AuthenticationError("Missing account identity")

        account = self._accounts.get_by_id(account_id)
        if not account:
            logger.warning("Account %s exists at the identity provider but has no role record", account_id)
            raise AuthenticationError("Account is not activated")

        return SessionAccount(
            account_id=account.account_id,
            email=account.email or email,
            role=account.role,
            name=account.name,
        )
