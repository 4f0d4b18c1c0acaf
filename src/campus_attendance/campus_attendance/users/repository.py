from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    """Repository interface for the ``users`` collection.

    Services depend on this interface, not on a concrete database.
    """

    def get_by_id(self, account_id: str) -> Optional[Account]:
        raise NotImplementedError

    def save(self, account: Account) -> None:
        raise NotImplementedError

    def list_by_role(self, role: Role) -> Sequence[Account]:
        raise NotImplementedError
