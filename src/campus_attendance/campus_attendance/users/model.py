from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Domain entity: an activated identity-provider account.

    Maps the external account ID to a role; profiles live in the people module.
    """

    account_id: str
    role: Role
    email: Optional[str] = None
    name: Optional[str] = None
