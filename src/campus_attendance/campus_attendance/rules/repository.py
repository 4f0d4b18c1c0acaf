from __future__ import annotations

from typing import Optional, Protocol

from .model import GlobalRules


class RulesRepository(Protocol):
    def get(self) -> Optional[GlobalRules]:
        raise NotImplementedError

    def save(self, rules: GlobalRules) -> None:
        raise NotImplementedError
