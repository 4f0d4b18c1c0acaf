from __future__ import annotations

import logging
from typing import Any, Dict

from ..common.datetime_utils import parse_hhmm
from ..core.exceptions import ValidationError
from .model import GlobalRules
from .repository import RulesRepository

logger = logging.getLogger(__name__)

_TIME_FIELDS = ("entry_start", "entry_end", "exit_start", "exit_end")


class RulesService:
    def __init__(self, rules: RulesRepository):
        self._rules = rules

    def get_rules(self) -> GlobalRules:
        current = self._rules.get()
        if current:
            return current
        current = GlobalRules()
        self._rules.save(current)
        return current

    def update_rules(self, values: Dict[str, Any]) -> GlobalRules:
        merged = self.get_rules().to_dict()
        for f in _TIME_FIELDS:
            if f in values:
                try:
                    merged[f] = parse_hhmm(str(values[f]))
                except ValueError:
                    raise ValidationError(f"Invalid time for {f}: expected HH:MM")
        if "maintenance_mode" in values:
            merged["maintenance_mode"] = bool(values["maintenance_mode"])

        rules = GlobalRules.from_dict(merged)
        self._rules.save(rules)
        logger.info("Global rules updated: %s", rules.to_dict())
        return rules
