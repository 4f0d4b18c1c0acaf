from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class GlobalRules:
    """Gate time windows (``settings/global_rules``). Stored, not enforced by scanning."""

    entry_start: str = "08:00"
    entry_end: str = "10:00"
    exit_start: str = "16:00"
    exit_end: str = "18:00"
    maintenance_mode: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GlobalRules":
        base = cls()
        return cls(
            entry_start=str(d.get("entry_start", base.entry_start)),
            entry_end=str(d.get("entry_end", base.entry_end)),
            exit_start=str(d.get("exit_start", base.exit_start)),
            exit_end=str(d.get("exit_end", base.exit_end)),
            maintenance_mode=bool(d.get("maintenance_mode", base.maintenance_mode)),
        )
