"""Department / branch normalization.

Import data spells departments freely ("AI&DS", "cse", "Computer Science").
Everything that compares departments goes through :func:`normalize_department`
so HOD scoping (broad groups) and roster filtering (strict branches) agree.
"""

from __future__ import annotations

import re
from typing import Optional

_NON_LETTERS = re.compile(r"[^A-Z]")

# Broad groups: HOD-level visibility.
_BROAD_ALIASES = {
    "AIDS": {"AID", "AIDS", "CSM", "AIML", "ML", "DS", "CSD", "CSDS", "CSAI", "IOT", "CSIOT"},
    "CSE": {"CSE", "CS", "CSBS", "CSI", "CSEA", "CSEB"},
}
_BROAD_KEYWORDS = {
    "AIDS": ("ARTIFICIAL", "MACHINE", "DATA", "IOT"),
    "CSE": ("COMPUTER", "COMP"),
}

# Strict branches: keeps AID, CSM and IOT apart.
_STRICT_ALIASES = {
    "AID": {"AID", "AIDS"},
    "IOT": {"IOT", "CSIOT"},
    "CSM": {"CSM", "CSML", "AIML"},
}


def _clean(value: Optional[str]) -> str:
    if not value:
        return ""
    return _NON_LETTERS.sub("", str(value).upper())


def normalize_department(value: Optional[str], *, strict: bool = False) -> str:
    """Collapse a department/branch string into its canonical tag.

    ``strict=False`` returns the broad group (``"AID"``, ``"CSM"`` -> ``"AIDS"``);
    ``strict=True`` returns the strict branch (``"AIDS"`` -> ``"AID"``, ``"CSM"``
    stays ``"CSM"``). Unknown values come back stripped and upper-cased.
    """

    cleaned = _clean(value)
    if not cleaned:
        return ""

    if strict:
        for tag, aliases in _STRICT_ALIASES.items():
            if cleaned in aliases:
                return tag
        return cleaned

    # Order matters: "DATA" must win over "COMP" for e.g. "COMPUTERSCIENCEDATA".
    for tag in ("AIDS", "CSE"):
        if cleaned in _BROAD_ALIASES[tag]:
            return tag
        if any(keyword in cleaned for keyword in _BROAD_KEYWORDS[tag]):
            return tag
    return cleaned


def broad_group(value: Optional[str]) -> str:
    return normalize_department(value)


def strict_branch(value: Optional[str]) -> str:
    return normalize_department(value, strict=True)
