from __future__ import annotations

from typing import Optional, Protocol

from .model import Timetable


class TimetableRepository(Protocol):
    def get(self, key: str) -> Optional[Timetable]:
        raise NotImplementedError

    def save(self, timetable: Timetable, *, expected_version: Optional[int] = None) -> int:
        """Replace the stored timetable for ``timetable.key``.

        ``expected_version=None`` overwrites unconditionally. Otherwise the write
        only happens when the stored version matches (0 = must not exist yet).
        Returns the new version, or -1 on mismatch.
        """

        raise NotImplementedError
