import pytest

from src.campus_attendance.campus_attendance.attendance.debounce import ScanGate
from src.campus_attendance.campus_attendance.core.exceptions import DuplicateScanError, ScannerBusyError


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def _scan(gate, session, code):
    with gate.admit(session, code):
        return code


def test_same_code_inside_window_is_dropped():
    clock = FakeClock()
    gate = ScanGate(3.0, clock=clock)
    _scan(gate, "gate-1", "23CS001")

    clock.now += 1.0
    with pytest.raises(DuplicateScanError):
        _scan(gate, "gate-1", "23CS001")

    clock.now += 3.0
    assert _scan(gate, "gate-1", "23CS001") == "23CS001"


def test_other_code_or_other_session_passes():
    clock = FakeClock()
    gate = ScanGate(3.0, clock=clock)
    _scan(gate, "gate-1", "23CS001")

    assert _scan(gate, "gate-1", "23CS002") == "23CS002"
    assert _scan(gate, "gate-2", "23CS002") == "23CS002"


def test_one_scan_in_flight_per_session():
    gate = ScanGate(0, clock=FakeClock())

    with gate.admit("gate-1", "A"):
        with pytest.raises(ScannerBusyError):
            _scan(gate, "gate-1", "B")
        assert _scan(gate, "gate-2", "B") == "B"

    assert _scan(gate, "gate-1", "B") == "B"


def test_failed_scan_releases_the_session():
    gate = ScanGate(0, clock=FakeClock())

    with pytest.raises(RuntimeError):
        with gate.admit("gate-1", "A"):
            raise RuntimeError("boom")

    assert _scan(gate, "gate-1", "A") == "A"
