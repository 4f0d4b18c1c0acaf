import pytest

from src.campus_attendance.campus_attendance.common.validators import loose_int, require_non_empty, require_year
from src.campus_attendance.campus_attendance.core.exceptions import ValidationError


@pytest.mark.parametrize("value, expected", [(1, 1), ("1", 1), ("1st", 1), (" 2ND", 2), (3.0, 3), ("N/A", None), (None, None)])
def test_loose_int(value, expected):
    assert loose_int(value) == expected


def test_require_year_rejects_non_numbers():
    with pytest.raises(ValidationError):
        require_year("first")


def test_require_non_empty_strips():
    assert require_non_empty("  x ", "Name") == "x"
    with pytest.raises(ValidationError, match="Name is required"):
        require_non_empty("   ", "Name")
