from __future__ import annotations

import pytest

from vacation_tracker.common.validators import (
    optional_max_length,
    require_min_length,
    require_non_empty,
    require_non_negative_int,
)
from vacation_tracker.core.exceptions import ValidationError


def test_optional_text_is_trimmed_and_blank_becomes_none():
    assert optional_max_length("  hi  ", "Reason", 10) == "hi"
    assert optional_max_length("   ", "Reason", 10) is None
    assert optional_max_length(None, "Reason", 10) is None


@pytest.mark.parametrize("value", [5, 1.5, ["a"], {"a": 1}, True])
def test_non_text_values_are_validation_errors(value):
    with pytest.raises(ValidationError):
        optional_max_length(value, "Reason", 200)
    with pytest.raises(ValidationError):
        require_non_empty(value, "Full name")
    with pytest.raises(ValidationError):
        require_min_length(value, "Password", 6)


def test_non_negative_int():
    assert require_non_negative_int("12", "Total days") == 12
    for bad in (-1, "x", None, True):
        with pytest.raises(ValidationError):
            require_non_negative_int(bad, "Total days")
