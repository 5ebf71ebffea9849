"""Tests for stored-field coercion."""

import pytest

from lantern.schema import MalformedRecordError, as_float, as_int


def test_as_float_rejects_values_beyond_float_range():
    with pytest.raises(MalformedRecordError) as exc_info:
        as_float(10**400, "ceasefire_compliance")
    assert exc_info.value.field == "ceasefire_compliance"


def test_as_float_accepts_ints():
    assert as_float(1, "x") == 1.0


def test_as_int_rejects_bools_and_fractions():
    with pytest.raises(MalformedRecordError):
        as_int(True, "shadows")
    with pytest.raises(MalformedRecordError):
        as_int(1.5, "shadows")
    assert as_int(2.0, "shadows") == 2
