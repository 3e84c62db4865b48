import pytest

from dumpreport.types.base import FAILURE_STATUSES, Status


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("passed", Status.PASSED),
        ("failed", Status.FAILED),
        ("skipped", Status.SKIPPED),
        ("timeout", Status.TIMEOUT),
        ("unknown", Status.UNKNOWN),
        (" FAILED ", Status.FAILED),
        ("Passed", Status.PASSED),
    ],
)
def test_from_string_known_values(raw, expected):
    assert Status.from_string(raw) is expected


@pytest.mark.parametrize("raw", ["bogus", "", None, 42, True, "pass", ["failed"]])
def test_from_string_folds_everything_else_into_unknown(raw):
    assert Status.from_string(raw) is Status.UNKNOWN


def test_from_string_passes_members_through():
    assert Status.from_string(Status.TIMEOUT) is Status.TIMEOUT


def test_status_compares_equal_to_its_string_value():
    assert Status.FAILED == "failed"
    assert str(Status.SKIPPED) == "skipped"


def test_failure_equivalent_statuses():
    assert FAILURE_STATUSES == {Status.FAILED, Status.TIMEOUT}
    assert Status.FAILED.is_failure
    assert Status.TIMEOUT.is_failure
    assert not Status.SKIPPED.is_failure
    assert not Status.PASSED.is_failure
    assert not Status.UNKNOWN.is_failure
