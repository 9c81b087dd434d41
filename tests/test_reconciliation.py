import pytest

from courier_shift.services.shift.reconciliation import Classification, reconcile


@pytest.mark.parametrize(
    ("loaded", "declared", "classification", "difference"),
    [(2, 2, Classification.EXACT, 0), (1, 3, Classification.UNDER, -2), (5, 3, Classification.OVER, 2)],
)
def test_reconcile_classifies_counts(loaded, declared, classification, difference):
    result = reconcile(loaded, declared)

    assert result.classification is classification
    assert result.difference == difference
    assert result.is_warning is (classification is not Classification.EXACT)


def test_under_message_states_shortfall():
    result = reconcile(1, 4)
    assert "3 missing" in result.message
    assert "4" in result.message


def test_over_message_states_surplus():
    result = reconcile(6, 4)
    assert "by 2" in result.message


def test_exact_message_is_affirmative():
    assert reconcile(3, 3).message == "Loading finished? Make sure every package is on board."
