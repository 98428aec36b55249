from fractions import Fraction

from tabbysplit.services.reconcile import reconcile


def test_extra_cent_goes_to_first_on_tie():
    result = reconcile({"a": Fraction(1000, 3), "b": Fraction(1000, 3), "c": Fraction(1000, 3)}, 1000)

    assert result.cents == {"a": 334, "b": 333, "c": 333}
    assert result.adjustments == {"a": 1}
    assert result.total_cents == 1000


def test_largest_remainder_wins():
    result = reconcile({"a": Fraction(101, 4), "b": Fraction(303, 4)}, 101)

    assert result.cents == {"a": 25, "b": 76}


def test_overshoot_is_taken_from_smallest_remainder():
    result = reconcile({"a": Fraction(101, 2), "b": Fraction(201, 4)}, 99)

    assert result.cents == {"a": 50, "b": 49}
    assert result.adjustments == {"b": -1}


def test_negative_amounts_round_toward_the_target():
    result = reconcile({"a": Fraction(-27027, 58), "b": Fraction(-20475, 58)}, -819)

    assert result.cents == {"a": -466, "b": -353}


def test_large_residue_wraps_around():
    result = reconcile({"a": Fraction(0), "b": Fraction(0)}, 5)

    assert result.cents == {"a": 3, "b": 2}


def test_exact_amounts_are_untouched():
    result = reconcile({"a": Fraction(500), "b": Fraction(250)}, 750)

    assert result.cents == {"a": 500, "b": 250}
    assert result.adjustments == {}


def test_empty_input():
    assert reconcile({}, 100).cents == {}
