from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP
from fractions import Fraction
from typing import Mapping, Sequence

from tabbysplit.errors import NegativeAmount
from tabbysplit.models import Bill, PersonId, SplitMode
from tabbysplit.utils.money import to_cents


@dataclass(slots=True)
class AncillaryAmounts:
    tax_cents: int = 0
    tip_cents: int = 0
    fee_cents: int = 0
    discount_cents: int = 0

    @classmethod
    def from_bill(cls, bill: Bill, rounding: str = ROUND_HALF_UP) -> "AncillaryAmounts":
        cents = {}
        for name in ("tax", "tip", "service_fee", "delivery_fee"):
            value = to_cents(getattr(bill, name), rounding)
            if value < 0:
                raise NegativeAmount(f"Bill {name} must not be negative, got {getattr(bill, name)!r}", field=name)
            cents[name] = value
        return cls(
            tax_cents=cents["tax"],
            tip_cents=cents["tip"],
            fee_cents=cents["service_fee"] + cents["delivery_fee"],
            discount_cents=to_cents(bill.discount, rounding),
        )

    @property
    def total_cents(self) -> int:
        return self.tax_cents + self.tip_cents + self.fee_cents + self.discount_cents


@dataclass(slots=True)
class Distribution:
    tax: dict[PersonId, Fraction] = field(default_factory=dict)
    tip: dict[PersonId, Fraction] = field(default_factory=dict)
    fee: dict[PersonId, Fraction] = field(default_factory=dict)
    discount: dict[PersonId, Fraction] = field(default_factory=dict)
    unallocated_charges: Fraction = Fraction(0)
    unallocated_discount: Fraction = Fraction(0)
    no_basis_for_split: bool = False

    @property
    def unallocated(self) -> Fraction:
        return self.unallocated_charges + self.unallocated_discount

    def total_for(self, person_id: PersonId) -> Fraction:
        return self.tax[person_id] + self.tip[person_id] + self.fee[person_id] + self.discount[person_id]


def _proportional(
    amount_cents: int,
    subtotals: Mapping[PersonId, Fraction],
    denominator: Fraction,
) -> tuple[dict[PersonId, Fraction], Fraction]:
    if denominator == 0:
        return {person_id: Fraction(0) for person_id in subtotals}, Fraction(amount_cents)
    shares = {person_id: amount_cents * subtotal / denominator for person_id, subtotal in subtotals.items()}
    return shares, amount_cents - sum(shares.values(), Fraction(0))


def _even(
    amount_cents: int,
    people: Sequence[PersonId],
    payers: Sequence[PersonId],
) -> tuple[dict[PersonId, Fraction], Fraction]:
    shares = {person_id: Fraction(0) for person_id in people}
    if not payers:
        return shares, Fraction(amount_cents)
    for person_id in payers:
        shares[person_id] = Fraction(amount_cents, len(payers))
    return shares, Fraction(0)


def distribute(
    subtotals: Mapping[PersonId, Fraction],
    amounts: AncillaryAmounts,
    withheld_cents: int = 0,
    tax_mode: SplitMode = SplitMode.PROPORTIONAL,
    tip_mode: SplitMode = SplitMode.PROPORTIONAL,
    include_zero_people: bool = True,
) -> Distribution:
    """
    Spread tax, tip, fees and discount over people.

    Proportional amounts follow each person's share of the item subtotal.
    Items withheld from the split still count in the denominator, so the
    ancillary part that belongs to them is returned as unallocated rather
    than being pushed onto the people who were allocated.

    Even amounts are split over everyone, or only over people with a
    non-zero subtotal when `include_zero_people` is off.
    """
    people = list(subtotals)
    if include_zero_people:
        even_payers = people
    else:
        even_payers = [person_id for person_id in people if subtotals[person_id] != 0]
    basis = sum(subtotals.values(), Fraction(0))
    denominator = basis + withheld_cents

    result = Distribution(no_basis_for_split=bool(people) and basis == 0)
    if result.no_basis_for_split:
        denominator = Fraction(0)

    columns = (
        ("tax", amounts.tax_cents, tax_mode),
        ("tip", amounts.tip_cents, tip_mode),
        ("fee", amounts.fee_cents, SplitMode.PROPORTIONAL),
        ("discount", amounts.discount_cents, SplitMode.PROPORTIONAL),
    )
    for name, amount_cents, mode in columns:
        if mode == SplitMode.EVEN:
            shares, unallocated = _even(amount_cents, people, even_payers)
        else:
            shares, unallocated = _proportional(amount_cents, subtotals, denominator)
        setattr(result, name, shares)
        if name == "discount":
            result.unallocated_discount += unallocated
        else:
            result.unallocated_charges += unallocated

    return result
