from __future__ import annotations

from fractions import Fraction
from typing import Iterable, Optional

from tabbysplit.config import get_settings
from tabbysplit.errors import BillSplitError, MissingTotal, NoBasisForSplit
from tabbysplit.logging import get_logger
from tabbysplit.models import (
    Bill,
    Diagnostics,
    Item,
    ItemShare,
    Person,
    PersonTotal,
    SplitMode,
    SplitPolicy,
    SplitResult,
)
from tabbysplit.services.distribution import AncillaryAmounts, Distribution, distribute
from tabbysplit.services.reconcile import reconcile
from tabbysplit.services.shares import resolve_shares
from tabbysplit.services.subtotals import SubtotalAllocation, allocate_subtotals
from tabbysplit.utils.money import round_cents, to_cents

log = get_logger(__name__)


def recompute(
    bill: Bill,
    items: Iterable[Item],
    people: Iterable[Person],
    shares: Iterable[ItemShare],
    policy: Optional[SplitPolicy] = None,
) -> SplitResult:
    """
    Split a bill between people.

    Data problems (bad weights, negative prices, missing total in strict mode)
    come back as `SplitResult.error`; only missing arguments raise.
    """
    if bill is None or items is None or people is None or shares is None:
        raise TypeError("recompute() requires bill, items, people and shares")
    if policy is None:
        policy = SplitPolicy.from_settings(get_settings())

    currency = bill.currency or get_settings().currency
    items = list(items)
    people = list(people)
    shares = list(shares)

    log.debug(
        "split.recompute",
        items=len(items),
        people=len(people),
        shares=len(shares),
        policy=policy.unassigned.value,
    )
    try:
        result = _compute(bill, items, people, shares, policy)
    except BillSplitError as exc:
        log.warning("split.rejected", code=exc.code, message=exc.message)
        return SplitResult(error=exc, currency=currency)

    result.currency = currency
    diagnostics = result.diagnostics
    if diagnostics.has_warnings:
        log.info(
            "split.diagnostics",
            unassigned_items=len(diagnostics.unassigned_item_ids),
            unallocated_item_cents=diagnostics.unallocated_item_cents,
            unallocated_ancillary_cents=diagnostics.unallocated_ancillary_cents,
            unallocated_discount_cents=diagnostics.unallocated_discount_cents,
            no_basis_for_split=diagnostics.no_basis_for_split,
            total_was_derived=diagnostics.total_was_derived,
            total_mismatch_cents=diagnostics.total_mismatch_cents,
        )
    return result


def _proportional_ancillary_present(amounts: AncillaryAmounts, policy: SplitPolicy) -> bool:
    return bool(
        (amounts.tax_cents and policy.tax_mode == SplitMode.PROPORTIONAL)
        or (amounts.tip_cents and policy.tip_mode == SplitMode.PROPORTIONAL)
        or amounts.fee_cents
        or amounts.discount_cents
    )


def _compute(
    bill: Bill,
    items: list[Item],
    people: list[Person],
    shares: list[ItemShare],
    policy: SplitPolicy,
) -> SplitResult:
    amounts = AncillaryAmounts.from_bill(bill, policy.rounding)
    distributions = resolve_shares(items, shares)
    allocation = allocate_subtotals(items, distributions, people, policy)
    distribution = distribute(
        allocation.subtotals,
        amounts,
        withheld_cents=allocation.withheld_cents,
        tax_mode=policy.tax_mode,
        tip_mode=policy.tip_mode,
        include_zero_people=policy.include_zero_people,
    )

    if distribution.no_basis_for_split and policy.strict and _proportional_ancillary_present(amounts, policy):
        raise NoBasisForSplit("Ancillary amounts cannot be split: no item is allocated to anyone")

    diagnostics = Diagnostics(
        unassigned_item_ids=list(allocation.unassigned_item_ids),
        unallocated_item_cents=allocation.withheld_cents,
        unallocated_ancillary_cents=round_cents(distribution.unallocated_charges),
        unallocated_discount_cents=round_cents(distribution.unallocated_discount),
        no_basis_for_split=distribution.no_basis_for_split,
    )
    if bill.subtotal is not None:
        diagnostics.subtotal_mismatch_cents = to_cents(bill.subtotal, policy.rounding) - allocation.items_total_cents

    raw = {
        person_id: subtotal + distribution.total_for(person_id)
        for person_id, subtotal in allocation.subtotals.items()
    }
    derived_cents = round_cents(sum(raw.values(), Fraction(0)))

    if bill.total is None:
        if policy.strict:
            raise MissingTotal("Bill total is missing", field="total")
        target_cents = derived_cents
        diagnostics.total_was_derived = True
    else:
        total_cents = to_cents(bill.total, policy.rounding)
        diagnostics.total_mismatch_cents = total_cents - (allocation.items_total_cents + amounts.total_cents)
        if distribution.no_basis_for_split:
            target_cents = derived_cents
        else:
            target_cents = (
                total_cents
                - diagnostics.unallocated_item_cents
                - diagnostics.unallocated_ancillary_cents
                - diagnostics.unallocated_discount_cents
            )

    if not people:
        return SplitResult(person_totals=[], diagnostics=diagnostics)

    totals = reconcile(raw, target_cents)
    diagnostics.rounding_residue_applied_to = dict(totals.adjustments)

    return SplitResult(
        person_totals=_build_person_totals(people, allocation, distribution, totals.cents),
        diagnostics=diagnostics,
    )


def _reconcile_column(column: dict) -> dict:
    return reconcile(column, round_cents(sum(column.values(), Fraction(0)))).cents


def _build_person_totals(
    people: list[Person],
    allocation: SubtotalAllocation,
    distribution: Distribution,
    total_cents: dict,
) -> list[PersonTotal]:
    subtotal = _reconcile_column(allocation.subtotals)
    tax = _reconcile_column(distribution.tax)
    tip = _reconcile_column(distribution.tip)
    fee = _reconcile_column(distribution.fee)
    discount = _reconcile_column(distribution.discount)

    return [
        PersonTotal(
            person_id=person.id,
            name=person.name,
            subtotal_cents=subtotal[person.id],
            tax_cents=tax[person.id],
            tip_cents=tip[person.id],
            fee_cents=fee[person.id],
            discount_cents=discount[person.id],
            total_cents=total_cents[person.id],
            items=allocation.itemize(person.id, subtotal[person.id]),
        )
        for person in people
    ]
