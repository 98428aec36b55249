from __future__ import annotations

from typing import Optional

from tabbysplit.config import get_settings
from tabbysplit.models import Diagnostics, PersonTotal
from tabbysplit.utils.money import from_cents


CURRENCY_SYMBOLS = {
    "USD": "$",
    "CAD": "$",
    "AUD": "$",
    "EUR": "€",
    "GBP": "£",
    "JPY": "¥",
}


def format_money(cents: int, currency: Optional[str] = None) -> str:
    currency = (currency or get_settings().currency).upper()
    amount = from_cents(abs(cents))
    sign = "-" if cents < 0 else ""
    symbol = CURRENCY_SYMBOLS.get(currency)
    if symbol:
        return f"{sign}{symbol}{amount:,.2f}"
    return f"{sign}{amount:,.2f} {currency}"


def format_person_receipt(person: PersonTotal, currency: Optional[str] = None) -> str:
    header = person.name or str(person.person_id)
    lines = [header]
    for item in person.items:
        label = item.label or str(item.item_id)
        if item.fraction != 1:
            label = f"{label} ({item.fraction.numerator}/{item.fraction.denominator})"
        lines.append(f"  {label}: {format_money(item.share_cents, currency)}")

    lines.append(f"Subtotal: {format_money(person.subtotal_cents, currency)}")
    if person.tax_cents:
        lines.append(f"Tax: {format_money(person.tax_cents, currency)}")
    if person.tip_cents:
        lines.append(f"Tip: {format_money(person.tip_cents, currency)}")
    if person.fee_cents:
        lines.append(f"Fees: {format_money(person.fee_cents, currency)}")
    if person.discount_cents:
        lines.append(f"Discount: {format_money(person.discount_cents, currency)}")
    lines.append(f"Total: {format_money(person.total_cents, currency)}")
    return "\n".join(lines)


def describe_diagnostics(diagnostics: Diagnostics, currency: Optional[str] = None) -> list[str]:
    """Warning messages for everything the split could not allocate cleanly."""
    warnings: list[str] = []
    if diagnostics.unassigned_item_ids:
        count = len(diagnostics.unassigned_item_ids)
        noun = "item is" if count == 1 else "items are"
        warnings.append(f"{count} {noun} not assigned to anyone.")
    if diagnostics.unallocated_item_cents:
        warnings.append(
            f"{format_money(diagnostics.unallocated_item_cents, currency)} of items is not included in anyone's total."
        )
    if diagnostics.unallocated_ancillary_cents:
        warnings.append(
            f"{format_money(diagnostics.unallocated_ancillary_cents, currency)} of tax, tip and fees "
            "is not included in anyone's total."
        )
    if diagnostics.unallocated_discount_cents:
        warnings.append(
            f"{format_money(abs(diagnostics.unallocated_discount_cents), currency)} of discounts "
            "is not applied to anyone's total."
        )
    if diagnostics.no_basis_for_split:
        warnings.append("Nothing is assigned yet, so tax, tip and fees cannot be split.")
    if diagnostics.total_was_derived:
        warnings.append("The receipt total is missing; totals were computed from the items and charges.")
    if diagnostics.subtotal_mismatch_cents:
        warnings.append(_mismatch("Items", "the receipt subtotal", diagnostics.subtotal_mismatch_cents, currency))
    if diagnostics.total_mismatch_cents:
        warnings.append(
            _mismatch("Items and charges", "the receipt total", diagnostics.total_mismatch_cents, currency)
        )
    return warnings


def _mismatch(what: str, against: str, delta_cents: int, currency: Optional[str]) -> str:
    direction = "less" if delta_cents > 0 else "more"
    return f"{what} add up to {format_money(abs(delta_cents), currency)} {direction} than {against}."


def summary_line(person: PersonTotal, currency: Optional[str] = None) -> str:
    name = person.name or str(person.person_id)
    return f"{name}: {format_money(person.total_cents, currency)}"
