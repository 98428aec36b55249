from __future__ import annotations

from decimal import Decimal, InvalidOperation
from enum import Enum
from fractions import Fraction
from typing import Iterable, Sequence, Union

from tabbysplit.errors import InvalidWeight, UnknownReference
from tabbysplit.models import Item, ItemId, ItemShare, PersonId, Weight


class Unassigned(Enum):
    TOKEN = "unassigned"

    def __repr__(self) -> str:
        return "UNASSIGNED"


UNASSIGNED = Unassigned.TOKEN

Distribution = dict[PersonId, Fraction]
Resolution = Union[Distribution, Unassigned]


def to_weight(value: Weight) -> Fraction:
    if isinstance(value, bool):
        raise InvalidWeight(f"Weight must be a number, got {value!r}", field="weight")
    if isinstance(value, (Fraction, int)):
        return Fraction(value)
    try:
        decimal_value = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise InvalidWeight(f"Weight must be a number, got {value!r}", field="weight") from exc
    if not decimal_value.is_finite():
        raise InvalidWeight(f"Weight must be finite, got {value!r}", field="weight")
    return Fraction(decimal_value)


def resolve_item_shares(rows: Sequence[ItemShare]) -> Resolution:
    """Normalize the share rows of one item into fractions summing to 1."""
    if not rows:
        return UNASSIGNED

    weights: Distribution = {}
    for row in rows:
        weight = to_weight(row.weight)
        if weight <= 0:
            raise InvalidWeight(
                f"Share of item {row.item_id!r} for person {row.person_id!r} has non-positive weight {row.weight!r}",
                field="weight",
                item_id=row.item_id,
                person_id=row.person_id,
            )
        weights[row.person_id] = weights.get(row.person_id, Fraction(0)) + weight

    total = sum(weights.values(), Fraction(0))
    return {person_id: weight / total for person_id, weight in weights.items()}


def resolve_shares(items: Iterable[Item], shares: Iterable[ItemShare]) -> dict[ItemId, Resolution]:
    rows_by_item: dict[ItemId, list[ItemShare]] = {item.id: [] for item in items}
    for share in shares:
        rows = rows_by_item.get(share.item_id)
        if rows is None:
            raise UnknownReference(
                f"Share refers to unknown item {share.item_id!r}",
                field="item_id",
                item_id=share.item_id,
            )
        rows.append(share)

    return {item_id: resolve_item_shares(rows) for item_id, rows in rows_by_item.items()}
