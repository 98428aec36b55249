from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP
from fractions import Fraction
from typing import Mapping, Sequence

from tabbysplit.errors import DuplicateId, InvalidQuantity, NegativePrice, UnknownDefaultPayer, UnknownReference
from tabbysplit.models import Item, ItemId, Person, PersonId, PersonItemShare, SplitPolicy, UnassignedPolicy
from tabbysplit.services.reconcile import reconcile
from tabbysplit.services.shares import UNASSIGNED, Resolution
from tabbysplit.utils.money import to_cents


@dataclass(slots=True)
class ItemPortion:
    item: Item
    fraction: Fraction
    amount: Fraction


@dataclass(slots=True)
class SubtotalAllocation:
    subtotals: dict[PersonId, Fraction]
    breakdown: dict[PersonId, list[ItemPortion]]
    items_total_cents: int = 0
    withheld_cents: int = 0
    unassigned_item_ids: list[ItemId] = field(default_factory=list)

    @property
    def basis(self) -> Fraction:
        return sum(self.subtotals.values(), Fraction(0))

    def itemize(self, person_id: PersonId, subtotal_cents: int) -> list[PersonItemShare]:
        """Per-item lines for one person, rounded so they add up to `subtotal_cents`."""
        portions = self.breakdown[person_id]
        cents = reconcile({portion.item.id: portion.amount for portion in portions}, subtotal_cents).cents
        return [
            PersonItemShare(
                item_id=portion.item.id,
                label=portion.item.label,
                fraction=portion.fraction,
                share_cents=cents[portion.item.id],
            )
            for portion in portions
        ]


def line_amounts(items: Sequence[Item], rounding: str = ROUND_HALF_UP) -> dict[ItemId, int]:
    """Line amount of every item in cents: price × quantity."""
    amounts: dict[ItemId, int] = {}
    for item in items:
        if item.id in amounts:
            raise DuplicateId(f"Item {item.id!r} appears more than once", field="items", item_id=item.id)

        price_cents = to_cents(item.price, rounding)
        if price_cents < 0:
            raise NegativePrice(
                f"Item {item.id!r} has negative price {item.price!r}",
                field="price",
                item_id=item.id,
            )
        if isinstance(item.quantity, bool) or not isinstance(item.quantity, int) or item.quantity < 1:
            raise InvalidQuantity(
                f"Item {item.id!r} has invalid quantity {item.quantity!r}",
                field="quantity",
                item_id=item.id,
            )
        amounts[item.id] = price_cents * item.quantity
    return amounts


def _default_payer(people: Sequence[Person], policy: SplitPolicy) -> PersonId:
    if policy.default_payer_id is None:
        return people[0].id
    # ids from configuration arrive as strings
    for person in people:
        if person.id == policy.default_payer_id or str(person.id) == str(policy.default_payer_id):
            return person.id
    raise UnknownDefaultPayer(
        f"Default payer {policy.default_payer_id!r} is not among the people on the bill",
        field="default_payer_id",
    )


def allocate_subtotals(
    items: Sequence[Item],
    distributions: Mapping[ItemId, Resolution],
    people: Sequence[Person],
    policy: SplitPolicy,
) -> SubtotalAllocation:
    amounts = line_amounts(items, policy.rounding)
    allocation = SubtotalAllocation(
        subtotals={person.id: Fraction(0) for person in people},
        breakdown={person.id: [] for person in people},
        items_total_cents=sum(amounts.values()),
    )
    if len(allocation.subtotals) != len(people):
        raise DuplicateId("A person appears more than once", field="people")

    if not people:
        # nobody to allocate to: every item stays in the withheld pool
        allocation.withheld_cents = allocation.items_total_cents
        allocation.unassigned_item_ids = [
            item.id for item in items if distributions.get(item.id, UNASSIGNED) is UNASSIGNED
        ]
        return allocation

    for item in items:
        amount = amounts[item.id]
        distribution = distributions.get(item.id, UNASSIGNED)

        if distribution is UNASSIGNED:
            allocation.unassigned_item_ids.append(item.id)
            if policy.unassigned == UnassignedPolicy.EXCLUDE_FROM_SPLIT:
                allocation.withheld_cents += amount
                continue
            if policy.unassigned == UnassignedPolicy.ASSIGN_TO_FIRST_PERSON:
                distribution = {_default_payer(people, policy): Fraction(1)}
            else:
                distribution = {person.id: Fraction(1, len(people)) for person in people}

        for person_id, fraction in distribution.items():
            if person_id not in allocation.subtotals:
                raise UnknownReference(
                    f"Share of item {item.id!r} refers to unknown person {person_id!r}",
                    field="person_id",
                    item_id=item.id,
                    person_id=person_id,
                )
            share = amount * fraction
            allocation.subtotals[person_id] += share
            allocation.breakdown[person_id].append(ItemPortion(item=item, fraction=fraction, amount=share))

    return allocation
