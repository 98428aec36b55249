from __future__ import annotations

from typing import Iterable, Mapping

from tabbysplit.models import ItemId, ItemShare, PersonId, Weight
from tabbysplit.services.shares import to_weight


def shares_from_assignments(assignments: Mapping[PersonId, Iterable[ItemId]]) -> list[ItemShare]:
    """
    Build share rows from a `person -> item ids` mapping.

    Every person listed on an item gets weight 1, so an item picked by three
    people is split in thirds. Repeated ids for the same person count once.
    """
    shares: list[ItemShare] = []
    seen: set[tuple[ItemId, PersonId]] = set()
    for person_id, item_ids in assignments.items():
        for item_id in item_ids:
            if (item_id, person_id) in seen:
                continue
            seen.add((item_id, person_id))
            shares.append(ItemShare(item_id=item_id, person_id=person_id, weight=1))
    return shares


def upsert_share(shares: Iterable[ItemShare], item_id: ItemId, person_id: PersonId, weight: Weight) -> list[ItemShare]:
    """Return a new share list with the `(item_id, person_id)` row replaced; weight <= 0 deletes it."""
    delete = to_weight(weight) <= 0
    result: list[ItemShare] = []
    replaced = False
    for share in shares:
        if share.item_id == item_id and share.person_id == person_id:
            if not delete and not replaced:
                result.append(ItemShare(item_id=item_id, person_id=person_id, weight=weight))
            replaced = True
            continue
        result.append(share)
    if not delete and not replaced:
        result.append(ItemShare(item_id=item_id, person_id=person_id, weight=weight))
    return result


def remove_person(shares: Iterable[ItemShare], person_id: PersonId) -> list[ItemShare]:
    return [share for share in shares if share.person_id != person_id]
