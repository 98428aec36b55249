from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Mapping

from tabbysplit.errors import UnknownReference
from tabbysplit.models import PersonId, PersonTotal
from tabbysplit.utils.money import from_cents


@dataclass(slots=True)
class Transfer:
    from_person: PersonId
    to_person: PersonId
    amount_cents: int

    @property
    def amount(self) -> Decimal:
        return from_cents(self.amount_cents)


def balances_from_totals(
    person_totals: Iterable[PersonTotal],
    paid_cents: Mapping[PersonId, int],
) -> dict[PersonId, int]:
    """Paid minus owed per person; positive means the person is owed money."""
    totals = list(person_totals)
    known = {person.person_id for person in totals}
    for person_id in paid_cents:
        if person_id not in known:
            raise UnknownReference(f"Payment recorded for unknown person {person_id!r}", field="paid_cents")

    return {person.person_id: paid_cents.get(person.person_id, 0) - person.total_cents for person in totals}


def settle(person_totals: Iterable[PersonTotal], paid_cents: Mapping[PersonId, int]) -> List[Transfer]:
    """
    Transfers that square up a bill several people paid into.

    People who are owed the most are paid first, each by whoever owes the most
    at that point. Ties keep the order of `person_totals`.
    """
    balances = balances_from_totals(person_totals, paid_cents)
    owed = deque(sorted(((pid, cents) for pid, cents in balances.items() if cents > 0), key=lambda row: -row[1]))
    owing = deque(sorted(((pid, -cents) for pid, cents in balances.items() if cents < 0), key=lambda row: -row[1]))

    transfers: list[Transfer] = []
    while owed and owing:
        creditor, credit = owed.popleft()
        debtor, debt = owing.popleft()
        amount = min(credit, debt)
        transfers.append(Transfer(from_person=debtor, to_person=creditor, amount_cents=amount))

        if credit > amount:
            owed.appendleft((creditor, credit - amount))
        if debt > amount:
            owing.appendleft((debtor, debt - amount))

    return transfers


def payment_requests(
    person_totals: Iterable[PersonTotal],
    payer_id: PersonId,
) -> List[Transfer]:
    """
    What everyone else owes the person who paid the receipt.

    Each person with a positive total sends it straight to the payer. Use
    `settle` when more than one person paid.
    """
    totals = list(person_totals)
    if all(person.person_id != payer_id for person in totals):
        raise UnknownReference(f"Unknown payer {payer_id!r}", field="payer_id")

    return [
        Transfer(from_person=person.person_id, to_person=payer_id, amount_cents=person.total_cents)
        for person in totals
        if person.person_id != payer_id and person.total_cents > 0
    ]
