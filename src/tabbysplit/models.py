from __future__ import annotations

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Hashable, Optional, Union

from tabbysplit.utils.money import from_cents

if TYPE_CHECKING:
    from tabbysplit.config import Settings
    from tabbysplit.errors import BillSplitError


Amount = Union[Decimal, int, float, str]
Weight = Union[Decimal, int, float, str, Fraction]
PersonId = Hashable
ItemId = Hashable


class UnassignedPolicy(str, Enum):
    EVEN_SPLIT_ALL = "even_split_all"
    EXCLUDE_FROM_SPLIT = "exclude_from_split"
    ASSIGN_TO_FIRST_PERSON = "assign_to_first_person"


class SplitMode(str, Enum):
    PROPORTIONAL = "proportional"
    EVEN = "even"


@dataclass(slots=True)
class Bill:
    subtotal: Optional[Amount] = None
    tax: Amount = 0
    tip: Amount = 0
    service_fee: Amount = 0
    discount: Amount = 0
    total: Optional[Amount] = None
    currency: Optional[str] = None
    delivery_fee: Amount = 0


@dataclass(slots=True)
class Item:
    id: ItemId
    price: Amount
    quantity: int = 1
    label: str = ""


@dataclass(slots=True)
class Person:
    id: PersonId
    name: str = ""


@dataclass(slots=True)
class ItemShare:
    item_id: ItemId
    person_id: PersonId
    weight: Weight = 1


@dataclass(slots=True)
class PersonItemShare:
    item_id: ItemId
    label: str
    fraction: Fraction
    share_cents: int

    @property
    def share(self) -> Decimal:
        return from_cents(self.share_cents)


@dataclass(slots=True)
class PersonTotal:
    person_id: PersonId
    name: str
    subtotal_cents: int = 0
    tax_cents: int = 0
    tip_cents: int = 0
    fee_cents: int = 0
    discount_cents: int = 0
    total_cents: int = 0
    items: list[PersonItemShare] = field(default_factory=list)

    @property
    def subtotal_share(self) -> Decimal:
        return from_cents(self.subtotal_cents)

    @property
    def tax_share(self) -> Decimal:
        return from_cents(self.tax_cents)

    @property
    def tip_share(self) -> Decimal:
        return from_cents(self.tip_cents)

    @property
    def fee_share(self) -> Decimal:
        return from_cents(self.fee_cents)

    @property
    def discount_share(self) -> Decimal:
        return from_cents(self.discount_cents)

    @property
    def total(self) -> Decimal:
        return from_cents(self.total_cents)


@dataclass(slots=True)
class SplitPolicy:
    unassigned: UnassignedPolicy = UnassignedPolicy.EVEN_SPLIT_ALL
    default_payer_id: Optional[PersonId] = None
    strict: bool = False
    tax_mode: SplitMode = SplitMode.PROPORTIONAL
    tip_mode: SplitMode = SplitMode.PROPORTIONAL
    include_zero_people: bool = True
    rounding: str = ROUND_HALF_UP

    @classmethod
    def from_settings(cls, settings: "Settings") -> "SplitPolicy":
        return cls(
            unassigned=settings.unassigned_policy,
            default_payer_id=settings.default_payer_id,
            strict=settings.strict,
            tax_mode=settings.tax_mode,
            tip_mode=settings.tip_mode,
            include_zero_people=settings.include_zero_people,
            rounding=settings.rounding,
        )


@dataclass(slots=True)
class Diagnostics:
    unassigned_item_ids: list[ItemId] = field(default_factory=list)
    unallocated_item_cents: int = 0
    unallocated_ancillary_cents: int = 0
    unallocated_discount_cents: int = 0
    no_basis_for_split: bool = False
    total_was_derived: bool = False
    rounding_residue_applied_to: dict[PersonId, int] = field(default_factory=dict)
    subtotal_mismatch_cents: int = 0
    total_mismatch_cents: int = 0

    @property
    def has_warnings(self) -> bool:
        return bool(
            self.unassigned_item_ids
            or self.unallocated_item_cents
            or self.unallocated_ancillary_cents
            or self.unallocated_discount_cents
            or self.no_basis_for_split
            or self.total_was_derived
            or self.subtotal_mismatch_cents
            or self.total_mismatch_cents
        )


@dataclass(slots=True)
class SplitResult:
    person_totals: list[PersonTotal] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)
    error: Optional["BillSplitError"] = None
    currency: str = "USD"

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def allocated_cents(self) -> int:
        return sum(person.total_cents for person in self.person_totals)

    @property
    def allocated_total(self) -> Decimal:
        return from_cents(self.allocated_cents)

    def get(self, person_id: PersonId) -> Optional[PersonTotal]:
        for person in self.person_totals:
            if person.person_id == person_id:
                return person
        return None

    def unwrap(self) -> list[PersonTotal]:
        if self.error is not None:
            raise self.error
        return self.person_totals
