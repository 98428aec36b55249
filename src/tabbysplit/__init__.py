from tabbysplit.errors import BillSplitError, MissingTotal, PolicyError, ValidationError
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
    UnassignedPolicy,
)
from tabbysplit.services.split import recompute

__all__ = [
    "Bill",
    "BillSplitError",
    "Diagnostics",
    "Item",
    "ItemShare",
    "MissingTotal",
    "Person",
    "PersonTotal",
    "PolicyError",
    "SplitMode",
    "SplitPolicy",
    "SplitResult",
    "UnassignedPolicy",
    "ValidationError",
    "recompute",
]
