from __future__ import annotations

import math
from dataclasses import dataclass, field
from fractions import Fraction
from typing import Hashable, Mapping


@dataclass(slots=True)
class Reconciliation:
    cents: dict[Hashable, int]
    adjustments: dict[Hashable, int] = field(default_factory=dict)

    @property
    def total_cents(self) -> int:
        return sum(self.cents.values())


def reconcile(raw: Mapping[Hashable, Fraction], target_cents: int) -> Reconciliation:
    """
    Round fractional cents to whole cents so they add up to `target_cents`.

    Largest Remainder Method: floor every amount, then hand out the missing
    cents to the largest fractional remainders. When the floors overshoot the
    target, cents are taken back from the smallest remainders. Ties go to the
    earlier key in `raw`.
    """
    keys = list(raw)
    floors = {key: math.floor(raw[key]) for key in keys}
    result = Reconciliation(cents=dict(floors))
    if not keys:
        return result

    remainder = target_cents - sum(floors.values())
    if remainder == 0:
        return result

    position = {key: index for index, key in enumerate(keys)}
    fractional = {key: raw[key] - floors[key] for key in keys}
    if remainder > 0:
        order = sorted(keys, key=lambda key: (-fractional[key], position[key]))
    else:
        order = sorted(keys, key=lambda key: (fractional[key], position[key]))

    step = 1 if remainder > 0 else -1
    idx = 0
    while remainder != 0:
        key = order[idx]
        result.cents[key] += step
        result.adjustments[key] = result.adjustments.get(key, 0) + step
        remainder -= step
        idx = (idx + 1) % len(order)

    return result
