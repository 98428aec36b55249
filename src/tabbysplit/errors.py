"""
Error taxonomy of the split engine.

Every data-shape problem is one of these classes. The engine raises them
internally and `recompute` returns them inside a `SplitResult` instead of
letting them escape, so UI handlers can call it on every edit.

Codes are part of the contract with the warning UI. Do not rename them.
"""

from __future__ import annotations

from typing import Any, Optional


class BillSplitError(Exception):
    code = "BILL_SPLIT_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.context = context

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.field is not None:
            payload["field"] = self.field
        if self.context:
            payload["context"] = self.context
        return {"error": payload}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


# ── Validation ─────────────────────────────────────────────────────────────

class ValidationError(BillSplitError):
    code = "VALIDATION_ERROR"


class InvalidWeight(ValidationError):
    code = "INVALID_WEIGHT"


class NegativePrice(ValidationError):
    code = "NEGATIVE_PRICE"


class NegativeAmount(ValidationError):
    code = "NEGATIVE_AMOUNT"


class InvalidAmount(ValidationError):
    code = "INVALID_AMOUNT"


class InvalidQuantity(ValidationError):
    code = "INVALID_QUANTITY"


class DuplicateId(ValidationError):
    code = "DUPLICATE_ID"


class UnknownReference(ValidationError):
    code = "UNKNOWN_REFERENCE"


# ── Policy ─────────────────────────────────────────────────────────────────

class PolicyError(BillSplitError):
    code = "POLICY_ERROR"


class NoBasisForSplit(PolicyError):
    code = "NO_BASIS_FOR_SPLIT"


class UnknownDefaultPayer(PolicyError):
    code = "UNKNOWN_DEFAULT_PAYER"


# ── Totals ─────────────────────────────────────────────────────────────────

class MissingTotal(BillSplitError):
    code = "MISSING_TOTAL"
