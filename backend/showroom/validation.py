from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .constants import CATEGORIES, COLORS, LOYALTY_TIERS, SIZES


# Maximum price: 9,999,999.99 (999,999,999 cents)
# This prevents storage overflow issues and nonsensical prices
MAX_PRICE_CENTS = 999_999_999


class ShowroomError(Exception):
    """Base class for ledger errors surfaced to callers."""
    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.details = details or {}


class ValidationError(ShowroomError, ValueError):
    """Input problem (non-positive quantity/amount, empty sale, unknown tag)."""


class NotFoundError(ShowroomError, LookupError):
    """Operation references an id absent from its store."""


class InsufficientStockError(ShowroomError):
    """Sale quantity exceeds current stock under the strict stock policy."""


INT = "int"
STR = "str"


@dataclass(frozen=True)
class ModelValidationPolicy:
    """
    Central policy layer:
    - field_types: what clients are allowed to set, and how to coerce it
    - required_on_create: fields required when creating
    - nullable_fields: fields that may be explicitly set to None
    """
    field_types: dict[str, str]
    required_on_create: set[str] = field(default_factory=set)
    nullable_fields: set[str] = field(default_factory=set)
    max_lengths: dict[str, int] = field(default_factory=dict)


def _coerce_int(key: str, value: Any) -> int:
    # Already an int (but not bool which is a subclass of int)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    # String input - must be plain digits (with optional leading minus)
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            raise ValidationError(f"{key} must be an integer")
        # Reject scientific notation (e.g., "1e15", "1E10")
        if "e" in stripped.lower():
            raise ValidationError(f"{key} must be a plain integer (scientific notation not allowed)")
        # Reject decimal points (e.g., "12.5")
        if "." in stripped:
            raise ValidationError(f"{key} must be an integer (no decimals)")
        try:
            return int(stripped)
        except ValueError:
            raise ValidationError(f"{key} must be an integer")
    # Reject floats explicitly
    if isinstance(value, float):
        raise ValidationError(f"{key} must be an integer, not a decimal")
    raise ValidationError(f"{key} must be an integer")


def _coerce_value(key: str, kind: str, value: Any):
    if kind == INT:
        return _coerce_int(key, value)
    return str(value).strip()


def validate_payload(*, payload: dict | None, policy: ModelValidationPolicy, partial: bool) -> dict:
    """
    Validates + normalizes incoming data against a policy.
    Returns a cleaned patch dict with only writable fields.

    partial=False: create semantics (enforce required_on_create)
    partial=True: patch semantics (validate only provided keys)
    """
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ValidationError("Invalid payload")

    if not partial:
        missing = sorted(f for f in policy.required_on_create if f not in payload)
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    # Reject unknown / non-writable fields
    for k in payload.keys():
        if k not in policy.field_types:
            raise ValidationError(f"Field not allowed: {k}")

    patch: dict = {}
    for k, raw in payload.items():
        if raw is None:
            if k not in policy.nullable_fields:
                raise ValidationError(f"{k} cannot be null")
            patch[k] = None
            continue

        val = _coerce_value(k, policy.field_types[k], raw)

        if isinstance(val, str):
            if k in policy.required_on_create and val == "":
                raise ValidationError(f"{k} cannot be blank")
            max_len = policy.max_lengths.get(k)
            if max_len and len(val) > max_len:
                raise ValidationError(f"{k} exceeds max length {max_len}")

        patch[k] = val

    return patch


def require_positive_int(key: str, value: Any) -> int:
    number = _coerce_int(key, value)
    if number <= 0:
        raise ValidationError(f"{key} must be > 0", details={key: value})
    return number


def _check_price(patch: dict, key: str) -> None:
    if key not in patch or patch[key] is None:
        return
    price = patch[key]
    if price < 0:
        raise ValidationError(f"{key} must be >= 0")
    if price > MAX_PRICE_CENTS:
        raise ValidationError(f"{key} cannot exceed {MAX_PRICE_CENTS} ({MAX_PRICE_CENTS / 100:,.2f})")


def _check_choice(patch: dict, key: str, choices) -> None:
    if key in patch and patch[key] not in choices:
        raise ValidationError(
            f"{key} must be one of: {', '.join(choices)}",
            details={key: patch[key]},
        )


def enforce_rules_product(patch: dict) -> None:
    """
    Business rules that are not captured by field types alone.
    Keep these small and centralized.
    """
    _check_price(patch, "purchase_price_cents")
    _check_price(patch, "selling_price_cents")
    _check_choice(patch, "category", CATEGORIES)
    _check_choice(patch, "size", SIZES)
    _check_choice(patch, "color", COLORS)

    if "opening_stock" in patch and patch["opening_stock"] < 0:
        raise ValidationError("opening_stock must be >= 0")


def enforce_rules_customer(patch: dict) -> None:
    _check_choice(patch, "loyalty_tier", LOYALTY_TIERS)
