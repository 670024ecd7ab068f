from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Mapping

from .errors import InvalidInput

CENT = Decimal("0.01")
# Largest value a DecimalField(max_digits=10, decimal_places=2) holds.
MAX_AMOUNT = Decimal("99999999.99")
BOOL_STRINGS = {"true": True, "false": False}


def _label(field: str) -> str:
    return field.replace("_", " ").capitalize()


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) == 0
    return False


def missing_fields(data: Mapping[str, Any], fields: Iterable[str]) -> list[str]:
    """Return one message per required field that is absent, blank or empty."""
    return [f"{_label(f)} is required" for f in fields if is_blank(data.get(f))]


def parse_amount(value: Any, field: str, *, allow_zero: bool = True) -> Decimal:
    """Parse a money amount, rejecting non-numbers and negatives (and zero unless allowed).

    Amounts must fit the money columns (ten digits, two of them decimals).
    """
    error = InvalidInput(errors=[f"Valid {_label(field).lower()} is required"])
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            raise error
        amount = amount.quantize(CENT)
    except (InvalidOperation, ValueError):
        raise error
    if amount < 0 or (amount == 0 and not allow_zero) or amount > MAX_AMOUNT:
        raise error
    return amount


def parse_bool(value: Any, field: str) -> bool:
    """Accept real booleans and the strings "true"/"false"; anything else is invalid."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in BOOL_STRINGS:
        return BOOL_STRINGS[value.strip().lower()]
    raise InvalidInput(errors=[f"{_label(field)} must be true or false"])


def clean_categories(value: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        raise InvalidInput(errors=["Categories must be a list"])
    cats = [str(c).strip() for c in value if str(c).strip()]
    if not cats:
        raise InvalidInput(errors=["Categories is required"])
    # dedupe keeping order
    return list(dict.fromkeys(cats))


def reject_fields(updates: Mapping[str, Any], allowed: Iterable[str]) -> None:
    extra = sorted(set(updates) - set(allowed))
    if extra:
        raise InvalidInput(errors=[f"{name} cannot be updated" for name in extra])
