from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Optional

from ..core.constants import MONEY_MAX, MONEY_PLACES
from ..core.enums import Weekday
from ..core.exceptions import InvalidAmountError, ValidationError

_QUANT = Decimal(1).scaleb(-MONEY_PLACES)
_HHMM = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def to_money(value) -> Decimal:
    """Coerce int/float/str/Decimal to a 2-place Decimal.

    Raises ValidationError for anything that is not a finite number
    or does not fit a DECIMAL(12,2) column.
    """

    if isinstance(value, bool):
        raise ValidationError(f"Not a number: {value!r}")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Not a number: {value!r}")
    if not amount.is_finite():
        raise ValidationError(f"Not a finite number: {value!r}")
    if abs(amount) > MONEY_MAX:
        raise ValidationError(f"Amount out of range: {value!r}")
    try:
        return amount.quantize(_QUANT, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        raise ValidationError(f"Amount out of range: {value!r}")


def require_non_negative(value, field_name: str) -> Decimal:
    amount = to_money(value)
    if amount < 0:
        raise ValidationError(f"{field_name} must not be negative")
    return amount


def require_positive_amount(value) -> Decimal:
    try:
        amount = to_money(value)
    except ValidationError as e:
        raise InvalidAmountError(str(e))
    if amount <= 0:
        raise InvalidAmountError("Payment amount must be greater than zero")
    return amount


def parse_weekdays(values: Iterable[str]) -> tuple[Weekday, ...]:
    """Parse day names into a de-duplicated tuple in Monday..Sunday order."""

    days = set()
    for v in values or ():
        try:
            days.add(v if isinstance(v, Weekday) else Weekday.parse(v))
        except (ValueError, AttributeError):
            raise ValidationError(f"Unknown weekday: {v!r}")
    return tuple(sorted(days, key=lambda d: d.position))


def optional_hhmm(value: Optional[str], field_name: str) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    value = str(value).strip()
    if not _HHMM.match(value):
        raise ValidationError(f"{field_name} must be HH:MM")
    return value
