from __future__ import annotations

from ...core.exceptions import ValidationError
from .all_flags_calculator import AllFlagsCostCalculator
from .base import CycleCostCalculator
from .scheduled_days_calculator import ScheduledDaysCostCalculator

_POLICIES = {
    "all_flags": AllFlagsCostCalculator,
    "scheduled_only": ScheduledDaysCostCalculator,
}


def calculator_for(policy: str) -> CycleCostCalculator:
    """Factory: map the COST_POLICY setting to a calculator."""

    try:
        return _POLICIES[(policy or "").strip().lower()]()
    except KeyError:
        raise ValidationError(f"Unknown cost policy: {policy!r} (expected one of {sorted(_POLICIES)})")
