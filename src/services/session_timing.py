"""Duration tables and countdown arithmetic for service sessions."""
import math
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional
from src.models.enums import DurationCategory, ExtensionLabel

# Minutes granted by each base duration category
DURATION_MINUTES = {
    DurationCategory.THIRTY_MINUTES: 30,
    DurationCategory.ONE_HOUR: 60,
    DurationCategory.SHORT_STAY: 45,
    DurationCategory.SEVERAL_HOURS: 180,
    DurationCategory.OVERNIGHT: 480,
}

# Minutes and price of each purchasable extension
EXTENSION_MINUTES = {
    ExtensionLabel.THIRTY_MINUTES: 30,
    ExtensionLabel.ONE_HOUR: 60,
    ExtensionLabel.TWO_HOURS: 120,
}

EXTENSION_PRICES = {
    ExtensionLabel.THIRTY_MINUTES: Decimal("80000"),
    ExtensionLabel.ONE_HOUR: Decimal("150000"),
    ExtensionLabel.TWO_HOURS: Decimal("280000"),
}

EXPIRY_WARNING_SECONDS = 300


@dataclass(frozen=True)
class SessionCountdown:
    """Snapshot of a session's timer at one instant."""

    elapsed_seconds: int
    remaining_seconds: int
    overtime_seconds: int

    @property
    def is_overtime(self) -> bool:
        return self.overtime_seconds > 0

    def to_dict(self) -> dict:
        return {
            "elapsed_seconds": self.elapsed_seconds,
            "remaining_seconds": self.remaining_seconds,
            "overtime_seconds": self.overtime_seconds,
            "is_overtime": self.is_overtime,
        }


def minutes_for_category(category: DurationCategory) -> int:
    """Base minutes for a duration category."""
    return DURATION_MINUTES[category]


def compute_countdown(
    started_at: datetime,
    duration_minutes: int,
    now: datetime,
    finalized: bool = False,
) -> SessionCountdown:
    """
    Recompute remaining and overtime seconds from wall-clock time.

    Elapsed time is floored to whole seconds. Finalized sessions always
    report zero remaining seconds.
    """
    elapsed = max(0, math.floor((now - started_at).total_seconds()))
    limit = duration_minutes * 60
    remaining = max(0, limit - elapsed)
    overtime = max(0, elapsed - limit)
    if finalized:
        remaining = 0
    return SessionCountdown(
        elapsed_seconds=elapsed,
        remaining_seconds=remaining,
        overtime_seconds=overtime,
    )


def crossed_warning_threshold(
    countdown: SessionCountdown,
    previous_remaining: Optional[int] = None,
    threshold: int = EXPIRY_WARNING_SECONDS,
) -> bool:
    """
    Check if the countdown has reached the warning window.

    Fires on crossing (previous > threshold >= current) rather than on
    exact equality, so a delayed or skipped tick cannot miss it. Without
    a previous reading any value inside (0, threshold] counts.
    """
    current = countdown.remaining_seconds
    if current <= 0 or current > threshold:
        return False
    if previous_remaining is None:
        return True
    return previous_remaining > threshold
