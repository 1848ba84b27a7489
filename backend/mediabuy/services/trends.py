from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

STABLE_EPSILON = 0.01


class TrendDirection(str, Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class Delta:
    absolute: float
    percent: float | None


@dataclass(frozen=True)
class Trend:
    direction: TrendDirection
    label: str
    icon: str
    percent_change: float | None = None

    def as_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["direction"] = self.direction.value
        return payload


@dataclass(frozen=True)
class StatusBadge:
    icon: str
    label: str

    def as_dict(self) -> dict[str, str]:
        return {"icon": self.icon, "label": self.label}


def compute_delta(current: float, previous: float) -> Delta:
    absolute = current - previous
    percent = absolute / abs(previous) * 100 if previous else None
    return Delta(absolute=absolute, percent=percent)


def classify_trend(current: float, previous: float) -> Trend:
    """Coarse trend of ``current`` against ``previous``; rules apply in order."""
    delta = compute_delta(current, previous)
    if previous == 0 and current == 0:
        return Trend(TrendDirection.NEUTRAL, "No Change", "–")
    if previous == 0:
        if current > 0:
            return Trend(TrendDirection.POSITIVE, "Positive Signs", "↑")
        return Trend(TrendDirection.NEGATIVE, "Negative Signs", "↓")
    if abs(delta.absolute) < STABLE_EPSILON:
        return Trend(TrendDirection.NEUTRAL, "Stable", "–", delta.percent)
    if current > previous:
        return Trend(TrendDirection.POSITIVE, "Improving", "↑", delta.percent)
    return Trend(TrendDirection.NEGATIVE, "Declining", "↓", delta.percent)


def classify_tiered_trend(current: float, previous: float) -> Trend:
    """Fine-grained trend used for profit breakdowns.

    The tiers overlap; the first matching tier wins, so a 60% jump on a
    small base falls through to "Stable" rather than "Growing".
    """
    delta = compute_delta(current, previous)
    change = delta.percent
    if change is None:
        return Trend(TrendDirection.NEUTRAL, "New", "🆕")
    if change >= 50 and current > 1000:
        return Trend(TrendDirection.POSITIVE, "Growing", "🚀", change)
    if 0 <= change < 10 and current > 3000:
        return Trend(TrendDirection.POSITIVE, "Consistent", "⭐", change)
    if 10 <= change < 50:
        return Trend(TrendDirection.POSITIVE, "Growing", "📈", change)
    if -20 < change < 0 and current > 0:
        return Trend(TrendDirection.NEUTRAL, "Variable", "📊", change)
    if change <= -20 and current > 0:
        return Trend(TrendDirection.NEGATIVE, "Declining", "⚠️", change)
    if current < 0 or change <= -50:
        return Trend(TrendDirection.NEGATIVE, "Critical", "💀", change)
    return Trend(TrendDirection.NEUTRAL, "Stable", "➡️", change)


def percentage_trend(current: float, previous: float) -> Trend:
    delta = compute_delta(current, previous)
    if not previous and not current:
        return Trend(TrendDirection.NEUTRAL, "NC", "–")
    if not previous:
        direction = TrendDirection.POSITIVE if current > 0 else TrendDirection.NEGATIVE
        icon = "↑" if current > 0 else "↓"
        return Trend(direction, "New", icon)
    if abs(delta.absolute) < STABLE_EPSILON:
        return Trend(TrendDirection.NEUTRAL, "NC", "–", delta.percent)
    if previous < 0 < current:
        return Trend(TrendDirection.POSITIVE, "Improved", "↑", delta.percent)

    is_positive = (previous > 0 and delta.absolute > 0) or (
        previous < 0 and delta.absolute < 0
    )
    label = f"{abs(delta.percent):.1f}%"
    if is_positive:
        return Trend(TrendDirection.POSITIVE, label, "↑", delta.percent)
    return Trend(TrendDirection.NEGATIVE, label, "↓", delta.percent)


def roi_status(roi: float | None, spend: float = 0.0) -> StatusBadge:
    if spend <= 0 or roi is None:
        return StatusBadge("⚪", "No Data")
    if roi >= 20:
        return StatusBadge("🟢", "High ROI")
    if roi >= 1:
        return StatusBadge("🟠", "Medium ROI")
    return StatusBadge("🔴", "Low ROI")


def profit_status(profit: float) -> StatusBadge:
    if profit > 3000:
        return StatusBadge("🟢", "Strong")
    if profit > 1000:
        return StatusBadge("🟡", "Healthy")
    if profit > 0:
        return StatusBadge("🟠", "Marginal")
    return StatusBadge("🔴", "Losing")
