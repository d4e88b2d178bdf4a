"""Service for generating natural language explanations of sunrise/sunset scores."""

from models.forecast import BreakdownItem, ViewingQuality
from models.scoring import (
    CLOUDCOVER_HIGH,
    CLOUDCOVER_LOW,
    CLOUDCOVER_MID,
    HUMIDITY_HIGH,
    HUMIDITY_LOW,
    HUMIDITY_MID,
    VISIBILITY,
)

FAMILY_LABELS = {
    "cloudcover": "Cloud cover",
    "moisture": "Humidity",
    "visibility": "Visibility",
}


def score_to_quality(score: float, has_data: bool = True) -> ViewingQuality:
    """Convert a 0-1 score to a quality level.

    Thresholds:
    - >= 0.8: EXCELLENT
    - >= 0.6: GOOD
    - >= 0.4: FAIR
    - >= 0.2: POOR
    - < 0.2: BAD
    """
    if not has_data:
        return ViewingQuality.UNKNOWN
    if score >= 0.8:
        return ViewingQuality.EXCELLENT
    elif score >= 0.6:
        return ViewingQuality.GOOD
    elif score >= 0.4:
        return ViewingQuality.FAIR
    elif score >= 0.2:
        return ViewingQuality.POOR
    else:
        return ViewingQuality.BAD


def score_to_100(score: float) -> int:
    """Convert a 0-1 score to a 0-100 scale."""
    return max(0, min(100, round(score * 100)))


def generate_quality_explanation(
    score: float,
    breakdown: list[BreakdownItem],
    conditions: dict[str, float] | None = None,
) -> list[str]:
    """Build human-readable reasoning for a quality assessment.

    Returns one sentence per topic: the overall rating, then the sky, moisture
    and visibility, then which factor carried the score.
    """
    conditions = conditions or {}
    if not breakdown:
        return [_default_explanation()]

    parts = [_describe_overall(score)]

    for text in (
        _describe_clouds(conditions),
        _describe_moisture(conditions),
        _describe_visibility(conditions),
        _describe_drivers(breakdown),
    ):
        if text:
            parts.append(text)

    return parts


def _describe_overall(score: float) -> str:
    quality = score_to_quality(score)
    return f"{quality.value.capitalize()} ({score_to_100(score)}/100)."


def _describe_clouds(conditions: dict[str, float]) -> str:
    """Describe how the cloud layers will interact with the light."""
    high = conditions.get(CLOUDCOVER_HIGH)
    mid = conditions.get(CLOUDCOVER_MID)
    low = conditions.get(CLOUDCOVER_LOW)
    if high is None and mid is None and low is None:
        return ""

    low = low or 0.0
    mid = mid or 0.0
    if low >= 80:
        return f"Low cloud ({low:.0f}%) will likely block the horizon."
    if mid >= 70:
        return f"Thick mid-level cloud ({mid:.0f}%) may mute the colours."
    if high is None:
        return f"Mid cloud {mid:.0f}%, low cloud {low:.0f}%."
    if high > 95:
        return f"Solid high overcast ({high:.0f}%) could dull the sky."
    if high >= 30:
        return f"High cloud ({high:.0f}%) should catch and reflect the light."
    if high + mid + low < 10:
        return "Nearly clear sky: a clean sun but little colour."
    return f"Only light high cloud ({high:.0f}%) to reflect colour."


def _describe_moisture(conditions: dict[str, float]) -> str:
    """Describe humidity aloft and near the surface."""
    levels = {
        "upper": conditions.get(HUMIDITY_HIGH),
        "mid-level": conditions.get(HUMIDITY_MID),
        "surface": conditions.get(HUMIDITY_LOW),
    }
    humid = [name for name, value in levels.items() if value is not None and value >= 80]
    if humid:
        return f"Humid {' and '.join(humid)} air may add haze."
    surface = levels["surface"]
    if surface is not None and surface < 20:
        return f"Very dry surface air ({surface:.0f}%)."
    return ""


def _describe_visibility(conditions: dict[str, float]) -> str:
    visibility = conditions.get(VISIBILITY)
    if visibility is None:
        return ""
    km = visibility / 1000
    if km >= 16:
        return f"Excellent visibility ({km:.0f} km)."
    elif km >= 8:
        return f"Good visibility ({km:.0f} km)."
    elif km >= 2:
        return f"Reduced visibility ({km:.1f} km)."
    return f"Poor visibility ({km:.1f} km), likely fog or haze."


def _describe_drivers(breakdown: list[BreakdownItem]) -> str:
    """Name the strongest and weakest factors."""
    top = breakdown[0]
    label = FAMILY_LABELS.get(top.key, top.key)
    if len(breakdown) == 1:
        return f"Based on {label.lower()} only."
    weakest = min(breakdown, key=lambda item: item.score)
    if weakest.key == top.key or weakest.score >= 0.6:
        return f"{label} contributes the most."
    weak_label = FAMILY_LABELS.get(weakest.key, weakest.key)
    return f"{label} contributes the most; {weak_label.lower()} holds the score back."


def _default_explanation() -> str:
    return "No cloud, humidity or visibility data available for this time."
