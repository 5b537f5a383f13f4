"""
AQI Classifier
Maps the upstream 1-5 AQI category to a display label and theme colors
"""

from dataclasses import dataclass, asdict
from typing import Dict

from utils.constants import AQI_CATEGORIES, HAZARDOUS_CATEGORY, BACKGROUND_ALPHA


@dataclass(frozen=True)
class AQIInfo:
    label: str
    color: str
    background: str

    def to_dict(self) -> Dict:
        return asdict(self)


def _theme_color(token: str, alpha: float = None) -> str:
    if alpha is None:
        return f"hsl(var(--{token}))"
    return f"hsl(var(--{token}) / {alpha})"


def classify_aqi(category) -> AQIInfo:
    """
    Classify an AQI category for display

    Total over every input: values outside 1-5 (0, 6, -1, None, ...)
    fall back to Hazardous.

    Args:
        category: AQI category reported by the air-pollution service

    Returns:
        AQIInfo with label, foreground color and background tint
    """
    info = HAZARDOUS_CATEGORY
    # bool is an int subclass; True must not read as "Good"
    if not isinstance(category, bool):
        try:
            info = AQI_CATEGORIES.get(category, HAZARDOUS_CATEGORY)
        except TypeError:
            info = HAZARDOUS_CATEGORY

    return AQIInfo(
        label=info["label"],
        color=_theme_color(info["token"]),
        background=_theme_color(info["token"], BACKGROUND_ALPHA),
    )


def aqi_badge(category) -> Dict:
    """Badge payload; pulse mirrors the animated indicator next to the label"""
    badge = {"category": category}
    badge.update(classify_aqi(category).to_dict())
    badge["pulse"] = True
    return badge
