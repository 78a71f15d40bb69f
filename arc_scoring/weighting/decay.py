"""Pure decay and weighting functions.

Every function here is stateless and side-effect-free; configuration is
passed in explicitly so concurrent runs with different configs never
interfere.
"""

import math

from arc_scoring.errors import ConfigurationError
from arc_scoring.weighting.config import DecayConfig
from arc_scoring.weighting.schemas import CONTENT_TYPE_ALIASES, ContentType, TimeWindow


def clamp(value: float, floor: float, cap: float) -> float:
    """Bound ``value`` to ``[floor, cap]``.

    Raises:
        ConfigurationError: If ``floor > cap``.
    """
    if floor > cap:
        raise ConfigurationError(f"clamp floor {floor} exceeds cap {cap}")
    return max(floor, min(cap, value))


def recency_weight(age_hours: float, half_life_hours: float) -> float:
    """Exponential half-life decay in (0, 1].

    ``0.5 ** (age / half_life)``. Negative ages (clock skew between the
    ingestion host and the batch host) count as brand new.
    """
    if half_life_hours <= 0:
        raise ConfigurationError(f"half-life must be positive, got {half_life_hours}")
    age = max(0.0, age_hours)
    weight = math.pow(0.5, age / half_life_hours)
    # Underflow for absurd ages must not zero out the post
    return max(weight, 5e-324)


def half_life_for(window: TimeWindow | str, config: DecayConfig | None = None) -> float:
    """Configured half-life in hours for ``window``."""
    return (config or DecayConfig()).half_life(window)


def resolve_content_type(content_type: ContentType | str | None) -> ContentType | None:
    """Map a raw content type string to a known ContentType, or None."""
    if content_type is None:
        return None
    if isinstance(content_type, ContentType):
        return content_type
    key = str(content_type).strip().lower().replace("-", "_").replace(" ", "_")
    if key in CONTENT_TYPE_ALIASES:
        return CONTENT_TYPE_ALIASES[key]
    try:
        return ContentType(key)
    except ValueError:
        return None


def content_type_weight(
    content_type: ContentType | str | None,
    config: DecayConfig | None = None,
) -> float:
    """Weight for a content type.

    Unknown types get the lowest weight in the table, never zero, so no post
    is silently dropped.
    """
    table = (config or DecayConfig()).content_weights()
    resolved = resolve_content_type(content_type)
    if resolved is None:
        return min(table.values())
    return table[resolved]


def engagement_points(likes: int, replies: int, reposts: int) -> int:
    """Linear engagement points: ``likes + 2*replies + 3*reposts``."""
    return max(0, likes) + 2 * max(0, replies) + 3 * max(0, reposts)


def engagement_log(points: float) -> float:
    """Log-scaled engagement, ``ln(1 + points)``."""
    return math.log1p(max(0.0, points))
