"""Shared enumerations for time windows and content types."""

from enum import Enum


class TimeWindow(str, Enum):
    """Aggregation window for signal and mindshare computations."""

    H24 = "24h"
    H48 = "48h"
    D7 = "7d"
    D30 = "30d"

    @property
    def hours(self) -> int:
        """Length of the window in hours."""
        return _WINDOW_HOURS[self]


_WINDOW_HOURS: dict[TimeWindow, int] = {
    TimeWindow.H24: 24,
    TimeWindow.H48: 48,
    TimeWindow.D7: 7 * 24,
    TimeWindow.D30: 30 * 24,
}


class ContentType(str, Enum):
    """Classification of a post's format."""

    THREAD = "thread"
    ANALYSIS = "analysis"
    MEME = "meme"
    QUOTE_REPOST = "quote_repost"
    REPOST = "repost"
    REPLY = "reply"


# Platform spellings seen in raw ingestion data
CONTENT_TYPE_ALIASES: dict[str, ContentType] = {
    "quote_rt": ContentType.QUOTE_REPOST,
    "quote": ContentType.QUOTE_REPOST,
    "retweet": ContentType.REPOST,
    "deep_dive": ContentType.ANALYSIS,
}
