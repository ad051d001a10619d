"""Progress status shared by every derived figure."""

from enum import Enum


class Status(str, Enum):
    """Closed set of progress states reported to the presentation layer."""

    ON_TRACK = "on_track"
    AHEAD_OF_PACE = "ahead_of_pace"
    WATCH_SPENDING = "watch_spending"
    OVER_BUDGET = "over_budget"
    BEHIND = "behind"
    URGENT = "urgent"
    EXPIRED = "expired"
    COMPLETE = "complete"
    NOT_STARTED = "not_started"
    NO_ALLOCATION = "no_allocation"
