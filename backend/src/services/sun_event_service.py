"""Pick which sunrise or sunset to score from a daily sun table."""

import logging

from models.forecast import DailySunTable, SunEvent

logger = logging.getLogger(__name__)


class NoUpcomingSunEventError(ValueError):
    """Raised when every sunrise and sunset in the table is already in the past."""


def all_sun_events(daily: DailySunTable) -> list[SunEvent]:
    """Every sunrise and sunset in the table, in chronological order."""
    events = []
    for day_index in range(len(daily.time)):
        events.extend(daily.events_for_day(day_index))
    return sorted(events, key=lambda event: event.timestamp)


def nearest_sun_event(
    daily: DailySunTable, now: int, margin_seconds: int = 0
) -> SunEvent:
    """The next sunrise or sunset that has not yet passed.

    An event still counts as upcoming until ``margin_seconds`` after it, so a
    sunset that started a few minutes ago is still the one worth scoring.
    Once both of today's events are over this naturally rolls over to
    tomorrow's sunrise.

    Raises:
        NoUpcomingSunEventError: If no event in the table qualifies.
    """
    for event in all_sun_events(daily):
        if event.timestamp + margin_seconds >= now:
            logger.debug("Nearest sun event: %s at %d", event.type, event.timestamp)
            return event
    raise NoUpcomingSunEventError(
        f"No sunrise or sunset at or after {now} (margin {margin_seconds}s)"
    )


def upcoming_sun_events(
    daily: DailySunTable, current: SunEvent, days: int = 7
) -> list[SunEvent]:
    """Sun events after ``current``: the rest of its day, then up to ``days`` more days.

    When ``current`` is a sunrise, the same day's sunset is the first entry.
    """
    events = []
    following_days = 0
    for day_index, day in enumerate(daily.time):
        if day == current.day:
            events.extend(
                event
                for event in daily.events_for_day(day_index)
                if event.timestamp > current.timestamp
            )
        elif day > current.day and following_days < days:
            events.extend(daily.events_for_day(day_index))
            following_days += 1
    return sorted(events, key=lambda event: event.timestamp)
