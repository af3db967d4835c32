"""Tournament and match status values, shared by the pipeline and the API."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Optional

TOURNAMENT_STATUSES: tuple[str, ...] = ("upcoming", "ongoing", "completed")

MATCH_STATUSES: tuple[str, ...] = ("scheduled", "live", "completed")

# How long a tournament with a start date but no end date stays ongoing
OPEN_ENDED_DAYS = 7


def tournament_status(
    start_date: Optional[date],
    end_date: Optional[date],
    today: date,
) -> str:
    """
    Derive a tournament's status from its dates.

    Without a start date a tournament is upcoming. Without an end date it is
    ongoing for OPEN_ENDED_DAYS after its start and completed afterwards.
    """
    if start_date is None or today < start_date:
        return "upcoming"
    if end_date is None:
        end_date = start_date + timedelta(days=OPEN_ENDED_DAYS)
    if today > end_date:
        return "completed"
    return "ongoing"


def normalize_status_filter(raw_statuses: Iterable[str] | None) -> list[str]:
    """
    Clean the ?status= values of a match listing.

    Unknown values are dropped and duplicates removed, keeping request order.
    No usable value means every status.
    """
    statuses: list[str] = []
    for raw in raw_statuses or ():
        status = raw.strip().lower()
        if status in MATCH_STATUSES and status not in statuses:
            statuses.append(status)
    return statuses or list(MATCH_STATUSES)
