"""Season watch-status transitions and date reconciliation.

Both operations are pure: they take a show, return an updated copy and never
touch storage. Earlier seasons are promoted to watched when a later season is
started or finished; they are never demoted.
"""

import logging

from ..core.clock import Clock, system_clock
from ..core.exceptions import InvalidDateFormat, SeasonNotFound
from ..models.show import (
    DateKind,
    Season,
    Show,
    WatchStatus,
    format_year_month,
    is_year_month,
)

logger = logging.getLogger(__name__)

ADVANCING_STATUSES = (WatchStatus.WATCHING, WatchStatus.WATCHED)


def _cascade_watched(season: Season, month: str) -> Season:
    """Promote an earlier season to watched, keeping dates it already has."""
    if season.status == WatchStatus.WATCHED:
        return season
    return season.model_copy(
        update={
            "status": WatchStatus.WATCHED,
            "watched_date": month,
            "started_date": season.started_date or month,
        }
    )


def _apply_status(season: Season, new_status: WatchStatus, month: str) -> Season:
    """Apply the date rules for a season entering new_status."""
    if new_status == WatchStatus.WATCHING:
        update = {"started_date": month, "watched_date": None}
    elif new_status == WatchStatus.WATCHED:
        update = {"watched_date": month, "started_date": season.started_date or month}
    else:
        update = {"started_date": None, "watched_date": None}

    update["status"] = new_status
    return season.model_copy(update=update)


def advance_to_status(
    show: Show,
    season_id: int,
    new_status: WatchStatus,
    clock: Clock = system_clock,
) -> Show:
    """
    Change a season's watch status.

    Moving a season to watching or watched marks every earlier season that
    is not already watched as watched, stamped with the current month.

    Args:
        show: Current show
        season_id: Sequence number of the season to change
        new_status: Requested status
        clock: Time source for auto-assigned dates

    Returns:
        Updated copy of the show

    Raises:
        SeasonNotFound: If the show has no season with that number
    """
    if show.get_season(season_id) is None:
        raise SeasonNotFound(show.show_id, season_id)

    now = clock.now()
    month = format_year_month(now)
    cascade = new_status in ADVANCING_STATUSES

    seasons = []
    for season in show.seasons:
        if season.id < season_id and cascade:
            season = _cascade_watched(season, month)
        elif season.id == season_id:
            season = _apply_status(season, new_status, month)
        seasons.append(season)

    logger.debug(
        f"Show {show.show_id} season {season_id} -> {new_status.value} ({month})"
    )
    return show.model_copy(update={"seasons": seasons, "last_updated": now})


def set_manual_date(
    show: Show,
    season_id: int,
    date_kind: DateKind,
    value: str,
    clock: Clock = system_clock,
) -> Show:
    """
    Overwrite one of a season's dates with a user-entered value.

    Status and the other date are left alone and no other season changes.

    Raises:
        InvalidDateFormat: If value is not a YYYY-MM year-month
        SeasonNotFound: If the show has no season with that number
    """
    if not is_year_month(value):
        raise InvalidDateFormat(value)
    if show.get_season(season_id) is None:
        raise SeasonNotFound(show.show_id, season_id)

    field = "started_date" if date_kind == DateKind.STARTED else "watched_date"
    seasons = [
        season.model_copy(update={field: value}) if season.id == season_id else season
        for season in show.seasons
    ]

    logger.debug(f"Show {show.show_id} season {season_id} {field} set to {value}")
    return show.model_copy(update={"seasons": seasons, "last_updated": clock.now()})
