"""Domain errors raised by the tracker, store and service layers."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from ..models.show import Show


class ShowTrackerError(Exception):
    """Base class for show tracker errors."""


class SeasonNotFound(ShowTrackerError):
    """The target season does not exist in the show."""

    def __init__(self, show_id: str, season_number: int):
        self.show_id = show_id
        self.season_number = season_number
        super().__init__(f"Season {season_number} not found in show {show_id}")


class InvalidDateFormat(ShowTrackerError):
    """A manual date value is not a YYYY-MM year-month."""

    def __init__(self, value: str):
        self.value = value
        super().__init__(f"Invalid year-month value {value!r}, expected YYYY-MM")


class Unauthenticated(ShowTrackerError):
    """A store operation was attempted without an identity."""

    def __init__(self):
        super().__init__("User not authenticated")


class ShowNotFound(ShowTrackerError):
    """The show does not exist or belongs to another user."""

    def __init__(self, show_id: str):
        self.show_id = show_id
        super().__init__(f"Show {show_id} not found")


class PersistenceError(ShowTrackerError):
    """
    A show write failed.

    Carries the stored version of the show as re-read after the failure so
    callers can replace their local copy.
    """

    def __init__(self, show_id: str, current: Optional["Show"] = None):
        self.show_id = show_id
        self.current = current
        super().__init__(f"Failed to save show {show_id}")
