"""Error taxonomy shared by the pipeline and the API layer."""

from __future__ import annotations


class PickemError(RuntimeError):
    pass


class ScheduleFormatError(PickemError):
    """The uploaded document yielded zero contests."""


class FeedFetchError(PickemError):
    """The scoreboard feed could not be fetched or decoded."""


class RefreshInProgressError(PickemError):
    pass


class NoScheduleError(PickemError):
    pass


class UnknownParticipantError(PickemError):
    pass


class UnknownContestError(PickemError):
    pass


class InvalidPickError(PickemError):
    pass


class DocumentNotFoundError(PickemError):
    pass


class PickLockedError(PickemError):
    """The contest already has a final result."""
