"""Errors raised while de-overlapping tabular search results. All are fatal to a run."""
from __future__ import annotations


class DeoverlapError(Exception):
    pass


class FormatError(DeoverlapError):
    """A tblout row does not look like the selected format."""


class OrderingError(DeoverlapError):
    """Input was not sorted by target and then by rank key."""


class ConfigError(DeoverlapError):
    """Options that cannot be combined, or a missing prerequisite option."""


class ClanFileError(DeoverlapError):
    """A model is assigned to more than one clan."""
