"""
Error taxonomy for the marketplace core.

Every ``MarketplaceError`` is raised synchronously by the operation that
detected it; dashboards decide how to present it.  The two ``Warning``
subclasses mark degraded-but-tolerated paths (zero fares, skipped lines).
"""


class MarketplaceError(Exception):
    """Base class for recoverable marketplace errors."""


class DuplicateBookingError(MarketplaceError):
    """The passenger already has an unresolved booking."""


class DriverBusyError(MarketplaceError):
    """The driver still has an accepted trip that is not completed."""


class AlreadyAcceptedError(MarketplaceError):
    """The booking was already claimed by a driver."""


class NoActiveTripError(MarketplaceError):
    """There is no booking the requested action could apply to."""


class UnknownDestinationError(MarketplaceError):
    """The destination is not in the fare table."""


class InvalidSurgeError(MarketplaceError):
    """The surge multiplier is outside the allowed range."""


class UsernameTakenError(MarketplaceError):
    """Another account already uses this username (case-insensitive)."""


class AuthenticationError(MarketplaceError):
    """Unknown username, wrong password or wrong role."""


class PersistenceError(MarketplaceError):
    """Reading or writing a ledger / receipt file failed."""


class UnknownDestinationWarning(UserWarning):
    """A fare was requested for a destination missing from the fare table."""


class MalformedRecordWarning(UserWarning):
    """A stored line could not be parsed and was skipped."""
