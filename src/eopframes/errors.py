"""Exception types raised by eopframes.

Only load-time failures are modelled as exceptions.  Queries outside the
Earth-orientation data coverage are not errors (they yield a neutral
correction), and numeric edge cases of the precession-nutation model are
handled by branch selection rather than raised.
"""

from __future__ import annotations


class EOPFramesError(Exception):
    """Base class for all eopframes errors."""


class InitializationError(EOPFramesError):
    """A bundled or user-supplied model resource could not be loaded.

    Raised once, at first use of a harmonic series table, when the resource
    is missing or malformed.  There is no recovery: the frame cannot be
    built without its series.

    Args:
        resource: Identifier (path or package resource name) of the
            offending resource.
        message: Description of the failure.

    Attributes:
        resource: Identifier of the offending resource.
    """

    def __init__(self, resource: str, message: str) -> None:
        self.resource = resource
        super().__init__(f"{resource}: {message}")
