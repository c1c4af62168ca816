"""The epoch module provides the ``Epoch`` class for representing instants in time.

An ``Epoch`` is a point on a continuous, UTC-like time line.  Days are
exactly 86400 s and leap seconds are not modelled, which is the scale in
which IERS bulletins tabulate Earth orientation parameters.

The internal representation is split into an integer count of whole days
since the J2000.0 reference epoch (2000-01-01 12:00:00) and the float64
seconds elapsed within that day.  The seconds part stays in ``[0, 86400)``,
which keeps about 1e-11 s resolution at any date, and differences between
epochs are formed from the two parts separately.

Epochs are immutable and hashable.  Equality is exact, so an ``Epoch``
can be used as a cache key for per-epoch frame computations.
"""

from __future__ import annotations

import math
import re

from .constants import MJD_UNIX_EPOCH, SECONDS_PER_DAY
from .time import caldate_to_mjd, mjd_to_caldate

# MJD of the first midnight after J2000.0; J2000.0 itself is half a day earlier
_MJD_J2000_NEXT_DAY = 51545

_HALF_DAY = 0.5 * SECONDS_PER_DAY

# Valid ISO 8601 epoch string patterns
_EPOCH_PATTERNS = [
    # YYYY-MM-DD
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})$'),
    # YYYY-MM-DDTHH:MM:SSZ
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})Z$'),
    # YYYY-MM-DDTHH:MM:SS.fffZ
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})\.(\d+)Z$'),
]


def _split_seconds(seconds: float) -> tuple[int, float]:
    """Split a seconds count into whole days and the seconds left over."""
    days = math.floor(seconds / SECONDS_PER_DAY)
    return days, seconds - days * SECONDS_PER_DAY


class Epoch:
    """Represents a single instant on the UTC-like continuous time line.

    The internal representation uses two private components: ``_days``,
    the whole days elapsed since J2000.0 (2000-01-01 12:00:00), and
    ``_seconds``, the seconds elapsed since the start of that day, always
    in ``[0, 86400)``.

    Constructors:
        Epoch(2018, 1, 1)
        Epoch(2018, 1, 1, 12, 0, 0.0)
        Epoch("2018-01-01T12:00:00Z")
        Epoch(other_epoch)
        Epoch.from_mjd(58119.5)
        Epoch.from_seconds(5.68e8)
        Epoch.from_unix(1514808000.0)
    """

    __slots__ = ('_days', '_seconds')

    def __init__(self, *args: int | float | str | Epoch) -> None:
        """Initialize Epoch. Supports multiple constructor forms.

        Args:
            *args: Either (year, month, day[, hour, minute, second]),
                a string in ISO 8601 format, or another Epoch instance.
        """
        if len(args) == 1:
            if isinstance(args[0], str):
                self._init_string(args[0])
            elif isinstance(args[0], Epoch):
                self._days = args[0]._days
                self._seconds = args[0]._seconds
            else:
                raise ValueError(f"Cannot construct Epoch from {type(args[0])}")
        elif 3 <= len(args) <= 6:
            self._init_date(*args)
        else:
            raise ValueError(
                "Epoch requires date components (3-6 args), a string, or an Epoch"
            )

    @classmethod
    def _from_internal(cls, days: int, seconds: float) -> Epoch:
        """Create from whole days and seconds, normalizing the seconds part."""
        carry, seconds = _split_seconds(seconds)
        obj = object.__new__(cls)
        obj._days = int(days) + carry
        obj._seconds = float(seconds)
        return obj

    @classmethod
    def from_seconds(cls, seconds: float) -> Epoch:
        """Create an Epoch from seconds elapsed since J2000.0.

        Args:
            seconds (float): Seconds since 2000-01-01 12:00:00.

        Returns:
            Epoch: New Epoch instance.
        """
        days, rest = _split_seconds(float(seconds))
        return cls._from_internal(days, rest)

    @classmethod
    def from_mjd(cls, mjd: float) -> Epoch:
        """Create an Epoch from a Modified Julian Date.

        The whole and fractional day are separated before conversion to
        seconds, so the result carries the full precision of *mjd*.

        Args:
            mjd (float): Modified Julian Date.

        Returns:
            Epoch: New Epoch instance.
        """
        mjd = float(mjd)
        whole = math.floor(mjd)
        return cls._from_internal(
            whole - _MJD_J2000_NEXT_DAY, (mjd - whole) * SECONDS_PER_DAY + _HALF_DAY
        )

    @classmethod
    def from_unix(cls, unix_seconds: float) -> Epoch:
        """Create an Epoch from seconds since the Unix epoch (1970-01-01).

        Args:
            unix_seconds (float): Seconds since 1970-01-01 00:00:00.

        Returns:
            Epoch: New Epoch instance.
        """
        days, rest = _split_seconds(float(unix_seconds))
        return cls._from_internal(
            int(MJD_UNIX_EPOCH) + days - _MJD_J2000_NEXT_DAY, rest + _HALF_DAY
        )

    def _init_date(self, year, month, day, hour=0, minute=0, second=0.0):
        """Initialize from calendar date components.

        The day number and the time of day are kept apart, so sub-second
        components are not rounded through an MJD.
        """
        mjd_day = math.floor(float(caldate_to_mjd(year, month, day)))
        other = Epoch._from_internal(
            mjd_day - _MJD_J2000_NEXT_DAY,
            _HALF_DAY + hour * 3600.0 + minute * 60.0 + second,
        )
        self._days = other._days
        self._seconds = other._seconds

    def _init_string(self, string):
        """Initialize from an ISO 8601 string.

        Supported formats:
            - ``YYYY-MM-DD``
            - ``YYYY-MM-DDTHH:MM:SSZ``
            - ``YYYY-MM-DDTHH:MM:SS.fffZ``

        Args:
            string (str): ISO 8601 date/time string.
        """
        for pattern in _EPOCH_PATTERNS:
            m = pattern.match(string)
            if m:
                groups = m.groups()
                year = int(groups[0])
                month = int(groups[1])
                day = int(groups[2])

                hour = 0
                minute = 0
                second = 0.0

                if len(groups) >= 6:
                    hour = int(groups[3])
                    minute = int(groups[4])
                    second = float(groups[5])

                if len(groups) == 7:
                    second += float(f"0.{groups[6]}")

                self._init_date(year, month, day, hour, minute, second)
                return

        raise ValueError(
            f'Invalid Epoch string: "{string}" is not ISO 8601 compliant'
        )

    # Arithmetic operators

    def __add__(self, delta: float) -> Epoch:
        """Return a new Epoch shifted by ``delta`` seconds."""
        days, rest = _split_seconds(float(delta))
        return Epoch._from_internal(self._days + days, self._seconds + rest)

    def __sub__(self, other: Epoch | float) -> Epoch | float:
        """Subtract seconds or compute the difference between Epochs.

        Args:
            other: If Epoch, returns the time difference in seconds.
                If numeric, returns a new Epoch with seconds subtracted.

        Returns:
            float or Epoch: Time difference in seconds, or new Epoch.
        """
        if isinstance(other, Epoch):
            return ((self._days - other._days) * SECONDS_PER_DAY
                    + (self._seconds - other._seconds))
        return self + (-float(other))

    # Comparison operators

    def _key(self) -> tuple[int, float]:
        return self._days, self._seconds

    def __eq__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self._key() == other._key()

    def __ne__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self._key() != other._key()

    def __lt__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self._key() < other._key()

    def __le__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self._key() <= other._key()

    def __gt__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self._key() > other._key()

    def __ge__(self, other):
        if not isinstance(other, Epoch):
            return NotImplemented
        return self._key() >= other._key()

    def __hash__(self):
        return hash(self._key())

    # Time properties

    def seconds_since_j2000(self) -> float:
        """Return the seconds elapsed since J2000.0 as a single float.

        Near the present one float64 step of this value is about 1e-7 s;
        use epoch subtraction for finer differences.
        """
        return self._days * SECONDS_PER_DAY + self._seconds

    def mjd(self) -> float:
        """Return the Modified Julian Date."""
        return (_MJD_J2000_NEXT_DAY + self._days) + (self._seconds - _HALF_DAY) / SECONDS_PER_DAY

    def caldate(self) -> tuple[int, int, int, int, int, float]:
        """Return the calendar date components.

        Returns:
            tuple: (year, month, day, hour, minute, second) where second
                includes fractional part (millisecond resolution).
        """
        year, month, day, hour, minute, second = mjd_to_caldate(self.mjd())
        return int(year), int(month), int(day), int(hour), int(minute), float(second)

    # String representations

    def __str__(self):
        year, month, day, hour, minute, second = self.caldate()
        return (f'{year:04d}-{month:02d}-{day:02d}T'
                f'{hour:02d}:{minute:02d}:{second:06.3f}Z')

    def __repr__(self):
        return f'Epoch(_days={self._days}, _seconds={self._seconds!r})'


"""
The J2000.0 reference epoch (2000-01-01 12:00:00).
"""
J2000_EPOCH = Epoch._from_internal(0, 0.0)
