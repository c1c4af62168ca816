"""Type definitions for Earth Orientation Parameters (EOP).

Provides the core data types for EOP storage and lookup:

- :class:`EarthOrientationEntry`: one bulletin record on the continuous
  time line.
- :class:`Bracket`: the pair of consecutive entries around a query date.
- :class:`PoleCorrection`: a pole offset ``(xp, yp)`` in radians.

The series container itself, :class:`~eopframes.eop.EOPSeries`, lives in
``_lookup`` next to the bracket search it owns.
"""

from __future__ import annotations

from typing import NamedTuple

from eopframes.epoch import Epoch


class EarthOrientationEntry(NamedTuple):
    """A single Earth orientation record.

    Only ``xp``, ``yp`` and ``ut1_utc`` enter the GCRF to ITRF rotation.
    ``lod``, ``dx`` and ``dy`` are carried through from the bulletin as
    read, so callers can inspect them, but nothing in the frame
    computation uses them: the rotation follows the IAU 2000 CIP
    developments without observed celestial pole offsets.

    Attributes:
        date: Instant of the record (0h UTC of ``mjd``).
        mjd: Modified Julian Date of the record.
        xp: Pole x-coordinate [rad].
        yp: Pole y-coordinate [rad].
        ut1_utc: UT1-UTC offset [s].
        lod: Length of day excess [s]. NaN where missing. Bulletin data only.
        dx: Celestial pole offset X [rad]. NaN where missing. Bulletin data only.
        dy: Celestial pole offset Y [rad]. NaN where missing. Bulletin data only.
    """

    date: Epoch
    mjd: float
    xp: float
    yp: float
    ut1_utc: float
    lod: float = float("nan")
    dx: float = float("nan")
    dy: float = float("nan")


class Bracket(NamedTuple):
    """Consecutive entries enclosing a query date.

    Attributes:
        previous: Last entry with ``date <= query``.
        next: First entry with ``date >= query`` after ``previous``.
    """

    previous: EarthOrientationEntry
    next: EarthOrientationEntry

    def contains(self, date: Epoch) -> bool:
        """Return ``True`` if ``previous.date <= date < next.date``."""
        return self.previous.date <= date < self.next.date


class PoleCorrection(NamedTuple):
    """Pole motion correction.

    Attributes:
        xp: x-component [rad], positive towards Greenwich.
        yp: y-component [rad], positive towards 90 deg West.
    """

    xp: float
    yp: float


NULL_CORRECTION = PoleCorrection(0.0, 0.0)
"""Neutral pole correction, returned outside data coverage."""
