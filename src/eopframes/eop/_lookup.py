"""EOP series container, bracket search and interpolation.

:class:`EOPSeries` keeps its entries in a tuple and the entry dates in a
sorted float64 JAX array.  A lookup first tries the caller's previous
:class:`~eopframes.eop.Bracket` (successive queries from one frame are
usually close in time), then falls back to ``jnp.searchsorted`` over the
dates followed by a short forward scan.

Dates outside the data coverage produce no bracket.  Interpolation then
returns neutral values (zero UT1-UTC, :data:`NULL_CORRECTION`), never an
error.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence

import jax
import jax.numpy as jnp

from eopframes.constants import SECONDS_PER_DAY
from eopframes.eop._types import NULL_CORRECTION, Bracket, EarthOrientationEntry, PoleCorrection
from eopframes.epoch import Epoch

logger = logging.getLogger(__name__)

_LOOKUP_MARGIN: float = 6.0 * SECONDS_PER_DAY
"""Distance before the query date at which the forward scan starts [s]."""


class EOPSeries:
    """Immutable, strictly increasing sequence of Earth orientation entries.

    Args:
        entries: Entries sorted by date.

    Raises:
        ValueError: If two consecutive entries are not strictly increasing
            in date.
    """

    __slots__ = ('_entries', '_dates')

    def __init__(self, entries: Sequence[EarthOrientationEntry] = ()) -> None:
        entries = tuple(entries)
        for previous, current in zip(entries, entries[1:]):
            if not previous.date < current.date:
                raise ValueError(
                    f"EOP entries must be strictly increasing in date: "
                    f"MJD {previous.mjd} is followed by MJD {current.mjd}"
                )
        self._entries = entries
        self._dates = jnp.array(
            [e.date.seconds_since_j2000() for e in entries], dtype=jnp.float64
        )

    # Container protocol

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[EarthOrientationEntry]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> EarthOrientationEntry:
        return self._entries[index]

    @property
    def entries(self) -> tuple[EarthOrientationEntry, ...]:
        """All entries in increasing date order."""
        return self._entries

    @property
    def dates(self) -> jax.Array:
        """Entry dates as seconds since J2000.0, shape ``(N,)``."""
        return self._dates

    def is_empty(self) -> bool:
        """Return ``True`` if the series holds no entries."""
        return not self._entries

    @property
    def mjd_min(self) -> float | None:
        """MJD of the first entry, ``None`` for an empty series."""
        return self._entries[0].mjd if self._entries else None

    @property
    def mjd_max(self) -> float | None:
        """MJD of the last entry, ``None`` for an empty series."""
        return self._entries[-1].mjd if self._entries else None

    # Bracket search

    def lookup(self, date: Epoch, bracket: Bracket | None = None) -> Bracket | None:
        """Find the consecutive entries enclosing *date*.

        If *bracket* already satisfies ``previous.date <= date <
        next.date`` it is returned unchanged.  Otherwise the search starts
        at the first entry no earlier than six days before *date* and
        scans forward to the first entry dated at or after *date*.

        Args:
            date: Query instant.
            bracket: Bracket returned by a previous lookup, if any.

        Returns:
            Bracket with ``previous.date <= date <= next.date``, or ``None``
            when *date* is outside the series (or the series is empty).
        """
        if bracket is not None and bracket.contains(date):
            return bracket

        n = len(self._entries)
        if n == 0:
            return None

        target = date.seconds_since_j2000()
        idx = int(jnp.searchsorted(self._dates, target - _LOOKUP_MARGIN, side="left"))
        while idx < n and self._entries[idx].date < date:
            idx += 1

        if idx == n:
            logger.debug("No EOP data after %s (last entry MJD %s)", date, self._entries[-1].mjd)
            return None

        if idx == 0:
            # Only an exact hit on the first entry is inside the coverage
            if self._entries[0].date == date and n > 1:
                return Bracket(self._entries[0], self._entries[1])
            logger.debug("No EOP data before %s (first entry MJD %s)", date, self._entries[0].mjd)
            return None

        return Bracket(self._entries[idx - 1], self._entries[idx])

    def __repr__(self) -> str:
        if not self._entries:
            return "EOPSeries(empty)"
        return f"EOPSeries(entries={len(self._entries)}, mjd=[{self.mjd_min}, {self.mjd_max}])"


def _weights(bracket: Bracket, date: Epoch) -> tuple[float, float]:
    """Return ``(dt_previous, dt_next)``: seconds from each bracket end to *date*."""
    return date - bracket.previous.date, bracket.next.date - date


def interpolate_ut1_utc(bracket: Bracket | None, date: Epoch) -> float:
    """Linearly interpolate UT1-UTC inside *bracket*.

    Computes ``(dtP * next.ut1_utc + dtN * previous.ut1_utc) / (dtP + dtN)``
    where ``dtP`` and ``dtN`` are the distances from *date* to the
    previous and next entries.

    Args:
        bracket: Enclosing entries, or ``None`` outside the coverage.
        date: Query instant.

    Returns:
        UT1-UTC [s]; ``0.0`` when *bracket* is ``None``.
    """
    if bracket is None:
        return 0.0
    dt_p, dt_n = _weights(bracket, date)
    return (dt_p * bracket.next.ut1_utc + dt_n * bracket.previous.ut1_utc) / (dt_p + dt_n)


def interpolate_pole(bracket: Bracket | None, date: Epoch) -> PoleCorrection:
    """Linearly interpolate the pole coordinates inside *bracket*.

    Uses the same weighting as :func:`interpolate_ut1_utc`.

    Args:
        bracket: Enclosing entries, or ``None`` outside the coverage.
        date: Query instant.

    Returns:
        Pole coordinates [rad]; :data:`NULL_CORRECTION` when *bracket* is
        ``None``.
    """
    if bracket is None:
        return NULL_CORRECTION
    dt_p, dt_n = _weights(bracket, date)
    total = dt_p + dt_n
    prev, nxt = bracket.previous, bracket.next
    return PoleCorrection(
        xp=(dt_p * nxt.xp + dt_n * prev.xp) / total,
        yp=(dt_p * nxt.yp + dt_n * prev.yp) / total,
    )


def _as_epoch(date: Epoch | float) -> Epoch:
    return date if isinstance(date, Epoch) else Epoch.from_mjd(date)


def get_ut1_utc(eop: EOPSeries, date: Epoch | float) -> float:
    """Query UT1-UTC at the given instant.

    Args:
        eop: EOP series.
        date: Query instant, as an :class:`~eopframes.epoch.Epoch` or an MJD.

    Returns:
        UT1-UTC offset [seconds], ``0.0`` outside the coverage.

    Examples:
        ```python
        from eopframes.eop import static_eop, get_ut1_utc
        eop = static_eop(ut1_utc=0.1)
        ut1_utc = get_ut1_utc(eop, 59569.0)  # 0.1
        ```
    """
    date = _as_epoch(date)
    return interpolate_ut1_utc(eop.lookup(date), date)


def get_pm(eop: EOPSeries, date: Epoch | float) -> PoleCorrection:
    """Query the pole coordinates at the given instant.

    Args:
        eop: EOP series.
        date: Query instant, as an :class:`~eopframes.epoch.Epoch` or an MJD.

    Returns:
        ``(xp, yp)`` [rad], :data:`NULL_CORRECTION` outside the coverage.

    Examples:
        ```python
        from eopframes.eop import empty_eop, get_pm
        xp, yp = get_pm(empty_eop(), 59569.0)  # (0.0, 0.0)
        ```
    """
    date = _as_epoch(date)
    return interpolate_pole(eop.lookup(date), date)
