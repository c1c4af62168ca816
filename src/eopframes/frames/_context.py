"""Shared, lazily initialized model data for frame computations.

A :class:`FrameContext` owns the data every :class:`~eopframes.frames.ITRFFrame`
reads but never modifies: the IERS 2003 harmonic series and the EOP
series.  Each item is produced by its loader on first access, exactly
once even under concurrent access, and then served read-only.

Most programs use the process-wide context from :func:`get_default_context`.
Tests and applications with their own data install one with
:func:`set_default_context` or pass a context to the frame directly.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from eopframes.eop import EOPSeries, load_default_eop
from eopframes.series import CIPSeries, load_iers2003_series

logger = logging.getLogger(__name__)


class FrameContext:
    """Container for the series and EOP data used by frames.

    Args:
        series: Harmonic series to use.  When ``None``, *series_loader*
            is called on first access.
        eop: EOP series to use.  When ``None``, *eop_loader* is called on
            first access.
        series_loader: Factory for the harmonic series.  Default:
            :func:`~eopframes.series.load_iers2003_series`.
        eop_loader: Factory for the EOP series.  Default:
            :func:`~eopframes.eop.load_default_eop` (reads
            ``EOPFRAMES_EOP_FILE``, empty when unset).
    """

    def __init__(
        self,
        series: CIPSeries | None = None,
        eop: EOPSeries | None = None,
        *,
        series_loader: Callable[[], CIPSeries] = load_iers2003_series,
        eop_loader: Callable[[], EOPSeries] = load_default_eop,
    ) -> None:
        self._series = series
        self._eop = eop
        self._series_loader = series_loader
        self._eop_loader = eop_loader
        self._lock = threading.Lock()

    @property
    def series(self) -> CIPSeries:
        """Harmonic series, loaded on first access.

        Raises:
            InitializationError: If the tables cannot be loaded.
        """
        if self._series is None:
            with self._lock:
                if self._series is None:
                    self._series = self._series_loader()
        return self._series

    @property
    def eop(self) -> EOPSeries:
        """EOP series, loaded on first access."""
        if self._eop is None:
            with self._lock:
                if self._eop is None:
                    self._eop = self._eop_loader()
                    logger.debug("Frame context EOP data: %r", self._eop)
        return self._eop

    def __repr__(self) -> str:
        series = "loaded" if self._series is not None else "pending"
        eop = repr(self._eop) if self._eop is not None else "pending"
        return f"FrameContext(series={series}, eop={eop})"


_default_lock = threading.Lock()
_default_context: FrameContext | None = None


def get_default_context() -> FrameContext:
    """Return the process-wide frame context, creating it on first call."""
    global _default_context
    if _default_context is None:
        with _default_lock:
            if _default_context is None:
                _default_context = FrameContext()
    return _default_context


def set_default_context(context: FrameContext | None) -> None:
    """Install *context* as the process-wide frame context.

    Frames created afterwards without an explicit context use it.  Passing
    ``None`` discards the current default; a fresh one is created on the
    next :func:`get_default_context` call.

    Args:
        context: New default context, or ``None``.
    """
    global _default_context
    with _default_lock:
        _default_context = context
