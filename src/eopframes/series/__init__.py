"""IERS 2003 harmonic series for the CIP coordinates and the CIO locator.

Typical usage::

    from eopframes.series import compute_bodies_elements, load_iers2003_series
    series = load_iers2003_series()
    elements = compute_bodies_elements(t)
    x = series.x.value(t, elements)
"""

from eopframes.series._fundamental import BodiesElements, compute_bodies_elements
from eopframes.series._harmonic import (
    CIPSeries,
    HarmonicSeries,
    SeriesTerms,
    load_cip_series,
    load_iers2003_series,
    load_series,
    parse_series,
)

__all__ = [
    "BodiesElements",
    "CIPSeries",
    "HarmonicSeries",
    "SeriesTerms",
    "compute_bodies_elements",
    "load_cip_series",
    "load_iers2003_series",
    "load_series",
    "parse_series",
]
