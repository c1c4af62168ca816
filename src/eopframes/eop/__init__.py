"""Earth Orientation Parameters (EOP).

Stores a sorted series of IERS bulletin records and interpolates UT1-UTC
and the pole coordinates between them.  Frames keep the
:class:`Bracket` returned by :meth:`EOPSeries.lookup` and pass it back on
the next query, so successive nearby lookups cost O(1).

Typical usage::

    from eopframes.eop import load_eop_from_file, get_ut1_utc
    eop = load_eop_from_file("finals.all.iau2000.txt")
    ut1_utc = get_ut1_utc(eop, 59569.5)
"""

from eopframes.eop._lookup import (
    EOPSeries,
    get_pm,
    get_ut1_utc,
    interpolate_pole,
    interpolate_ut1_utc,
)
from eopframes.eop._parsers import (
    parse_c04_file,
    parse_c04_line,
    parse_standard_file,
    parse_standard_line,
)
from eopframes.eop._providers import (
    IERS_STANDARD_URL,
    download_standard_eop_file,
    empty_eop,
    load_cached_eop,
    load_default_eop,
    load_eop,
    load_eop_from_file,
    static_eop,
)
from eopframes.eop._types import NULL_CORRECTION, Bracket, EarthOrientationEntry, PoleCorrection

__all__ = [
    "Bracket",
    "EOPSeries",
    "EarthOrientationEntry",
    "IERS_STANDARD_URL",
    "NULL_CORRECTION",
    "PoleCorrection",
    "download_standard_eop_file",
    "empty_eop",
    "get_pm",
    "get_ut1_utc",
    "interpolate_pole",
    "interpolate_ut1_utc",
    "load_cached_eop",
    "load_default_eop",
    "load_eop",
    "load_eop_from_file",
    "parse_c04_file",
    "parse_c04_line",
    "parse_standard_file",
    "parse_standard_line",
    "static_eop",
]
