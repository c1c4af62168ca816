"""Factory functions for creating :class:`~eopframes.eop.EOPSeries` instances.

- :func:`load_eop`: build a series from raw ``(mjd, xp, yp, ut1_utc)``
  records.
- :func:`empty_eop`: a series with no data (every query is neutral).
- :func:`static_eop`: constant values over an MJD range.
- :func:`load_eop_from_file`: parse an IERS standard or C04 file.
- :func:`load_default_eop`: the file named by ``EOPFRAMES_EOP_FILE``, or
  an empty series.
- :func:`load_cached_eop`: a local cache refreshed from IERS when stale.

The cache lives in ``$EOPFRAMES_CACHE/eop`` (default
``~/.cache/eopframes/eop``) and holds a single
``finals.all.iau2000.txt``.
"""

from __future__ import annotations

import logging
import math
import os
import time
from collections.abc import Iterable, Sequence
from pathlib import Path

import httpx

from eopframes.eop._lookup import EOPSeries
from eopframes.eop._parsers import parse_c04_file, parse_standard_file, parse_standard_line
from eopframes.eop._types import EarthOrientationEntry
from eopframes.epoch import Epoch

logger = logging.getLogger(__name__)

EOP_FILE_ENV_VAR = "EOPFRAMES_EOP_FILE"
EOP_FORMAT_ENV_VAR = "EOPFRAMES_EOP_FORMAT"
CACHE_ENV_VAR = "EOPFRAMES_CACHE"

IERS_STANDARD_URL: str = (
    "https://datacenter.iers.org/data/latestVersion/finals.all.iau2000.txt"
)
"""IERS data centre URL of the rapid service finals file (IAU 2000 pole)."""

STANDARD_FILENAME: str = "finals.all.iau2000.txt"

_DEFAULT_MAX_AGE_DAYS: float = 7.0
"""Default maximum age for cached EOP data in days."""

_HTTP_TIMEOUT: float = 120.0

_PARSERS = {
    "standard": parse_standard_file,
    "c04": parse_c04_file,
}


def get_eop_cache_dir() -> Path:
    """Return the directory holding cached EOP files, creating it if needed."""
    root = os.environ.get(CACHE_ENV_VAR)
    cache_root = Path(root) if root is not None else Path.home() / ".cache" / "eopframes"
    eop_dir = cache_root / "eop"
    eop_dir.mkdir(parents=True, exist_ok=True)
    return eop_dir


def is_file_stale(filepath: Path, max_age_seconds: float) -> bool:
    """Whether the cached EOP file is missing or was written too long ago."""
    try:
        modified = filepath.stat().st_mtime
    except FileNotFoundError:
        return True
    return time.time() - modified > max_age_seconds


def download_standard_eop_file(
    filepath: str | Path,
    *,
    url: str = IERS_STANDARD_URL,
    timeout: float = _HTTP_TIMEOUT,
) -> Path:
    """Fetch the IERS finals file and store it at *filepath*.

    The response must contain at least one parseable standard-format
    record before it is written, so an error page served with a 200
    status cannot replace a good cache.  The body goes to a sibling
    ``.part`` file first and is renamed into place.

    Args:
        filepath: Destination path.  Parent directories are created.
        url: Source URL.  Defaults to :data:`IERS_STANDARD_URL`.
        timeout: HTTP timeout in seconds.

    Returns:
        Resolved path of the written file.

    Raises:
        httpx.HTTPStatusError: If the server answers with an error status.
        httpx.TransportError: On network failures.
        ValueError: If the body holds no EOP records.
    """
    filepath = Path(filepath)
    logger.info("Fetching EOP data from %s", url)
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()
    body = response.text

    if not any(parse_standard_line(line) for line in body.splitlines()):
        raise ValueError(f"Response from {url} contains no standard-format EOP records")

    filepath.parent.mkdir(parents=True, exist_ok=True)
    staging = filepath.with_name(filepath.name + ".part")
    staging.write_text(body, encoding="utf-8")
    staging.replace(filepath)
    logger.info("Cached EOP data at %s", filepath)
    return filepath.resolve()


def _entry_from_raw(record: Sequence[float]) -> EarthOrientationEntry:
    if not 4 <= len(record) <= 7:
        raise ValueError(
            f"EOP record must have 4 to 7 fields (mjd, xp, yp, ut1_utc[, lod, dx, dy]), "
            f"got {len(record)}"
        )
    mjd, xp, yp, ut1_utc, *optional = (float(v) for v in record)
    optional += [math.nan] * (3 - len(optional))
    return EarthOrientationEntry(Epoch.from_mjd(mjd), mjd, xp, yp, ut1_utc, *optional)


def load_eop(records: Iterable[Sequence[float]]) -> EOPSeries:
    """Build an EOP series from raw records.

    Each record is ``(mjd, xp, yp, ut1_utc)`` optionally followed by
    ``lod, dx, dy``, with angles in radians and times in seconds.  The
    entry date is 0h UTC of ``mjd``.  Records are sorted by MJD once here.

    Args:
        records: Raw records in any order.

    Returns:
        EOPSeries holding one entry per record.

    Raises:
        ValueError: If a record has the wrong number of fields or two
            records share a date.

    Examples:
        ```python
        from eopframes.eop import load_eop, get_ut1_utc
        eop = load_eop([(59000.0, 0.0, 0.0, -0.2), (59001.0, 0.0, 0.0, -0.3)])
        get_ut1_utc(eop, 59000.5)  # -0.25
        ```
    """
    entries = sorted((_entry_from_raw(r) for r in records), key=lambda e: e.mjd)
    eop = EOPSeries(entries)
    if entries:
        logger.info(
            "Loaded %d EOP entries (MJD %s to %s)", len(eop), eop.mjd_min, eop.mjd_max
        )
    return eop


def empty_eop() -> EOPSeries:
    """Create an EOP series with no entries.

    Every query returns neutral values, which is equivalent to ignoring
    Earth orientation corrections.

    Returns:
        Empty EOPSeries.
    """
    return EOPSeries()


def static_eop(
    xp: float = 0.0,
    yp: float = 0.0,
    ut1_utc: float = 0.0,
    mjd_min: float = 0.0,
    mjd_max: float = 99999.0,
) -> EOPSeries:
    """Create an EOP series with constant values across an MJD range.

    The series holds two identical entries at *mjd_min* and *mjd_max*, so
    interpolation returns the constant anywhere in between.

    Args:
        xp: Pole x-coordinate [rad]. Default: 0.0.
        yp: Pole y-coordinate [rad]. Default: 0.0.
        ut1_utc: UT1-UTC offset [seconds]. Default: 0.0.
        mjd_min: Start of the valid MJD range. Default: 0.0.
        mjd_max: End of the valid MJD range. Default: 99999.0.

    Returns:
        EOPSeries with constant values.

    Examples:
        ```python
        from eopframes.eop import static_eop, get_ut1_utc
        eop = static_eop(ut1_utc=0.1)
        val = get_ut1_utc(eop, 59569.0)  # returns 0.1
        ```
    """
    return EOPSeries([
        EarthOrientationEntry(Epoch.from_mjd(mjd_min), float(mjd_min), xp, yp, ut1_utc),
        EarthOrientationEntry(Epoch.from_mjd(mjd_max), float(mjd_max), xp, yp, ut1_utc),
    ])


def load_eop_from_file(filepath: str | Path, format: str = "standard") -> EOPSeries:
    """Load EOP data from an IERS file.

    Args:
        filepath: Path to the file.
        format: ``"standard"`` for ``finals.all.iau2000.txt`` style files
            or ``"c04"`` for EOP 14 C04 tables.

    Returns:
        EOPSeries built from the parsed records.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If *format* is unknown or no valid EOP data is found.

    Examples:
        ```python
        from eopframes.eop import load_eop_from_file
        eop = load_eop_from_file("path/to/finals.all.iau2000.txt")
        ```
    """
    try:
        parse = _PARSERS[format]
    except KeyError:
        raise ValueError(
            f"Unknown EOP file format '{format}'. Expected one of {sorted(_PARSERS)}"
        ) from None

    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"EOP file not found: {filepath}")

    logger.info("Reading %s EOP file %s", format, filepath)
    return load_eop(parse(str(filepath)))


def load_default_eop() -> EOPSeries:
    """Load the EOP series configured through the environment.

    Reads the file named by ``EOPFRAMES_EOP_FILE`` in the format given by
    ``EOPFRAMES_EOP_FORMAT`` (default ``"standard"``).  When the variable
    is unset an empty series is returned and frames run without Earth
    orientation corrections.

    Returns:
        EOPSeries for the default frame context.
    """
    filepath = os.environ.get(EOP_FILE_ENV_VAR)
    if not filepath:
        logger.debug("%s is not set; using an empty EOP series", EOP_FILE_ENV_VAR)
        return empty_eop()
    return load_eop_from_file(filepath, os.environ.get(EOP_FORMAT_ENV_VAR, "standard"))


def load_cached_eop(
    filepath: str | Path | None = None,
    *,
    max_age_days: float = _DEFAULT_MAX_AGE_DAYS,
) -> EOPSeries:
    """Load EOP data from a local cache, downloading fresh data when stale.

    If the cached file at *filepath* is missing or older than
    *max_age_days*, a fresh copy of ``finals.all.iau2000.txt`` is
    downloaded from IERS.  If the download fails or the file cannot be
    parsed, an empty series is returned so this function never raises on
    network issues.

    Args:
        filepath: Path to the cached EOP file.  When ``None`` (the default),
            uses ``<cache_dir>/eop/finals.all.iau2000.txt``.
        max_age_days: Maximum acceptable age of the cached file in days.
            Defaults to 7.

    Returns:
        EOPSeries loaded from the cached (or freshly downloaded) file, or
        an empty series as a fallback.

    Examples:
        ```python
        from eopframes.eop import load_cached_eop

        # Uses default cache location and 7-day refresh
        eop = load_cached_eop()

        # Custom path and 1-day refresh
        eop = load_cached_eop("/tmp/eop_cache/finals.txt", max_age_days=1.0)
        ```
    """
    if filepath is None:
        filepath = get_eop_cache_dir() / STANDARD_FILENAME
    else:
        filepath = Path(filepath)

    if is_file_stale(filepath, max_age_days * 86400.0):
        try:
            download_standard_eop_file(filepath)
        except Exception:
            logger.warning(
                "Failed to download EOP data; falling back to an empty EOP series.",
                exc_info=True,
            )
            return empty_eop()

    try:
        return load_eop_from_file(filepath)
    except Exception:
        logger.warning(
            "Failed to parse cached EOP file %s; falling back to an empty EOP series.",
            filepath,
            exc_info=True,
        )
        return empty_eop()
