"""Parsers for IERS Earth Orientation Parameter data files.

Two formats are supported:

- the IERS standard format (``finals.all.iau2000.txt``), also known as
  Bulletin A/B format, with fixed column ranges;
- the IERS EOP 14 C04 format (``eopc04_IAU2000.62-now``), a
  whitespace-separated table of smoothed daily values.

Both parsers produce raw ``(mjd, xp, yp, ut1_utc, lod, dx, dy)`` tuples
with angles in radians, times in seconds and NaN for missing optional
fields, ready for :func:`~eopframes.eop.load_eop`.
"""

from __future__ import annotations

import math

from eopframes.constants import AS2RAD

RawEOPRecord = tuple[float, float, float, float, float, float, float]
"""``(mjd, xp [rad], yp [rad], ut1_utc [s], lod [s], dx [rad], dy [rad])``."""

# Column ranges for IERS standard format (0-indexed Python slices)
_MJD_RANGE = slice(6, 15)
_PM_X_RANGE = slice(17, 27)
_PM_Y_RANGE = slice(36, 46)
_UT1_UTC_RANGE = slice(58, 68)
_LOD_RANGE = slice(78, 86)
_DX_RANGE = slice(96, 106)
_DY_RANGE = slice(115, 125)
_STANDARD_LINE_LENGTH = 187

# Minimum token count of a C04 data line: YR MO DY MJD x y UT1-UTC LOD dX dY
_C04_MIN_TOKENS = 10


def _optional(text: str, scale: float) -> float:
    try:
        return float(text.strip()) * scale
    except ValueError:
        return math.nan


def parse_standard_line(line: str) -> RawEOPRecord | None:
    """Parse a single line from an IERS standard format EOP file.

    Lines shorter than 187 characters are padded with spaces (prediction
    lines may have trailing whitespace trimmed). Lines longer than 187
    characters or lines where required fields (MJD, PM_X, PM_Y, UT1-UTC)
    cannot be parsed are skipped (returns None).

    Args:
        line: A single line from the IERS standard format file.

    Returns:
        Raw record tuple, or None if the line cannot be parsed.
    """
    if len(line) > _STANDARD_LINE_LENGTH:
        return None

    line = line.ljust(_STANDARD_LINE_LENGTH)

    try:
        mjd = float(line[_MJD_RANGE].strip())
        xp = float(line[_PM_X_RANGE].strip()) * AS2RAD
        yp = float(line[_PM_Y_RANGE].strip()) * AS2RAD
        ut1_utc = float(line[_UT1_UTC_RANGE].strip())
    except ValueError:
        return None

    lod = _optional(line[_LOD_RANGE], 1.0e-3)  # ms -> s
    dx = _optional(line[_DX_RANGE], 1.0e-3 * AS2RAD)  # mas -> rad
    dy = _optional(line[_DY_RANGE], 1.0e-3 * AS2RAD)  # mas -> rad

    return mjd, xp, yp, ut1_utc, lod, dx, dy


def parse_c04_line(line: str) -> RawEOPRecord | None:
    """Parse a single data line from an IERS EOP 14 C04 file.

    Header and comment lines (anything whose first four tokens are not the
    integer year, month, day and MJD) are skipped (returns None).

    Args:
        line: A single line from the C04 file.

    Returns:
        Raw record tuple, or None if the line is not a data line.
    """
    tokens = line.split()
    if len(tokens) < _C04_MIN_TOKENS:
        return None

    try:
        int(tokens[0])
        int(tokens[1])
        int(tokens[2])
        mjd = float(int(tokens[3]))
        xp = float(tokens[4]) * AS2RAD
        yp = float(tokens[5]) * AS2RAD
        ut1_utc = float(tokens[6])
        lod = float(tokens[7])
        dx = float(tokens[8]) * AS2RAD
        dy = float(tokens[9]) * AS2RAD
    except ValueError:
        return None

    return mjd, xp, yp, ut1_utc, lod, dx, dy


def _parse_file(filepath: str, parse_line) -> list[RawEOPRecord]:
    records: list[RawEOPRecord] = []
    with open(filepath) as f:
        for line in f:
            result = parse_line(line.rstrip("\n"))
            if result is not None:
                records.append(result)

    if not records:
        raise ValueError(f"No valid EOP data found in {filepath}")

    return records


def parse_standard_file(filepath: str) -> list[RawEOPRecord]:
    """Parse an entire IERS standard format EOP file.

    Lines that cannot be parsed (e.g. empty prediction lines at the
    end of the file) are silently skipped.

    Args:
        filepath: Path to the IERS standard format file.

    Returns:
        List of raw record tuples in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no valid lines were parsed.
    """
    return _parse_file(filepath, parse_standard_line)


def parse_c04_file(filepath: str) -> list[RawEOPRecord]:
    """Parse an entire IERS EOP 14 C04 file.

    Args:
        filepath: Path to the C04 file.

    Returns:
        List of raw record tuples in file order.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no valid lines were parsed.
    """
    return _parse_file(filepath, parse_c04_line)
