"""Harmonic (Poisson) series of the IERS Conventions 2003, tables 5.2a-c.

A series is a polynomial in ``t`` (Julian centuries since J2000.0) whose
degree-``j`` coefficient is augmented by a sum of periodic terms::

    value(t) = sum_j t^j * (p_j + sum_i [a_s sin(ARG_i) + a_c cos(ARG_i)])

where each ``ARG_i`` is an integer combination of the 14 fundamental
arguments (see :mod:`eopframes.series._fundamental`).

Tables are read from text resources in the IERS layout:

- free header lines, up to a line starting with ``Polynomial part``;
- the polynomial itself on the next non-blank line, e.g.
  ``-16616.99 + 2004191742.88 t - 427219.05 t^2 ...``;
- one block per degree, opened by ``j = <degree>  Number of terms = <n>``
  and followed by ``n`` rows of ``i a_s a_c`` and 14 integer multipliers.

All amplitudes are in microarcseconds and are converted to radians at load
time.  Loading failures raise :class:`~eopframes.errors.InitializationError`.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
import re
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import NamedTuple

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from eopframes.config import get_dtype
from eopframes.constants import UAS2RAD
from eopframes.errors import InitializationError
from eopframes.series._fundamental import BodiesElements

logger = logging.getLogger(__name__)

SERIES_DIR_ENV_VAR = "EOPFRAMES_SERIES_DIR"

X_SERIES_FILE = "tab5.2a.txt"
Y_SERIES_FILE = "tab5.2b.txt"
SXY2_SERIES_FILE = "tab5.2c.txt"

_BUNDLED_PACKAGE = "eopframes.data.iers2003"

N_ARGUMENTS = 14
_ROW_TOKENS = 3 + N_ARGUMENTS

_POLYNOMIAL_MARKER = "Polynomial part"
_DEGREE_HEADER = re.compile(r"^\s*j\s*=\s*(\d+)\s+Number\s+of\s+terms\s*=\s*(\d+)\s*$")
_POLYNOMIAL_TERM = re.compile(r"([+-]?)\s*(\d+(?:\.\d*)?(?:[eE][+-]?\d+)?)(\s*t(?:\s*\^\s*(\d+))?)?")


class SeriesTerms(NamedTuple):
    """Periodic terms attached to one power of ``t``.

    Attributes:
        multipliers: Integer argument multipliers, shape ``(N, 14)``,
            stored as floats for the matrix product with the arguments.
        amplitudes: ``(a_s, a_c)`` pairs in radians, shape ``(N, 2)``.
    """

    multipliers: jax.Array
    amplitudes: jax.Array


class HarmonicSeries:
    """A polynomial-plus-periodic series evaluated with Horner's scheme.

    Instances are immutable once built and can be shared freely.

    Args:
        polynomial: Polynomial coefficients in radians, lowest degree first.
        terms: Periodic terms per degree, lowest degree first.
        name: Identifier of the resource the series came from.
    """

    __slots__ = ('_polynomial', '_terms', '_name')

    def __init__(self, polynomial: ArrayLike, terms: Iterable[SeriesTerms] = (),
                 name: str = "<series>") -> None:
        self._polynomial = jnp.asarray(polynomial, dtype=get_dtype())
        self._terms = tuple(terms)
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def polynomial(self) -> jax.Array:
        """Polynomial coefficients [rad], lowest degree first."""
        return self._polynomial

    @property
    def terms(self) -> tuple[SeriesTerms, ...]:
        """Periodic terms per degree."""
        return self._terms

    @property
    def degree(self) -> int:
        """Highest power of ``t`` appearing in the series."""
        return max(self._polynomial.shape[0], len(self._terms)) - 1

    def n_terms(self) -> int:
        """Total number of periodic terms over all degrees."""
        return sum(int(g.amplitudes.shape[0]) for g in self._terms)

    def value(self, t: ArrayLike, elements: BodiesElements) -> jax.Array:
        """Evaluate the series.

        Args:
            t: Julian centuries since J2000.0.
            elements: Fundamental arguments at ``t``.

        Returns:
            Series value [rad].
        """
        t = jnp.asarray(t, dtype=get_dtype())
        args = elements.as_array()
        n_poly = self._polynomial.shape[0]

        result = jnp.zeros((), dtype=get_dtype())
        for j in range(self.degree, -1, -1):
            coefficient = self._polynomial[j] if j < n_poly else 0.0
            if j < len(self._terms):
                group = self._terms[j]
                phase = group.multipliers @ args
                coefficient = coefficient + jnp.sum(
                    group.amplitudes[:, 0] * jnp.sin(phase)
                    + group.amplitudes[:, 1] * jnp.cos(phase)
                )
            result = result * t + coefficient
        return result

    def __repr__(self) -> str:
        return f"HarmonicSeries(name={self._name!r}, degree={self.degree}, terms={self.n_terms()})"


class CIPSeries(NamedTuple):
    """The three IERS 2003 series locating the CIP and the CIO.

    Attributes:
        x: X coordinate of the CIP in the GCRS.
        y: Y coordinate of the CIP in the GCRS.
        sxy2: The quantity ``s + XY/2``.
    """

    x: HarmonicSeries
    y: HarmonicSeries
    sxy2: HarmonicSeries


def _parse_polynomial(line: str, resource: str) -> list[float]:
    text = line.split("=", 1)[1] if "=" in line else line
    text = text.strip()

    coefficients: dict[int, float] = {}
    position = 0
    for match in _POLYNOMIAL_TERM.finditer(text):
        if text[position:match.start()].strip():
            break
        sign, number, has_t, power = match.groups()
        degree = 0 if not has_t else (int(power) if power else 1)
        if degree in coefficients:
            raise InitializationError(resource, f"duplicate t^{degree} coefficient in polynomial part")
        value = float(number)
        coefficients[degree] = -value if sign == "-" else value
        position = match.end()

    if not coefficients or text[position:].strip():
        raise InitializationError(resource, f"cannot parse polynomial part: {line.strip()!r}")

    return [coefficients.get(j, 0.0) for j in range(max(coefficients) + 1)]


def _parse_row(line: str, tokens: list[str], resource: str, lineno: int) -> tuple[list[float], list[float]]:
    if len(tokens) != _ROW_TOKENS:
        raise InitializationError(
            resource,
            f"line {lineno}: expected {_ROW_TOKENS} fields, got {len(tokens)}: {line.strip()!r}",
        )
    try:
        a_s = float(tokens[1])
        a_c = float(tokens[2])
        multipliers = [float(int(tok)) for tok in tokens[3:]]
    except ValueError:
        raise InitializationError(
            resource, f"line {lineno}: malformed data line: {line.strip()!r}"
        ) from None
    return multipliers, [a_s, a_c]


def _is_data_row(tokens: list[str]) -> bool:
    return bool(tokens) and tokens[0].isdigit()


def parse_series(lines: Iterable[str], resource: str = "<series>") -> HarmonicSeries:
    """Parse a harmonic series table.

    Args:
        lines: Text lines of the table.
        resource: Identifier used in error messages and as the series name.

    Returns:
        HarmonicSeries with all amplitudes converted to radians.

    Raises:
        InitializationError: If the polynomial part is missing or
            malformed, a data line is malformed, a degree block is out of
            order, or a block's term count does not match its header.
    """
    polynomial: list[float] | None = None
    waiting_for_polynomial = False
    groups: list[tuple[list[list[float]], list[list[float]]]] = []
    expected = 0

    def close_group() -> None:
        if groups and len(groups[-1][0]) != expected:
            raise InitializationError(
                resource,
                f"degree {len(groups) - 1} declares {expected} terms but {len(groups[-1][0])} were read",
            )

    for lineno, line in enumerate(lines, start=1):
        stripped = line.strip()
        if polynomial is None:
            if waiting_for_polynomial and stripped:
                polynomial = _parse_polynomial(stripped, resource)
            elif stripped.startswith(_POLYNOMIAL_MARKER):
                waiting_for_polynomial = True
            continue

        header = _DEGREE_HEADER.match(line)
        if header:
            close_group()
            degree, expected = int(header.group(1)), int(header.group(2))
            if degree != len(groups):
                raise InitializationError(
                    resource,
                    f"line {lineno}: degree {degree} found where degree {len(groups)} was expected",
                )
            groups.append(([], []))
            continue

        tokens = stripped.split()
        if not groups or not _is_data_row(tokens):
            continue
        multipliers, amplitudes = _parse_row(line, tokens, resource, lineno)
        groups[-1][0].append(multipliers)
        groups[-1][1].append(amplitudes)

    if polynomial is None:
        raise InitializationError(resource, "missing polynomial part")
    close_group()

    dtype = get_dtype()
    terms = [
        SeriesTerms(
            multipliers=jnp.array(m, dtype=dtype).reshape(-1, N_ARGUMENTS),
            amplitudes=jnp.array(a, dtype=dtype).reshape(-1, 2) * UAS2RAD,
        )
        for m, a in groups
    ]
    series = HarmonicSeries(jnp.array(polynomial, dtype=dtype) * UAS2RAD, terms, name=resource)
    logger.debug("Loaded %s: degree %d, %d periodic terms", resource, series.degree, series.n_terms())
    return series


def load_series(name: str, directory: str | Path | None = None) -> HarmonicSeries:
    """Load one harmonic series table.

    Args:
        name: File name of the table (e.g. ``"tab5.2a.txt"``).
        directory: Directory to read it from.  When ``None`` the table
            bundled with the package is used.

    Returns:
        Parsed HarmonicSeries.

    Raises:
        InitializationError: If the table cannot be found, read or parsed.
    """
    if directory is not None:
        source = Path(directory) / name
        resource = str(source)
    else:
        source = importlib.resources.files(_BUNDLED_PACKAGE).joinpath(name)
        resource = f"{_BUNDLED_PACKAGE}/{name}"

    try:
        text = source.read_text(encoding="utf-8")
    except OSError as err:
        raise InitializationError(resource, f"cannot read resource ({err})") from err

    return parse_series(text.splitlines(), resource)


def load_cip_series(directory: str | Path | None = None) -> CIPSeries:
    """Load the X, Y and ``s + XY/2`` tables from *directory*.

    Args:
        directory: Directory holding ``tab5.2a.txt``, ``tab5.2b.txt`` and
            ``tab5.2c.txt``.  When ``None`` the bundled tables are used.

    Returns:
        CIPSeries with the three parsed tables.

    Raises:
        InitializationError: If any table cannot be loaded.
    """
    return CIPSeries(
        x=load_series(X_SERIES_FILE, directory),
        y=load_series(Y_SERIES_FILE, directory),
        sxy2=load_series(SXY2_SERIES_FILE, directory),
    )


_lock = threading.Lock()
_shared: CIPSeries | None = None


def load_iers2003_series() -> CIPSeries:
    """Return the process-wide IERS 2003 series, loading them on first call.

    The tables come from ``$EOPFRAMES_SERIES_DIR`` when that variable is
    set, otherwise from the bundled tables.  Loading happens at
    most once, even when several threads call this concurrently; later
    calls return the same object.

    Returns:
        Shared CIPSeries.

    Raises:
        InitializationError: If a table cannot be loaded.  The next call
            retries.
    """
    global _shared
    if _shared is None:
        with _lock:
            if _shared is None:
                directory = os.environ.get(SERIES_DIR_ENV_VAR) or None
                logger.debug("Loading IERS 2003 series from %s", directory or _BUNDLED_PACKAGE)
                _shared = load_cip_series(directory)
    return _shared
