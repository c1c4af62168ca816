import jax.numpy as jnp
import pytest

from eopframes.config import set_dtype
from eopframes.frames import set_default_context


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that need single precision override it locally.
    """
    set_dtype(jnp.float64)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch):
    """Keep user EOP, cache and series settings and the default frame context out of tests."""
    monkeypatch.delenv("EOPFRAMES_EOP_FILE", raising=False)
    monkeypatch.delenv("EOPFRAMES_EOP_FORMAT", raising=False)
    monkeypatch.delenv("EOPFRAMES_SERIES_DIR", raising=False)
    monkeypatch.delenv("EOPFRAMES_CACHE", raising=False)
    set_default_context(None)
    yield
    set_default_context(None)


# ---------------------------------------------------------------------------
# Synthetic IERS EOP files
# ---------------------------------------------------------------------------


def _standard_line(mjd, xp, yp, ut1_utc, lod=None, dx=None, dy=None):
    """Build a finals.all.iau2000-style line (pole in arcsec, LOD in ms, dX/dY in mas)."""
    chars = [" "] * 187

    def put(start, text):
        chars[start:start + len(text)] = list(text)

    put(0, "070405")
    put(6, f"{mjd:9.2f}")
    put(16, "I")
    put(17, f"{xp:10.6f}")
    put(36, f"{yp:10.6f}")
    put(57, "I")
    put(58, f"{ut1_utc:10.7f}")
    if lod is not None:
        put(78, f"{lod:8.4f}")
    if dx is not None:
        put(96, f"{dx:10.3f}")
    if dy is not None:
        put(115, f"{dy:10.3f}")
    return "".join(chars).rstrip()


def _c04_line(mjd, xp, yp, ut1_utc, lod=0.0, dx=0.0, dy=0.0):
    """Build an EOP 14 C04 data line (angles in arcsec, times in s)."""
    return (
        f"2007   4   5  {mjd:5d} {xp:10.6f} {yp:10.6f} {ut1_utc:11.7f} {lod:11.7f}"
        f" {dx:10.6f} {dy:10.6f}   0.000030   0.000030  0.0000050  0.0000060   0.000060   0.000060"
    )


_C04_HEADER = [
    "                          EOP (IERS) 14 C04 TIME SERIES  consistent with ITRF 2014 - sampled at 0h UTC",
    "",
    "      Date      MJD      x          y        UT1-UTC       LOD         dX        dY        x Err     y Err   UT1-UTC Err  LOD Err     dX Err       dY Err  ",
    "     (0h UTC)",
    "",
]


@pytest.fixture
def standard_line():
    return _standard_line


@pytest.fixture
def c04_line():
    return _c04_line


@pytest.fixture
def write_standard_eop(tmp_path):
    """Write ``(mjd, xp [as], yp [as], ut1_utc [s])`` records as a standard-format file."""

    def _write(records, name="finals.all.iau2000.txt"):
        path = tmp_path / name
        path.write_text("\n".join(_standard_line(*r) for r in records) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def write_c04_eop(tmp_path):
    """Write ``(mjd, xp [as], yp [as], ut1_utc [s])`` records as a C04 file."""

    def _write(records, name="eopc04_IAU2000.62-now"):
        path = tmp_path / name
        lines = _C04_HEADER + [_c04_line(*r) for r in records]
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write
