"""Tests for the Earth Orientation Parameters (EOP) module."""

from __future__ import annotations

import math

import jax.numpy as jnp
import pytest

from eopframes.constants import AS2RAD, SECONDS_PER_DAY
from eopframes.eop import (
    NULL_CORRECTION,
    Bracket,
    EOPSeries,
    EarthOrientationEntry,
    empty_eop,
    get_pm,
    get_ut1_utc,
    interpolate_pole,
    interpolate_ut1_utc,
    load_default_eop,
    load_eop,
    load_eop_from_file,
    parse_c04_line,
    parse_standard_line,
    static_eop,
)
from eopframes.epoch import Epoch


# Daily series: ut1 falls by 1 ms per day, xp rises by 1 mas per day
_RECORDS = [
    (59000.0 + i, (0.1 + 0.001 * i) * AS2RAD, (0.3 - 0.002 * i) * AS2RAD, -0.2 - 0.001 * i)
    for i in range(10)
]


@pytest.fixture
def eop() -> EOPSeries:
    return load_eop(_RECORDS)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestLoadEOP:
    def test_entry_count(self, eop):
        assert len(eop) == 10
        assert eop.mjd_min == 59000.0
        assert eop.mjd_max == 59009.0

    def test_entry_date_is_midnight_of_mjd(self, eop):
        assert eop[0].date == Epoch.from_mjd(59000.0)
        assert eop[0].date.seconds_since_j2000() == (59000.0 - 51544.5) * SECONDS_PER_DAY
        assert eop[0].date == Epoch(2020, 5, 31)

    def test_dates_array(self, eop):
        assert eop.dates.shape == (10,)
        assert eop.dates.dtype == jnp.float64
        assert bool(jnp.all(jnp.diff(eop.dates) == SECONDS_PER_DAY))

    def test_unsorted_input_is_sorted(self):
        series = load_eop(list(reversed(_RECORDS)))
        assert [e.mjd for e in series] == [r[0] for r in _RECORDS]

    def test_duplicate_dates_raise(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            load_eop([_RECORDS[0], _RECORDS[1], _RECORDS[1]])

    def test_non_increasing_entries_raise(self):
        a = EarthOrientationEntry(Epoch.from_mjd(59001.0), 59001.0, 0.0, 0.0, 0.0)
        b = EarthOrientationEntry(Epoch.from_mjd(59000.0), 59000.0, 0.0, 0.0, 0.0)
        with pytest.raises(ValueError):
            EOPSeries([a, b])

    def test_bad_record_length(self):
        with pytest.raises(ValueError, match="4 to 7 fields"):
            load_eop([(59000.0, 0.0, 0.0)])

    def test_optional_fields(self):
        series = load_eop([(59000.0, 0.0, 0.0, 0.1, 0.001, 1e-9, 2e-9)])
        entry = series[0]
        assert entry.lod == 0.001
        assert entry.dx == 1e-9
        assert entry.dy == 2e-9

    def test_missing_optional_fields_are_nan(self, eop):
        assert math.isnan(eop[0].lod)
        assert math.isnan(eop[0].dx)
        assert math.isnan(eop[0].dy)

    def test_empty(self):
        series = empty_eop()
        assert len(series) == 0
        assert series.is_empty()
        assert series.mjd_min is None
        assert repr(series) == "EOPSeries(empty)"

    def test_static(self):
        series = static_eop(xp=1e-6, yp=2e-6, ut1_utc=0.1)
        assert len(series) == 2
        assert get_ut1_utc(series, 59569.3) == pytest.approx(0.1, abs=1e-15)
        xp, yp = get_pm(series, 59569.3)
        assert xp == pytest.approx(1e-6, abs=1e-20)
        assert yp == pytest.approx(2e-6, abs=1e-20)


# ---------------------------------------------------------------------------
# Bracket search
# ---------------------------------------------------------------------------


class TestLookup:
    def test_interior(self, eop):
        bracket = eop.lookup(Epoch.from_mjd(59003.25))
        assert bracket.previous.mjd == 59003.0
        assert bracket.next.mjd == 59004.0

    def test_exact_interior_date(self, eop):
        bracket = eop.lookup(Epoch.from_mjd(59004.0))
        assert bracket.previous.mjd == 59003.0
        assert bracket.next.mjd == 59004.0

    def test_exact_first_date(self, eop):
        bracket = eop.lookup(Epoch.from_mjd(59000.0))
        assert bracket == Bracket(eop[0], eop[1])

    def test_exact_last_date(self, eop):
        bracket = eop.lookup(Epoch.from_mjd(59009.0))
        assert bracket == Bracket(eop[8], eop[9])

    def test_before_first(self, eop):
        assert eop.lookup(Epoch.from_mjd(58999.5)) is None

    def test_after_last(self, eop):
        assert eop.lookup(Epoch.from_mjd(59009.5)) is None

    def test_empty_series(self):
        assert empty_eop().lookup(Epoch.from_mjd(59000.0)) is None

    def test_single_entry(self):
        series = load_eop([_RECORDS[0]])
        assert series.lookup(Epoch.from_mjd(59000.0)) is None

    def test_fast_path_reuses_bracket(self, eop):
        bracket = eop.lookup(Epoch.from_mjd(59003.25))
        assert eop.lookup(Epoch.from_mjd(59003.75), bracket) is bracket

    def test_stale_bracket_is_replaced(self, eop):
        bracket = eop.lookup(Epoch.from_mjd(59003.25))
        moved = eop.lookup(Epoch.from_mjd(59006.5), bracket)
        assert moved is not bracket
        assert moved.previous.mjd == 59006.0

    def test_bracket_contains_is_right_open(self, eop):
        bracket = eop.lookup(Epoch.from_mjd(59003.25))
        assert bracket.contains(Epoch.from_mjd(59003.0))
        assert not bracket.contains(Epoch.from_mjd(59004.0))

    def test_sparse_series(self):
        # entries every five days
        series = load_eop([(59000.0 + 5 * i, 0.0, 0.0, float(i)) for i in range(6)])
        bracket = series.lookup(Epoch.from_mjd(59012.0))
        assert bracket.previous.mjd == 59010.0
        assert bracket.next.mjd == 59015.0


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------


class TestInterpolation:
    def test_exact_dates_return_entry_values(self, eop):
        for entry in eop:
            assert get_ut1_utc(eop, entry.date) == pytest.approx(entry.ut1_utc, abs=1e-15)
            xp, yp = get_pm(eop, entry.date)
            assert xp == pytest.approx(entry.xp, abs=1e-20)
            assert yp == pytest.approx(entry.yp, abs=1e-20)

    def test_midpoint(self, eop):
        value = get_ut1_utc(eop, 59002.5)
        assert value == pytest.approx((eop[2].ut1_utc + eop[3].ut1_utc) / 2, abs=1e-15)

    def test_weighting_formula(self, eop):
        date = Epoch.from_mjd(59005.0) + 3600.0
        bracket = eop.lookup(date)
        dt_p = date - bracket.previous.date
        dt_n = bracket.next.date - date
        expected = (dt_p * bracket.next.ut1_utc + dt_n * bracket.previous.ut1_utc) / (dt_p + dt_n)
        assert interpolate_ut1_utc(bracket, date) == expected

    def test_pole_weighting(self, eop):
        # a quarter of the way from 59001 to 59002
        xp, yp = get_pm(eop, 59001.25)
        assert xp == pytest.approx(0.75 * eop[1].xp + 0.25 * eop[2].xp, abs=1e-20)
        assert yp == pytest.approx(0.75 * eop[1].yp + 0.25 * eop[2].yp, abs=1e-20)

    def test_linear_in_time(self, eop):
        start = Epoch.from_mjd(59003.0)
        values = [get_ut1_utc(eop, start + f * SECONDS_PER_DAY) for f in (0.1, 0.2, 0.3)]
        assert values[1] - values[0] == pytest.approx(values[2] - values[1], abs=1e-15)

    def test_out_of_coverage_is_neutral(self, eop):
        assert get_ut1_utc(eop, 58000.0) == 0.0
        assert get_pm(eop, 60000.0) == NULL_CORRECTION

    def test_no_bracket(self):
        date = Epoch(2020, 1, 1)
        assert interpolate_ut1_utc(None, date) == 0.0
        assert interpolate_pole(None, date) is NULL_CORRECTION

    def test_accepts_epoch_or_mjd(self, eop):
        assert get_ut1_utc(eop, 59002.5) == get_ut1_utc(eop, Epoch.from_mjd(59002.5))


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------


class TestParseStandardLine:
    def test_required_fields(self, standard_line):
        line = standard_line(54195.0, 0.034928, 0.483316, -0.0720737)
        mjd, xp, yp, ut1_utc, lod, dx, dy = parse_standard_line(line)
        assert mjd == 54195.0
        assert xp == pytest.approx(0.034928 * AS2RAD, rel=1e-12)
        assert yp == pytest.approx(0.483316 * AS2RAD, rel=1e-12)
        assert ut1_utc == pytest.approx(-0.0720737, rel=1e-12)
        assert math.isnan(lod)
        assert math.isnan(dx)
        assert math.isnan(dy)

    def test_optional_fields(self, standard_line):
        line = standard_line(54195.0, 0.03, 0.48, -0.07, lod=0.6542, dx=0.175, dy=-0.226)
        _, _, _, _, lod, dx, dy = parse_standard_line(line)
        assert lod == pytest.approx(0.6542e-3, rel=1e-12)
        assert dx == pytest.approx(0.175e-3 * AS2RAD, rel=1e-12)
        assert dy == pytest.approx(-0.226e-3 * AS2RAD, rel=1e-12)

    def test_too_long_line(self):
        assert parse_standard_line("x" * 200) is None

    def test_missing_ut1(self, standard_line):
        assert parse_standard_line(standard_line(54195.0, 0.0, 0.0, 0.0)[:50]) is None

    def test_blank_line(self):
        assert parse_standard_line("") is None


class TestParseC04Line:
    def test_data_line(self, c04_line):
        mjd, xp, yp, ut1_utc, lod, dx, dy = parse_c04_line(
            c04_line(54195, 0.034928, 0.483316, -0.0720737, 0.0006542, 0.000175, -0.000226)
        )
        assert mjd == 54195.0
        assert xp == pytest.approx(0.034928 * AS2RAD, rel=1e-12)
        assert yp == pytest.approx(0.483316 * AS2RAD, rel=1e-12)
        assert ut1_utc == pytest.approx(-0.0720737, rel=1e-12)
        assert lod == pytest.approx(0.0006542, rel=1e-12)
        assert dx == pytest.approx(0.000175 * AS2RAD, rel=1e-12)
        assert dy == pytest.approx(-0.000226 * AS2RAD, rel=1e-12)

    @pytest.mark.parametrize("line", [
        "                          EOP (IERS) 14 C04 TIME SERIES  consistent with ITRF 2014 - sampled at 0h UTC",
        "      Date      MJD      x          y        UT1-UTC       LOD         dX        dY        x Err     y Err   UT1-UTC Err  LOD Err     dX Err       dY Err  ",
        "     (0h UTC)",
        "",
    ])
    def test_header_lines(self, line):
        assert parse_c04_line(line) is None


# ---------------------------------------------------------------------------
# File loading
# ---------------------------------------------------------------------------


class TestLoadFromFile:
    def test_standard_file(self, write_standard_eop):
        path = write_standard_eop(
            [(54195.0, 0.0349, 0.4833, -0.0720), (54196.0, 0.0351, 0.4820, -0.0727)],
        )
        series = load_eop_from_file(path)
        assert len(series) == 2
        assert series[1].ut1_utc == pytest.approx(-0.0727)

    def test_standard_file_skips_empty_predictions(self, tmp_path, standard_line):
        path = tmp_path / "finals.txt"
        path.write_text(
            standard_line(54195.0, 0.0349, 0.4833, -0.0720) + "\n" + "07 4 6 54196.00\n",
            encoding="utf-8",
        )
        assert len(load_eop_from_file(path)) == 1

    def test_c04_file(self, write_c04_eop):
        path = write_c04_eop(
            [(54195, 0.0349, 0.4833, -0.0720), (54196, 0.0351, 0.4820, -0.0727)],
        )
        series = load_eop_from_file(path, format="c04")
        assert [e.mjd for e in series] == [54195.0, 54196.0]
        assert series[0].xp == pytest.approx(0.0349 * AS2RAD)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_eop_from_file(tmp_path / "nope.txt")

    def test_unknown_format(self, tmp_path):
        with pytest.raises(ValueError, match="Unknown EOP file format"):
            load_eop_from_file(tmp_path / "nope.txt", format="bulletin-b")

    def test_no_valid_data(self, tmp_path):
        path = tmp_path / "garbage.txt"
        path.write_text("not eop data\n" * 5, encoding="utf-8")
        with pytest.raises(ValueError, match="No valid EOP data"):
            load_eop_from_file(path)


class TestLoadDefaultEOP:
    def test_unset_is_empty(self):
        assert load_default_eop().is_empty()

    def test_env_file(self, write_c04_eop, monkeypatch):
        path = write_c04_eop([(54195, 0.0349, 0.4833, -0.0720)])
        monkeypatch.setenv("EOPFRAMES_EOP_FILE", str(path))
        monkeypatch.setenv("EOPFRAMES_EOP_FORMAT", "c04")
        assert len(load_default_eop()) == 1
