import math

import pytest

from eopframes.constants import MJD2000, SECONDS_PER_DAY
from eopframes.epoch import J2000_EPOCH, Epoch

# float64 seconds survive the calendar round trip to well below a millisecond
_SEC_TOL = 1e-3


# ──────────────────────────────────────────────
# Construction: date components
# ──────────────────────────────────────────────


class TestEpochDateConstruction:
    def test_epoch_from_date(self):
        epc = Epoch(2000, 1, 1, 12, 0, 0.0)
        assert epc.seconds_since_j2000() == 0.0
        assert epc == J2000_EPOCH

    def test_epoch_from_date_defaults(self):
        epc = Epoch(2000, 1, 1)
        year, month, day, hour, minute, second = epc.caldate()
        assert (year, month, day, hour, minute) == (2000, 1, 1, 0, 0)
        assert second == pytest.approx(0.0, abs=_SEC_TOL)
        assert epc.seconds_since_j2000() == -43200.0

    def test_epoch_from_date_with_time(self):
        epc = Epoch(2024, 3, 15, 6, 30, 45.0)
        year, month, day, hour, minute, second = epc.caldate()
        assert (year, month, day, hour, minute) == (2024, 3, 15, 6, 30)
        assert second == pytest.approx(45.0, abs=_SEC_TOL)

    def test_epoch_from_date_fractional_second(self):
        epc = Epoch(2020, 6, 15, 10, 30, 15.123)
        year, month, day, hour, minute, second = epc.caldate()
        assert (year, month, day, hour, minute) == (2020, 6, 15, 10, 30)
        assert second == pytest.approx(15.123, abs=_SEC_TOL)

    def test_sub_second_resolution(self):
        a = Epoch(2020, 6, 15, 10, 30, 15.0)
        b = Epoch(2020, 6, 15, 10, 30, 15.000001)
        assert b - a == pytest.approx(1e-6, abs=1e-10)

    def test_sub_second_resolution_far_from_j2000(self):
        a = Epoch(2090, 12, 31, 23, 59, 59.0)
        assert (a + 1e-7) - a == pytest.approx(1e-7, abs=1e-11)
        assert (a + 2e-6) > (a + 1e-6)

    def test_seconds_of_day_normalized(self):
        epc = Epoch(2020, 6, 15, 23, 59, 60.0)
        assert epc == Epoch(2020, 6, 16)
        assert 0.0 <= epc._seconds < SECONDS_PER_DAY

    def test_mjd(self):
        assert Epoch(2018, 1, 1).mjd() == 58119.0
        assert Epoch(2000, 1, 1, 12).mjd() == MJD2000

    def test_invalid_arg_count(self):
        with pytest.raises(ValueError):
            Epoch(2000, 1)

    def test_invalid_single_arg(self):
        with pytest.raises(ValueError):
            Epoch(1.5)


# ──────────────────────────────────────────────
# Construction: string and alternative constructors
# ──────────────────────────────────────────────


class TestEpochStringConstruction:
    def test_epoch_from_string_date_only(self):
        assert Epoch("2018-01-01") == Epoch(2018, 1, 1)

    def test_epoch_from_string_datetime(self):
        assert Epoch("2018-01-01T12:00:00Z") == Epoch(2018, 1, 1, 12, 0, 0.0)

    def test_epoch_from_string_fractional(self):
        epc = Epoch("2018-01-01T12:00:00.250Z")
        assert epc - Epoch(2018, 1, 1, 12) == pytest.approx(0.25, abs=1e-9)

    def test_epoch_from_string_invalid(self):
        with pytest.raises(ValueError, match="ISO 8601"):
            Epoch("2018/01/01")

    def test_copy_constructor(self):
        epc = Epoch(2018, 1, 1)
        assert Epoch(epc) == epc


class TestEpochAlternativeConstructors:
    def test_from_mjd(self):
        assert Epoch.from_mjd(MJD2000) == J2000_EPOCH
        assert Epoch.from_mjd(58119.0) == Epoch(2018, 1, 1)

    def test_from_seconds(self):
        epc = Epoch.from_seconds(SECONDS_PER_DAY)
        assert epc == Epoch(2000, 1, 2, 12)

    def test_from_unix(self):
        assert Epoch.from_unix(0.0).mjd() == 40587.0
        assert Epoch.from_unix(946728000.0) == J2000_EPOCH


# ──────────────────────────────────────────────
# Arithmetic and comparison
# ──────────────────────────────────────────────


class TestEpochArithmetic:
    def test_add_seconds(self):
        epc = J2000_EPOCH + 60.0
        assert isinstance(epc, Epoch)
        assert epc.seconds_since_j2000() == 60.0

    def test_sub_seconds(self):
        epc = J2000_EPOCH - 60.0
        assert isinstance(epc, Epoch)
        assert epc.seconds_since_j2000() == -60.0

    def test_difference(self):
        assert Epoch(2000, 1, 2, 12) - J2000_EPOCH == SECONDS_PER_DAY

    def test_comparisons(self):
        a = Epoch(2020, 1, 1)
        b = a + 1.0
        assert a < b
        assert a <= b
        assert b > a
        assert b >= a
        assert a != b
        assert a == Epoch(2020, 1, 1)

    def test_comparison_with_other_type(self):
        assert (Epoch(2020, 1, 1) == 5) is False

    def test_hashable(self):
        cache = {Epoch(2020, 1, 1): "x"}
        assert cache[Epoch("2020-01-01")] == "x"


class TestEpochStringRepresentation:
    def test_str(self):
        assert str(Epoch(2018, 1, 1, 12)) == "2018-01-01T12:00:00.000Z"

    def test_repr(self):
        assert repr(J2000_EPOCH) == "Epoch(_days=0, _seconds=0.0)"

    def test_caldate_is_python_types(self):
        year, month, day, hour, minute, second = Epoch(2024, 2, 29, 23, 59, 59.5).caldate()
        assert isinstance(year, int)
        assert isinstance(second, float)
        assert (year, month, day, hour, minute) == (2024, 2, 29, 23, 59)
        assert math.isclose(second, 59.5, abs_tol=_SEC_TOL)
