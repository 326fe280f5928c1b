"""Tests for calendar <-> Julian Date conversions and rendering."""

import pytest

from skyclock.time import (
    caldate_to_jd,
    caldate_to_mjd,
    format_jd,
    jd_to_caldate,
    jd_to_mjd,
    mjd_to_jd,
    validate_caldate,
)


def test_caldate_to_mjd():
    assert caldate_to_mjd(2000, 1, 1, 12, 0, 0.0) == 51544.5


def test_caldate_to_jd():
    assert caldate_to_jd(2000, 1, 1, 12, 0, 0.0) == 2451545.0


def test_caldate_to_jd_midnight():
    assert caldate_to_jd(2017, 1, 1) == 2457754.5


def test_jd_to_mjd():
    assert jd_to_mjd(2451545.0) == 51544.5


def test_mjd_to_jd():
    assert mjd_to_jd(51544.5) == 2451545.0


def test_jd_to_caldate_j2000():
    year, month, day, hour, minute, second = jd_to_caldate(2451545.0)
    assert (year, month, day, hour, minute) == (2000, 1, 1, 12, 0)
    assert second == pytest.approx(0.0, abs=1e-6)


def test_jd_to_caldate_midnight():
    year, month, day, hour, minute, second = jd_to_caldate(2451544.5)
    assert (year, month, day, hour, minute) == (2000, 1, 1, 0, 0)
    assert second == pytest.approx(0.0, abs=1e-6)


def test_jd_to_caldate_with_time():
    jd = caldate_to_jd(2018, 2, 23, 3, 5, 45.5)
    year, month, day, hour, minute, second = jd_to_caldate(jd)
    assert (year, month, day, hour, minute) == (2018, 2, 23, 3, 5)
    assert second == pytest.approx(45.5, abs=1e-4)


def test_jd_caldate_roundtrip():
    for date in [
        (1972, 1, 1, 0, 0, 0.0),
        (1999, 12, 31, 23, 59, 59.0),
        (2000, 2, 29, 6, 30, 15.25),
        (2024, 3, 20, 3, 6, 0.0),
        (2100, 7, 4, 18, 0, 1.0),
    ]:
        year, month, day, hour, minute, second = jd_to_caldate(caldate_to_jd(*date))
        assert (year, month, day) == date[:3]
        seconds_of_day = hour * 3600 + minute * 60 + second
        expected = date[3] * 3600 + date[4] * 60 + date[5]
        assert seconds_of_day == pytest.approx(expected, abs=1e-4)


def test_caldate_to_jd_february():
    """Day after February 28th in a leap and a common year."""
    assert caldate_to_jd(2024, 3, 1) - caldate_to_jd(2024, 2, 28) == 2.0
    assert caldate_to_jd(2023, 3, 1) - caldate_to_jd(2023, 2, 28) == 1.0


def test_jd_to_caldate_julian_calendar():
    """Dates before the Gregorian switchover use the Julian calendar."""
    assert jd_to_caldate(2299160.5)[:3] == (1582, 10, 15)
    assert jd_to_caldate(2299159.5)[:3] == (1582, 10, 4)


# ---------------------------------------------------------------------------
# validate_caldate
# ---------------------------------------------------------------------------


class TestValidateCaldate:
    def test_valid_date(self):
        validate_caldate(2024, 2, 29, 23, 59, 59.999)

    def test_leap_second_allowed(self):
        validate_caldate(2016, 12, 31, 23, 59, 60.5)

    @pytest.mark.parametrize(
        "components, message",
        [
            ((2024, 0, 1), "month"),
            ((2024, 13, 1), "month"),
            ((2023, 2, 29), "day"),
            ((2024, 4, 31), "day"),
            ((2024, 1, 0), "day"),
            ((2024, 1, 1, 24), "hour"),
            ((2024, 1, 1, 0, 60), "minute"),
            ((2024, 1, 1, 0, 0, 61.0), "second"),
            ((2024, 1, 1, 0, 0, -0.5), "second"),
            ((1582, 10, 15), "year"),
            ((1000, 1, 1), "year"),
        ],
    )
    def test_out_of_range(self, components, message):
        with pytest.raises(ValueError, match=message):
            validate_caldate(*components)


# ---------------------------------------------------------------------------
# format_jd
# ---------------------------------------------------------------------------


class TestFormatJD:
    def test_j2000(self):
        assert format_jd(2451545.0) == "2000-01-01 12:00:00.000"

    def test_midnight(self):
        assert format_jd(2457754.5) == "2017-01-01 00:00:00.000"

    def test_quarter_day(self):
        assert format_jd(2451544.75) == "2000-01-01 06:00:00.000"

    def test_separator(self):
        assert format_jd(2451545.0, "T") == "2000-01-01T12:00:00.000"

    def test_fraction_digits(self):
        """Sub-second values keep at most 8 digits."""
        text = format_jd(caldate_to_jd(2018, 2, 23, 3, 5, 45.5))
        assert text.startswith("2018-02-23 03:05:")
        fraction = text.split(".")[1]
        assert 3 <= len(fraction) <= 8
        assert float(text[17:]) == pytest.approx(45.5, abs=1e-4)

    def test_rounding_stays_in_day(self):
        """The last representable instant before midnight stays on the same date."""
        text = format_jd(2451544.5 - 2.0**-31)
        assert text.startswith("1999-12-31 23:59:59.9999")
