"""Parser for the IERS ``finals`` Earth Orientation Parameter format.

Supports the fixed-column Bulletin A layout used by ``finals.data`` and
``finals.all`` (IAU1980 nutation). Column ranges below are 0-indexed Python
slices of the 1-based columns in the IERS format description
(https://datacenter.iers.org/data/latestVersion/readme.finals.txt).

Polar motion is kept in arcseconds, UT1-UTC in seconds and the nutation
corrections in milliarcseconds.
"""

from __future__ import annotations

import logging

from skyclock.constants import JD_MJD_OFFSET
from skyclock.eop._types import EarthOrientationRecord

logger = logging.getLogger(__name__)

# Column ranges for the IERS finals format (0-indexed Python slices)
_MJD_RANGE = slice(7, 15)
_PM_FLAG_INDEX = 16
_PM_X_RANGE = slice(18, 27)
_PM_X_ERR_RANGE = slice(27, 36)
_PM_Y_RANGE = slice(37, 46)
_PM_Y_ERR_RANGE = slice(46, 55)
_UT1_FLAG_INDEX = 57
_UT1_UTC_RANGE = slice(58, 68)
_UT1_UTC_ERR_RANGE = slice(68, 78)
_DPSI_RANGE = slice(97, 106)
_DPSI_ERR_RANGE = slice(106, 115)
_DEPS_RANGE = slice(116, 125)
_DEPS_ERR_RANGE = slice(125, 134)

_STRICT_LINES = 10
"""A mandatory-field failure on one of the first lines means a broken file."""


class EOPFormatError(ValueError):
    """Raised when EOP text is not in the IERS finals format."""


def _field(line: str, columns: slice, name: str) -> float:
    text = line[columns].strip()
    try:
        return float(text)
    except ValueError:
        raise ValueError(f"cannot parse {name} from {text!r}") from None


def _optional_field(line: str, columns: slice) -> float | None:
    try:
        return float(line[columns].strip())
    except ValueError:
        return None


def _prediction_flag(line: str, index: int, name: str) -> bool:
    flag = line[index] if len(line) > index else ""
    if flag == "I":
        return False
    if flag == "P":
        return True
    raise ValueError(f"invalid {name} prediction flag {flag!r}")


def parse_finals_line(line: str) -> EarthOrientationRecord:
    """Parse a single line of an IERS finals file.

    Args:
        line: One line of the file, without the trailing newline.

    Returns:
        The parsed record. Optional nutation fields that are blank or
        malformed are ``None``.

    Raises:
        ValueError: If a mandatory field (MJD, polar motion, UT1-UTC or
            either prediction flag) is missing or malformed.
    """
    mjd = _field(line, _MJD_RANGE, "MJD")
    pm_is_prediction = _prediction_flag(line, _PM_FLAG_INDEX, "polar motion")
    pm_x = _field(line, _PM_X_RANGE, "PM-x")
    pm_x_err = _field(line, _PM_X_ERR_RANGE, "PM-x error")
    pm_y = _field(line, _PM_Y_RANGE, "PM-y")
    pm_y_err = _field(line, _PM_Y_ERR_RANGE, "PM-y error")
    ut1_is_prediction = _prediction_flag(line, _UT1_FLAG_INDEX, "UT1-UTC")
    ut1_utc = _field(line, _UT1_UTC_RANGE, "UT1-UTC")
    ut1_utc_err = _field(line, _UT1_UTC_ERR_RANGE, "UT1-UTC error")

    return EarthOrientationRecord(
        julian_utc=JD_MJD_OFFSET + mjd,
        pm_x=pm_x,
        pm_x_err=pm_x_err,
        pm_y=pm_y,
        pm_y_err=pm_y_err,
        pm_is_prediction=pm_is_prediction,
        ut1_minus_utc=ut1_utc,
        ut1_minus_utc_err=ut1_utc_err,
        ut1_is_prediction=ut1_is_prediction,
        nutation_psi=_optional_field(line, _DPSI_RANGE),
        nutation_psi_err=_optional_field(line, _DPSI_ERR_RANGE),
        nutation_epsilon=_optional_field(line, _DEPS_RANGE),
        nutation_epsilon_err=_optional_field(line, _DEPS_ERR_RANGE),
    )


def parse_finals_text(text: str) -> list[EarthOrientationRecord]:
    """Parse the full text of an IERS finals file.

    Records are read in order until the first line whose mandatory fields
    do not parse; that line marks the end of the valid data (the tail of a
    finals file holds dates with no UT1 prediction yet).

    Args:
        text: Raw file contents.

    Returns:
        Parsed records in file order.

    Raises:
        EOPFormatError: If one of the first ten lines fails to parse, or
            if no record was found.
    """
    records: list[EarthOrientationRecord] = []

    for line_number, line in enumerate(text.splitlines(), start=1):
        try:
            records.append(parse_finals_line(line))
        except ValueError as exc:
            if line_number <= _STRICT_LINES:
                raise EOPFormatError(f"{exc} (line {line_number})") from exc
            logger.debug("EOP parsing stopped at line %d: %s", line_number, exc)
            break

    if not records:
        raise EOPFormatError("No valid EOP records found")

    return records
