import jax.numpy as jnp
import pytest

from skyclock.config import set_dtype


@pytest.fixture(autouse=True)
def _ensure_float64():
    """Set float64 precision before every test.

    Tests that change the dtype (e.g. test_config.py) would otherwise leak
    float32 into the rest of the session.
    """
    set_dtype(jnp.float64)


def _put(chars: list[str], start: int, text: str) -> None:
    chars[start:start + len(text)] = list(text)


def _finals_line(
    mjd: float,
    pm_x: float = 0.1,
    pm_y: float = 0.3,
    ut1_utc: float = 0.2,
    pm_flag: str = "I",
    ut1_flag: str = "I",
    dpsi: float | None = -99.8,
    deps: float | None = -8.6,
) -> str:
    """Build one IERS finals line with every field at its fixed column."""
    chars = [" "] * 185
    _put(chars, 0, "180223")
    _put(chars, 7, f"{mjd:8.2f}")
    _put(chars, 16, pm_flag)
    _put(chars, 18, f"{pm_x:9.6f}")
    _put(chars, 27, f"{0.000024:9.6f}")
    _put(chars, 37, f"{pm_y:9.6f}")
    _put(chars, 46, f"{0.000027:9.6f}")
    _put(chars, 57, ut1_flag)
    _put(chars, 58, f"{ut1_utc:10.7f}")
    _put(chars, 68, f"{0.0000087:10.7f}")
    if dpsi is not None:
        _put(chars, 97, f"{dpsi:9.3f}")
        _put(chars, 106, f"{0.298:9.3f}")
    if deps is not None:
        _put(chars, 116, f"{deps:9.3f}")
        _put(chars, 125, f"{0.300:9.3f}")
    return "".join(chars).rstrip()


@pytest.fixture()
def finals_line():
    """Factory for synthetic IERS finals lines."""
    return _finals_line


@pytest.fixture()
def finals_text() -> str:
    """Fifteen days of finals data starting at MJD 58172 (2018-02-23).

    UT1-UTC grows by 0.01 s per day from 0.17 s; polar motion x by 0.001
    arcsec per day from 0.06. The last two days are predictions and the file
    ends with a line lacking UT1 data, as real finals files do.
    """
    lines = []
    for i in range(15):
        flag = "P" if i >= 13 else "I"
        lines.append(_finals_line(
            58172.0 + i,
            pm_x=0.06 + 0.001 * i,
            pm_y=0.32,
            ut1_utc=0.17 + 0.01 * i,
            pm_flag=flag,
            ut1_flag=flag,
        ))
    lines.append("180310 58187.00 P  0.081000 0.000100  0.330000 0.000100")
    return "\n".join(lines) + "\n"
