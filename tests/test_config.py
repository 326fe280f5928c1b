"""Tests for the skyclock.config module."""

import jax
import jax.numpy as jnp
import pytest

from skyclock.config import get_dtype, get_finder_tolerance, set_dtype
from skyclock.rootfinding import brent


@pytest.fixture(autouse=True)
def reset_dtype():
    """Reset dtype to float64 after each test."""
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self):
        for dtype in (jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_float16_rejected(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.float16)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float32")

    def test_x64_enabled(self):
        assert jax.config.jax_enable_x64
        assert jnp.array(2451545.0, dtype=jnp.float64).dtype == jnp.float64


# ---------------------------------------------------------------------------
# Finder tolerance
# ---------------------------------------------------------------------------


class TestFinderTolerance:
    def test_float64_tolerance(self):
        assert get_finder_tolerance() == pytest.approx(100 * 2.220446049250313e-16)

    def test_float32_tolerance(self):
        set_dtype(jnp.float32)
        assert get_finder_tolerance() == pytest.approx(100 * 1.1920929e-07)

    def test_tolerance_tracks_dtype(self):
        set_dtype(jnp.float32)
        loose = get_finder_tolerance()
        set_dtype(jnp.float64)
        assert get_finder_tolerance() < loose

    def test_float32_tolerance_still_converges(self):
        set_dtype(jnp.float32)
        root = brent(lambda x: x * x - 2.0, 1.0, 2.0, get_finder_tolerance())
        assert root == pytest.approx(2.0 ** 0.5, abs=1e-5)
