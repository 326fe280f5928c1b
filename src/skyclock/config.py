"""Module-wide floating-point precision configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used by
the analytic astrometry vector math, and ``get_finder_tolerance`` for the
root refinement tolerance derived from it.

Julian dates near 2.45e6 need float64 to resolve sub-second offsets, so JAX's
64-bit mode is enabled when this module is imported and every time-keyed
table (leap seconds, Earth orientation) is stored as ``jnp.float64``
regardless of the configured dtype.
"""

from __future__ import annotations

import jax
import jax.numpy as jnp

jax.config.update("jax_enable_x64", True)

_VALID_DTYPES = (jnp.float32, jnp.float64)

_dtype = jnp.float64


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for skyclock vector math.

    Args:
        dtype: Either ``jnp.float32`` or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: jnp.float32, jnp.float64"
        )
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_finder_tolerance() -> float:
    """Return the dtype-adaptive tolerance for Brent root refinement.

    The tolerance is 100 machine epsilons of the configured dtype:

    - ``float64``: ~2.2e-14
    - ``float32``: ~1.2e-5

    Returns:
        float: Absolute tolerance in the units of the search variable (days).
    """
    return float(jnp.finfo(_dtype).eps) * 100.0
