"""Bracket-then-refine root finding for scalar functions of one variable.

The search is split into two stages:

1. :func:`find_brackets` samples the function on an even grid and records
   every sub-interval across which the sign changes (or touches zero).
2. :func:`brent` refines a single bracket with Brent's method (inverse
   quadratic interpolation / secant steps with a bisection fallback).

:func:`find_roots` chains both. The functions are domain agnostic; the event
search uses Julian Dates as the variable.

References:

    1. Brent, R. P. (1973). *Algorithms for Minimization without
       Derivatives*. Prentice-Hall, ch. 4.
    2. Press, W. H. et al. (2007). *Numerical Recipes (3rd Ed.)*,
       sec. 9.1 and 9.3.
"""

from __future__ import annotations

import logging
import sys
from typing import Callable, NamedTuple

import jax.numpy as jnp

logger = logging.getLogger(__name__)

_MAX_ITERATIONS = 100
_EPS = sys.float_info.epsilon


class RootFindingError(RuntimeError):
    """Base class for root finding failures."""


class RootNotBracketedError(RootFindingError):
    """Raised when the function has the same sign at both ends of the interval."""


class MaxIterationsError(RootFindingError):
    """Raised when Brent's method does not converge within the iteration cap."""


class Bracket(NamedTuple):
    """Interval ``[lo, hi]`` across which a function changes sign."""

    lo: float
    hi: float


def find_brackets(
    f: Callable,
    x1: float,
    x2: float,
    n: int,
    *,
    vectorized: bool = False,
) -> list[Bracket]:
    """Find sub-intervals of ``[x1, x2]`` that bracket a root of *f*.

    The interval is divided into *n* equal steps and *f* is sampled at every
    step boundary. A bracket is recorded wherever two consecutive samples
    have a non-positive product, so a sample that is exactly zero shows up
    in the brackets on both sides of it.

    Args:
        f: Scalar function. With ``vectorized=True`` it must accept a 1-D
            array of abscissae and return an array of values (e.g. a
            ``jnp`` expression).
        x1: Start of the search interval.
        x2: End of the search interval.
        n: Number of sub-intervals.
        vectorized: Evaluate the whole grid in one call.

    Returns:
        list[Bracket]: Brackets in increasing order.

    Raises:
        ValueError: If ``n < 1`` or ``x2 <= x1``.

    Examples:
        ```python
        import math
        brackets = find_brackets(math.sin, 0.5, 10.0, 95)
        # 3 brackets, around pi, 2*pi and 3*pi
        ```
    """
    if n < 1:
        raise ValueError(f"Number of sub-intervals must be >= 1, got {n}")
    if not x2 > x1:
        raise ValueError(f"Search interval must satisfy x1 < x2, got [{x1}, {x2}]")

    dx = (x2 - x1) / n
    xs = [x1 + i * dx for i in range(n)] + [x2]

    if vectorized:
        values = [float(v) for v in jnp.asarray(f(jnp.asarray(xs, dtype=jnp.float64)))]
    else:
        values = [float(f(x)) for x in xs]

    brackets: list[Bracket] = []
    for i in range(n):
        if values[i] * values[i + 1] <= 0.0:
            brackets.append(Bracket(xs[i], xs[i + 1]))

    logger.debug("Found %d brackets on [%r, %r] with %d steps", len(brackets), x1, x2, n)
    return brackets


def brent(
    f: Callable[[float], float],
    lo: float,
    hi: float,
    tol: float,
) -> float:
    """Refine a root of *f* inside ``[lo, hi]`` with Brent's method.

    Convergence is declared when half the bracket width falls below
    ``2 * eps * |b| + tol / 2``, where ``b`` is the current best estimate,
    or when ``f(b)`` is exactly zero.

    Args:
        f: Scalar function.
        lo: Lower end of the bracket.
        hi: Upper end of the bracket.
        tol: Absolute tolerance on the root.

    Returns:
        float: The root estimate.

    Raises:
        RootNotBracketedError: If ``f(lo)`` and ``f(hi)`` are non-zero and
            have the same sign.
        MaxIterationsError: If the estimate has not converged after 100
            iterations.
    """
    a = lo
    b = hi
    c = hi
    fa = float(f(a))
    fb = float(f(b))

    if (fa > 0.0 and fb > 0.0) or (fa < 0.0 and fb < 0.0):
        raise RootNotBracketedError(
            f"Root must be bracketed: f({lo!r}) = {fa!r}, f({hi!r}) = {fb!r}"
        )

    fc = fb
    d = e = b - a
    for _ in range(_MAX_ITERATIONS):
        if (fb > 0.0 and fc > 0.0) or (fb < 0.0 and fc < 0.0):
            # Root lies between a and b; restart the contrapoint
            c = a
            fc = fa
            d = e = b - a
        if abs(fc) < abs(fb):
            a, b, c = b, c, b
            fa, fb, fc = fb, fc, fb

        tol1 = 2.0 * _EPS * abs(b) + 0.5 * tol
        xm = 0.5 * (c - b)
        if abs(xm) <= tol1 or fb == 0.0:
            return b

        if abs(e) >= tol1 and abs(fa) > abs(fb):
            s = fb / fa
            if a == c:
                # Secant
                p = 2.0 * xm * s
                q = 1.0 - s
            else:
                # Inverse quadratic interpolation
                q = fa / fc
                r = fb / fc
                p = s * (2.0 * xm * q * (q - r) - (b - a) * (r - 1.0))
                q = (q - 1.0) * (r - 1.0) * (s - 1.0)
            if p > 0.0:
                q = -q
            p = abs(p)
            min1 = 3.0 * xm * q - abs(tol1 * q)
            min2 = abs(e * q)
            if 2.0 * p < min(min1, min2):
                e = d
                d = p / q
            else:
                d = xm
                e = d
        else:
            d = xm
            e = d

        a = b
        fa = fb
        if abs(d) > tol1:
            b += d
        else:
            b += tol1 if xm >= 0.0 else -tol1
        fb = float(f(b))

    raise MaxIterationsError(
        f"Brent's method did not converge in {_MAX_ITERATIONS} iterations on [{lo!r}, {hi!r}]"
    )


def find_roots(
    f: Callable[[float], float],
    x1: float,
    x2: float,
    n: int,
    tol: float,
) -> list[float]:
    """Find the roots of *f* on ``[x1, x2]``.

    Brackets with :func:`find_brackets` and refines each with :func:`brent`.

    Args:
        f: Scalar function.
        x1: Start of the search interval.
        x2: End of the search interval.
        n: Number of sampling sub-intervals.
        tol: Absolute tolerance on each root.

    Returns:
        list[float]: One root per bracket, in increasing order.
    """
    return [brent(f, lo, hi, tol) for lo, hi in find_brackets(f, x1, x2, n)]
