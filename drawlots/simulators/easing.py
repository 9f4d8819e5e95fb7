"""Easing curves mapping animation progress in ``[0, 1]`` to eased progress."""

from __future__ import annotations

from typing import Callable

Easing = Callable[[float], float]


def _clamp(t: float) -> float:
    return 0.0 if t <= 0.0 else 1.0 if t >= 1.0 else t


def linear(t: float) -> float:
    return _clamp(t)


def ease_in_out_quad(t: float) -> float:
    """Quadratic acceleration until halfway, deceleration afterwards."""
    t = _clamp(t)
    if t < 0.5:
        return 2.0 * t * t
    return 1.0 - ((-2.0 * t + 2.0) ** 2) / 2.0


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> Easing:
    """Return the CSS ``cubic-bezier(x1, y1, x2, y2)`` timing function.

    The curve runs from ``(0, 0)`` to ``(1, 1)``. For an input time ``x`` the
    parameter ``s`` with ``bx(s) == x`` is found by Newton iteration, falling
    back to bisection, and ``by(s)`` is returned.
    """

    if not (0.0 <= x1 <= 1.0 and 0.0 <= x2 <= 1.0):
        raise ValueError("x control points must lie in [0, 1]")

    cx = 3.0 * x1
    bx = 3.0 * (x2 - x1) - cx
    ax = 1.0 - cx - bx
    cy = 3.0 * y1
    by = 3.0 * (y2 - y1) - cy
    ay = 1.0 - cy - by

    def sample_x(s: float) -> float:
        return ((ax * s + bx) * s + cx) * s

    def sample_y(s: float) -> float:
        return ((ay * s + by) * s + cy) * s

    def slope_x(s: float) -> float:
        return (3.0 * ax * s + 2.0 * bx) * s + cx

    def solve_s(x: float, epsilon: float = 1e-7) -> float:
        s = x
        for _ in range(8):
            error = sample_x(s) - x
            if abs(error) < epsilon:
                return s
            d = slope_x(s)
            if abs(d) < 1e-6:
                break
            s -= error / d

        lo, hi = 0.0, 1.0
        s = x
        for _ in range(64):
            value = sample_x(s)
            if abs(value - x) < epsilon:
                return s
            if value < x:
                lo = s
            else:
                hi = s
            s = (lo + hi) / 2.0
        return s

    def ease(t: float) -> float:
        t = _clamp(t)
        if t == 0.0 or t == 1.0:
            return t
        return sample_y(solve_s(t))

    return ease


WHEEL_EASING = cubic_bezier(0.1, 0.5, 0.2, 1.0)
"""Fast start, long gentle stop; used by the spinning wheel."""


__all__ = [
    "Easing",
    "WHEEL_EASING",
    "cubic_bezier",
    "ease_in_out_quad",
    "linear",
]
