"""Brightness curves.

Pure helpers mapping a current brightness and a signed step to a new
brightness, one per stepping mode. Normalized brightness is a fraction of the
device maximum in [0, 1].

The curved modes (parabolic, blend) treat brightness as the output of a curve
``f`` over a position ``p`` in [0, 1]. The current position is recovered with
``f``'s inverse, moved by ``step`` percent and mapped back through ``f``.

None of these clamp the resulting brightness, that is left to the caller.
Positions are kept inside the curve domain.
"""

from __future__ import annotations

from .const import BLEND_MAX_ITERATIONS, BLEND_TOLERANCE
from .stepping import Stepping, SteppingKind


def clamp_float(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(max_value, value))


def clamp_unit(value: float) -> float:
    return clamp_float(value, 0.0, 1.0)


def absolute(current_raw: float, step: float) -> float:
    """Add the raw step onto the raw brightness."""
    return current_raw + step


def set_value(step: float) -> float:
    """Use the raw step as the new raw brightness."""
    return step


def geometric(current: float, step: float) -> float:
    """Grow or shrink the brightness by step percent of itself.

    Zero stays zero whatever the step.
    """
    return current * (1.0 + step / 100.0)


def parabolic(current: float, step: float, exponent: float = 2.0) -> float:
    """Advance step percent along the curve p^exponent.

    With exponent 2, stepping -20 from full brightness gives
    0.64, 0.36, 0.16, 0.04.
    """
    position = clamp_unit(current) ** (1.0 / exponent)
    position = clamp_unit(position + step / 100.0)
    return position**exponent


def blend_curve(position: float, ratio: float, a: float, b: float) -> float:
    """ratio * p^a + (1 - ratio) * (1 - (1 - p)^(1/b))"""
    return ratio * position**a + (1.0 - ratio) * (1.0 - (1.0 - position) ** (1.0 / b))


def blend_inverse(
    value: float,
    ratio: float,
    a: float,
    b: float,
    tolerance: float = BLEND_TOLERANCE,
    max_iterations: int = BLEND_MAX_ITERATIONS,
) -> float:
    """Find the position p in [0, 1] with blend_curve(p) == value.

    The blend is a convex combination of p^a and 1 - (1 - p)^(1/b), so the
    answer lies between the inverses of those two and a bisection over that
    bracket converges. Iterations are capped; the best midpoint found is
    returned when the cap is hit.
    """
    value = clamp_unit(value)

    power_inverse = value ** (1.0 / a)
    root_inverse = 1.0 - (1.0 - value) ** b
    low = min(power_inverse, root_inverse)
    high = max(power_inverse, root_inverse)

    position = ratio * low + (1.0 - ratio) * high
    for _ in range(max_iterations):
        diff = blend_curve(position, ratio, a, b) - value
        if abs(diff) <= tolerance:
            break

        if diff > 0:
            high = position
        else:
            low = position

        position = clamp_unit(low + (high - low) / 2.0)

    return position


def blend(current: float, step: float, ratio: float, a: float, b: float) -> float:
    """Advance step percent along the blend curve."""
    position = blend_inverse(current, ratio, a, b)
    position = clamp_unit(position + step / 100.0)
    return blend_curve(position, ratio, a, b)


def apply(stepping: Stepping, step: float, current_raw: int, current: float) -> float:
    """Evaluate the curve for the given stepping mode.

    current is current_raw as a fraction of the device maximum. Absolute and
    set return a raw value, every other mode returns a normalized value.
    """
    if stepping.kind is SteppingKind.ABSOLUTE:
        return absolute(current_raw, step)

    if stepping.kind is SteppingKind.SET:
        return set_value(step)

    if stepping.kind is SteppingKind.GEOMETRIC:
        return geometric(current, step)

    if stepping.kind is SteppingKind.PARABOLIC:
        return parabolic(current, step, stepping.exponent)

    if stepping.kind is SteppingKind.BLEND:
        return blend(current, step, stepping.ratio, stepping.a, stepping.b)

    raise ValueError(f"Unknown stepping mode: {stepping.kind}")
