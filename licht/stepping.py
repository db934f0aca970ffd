"""Stepping modes.

A stepping mode is a closed set of variants, each carrying its own parameters.
They are modelled as one frozen dataclass tagged by ``SteppingKind`` rather than
a class hierarchy; ``curves.apply`` dispatches on the tag.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import math

from .const import (
    DEFAULT_EXPONENT,
    RECOMMENDED_BLEND_A,
    RECOMMENDED_BLEND_B,
    RECOMMENDED_BLEND_RATIO,
)
from .exceptions import InvalidSteppingParameters


class SteppingKind(Enum):
    # Adds the raw step onto the raw brightness
    ABSOLUTE = "absolute"
    # Sets the raw brightness to the step
    SET = "set"
    # Multiplies the brightness by (1 + step%)
    GEOMETRIC = "geometric"
    # Moves step% along x^exponent
    PARABOLIC = "parabolic"
    # Moves step% along ratio*x^a + (1-ratio)*(1-(1-x)^(1/b))
    BLEND = "blend"


@dataclass(frozen=True, slots=True)
class Stepping:
    """A stepping mode and its parameters."""

    kind: SteppingKind
    exponent: float = DEFAULT_EXPONENT
    ratio: float = RECOMMENDED_BLEND_RATIO
    a: float = RECOMMENDED_BLEND_A
    b: float = RECOMMENDED_BLEND_B

    @classmethod
    def absolute(cls) -> Stepping:
        return cls(SteppingKind.ABSOLUTE)

    @classmethod
    def set_value(cls) -> Stepping:
        return cls(SteppingKind.SET)

    @classmethod
    def geometric(cls) -> Stepping:
        return cls(SteppingKind.GEOMETRIC)

    @classmethod
    def parabolic(cls, exponent: float = DEFAULT_EXPONENT) -> Stepping:
        return cls(SteppingKind.PARABOLIC, exponent=exponent)

    @classmethod
    def blend(cls, ratio: float, a: float, b: float) -> Stepping:
        return cls(SteppingKind.BLEND, ratio=ratio, a=a, b=b)

    @property
    def is_raw(self) -> bool:
        """True when the curve works on raw values rather than fractions."""
        return self.kind in (SteppingKind.ABSOLUTE, SteppingKind.SET)

    def validate(self) -> Stepping:
        """Raise InvalidSteppingParameters if this stepping cannot be evaluated.
        Returns self so it can be chained."""
        if self.kind is SteppingKind.PARABOLIC:
            if not math.isfinite(self.exponent) or self.exponent <= 0:
                raise InvalidSteppingParameters(
                    f"Parabolic exponent must be a positive number, got {self.exponent}"
                )

        elif self.kind is SteppingKind.BLEND:
            if not math.isfinite(self.ratio) or not 0.0 <= self.ratio <= 1.0:
                raise InvalidSteppingParameters(
                    f"Blend ratio must be within [0, 1], got {self.ratio}"
                )
            for name, value in (("a", self.a), ("b", self.b)):
                if not math.isfinite(value) or value <= 0:
                    raise InvalidSteppingParameters(
                        f"Blend parameter {name} must be a positive number, got {value}"
                    )

        return self

    def __str__(self) -> str:
        if self.kind is SteppingKind.PARABOLIC:
            return f"parabolic(exponent={self.exponent:g})"
        if self.kind is SteppingKind.BLEND:
            return f"blend(ratio={self.ratio:g}, a={self.a:g}, b={self.b:g})"
        return self.kind.value


DEFAULT_STEPPING = Stepping.parabolic()

RECOMMENDED_BLEND = Stepping.blend(
    RECOMMENDED_BLEND_RATIO, RECOMMENDED_BLEND_A, RECOMMENDED_BLEND_B
)
