"""Catalog of closed-form test integrands over the unit square.

Each entry pairs a pure evaluation rule with the exact (or high precision)
integral of that rule over ``[0, 1)^2``. Rules are written against numpy so a
single definition serves both the scalar :meth:`Integrand.evaluate` contract
and the vectorised path used by the estimator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from math import pi
from typing import Callable, Dict, Iterator, List, Optional, Tuple, Union

import numpy as np

from ..models.samples import Point
from .validator import UnknownIntegrand

ArrayLike = Union[float, np.ndarray]


class IntegrandCategory(str, Enum):
    """Smoothness class of an integrand."""

    DISCONTINUOUS = "discontinuous"
    PIECEWISE_LINEAR = "piecewise-linear"
    SMOOTH = "smooth"


class Projection(str, Enum):
    """Coordinate consumed by a 1D integrand."""

    X = "x"
    Y = "y"

    def project(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        return x if self is Projection.X else y


@dataclass(frozen=True)
class Integrand:
    """
    An immutable, stateless test function with its reference integral.

    ``rule`` takes ``(x, y)`` for 2D integrands and a single coordinate for 1D
    integrands; ``projection`` selects that coordinate and is ``None`` for 2D
    entries.
    """

    name: str
    rule: Callable[..., ArrayLike] = field(repr=False, compare=False)
    reference: float
    category: IntegrandCategory
    projection: Optional[Projection] = None
    description: str = ""

    @property
    def dimension(self) -> int:
        return 2 if self.projection is None else 1

    def evaluate(self, point: Point) -> float:
        """Evaluate the integrand at a single point."""
        x, y = point
        return float(self.evaluate_many(np.float64(x), np.float64(y)))

    def evaluate_many(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """Evaluate the integrand element-wise over coordinate arrays."""
        if self.projection is None:
            return self.rule(x, y)
        return self.rule(self.projection.project(x, y))


# --------------------------------------------------------------------- rules
def _linear_falloff(r: ArrayLike, inner: float, outer: float) -> ArrayLike:
    """1 inside ``inner``, 0 beyond ``outer``, linear in between."""
    return np.where(
        r <= inner,
        1.0,
        np.where(r >= outer, 0.0, 1.0 - (r - inner) / (outer - inner)),
    )


def quarterdisk(x, y):
    # Quarter disk about the origin with area 0.5.
    return np.where(x * x + y * y < 2.0 / pi, 1.0, 0.0)


def fulldisk(x, y):
    x = x - 0.5
    y = y - 0.5
    return np.where(x * x + y * y < 1.0 / (2.0 * pi), 1.0, 0.0)


def triangle(x, y):
    return np.where(x + y < 1.0, 1.0, 0.0)


def quarterdiskramp(x, y):
    return _linear_falloff(np.sqrt(x * x + y * y), 0.7, 0.9)


def fulldiskramp(x, y):
    x = x - 0.5
    y = y - 0.5
    return _linear_falloff(np.sqrt(x * x + y * y), 0.35, 0.45)


def triangleramp(x, y):
    return np.clip(5.0 * (y - x), -0.5, 0.5) + 0.5


def quartergaussian(x, y):
    return np.exp(-x * x - y * y)


def fullgaussian(x, y):
    x = x - 0.5
    y = y - 0.5
    return np.exp(-x * x - y * y)


def bilinear(x, y):
    return x * y


def biquadratic(x, y):
    return x * x * y * y


def sinxy(x, y):
    return np.sin(pi * (x + y))


def sininvr(x, y):
    # Very large derivatives near the origin; defined as 1 at r == 0.
    r = np.sqrt(x * x + y * y)
    with np.errstate(divide="ignore", invalid="ignore"):
        value = np.sin(pi / r)
    return np.where(r > 0.0, value, 1.0)


def step(t):
    return np.where(t < 1.0 / pi, 1.0, 0.0)


def ramp(t):
    return _linear_falloff(t, 0.2, 0.4)


def linear(t):
    return np.asarray(t, dtype=float)


def gaussian(t):
    return np.exp(-t * t)


def sin_pi(t):
    return np.sin(pi * t)


def sin_2pi(t):
    return np.sin(2.0 * pi * t)


# ------------------------------------------------------------------ registry
class IntegrandCatalog:
    """Name → :class:`Integrand` registry preserving registration order."""

    def __init__(self, integrands: Optional[List[Integrand]] = None) -> None:
        self._entries: Dict[str, Integrand] = {}
        for integrand in integrands or ():
            self.register(integrand)

    def register(self, integrand: Integrand) -> Integrand:
        """Add an integrand; names must be unique."""
        if integrand.name in self._entries:
            raise ValueError(f"Integrand {integrand.name!r} already registered")
        self._entries[integrand.name] = integrand
        return integrand

    def lookup(self, name: str) -> Integrand:
        try:
            return self._entries[name]
        except KeyError:
            raise UnknownIntegrand(name, self.names()) from None

    def names(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __iter__(self) -> Iterator[Integrand]:
        return iter(self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)


_D = IntegrandCategory.DISCONTINUOUS
_P = IntegrandCategory.PIECEWISE_LINEAR
_S = IntegrandCategory.SMOOTH

DEFAULT_CATALOG = IntegrandCatalog(
    [
        # 2D
        Integrand("quarterdisk", quarterdisk, 0.5, _D,
                  description="Indicator of the quarter disk r < sqrt(2/pi) about (0,0)"),
        Integrand("fulldisk", fulldisk, 0.5, _D,
                  description="Indicator of the disk r < 1/sqrt(2 pi) about (0.5,0.5)"),
        Integrand("triangle", triangle, 0.5, _D,
                  description="Indicator of x + y < 1"),
        Integrand("quarterdiskramp", quarterdiskramp, 0.505273, _P,
                  description="Quarter disk about (0,0) with linear falloff for r in [0.7, 0.9]"),
        Integrand("fulldiskramp", fulldiskramp, 0.505273, _P,
                  description="Disk about (0.5,0.5) with linear falloff for r in [0.35, 0.45]"),
        Integrand("triangleramp", triangleramp, 0.5, _P,
                  description="clamp(5 (y - x), -0.5, 0.5) + 0.5"),
        Integrand("quartergaussian", quartergaussian, 0.55774629, _S,
                  description="exp(-x^2 - y^2); reference pi/4 erf(1)^2"),
        Integrand("fullgaussian", fullgaussian, 0.851121, _S,
                  description="exp(-(x-0.5)^2 - (y-0.5)^2); reference pi erf(0.5)^2"),
        Integrand("bilinear", bilinear, 0.25, _S, description="x y"),
        Integrand("biquadratic", biquadratic, 1.0 / 9.0, _S, description="x^2 y^2"),
        Integrand("sinxy", sinxy, 0.0, _S, description="sin(pi (x + y))"),
        Integrand("sininvr", sininvr, -0.220242, _S,
                  description="sin(pi / r), 1 at the origin"),
        # 1D
        Integrand("stepx", step, 1.0 / pi, _D, Projection.X,
                  description="1 if x < 1/pi else 0"),
        Integrand("rampx", ramp, 0.3, _P, Projection.X,
                  description="1 below x = 0.2, 0 above x = 0.4, linear in between"),
        Integrand("lineary", linear, 0.5, _S, Projection.Y, description="y"),
        Integrand("gaussianx", gaussian, 0.74682413, _S, Projection.X,
                  description="exp(-x^2); reference sqrt(pi)/2 erf(1)"),
        Integrand("siny", sin_pi, 2.0 / pi, _S, Projection.Y, description="sin(pi y)"),
        Integrand("sin2x", sin_2pi, 0.0, _S, Projection.X, description="sin(2 pi x)"),
    ]
)


def lookup(name: str, catalog: Optional[IntegrandCatalog] = None) -> Tuple[Callable[[Point], float], float]:
    """Return ``(evaluate, reference)`` for ``name``; raises ``UnknownIntegrand``."""
    integrand = (catalog if catalog is not None else DEFAULT_CATALOG).lookup(name)
    return integrand.evaluate, integrand.reference


def get_integrand(name: str, catalog: Optional[IntegrandCatalog] = None) -> Integrand:
    """Return the full :class:`Integrand` definition for ``name``."""
    return (catalog if catalog is not None else DEFAULT_CATALOG).lookup(name)


__all__ = [
    "DEFAULT_CATALOG",
    "Integrand",
    "IntegrandCatalog",
    "IntegrandCategory",
    "Projection",
    "get_integrand",
    "lookup",
]
