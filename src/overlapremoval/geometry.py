"""Angular-distance helpers for overlap removal.

Distances use the rapidity `y` rather than the pseudorapidity:
`dR^2 = (y1 - y2)^2 + dphi^2`, with `dphi` wrapped into (-pi, pi].
"""

from __future__ import annotations
__author__ = "Overlap Removal developers"

import math
from typing import Protocol


class HasPosition(Protocol):
    """Anything exposing a rapidity and an azimuth."""

    @property
    def rapidity(self) -> float: ...

    phi: float


def wrap_phi(dphi: float) -> float:
    """Map an azimuthal difference into (-pi, pi]."""
    wrapped = math.remainder(dphi, 2.0 * math.pi)
    if wrapped <= -math.pi:
        wrapped += 2.0 * math.pi
    return wrapped


def rapidity(pt: float, eta: float, m: float = 0.0) -> float:
    """Rapidity of a particle given `(pt, eta, m)`.

    Equals `eta` for massless particles.
    """
    if m == 0.0:
        return eta
    pz = pt * math.sinh(eta)
    energy = math.sqrt(pt * pt + pz * pz + m * m)
    return 0.5 * math.log((energy + pz) / (energy - pz))


def delta_r2(p1: HasPosition, p2: HasPosition) -> float:
    """Squared rapidity-azimuth distance between two objects."""
    dy = p1.rapidity - p2.rapidity
    dphi = wrap_phi(p1.phi - p2.phi)
    return dy * dy + dphi * dphi


def delta_r(p1: HasPosition, p2: HasPosition) -> float:
    """Rapidity-azimuth distance, `sqrt(delta_r2)`."""
    return math.sqrt(delta_r2(p1, p2))
