"""Unit tests for rapidity and angular-distance helpers."""

from __future__ import annotations

import math
import unittest

from overlapremoval import Jet, Photon, delta_r, delta_r2, rapidity, wrap_phi


class TestGeometry(unittest.TestCase):
    """Validate phi wrapping, rapidity, and the rapidity-based dR metric."""

    def test_wrap_phi_maps_into_half_open_interval(self) -> None:
        """Wrapped differences must land in (-pi, pi]."""
        self.assertAlmostEqual(wrap_phi(0.3), 0.3, places=12)
        self.assertAlmostEqual(wrap_phi(2.0 * math.pi + 0.1), 0.1, places=12)
        self.assertAlmostEqual(wrap_phi(-2.0 * math.pi - 0.1), -0.1, places=12)
        self.assertAlmostEqual(wrap_phi(math.pi), math.pi, places=12)
        self.assertAlmostEqual(wrap_phi(-math.pi), math.pi, places=12)

    def test_delta_r_wraps_across_phi_boundary(self) -> None:
        """Objects on either side of phi=+-pi are close, not 2pi apart."""
        a = Photon(pt=10.0, eta=0.0, phi=math.pi - 0.05)
        b = Photon(pt=10.0, eta=0.0, phi=-math.pi + 0.05)
        self.assertAlmostEqual(delta_r(a, b), 0.1, places=12)

    def test_delta_r2_combines_rapidity_and_phi(self) -> None:
        a = Photon(pt=10.0, eta=0.3, phi=0.0)
        b = Photon(pt=10.0, eta=0.0, phi=0.4)
        self.assertAlmostEqual(delta_r2(a, b), 0.09 + 0.16, places=12)
        self.assertAlmostEqual(delta_r(a, b), 0.5, places=12)

    def test_massless_rapidity_equals_eta(self) -> None:
        self.assertEqual(rapidity(25.0, 1.3, 0.0), 1.3)

    def test_massive_rapidity_is_smaller_than_eta(self) -> None:
        """A massive object has |y| < |eta|, so the metric differs from eta-based dR."""
        pt, eta, m = 20.0, 1.5, 15.0
        pz = pt * math.sinh(eta)
        energy = math.sqrt(pt * pt + pz * pz + m * m)
        expected = 0.5 * math.log((energy + pz) / (energy - pz))
        y = rapidity(pt, eta, m)
        self.assertAlmostEqual(y, expected, places=12)
        self.assertLess(y, eta)

    def test_distance_uses_rapidity_not_pseudorapidity(self) -> None:
        """Two jets with equal eta but different mass are separated in rapidity."""
        light = Jet(pt=20.0, eta=1.5, phi=0.0, m=0.0)
        heavy = Jet(pt=20.0, eta=1.5, phi=0.0, m=15.0)
        self.assertAlmostEqual(delta_r(light, heavy), abs(light.rapidity - heavy.rapidity), places=12)
        self.assertGreater(delta_r(light, heavy), 0.0)


if __name__ == "__main__":
    unittest.main()
