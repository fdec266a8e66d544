#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Wed Mar 15 16:31:08 2023

@author: Mike
"""


import unittest
import pytest
from pytest import approx
import numpy as np
import numpy.testing as npt
from gravray.spacetime.kerr import KerrMetric, SchwarzschildMetric
from gravray.spacetime.metric import dot, frame_components, lnr_basis


class KerrMetricTestCase(unittest.TestCase):
    def setUp(self):
        self.kerr = KerrMetric(M=1.0, a=0.9)
        self.x = np.array([0., 5., 1.1, 0.3])

    def test_spin_limit(self):
        with pytest.raises(ValueError):
            KerrMetric(M=1.0, a=1.2)

    def test_characteristic_radii(self):
        assert KerrMetric(a=0.0).isco() == approx(6.0)
        assert KerrMetric(a=0.998).isco() == approx(1.237, abs=1e-3)
        assert KerrMetric(a=0.998).inner_radius() == approx(1.0632, abs=1e-4)
        assert SchwarzschildMetric(M=2.0).inner_radius() == 4.0
        assert SchwarzschildMetric(M=2.0).isco() == 12.0

    def test_components_jacobian(self):
        h = 1e-20
        r, theta = self.x[1], self.x[2]
        jac_r, jac_th = self.kerr.components_jacobian(r, theta)
        d_r = np.imag(self.kerr.components(r + 1j*h, theta))/h
        d_th = np.imag(self.kerr.components(r, theta + 1j*h))/h
        npt.assert_allclose(jac_r, d_r, rtol=1e-10, atol=1e-12)
        npt.assert_allclose(jac_th, d_th, rtol=1e-10, atol=1e-12)

    def test_schwarzschild_acceleration(self):
        m = SchwarzschildMetric()
        generic = KerrMetric(a=0.0)
        v = np.array([1.3, -0.4, 0.02, 0.05])
        npt.assert_allclose(m.geodesic_acceleration(self.x, v),
                            generic.geodesic_acceleration(self.x, v),
                            rtol=1e-12, atol=1e-14)

    def test_constrain(self):
        v = self.kerr.constrain(self.x, np.array([0., -1., 0.01, 0.02]))
        g = self.kerr.metric(self.x)
        assert dot(g, v, v) == approx(0.0, abs=1e-12)
        assert v[0] > 0

        u = self.kerr.constrain(self.x, np.array([0., 0.1, 0., 0.]), mu=1.0)
        assert dot(g, u, u) == approx(-1.0)

        vs = np.array([[0., -1., 0., 0.], [0., -1., 0.001, 0.]])
        vc = self.kerr.constrain_all(self.x, vs)
        assert vc.shape == (2, 4)
        npt.assert_allclose(vc[0], self.kerr.constrain(self.x, vs[0]))

    def test_lnr_frame_orthonormal(self):
        g = self.kerr.metric(self.x)
        basis = self.kerr.local_frame(self.x)
        gram = np.array([[dot(g, e1, e2) for e2 in basis] for e1 in basis])
        npt.assert_allclose(gram, np.diag([-1., 1., 1., 1.]), atol=1e-12)

    def test_map_impact_parameters(self):
        u = np.array([0., 1000., np.pi/2, 0.])
        v = self.kerr.map_impact_parameters(u, 3.0, 4.0)
        npt.assert_allclose(v, [0., -1., 4e-6, 3e-6])


class OrbitTestCase(unittest.TestCase):
    def test_circular_orbit(self):
        m = KerrMetric(a=0.5)
        r = 8.0
        u = m.circular_four_velocity(r)
        g = m.metric(np.array([0., r, np.pi/2, 0.]))
        assert dot(g, u, u) == approx(-1.0)
        assert u[3]/u[0] == approx(m.keplerian_angular_velocity(r))

    def test_plunging_orbit(self):
        m = SchwarzschildMetric()
        r = 4.0
        u = m.plunging_four_velocity(r)
        g = m.metric(np.array([0., r, np.pi/2, 0.]))
        assert dot(g, u, u) == approx(-1.0)
        assert u[1] < 0

        energy, ang_mom = m.isco_energy_momentum
        assert energy == approx(np.sqrt(8/9))
        assert ang_mom == approx(np.sqrt(12))

    def test_lorentz_frame_velocity(self):
        m = SchwarzschildMetric()
        x = np.array([0., 10., np.pi/2, 0.])
        g = m.metric(x)
        u = m.circular_four_velocity(10.0)
        comps = frame_components(g, lnr_basis(g), u)
        # circular velocity in the static frame, sqrt(M/(r - 2M))
        assert comps[3]/comps[0] == approx(np.sqrt(1/8))
        assert comps[1] == approx(0.0, abs=1e-14)


if __name__ == '__main__':
    unittest.main(verbosity=2)
