#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Mon Mar 27 09:14:38 2023

@author: Mike
"""


import logging
import unittest
import pytest
from pytest import approx
import numpy as np
from gravray.geom.geometry import ThinDisc, ThickDisc
from gravray.raytr.integrator import init_integrator
from gravray.raytr.precision import (find_offset_for_radius,
                                     impact_parameters_for_radius,
                                     impact_parameters_for_radius_into,
                                     impact_parameters_for_target,
                                     jacobian_area_factor, projected_radius)
from gravray.raytr.sampler import impact_parameters_from_polar
from gravray.raytr.statuscodes import StatusCode
from gravray.raytr.trace import tracegeodesics
from gravray.raytr.traceerror import DimensionMismatchError
from gravray.spacetime.kerr import SchwarzschildMetric


class OffsetForRadiusTestCase(unittest.TestCase):
    def setUp(self):
        self.m = SchwarzschildMetric()
        self.u = np.array([0., 1000., np.deg2rad(60.), 0.])
        self.disc = ThinDisc(0., 400.)

    def test_inversion_consistency(self):
        for theta in (0.3, np.pi/2, 4.0):
            r0, gp = find_offset_for_radius(self.m, self.u, self.disc, 6.0,
                                            theta)
            assert 0.0 < r0 < 20.0
            assert gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY

            # retrace from the image plane coordinates
            alpha, beta = impact_parameters_from_polar(r0, theta)
            v = self.m.map_impact_parameters(self.u, alpha, beta)
            gp2 = tracegeodesics(self.m, self.u, v, (0., 2000.), self.disc)
            assert gp2.status is StatusCode.INTERSECTED_WITH_GEOMETRY
            assert projected_radius(gp2) == approx(6.0, abs=1e-3)

    def test_reused_integrator(self):
        integrator = init_integrator(self.m, (0., 2000.), geometry=self.disc)
        r1, gp1 = find_offset_for_radius(self.m, self.u, self.disc, 10.0,
                                         1.0, integrator=integrator)
        r2, gp2 = find_offset_for_radius(self.m, self.u, self.disc, 10.0,
                                         1.0)
        assert r1 == approx(r2, abs=1e-6)

    def test_inside_horizon(self):
        with self.assertLogs('gravray.raytr.precision',
                             level=logging.WARNING):
            r0, gp = find_offset_for_radius(self.m, self.u, self.disc, 1.0,
                                            0.5)
        assert np.isnan(r0)

    def test_offset_max_too_small(self):
        with self.assertLogs('gravray.raytr.precision',
                             level=logging.WARNING):
            r0, gp = find_offset_for_radius(self.m, self.u, self.disc, 6.0,
                                            0.5, offset_max=1.0)
        assert np.isnan(r0)

    def test_thick_disc(self):
        disc = ThickDisc(lambda rho: 0.05*rho, 0., 400.)
        r0, gp = find_offset_for_radius(self.m, self.u, disc, 8.0, 2.0)
        assert gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY
        assert gp.x[1]*np.cos(gp.x[2]) == approx(0.4, abs=1e-6)
        assert projected_radius(gp) == approx(8.0, abs=1e-3)


class ImpactParametersForRadiusTestCase(unittest.TestCase):
    def setUp(self):
        self.m = SchwarzschildMetric()
        self.u = np.array([0., 1000., np.deg2rad(60.), 0.])
        self.disc = ThinDisc(0., 400.)

    def test_buffers_must_match(self):
        with pytest.raises(DimensionMismatchError):
            impact_parameters_for_radius_into(np.zeros(4), np.zeros(5),
                                              self.m, self.u, self.disc, 6.0)

    def test_ring(self):
        alphas, betas = impact_parameters_for_radius(self.m, self.u,
                                                     self.disc, 8.0, N=6,
                                                     max_workers=3)
        assert len(alphas) == 6
        again = impact_parameters_for_radius(self.m, self.u, self.disc, 8.0,
                                             N=6)
        np.testing.assert_allclose(alphas, again[0], atol=1e-8)
        np.testing.assert_allclose(betas, again[1], atol=1e-8)

        # the first point lies along theta = 0, i.e. beta = 0
        assert betas[0] == approx(0.0, abs=1e-12)
        assert alphas[0] > 0.0

    def test_ring_drops_failures(self):
        alphas, betas = impact_parameters_for_radius(self.m, self.u,
                                                     self.disc, 6.0, N=4,
                                                     offset_max=1.0)
        assert len(alphas) == 0
        assert len(betas) == 0


class TargetAndJacobianTestCase(unittest.TestCase):
    def setUp(self):
        self.m = SchwarzschildMetric()
        self.u = np.array([0., 100., np.deg2rad(60.), 0.])
        self.disc = ThinDisc(0., 400.)

    def test_target(self):
        v = self.m.map_impact_parameters(self.u, 3.0, 5.0)
        gp = tracegeodesics(self.m, self.u, v, (0., 200.), self.disc)
        assert gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY

        alpha, beta, gp_opt, distance = impact_parameters_for_target(
            gp.x, self.m, self.u, x0=(2.5, 4.5), options={'maxiter': 400})
        assert distance < 0.1
        assert alpha == approx(3.0, abs=0.2)
        assert beta == approx(5.0, abs=0.2)

    def test_jacobian(self):
        factor = jacobian_area_factor(self.m, self.u, self.disc, 3.0, 5.0)
        assert np.isfinite(factor)
        assert factor > 0.0

    def test_jacobian_miss(self):
        # straight into the hole
        factor = jacobian_area_factor(self.m, self.u, self.disc, 0.0, 0.0)
        assert np.isnan(factor)


if __name__ == '__main__':
    unittest.main(verbosity=2)
