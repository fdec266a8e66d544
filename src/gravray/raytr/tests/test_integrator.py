#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Tue Mar 21 09:47:15 2023

@author: Mike
"""


import unittest
import pytest
from pytest import approx
import numpy as np
import numpy.testing as npt
from gravray.geom.geometry import ThinDisc, ThickDisc
from gravray.raytr.integrator import (Callback, GeodesicIntegrator,
                                      IntegrationParameters, init_integrator,
                                      create_callback_set)
from gravray.raytr.statuscodes import StatusCode
from gravray.raytr.trace import tracegeodesics
from gravray.raytr.traceerror import IntegrationFailedError
from gravray.spacetime.kerr import SchwarzschildMetric
from gravray.util.misc_math import to_cartesian


def spherical(rho, z):
    return np.array([0., np.hypot(rho, z), np.arctan2(rho, z), 0.])


def spherical_velocity(x, vx, vz):
    """ spatial velocity components of cartesian (vx, 0, vz) at x, phi=0 """
    r, theta = x[1], x[2]
    vr = vx*np.sin(theta) + vz*np.cos(theta)
    vth = (vx*np.cos(theta) - vz*np.sin(theta))/r
    return np.array([0., vr, vth, 0.])


class WeakFieldTestCase(unittest.TestCase):
    """ with a tiny mass geodesics are straight lines """
    def setUp(self):
        self.m = SchwarzschildMetric(M=1e-6)
        self.x0 = np.array([0., 100., np.pi/2, 0.])

    def trace(self, v, time_domain, geometry=None):
        integrator = init_integrator(self.m, time_domain, geometry=geometry)
        v = self.m.constrain(self.x0, v)
        return integrator.reinit_and_solve(np.concatenate((self.x0, v)))

    def test_radial_ray(self):
        gp = self.trace(np.array([0., -1., 0., 0.]), (0., 50.))
        assert gp.status is StatusCode.NO_STATUS
        assert gp.lambda_end == approx(50.)
        assert gp.x[1] == approx(50., abs=1e-5)

    def test_equatorial_ray(self):
        b = 5.0
        gp = self.trace(np.array([0., -1., 0., b/100.**2]), (0., 50.))
        npt.assert_allclose(to_cartesian(gp.x), [50., 2.5, 0.], atol=1e-5)

    def test_disc_annulus(self):
        x0 = spherical(20.0, 10.0)
        v = self.m.constrain(x0, spherical_velocity(x0, 0., -1.))
        u0 = np.concatenate((x0, v))

        # the crossing at rho = 20 falls inside the hole of the disc
        missed = init_integrator(self.m, (0., 30.), geometry=ThinDisc(50., 400.))
        gp = missed.reinit_and_solve(u0)
        assert gp.status is StatusCode.NO_STATUS
        assert gp.x[1]*np.cos(gp.x[2]) == approx(-20., abs=1e-5)

        hit = init_integrator(self.m, (0., 30.), geometry=ThinDisc(10., 400.))
        gp = hit.reinit_and_solve(u0)
        assert gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY
        assert gp.lambda_end == approx(10., abs=1e-5)
        assert gp.x[1]*np.sin(gp.x[2]) == approx(20., abs=1e-5)

    def test_thick_disc_within_one_step(self):
        # a slab of half thickness 1, entered and left inside one step
        x0 = spherical(17.0, 10.0)
        v = self.m.constrain(x0, spherical_velocity(x0, 0., -1.))
        u0 = np.concatenate((x0, v))
        disc = ThickDisc(lambda rho: 1.0, 10., 20.)

        integrator = init_integrator(self.m, (0., 30.), geometry=disc)
        gp = integrator.reinit_and_solve(u0)
        assert gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY
        assert gp.lambda_end == approx(9., abs=1e-5)
        assert gp.x[1]*np.cos(gp.x[2]) == approx(1., abs=1e-5)

        gp = tracegeodesics(self.m, x0, spherical_velocity(x0, 0., -1.),
                            (0., 30.), disc)
        assert gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY

    def test_event_sensitivity(self):
        # the crossing point depends on h through the crossing time:
        # rho_end = 20 + 10/(1 + h)
        h = 1e-20
        x0 = spherical(20.0, 10.0).astype(complex)
        v = self.m.constrain(x0, spherical_velocity(x0, 1., -(1. + 1j*h)))
        integrator = init_integrator(self.m, (0., 30.), geometry=ThinDisc())
        gp = integrator.reinit_and_solve(np.concatenate((x0, v)))
        assert gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY
        rho_end = gp.x[1]*np.sin(gp.x[2])
        assert np.real(rho_end) == approx(30., abs=1e-5)
        assert np.imag(rho_end)/h == approx(-10., rel=1e-4)


class IntegratorTestCase(unittest.TestCase):
    def setUp(self):
        self.m = SchwarzschildMetric()

    def test_status_set_once(self):
        params = IntegrationParameters(self.m)
        params.set_status(StatusCode.WITHIN_INNER_BOUNDARY)
        params.set_status(StatusCode.INTERSECTED_WITH_GEOMETRY)
        assert params.status is StatusCode.WITHIN_INNER_BOUNDARY
        params.reset()
        assert params.status is StatusCode.NO_STATUS

    def test_callback_set(self):
        extra = Callback(lambda u, p: u[1] - 3.0, lambda p, u: False)
        cbs = create_callback_set(self.m, callback=extra,
                                  geometry=ThinDisc())
        assert len(cbs) == 4
        assert cbs[-1] is extra

    def test_horizon_and_escape(self):
        x0 = np.array([0., 50., np.pi/2, 0.])
        integrator = init_integrator(self.m, (0., 2000.))

        v_in = self.m.constrain(x0, np.array([0., -1., 0., 0.]))
        gp = integrator.reinit_and_solve(np.concatenate((x0, v_in)))
        assert gp.status is StatusCode.WITHIN_INNER_BOUNDARY
        assert gp.x[1] == approx(2.02, abs=1e-6)

        # the same session is reused, the status starts afresh
        v_out = self.m.constrain(x0, np.array([0., 1., 0., 0.]))
        gp = integrator.reinit_and_solve(np.concatenate((x0, v_out)))
        assert gp.status is StatusCode.OUTSIDE_COORDINATE_RANGE
        assert gp.x[1] == approx(1200., abs=1e-6)

    def test_reinit_is_repeatable(self):
        x0 = np.array([0., 1000., np.deg2rad(60.), 0.])
        integrator = init_integrator(self.m, (0., 2000.), geometry=ThinDisc())
        v = self.m.constrain(x0, self.m.map_impact_parameters(x0, 7., 2.))
        gp1 = integrator.reinit_and_solve(np.concatenate((x0, v)))
        gp2 = integrator.reinit_and_solve(np.concatenate((x0, v)))
        assert gp1.status is StatusCode.INTERSECTED_WITH_GEOMETRY
        npt.assert_array_equal(gp1.x, gp2.x)
        npt.assert_array_equal(gp1.v, gp2.v)

    def test_solver_failure(self):
        # du/dt = u**2 blows up at t = 1
        def rhs(t, u, params):
            return u*u

        params = IntegrationParameters(self.m)
        integrator = GeodesicIntegrator(rhs, (0., 2.), params)
        with np.errstate(all='ignore'):
            gp = integrator.reinit_and_solve(np.ones(8))
            assert gp.status is StatusCode.OUT_OF_DOMAIN
            assert gp.lambda_end < 1.0 + 1e-3

            with pytest.raises(IntegrationFailedError):
                integrator.reinit_and_solve(np.ones(8), strict=True)


if __name__ == '__main__':
    unittest.main(verbosity=2)
