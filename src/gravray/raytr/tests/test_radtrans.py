#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Created on Thu Mar 23 15:02:51 2023

@author: Mike
"""


import unittest
import pytest
from pytest import approx
import numpy as np
from gravray.geom.geometry import ThinDisc, ThickDisc, CompositeGeometry
from gravray.raytr.radtrans import (RadiativeTransferParameters,
                                    trace_radiative_transfer)
from gravray.raytr.statuscodes import StatusCode
from gravray.raytr.traceerror import GeometryRequiredError
from gravray.spacetime.kerr import SchwarzschildMetric


def spherical(rho, z):
    return np.array([0., np.hypot(rho, z), np.arctan2(rho, z), 0.])


def downward_velocity(x):
    """ unit speed in the -z direction at x """
    r, theta = x[1], x[2]
    return np.array([0., -np.cos(theta), np.sin(theta)/r, 0.])


def slab(rho_min=10.0, rho_max=30.0, **kwargs):
    """ a disc of constant half thickness 1 """
    return ThickDisc(lambda rho: 1.0, rho_min, rho_max, **kwargs)


class RadiativeTransferTestCase(unittest.TestCase):
    """ In a nearly flat spacetime a vertical ray crosses the slab along a
    path of length 2, with c = -g(p, u) close to 1.
    """
    def setUp(self):
        self.m = SchwarzschildMetric(M=1e-6)
        self.x0 = spherical(20.0, 10.0)
        self.v0 = downward_velocity(self.x0)

    def rt(self, geometry, x0=None, I0=0.0):
        x0 = self.x0 if x0 is None else x0
        return trace_radiative_transfer(self.m, x0, downward_velocity(x0),
                                        geometry, (0., 30.), I0=I0)

    def test_emission(self):
        gp = self.rt(slab(emissivity=2.0))
        assert gp.status is StatusCode.NO_STATUS
        assert gp.aux == approx(4.0, rel=1e-4)

    def test_absorption(self):
        gp = self.rt(slab(absorption=0.5), I0=1.0)
        assert gp.aux == approx(np.exp(-1.0), rel=1e-4)

    def test_emission_and_absorption_signs(self):
        emitting = self.rt(slab(emissivity=1.0), I0=1.0)
        absorbing = self.rt(slab(absorption=1.0), I0=1.0)
        assert emitting.aux > 1.0
        assert absorbing.aux < 1.0

    def test_optically_thin(self):
        gp = self.rt(slab(emissivity=2.0, optically_thin=True))
        assert gp.aux == approx(4.0, rel=1e-3)

    def test_miss(self):
        gp = self.rt(slab(emissivity=2.0), x0=spherical(50.0, 10.0), I0=0.5)
        assert gp.aux == 0.5

    def test_start_inside(self):
        # starts at z = 0.5, so only 1.5 of the slab lies ahead
        gp = self.rt(slab(emissivity=2.0), x0=spherical(20.0, 0.5))
        assert gp.aux == approx(3.0, rel=1e-4)

    def test_composite_sum(self):
        inner = slab(10.0, 20.0, emissivity=1.0)
        outer = slab(15.0, 40.0, emissivity=3.0)
        gp = self.rt(CompositeGeometry(inner, outer), x0=spherical(17.0, 10.))
        assert gp.aux == approx(8.0, rel=1e-4)

    def test_slab_within_one_step(self):
        # the whole slab is crossed in a single solver step, between two
        # step ends; only the interior checks of the step see it
        gp = self.rt(slab(10.0, 20.0, emissivity=1.0),
                     x0=spherical(17.0, 10.))
        assert gp.status is StatusCode.NO_STATUS
        assert gp.aux == approx(2.0, rel=1e-4)

        gp = trace_radiative_transfer(self.m, spherical(17.0, 10.),
                                      downward_velocity(spherical(17.0, 10.)),
                                      slab(10.0, 20.0, emissivity=1.0),
                                      (0., 30.), interp_points=0)
        assert gp.aux == 0.0

    def test_optical_thinness_method(self):
        class ThinSlab(ThickDisc):
            def is_optically_thin(self):
                return True

        gp = self.rt(ThinSlab(lambda rho: 1.0, 10.0, 30.0, emissivity=2.0))
        assert gp.aux == approx(4.0, rel=1e-3)

    def test_surface_stops_ray(self):
        geometry = CompositeGeometry(slab(emissivity=2.0), ThinDisc(0., 400.))
        gp = self.rt(geometry)
        assert gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY
        # half of the slab lies above the midplane
        assert gp.aux == approx(2.0, rel=1e-4)

    def test_batch(self):
        vels = np.array([self.v0, self.v0])
        gps = trace_radiative_transfer(self.m, self.x0, vels,
                                       slab(emissivity=2.0), (0., 30.))
        assert len(gps) == 2
        assert gps[0].aux == gps[1].aux

    def test_geometry_required(self):
        with pytest.raises(GeometryRequiredError):
            trace_radiative_transfer(self.m, self.x0, self.v0, None,
                                     (0., 30.))

    def test_within_geometry_reset(self):
        geometry = CompositeGeometry(slab(), slab(40.0, 60.0))
        params = RadiativeTransferParameters(self.m, geometry)
        params.reset(np.concatenate((spherical(20.0, 0.0), self.v0, [0.])))
        assert list(params.within_geometry) == [True, False]
        params.toggle(1)
        assert list(params.within_geometry) == [True, True]
        params.reset(np.concatenate((self.x0, self.v0, [0.])))
        assert list(params.within_geometry) == [False, False]


if __name__ == '__main__':
    unittest.main(verbosity=2)
