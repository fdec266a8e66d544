#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Corona source models and the disc profile they illuminate

.. Created on Mon Mar 27 13:22:09 2023

.. codeauthor: Michael J. Hayford
"""

import logging

import numpy as np

from gravray.raytr.sampler import sphere_directions
from gravray.raytr.statuscodes import StatusCode
from gravray.raytr.trace import tracegeodesics
from gravray.raytr.traceerror import (DimensionMismatchError,
                                      UnsupportedCombinationError)
from gravray.spacetime.orbits import static_four_velocity

logger = logging.getLogger(__name__)


class CoronaModel:
    """ Base class of corona models.

    A model supplies the position and four-velocity of the emitting source
    and the initial velocities of the rays it emits.
    """

    def source_position(self, m):
        raise UnsupportedCombinationError('source_position', m, self)

    def source_velocity(self, m):
        raise UnsupportedCombinationError('source_velocity', m, self)

    def sample_velocities(self, m, n):
        """ n emission velocities, isotropic in the local frame of the source
        """
        x = self.source_position(m)
        e_t, e_r, e_th, e_ph = m.local_frame(x)
        vels = []
        for chi, psi in sphere_directions(n):
            vels.append(e_t + np.cos(chi)*e_r + np.sin(chi)*(np.cos(psi)*e_th
                                                             + np.sin(psi)*e_ph))
        return np.array(vels)

    def trace_to_disc(self, m, disc, n, max_time=None, **kwargs):
        """ trace `n` rays from the source and keep those that hit the disc """
        x = self.source_position(m)
        if max_time is None:
            max_time = 2e3
        gps = tracegeodesics(m, x, self.sample_velocities(m, n),
                             (0.0, max_time), disc, **kwargs)
        return DiscProfile.from_geodesic_points(gps)


class LampPostModel(CoronaModel):
    """ Point source at rest on (or near) the spin axis.

    Attributes:
        h: height of the source above the hole
        theta: polar angle of the source, kept off the axis itself where the
               Boyer-Lindquist coordinates are singular
        phi: azimuth of the source
    """

    def __init__(self, h=10.0, theta=0.01, phi=0.0):
        self.h = h
        self.theta = theta
        self.phi = phi

    def __repr__(self):
        return (f"{type(self).__name__}(h={self.h!r}, theta={self.theta!r}, "
                f"phi={self.phi!r})")

    def listobj_str(self):
        return (f"{type(self).__name__}: h={self.h}, theta={self.theta}, "
                f"phi={self.phi}\n")

    def source_position(self, m):
        return np.array([0.0, self.h, self.theta, self.phi])

    def source_velocity(self, m):
        return static_four_velocity(m, self.source_position(m))


class DiscProfile:
    """ The disc points illuminated by a source and the area each represents.

    Attributes:
        geodesic_points: list of :class:`~.GeodesicPoint` ending on the disc
        areas: array of the disc area assigned to each point
    """

    def __init__(self, geodesic_points, areas=None):
        self.geodesic_points = list(geodesic_points)
        if areas is None:
            areas = np.ones(len(self.geodesic_points))
        self.areas = np.asarray(areas, dtype=float)
        if len(self.areas) != len(self.geodesic_points):
            raise DimensionMismatchError(len(self.geodesic_points),
                                         len(self.areas))

    def __len__(self):
        return len(self.geodesic_points)

    @classmethod
    def from_geodesic_points(cls, gps, areas=None):
        """ build a profile from the points that intersected the disc """
        if areas is None:
            areas = [None]*len(gps)
        kept = [(gp, a) for gp, a in zip(gps, areas)
                if gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY]
        logger.debug(f"{len(kept)} of {len(gps)} rays reached the disc")
        points = [gp for gp, a in kept]
        if any(a is None for gp, a in kept):
            return cls(points)
        return cls(points, [a for gp, a in kept])

    def radii(self):
        """ cylindrical radii of the disc points """
        return np.array([np.real(gp.x[1]*np.sin(gp.x[2]))
                         for gp in self.geodesic_points])
