#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Redshift of disc emission seen by a distant observer

    Rays are traced backwards, from the observer into the disc. The physical
    photon is the image of the traced ray under the reflection
    (t, phi) -> (-t, -phi), an isometry of every stationary axisymmetric
    metric, so its momentum follows from the traced velocity by negating the
    r and theta components; see :func:`photon_momentum`.

.. Created on Thu Mar 23 10:05:47 2023

.. codeauthor: Michael J. Hayford
"""

import numpy as np

from gravray.typing import PointFunction
from gravray.spacetime.metric import dot
from gravray.spacetime.orbits import disc_four_velocity, static_four_velocity


def photon_momentum(k):
    """ physical momentum of a photon traced backwards with velocity `k` """
    return np.array([k[0], -k[1], -k[2], k[3]])


def disc_energy(m, x, k, isco_r=None):
    """ photon energy measured by disc matter at `x` """
    u = disc_four_velocity(m, x[1], isco_r)
    return -dot(m.metric(x), photon_momentum(k), u)


def observer_energy(m, x, k):
    """ photon energy measured by a static observer at `x` """
    u = static_four_velocity(m, x)
    return -dot(m.metric(x), photon_momentum(k), u)


def redshift_point_function(m, u_obs=None) -> PointFunction:
    """ Return a function of a :class:`~.GeodesicPoint` giving E_obs/E_disc.

    The observer sits at the start of the geodesic, `u_obs` is accepted for
    symmetry with the other image plane operations. The disc velocity splits
    into circular and plunging regimes at the ISCO.
    """
    isco_r = m.isco()

    def redshift(gp):
        e_obs = observer_energy(m, gp.x_init, gp.v_init)
        e_disc = disc_energy(m, gp.x, gp.v, isco_r)
        return e_obs/e_disc
    return redshift
