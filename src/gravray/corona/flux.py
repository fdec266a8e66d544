#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Flux of the corona reflected off the disc

    The flux reaching each disc element combines the source to disc
    redshift, the proper area of the element and the Lorentz factor of the
    disc matter. Disc velocities split at the ISCO through
    :func:`~.orbits.disc_four_velocity`.

.. Created on Mon Mar 27 16:04:51 2023

.. codeauthor: Michael J. Hayford
"""

import numpy as np

from gravray.raytr.traceerror import (DimensionMismatchError,
                                      UnsupportedCombinationError)
from gravray.spacetime.metric import (AbstractMetric, dot, frame_components,
                                      lnr_basis)
from gravray.spacetime.orbits import disc_four_velocity, is_plunging
from .models import CoronaModel, DiscProfile


def lorentz_factor(g, isco_r, x, v):
    """ Lorentz factor of `v` in the locally non-rotating frame of metric `g`.

    Only the azimuthal velocity counts outside the ISCO; inside, the radial
    velocity of the plunging matter is included as well.
    """
    comps = frame_components(g, lnr_basis(g), v)
    v_ph = comps[3]/comps[0]
    if is_plunging(x[1], isco_r):
        v_r = comps[1]/comps[0]
        return 1/np.sqrt(1 - v_r**2 - v_ph**2)
    return 1/np.sqrt(1 - v_ph**2)


def metric_lorentz_factor(m, x, v):
    """ Lorentz factor of the azimuthal motion of `v` at `x` """
    g = m.metric(x)
    comps = frame_components(g, lnr_basis(g), v)
    return 1/np.sqrt(1 - (comps[3]/comps[0])**2)


def energy_ratio(m, gp, v_src):
    """ E_source/E_disc for the geodesic `gp` emitted by a source moving with
    `v_src`
    """
    e_src = -dot(m.metric(gp.x_init), gp.v_init, v_src)
    v_disc = disc_four_velocity(m, gp.x[1])
    e_disc = -dot(m.metric(gp.x), gp.v, v_disc)
    return e_src/e_disc


def flux_source_to_disc(m, model, points, areas=None, *, alpha=1.0):
    """ Flux delivered by the corona `model` to each illuminated disc point.

    Args:
        m: the metric
        model: a :class:`~.CoronaModel`
        points: a :class:`~.DiscProfile`, or a sequence of geodesic points
                traced from the source to the disc
        areas: the disc area of each point; taken from the profile if
               `points` is a :class:`~.DiscProfile`
        alpha: photon index of the source spectrum

    Returns:
        array of the flux at each point

    Raises:
        UnsupportedCombinationError: no flux calculation exists for the
                                     given metric, model and points
    """
    if isinstance(points, DiscProfile) and areas is None:
        points, areas = points.geodesic_points, points.areas
    if (not isinstance(m, AbstractMetric) or
            not isinstance(model, CoronaModel) or
            isinstance(points, DiscProfile) or areas is None):
        raise UnsupportedCombinationError('flux_source_to_disc', m, model,
                                          points)

    areas = np.asarray(areas, dtype=float)
    if len(points) != len(areas):
        raise DimensionMismatchError(len(points), len(areas))

    v_source = model.source_velocity(m)
    total_area = np.sum(areas)
    isco_r = m.isco()

    flux = np.empty(len(points))
    for i, gp in enumerate(points):
        g_1 = m.metric(gp.x_init)
        g_2 = m.metric(gp.x)
        e_s = -dot(g_1, gp.v_init, v_source)
        v_disc = disc_four_velocity(m, gp.x[1], isco_r)
        e_d = -dot(g_2, gp.v, v_disc)
        g_sd = e_d/e_s
        dA = 1/np.sqrt(g_2[1, 1]*g_2[3, 3])
        gamma = lorentz_factor(g_2, isco_r, gp.x, v_disc)
        f_sd = total_area/areas[i]
        flux[i] = np.real(g_sd**(1 + alpha) * e_d**(-alpha) * dA*f_sd/gamma)
    return flux
