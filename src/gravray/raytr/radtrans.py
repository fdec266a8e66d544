#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Radiative transfer along geodesics

    The geodesic state is augmented with the invariant intensity I, giving a
    9 component state. Inside a volume of the geometry the intensity obeys

        dI/dlambda = c (-a_nu I + j_nu/nu**3)

    where c = -g(p, u) is the photon energy measured by the local disc matter
    and a_nu, j_nu are the geometry's absorption and emissivity.

    Which volumes a ray is inside is tracked differently for the two kinds of
    volume. Optically thick volumes flip a flag in
    :class:`RadiativeTransferParameters` every time their surface is crossed;
    optically thin ones are simply tested with
    :meth:`~.AccretionGeometry.is_inside` at every evaluation. Surfaces (thin
    discs and planes) stop the ray as in plain tracing.

.. Created on Wed Mar 22 15:47:21 2023

.. codeauthor: Michael J. Hayford
"""

import logging

import numpy as np

from gravray.spacetime.metric import dot
from gravray.spacetime.orbits import disc_four_velocity
from .integrator import (Callback, GeodesicIntegrator, IntegrationParameters,
                         create_callback_set, intersection_callbacks)
from .redshift import photon_momentum
from .trace import threaded_map
from .traceerror import GeometryRequiredError
from .tracingspec import resolve_spec

logger = logging.getLogger(__name__)


class RadiativeTransferParameters(IntegrationParameters):
    """ Integration parameters plus the inside/outside flags of the geometry.

    Attributes:
        components: the elementary geometries being traced through
        within_geometry: one flag per component, True while the ray is inside
    """

    def __init__(self, metric, geometry):
        super().__init__(metric)
        self.components = geometry.components
        self.within_geometry = np.zeros(len(self.components), dtype=bool)

    def reset(self, u0=None):
        super().reset(u0)
        if u0 is None:
            self.within_geometry[:] = False
        else:
            x = u0[:4]
            for i, g in enumerate(self.components):
                self.within_geometry[i] = np.real(g.signed_distance(x)) < 0

    def toggle(self, i):
        self.within_geometry[i] = not self.within_geometry[i]


def radiative_transfer(m, x, k, g, intensity, nu, inv_nu3, isco_r):
    """ dI/dlambda contributed by the geometry `g` at `x` """
    a_nu = g.absorption_coefficient(m, x, nu)
    j_nu = g.emissivity_coefficient(m, x, nu)
    u = disc_four_velocity(m, x[1], isco_r)
    c = -dot(m.metric(x), photon_momentum(k), u)
    return c*(-a_nu*intensity + j_nu*inv_nu3)


def intensity_delta(m, x, k, components, within, intensity, nu, inv_nu3,
                    isco_r):
    """ sum the contributions of all the components the ray is inside """
    total = 0.0
    for i, g in enumerate(components):
        if not g.volumetric:
            continue
        inside = g.is_inside(x) if g.is_optically_thin() else within[i]
        if inside:
            total = total + radiative_transfer(m, x, k, g, intensity, nu,
                                               inv_nu3, isco_r)
    return total


def radiative_transfer_rhs(geometry, nu, isco_r):
    components = geometry.components
    inv_nu3 = nu**-3

    def rhs(t, u, params):
        m = params.metric
        x, k, intensity = u[:4], u[4:8], u[8]
        dI = intensity_delta(m, x, k, components, params.within_geometry,
                             intensity, nu, inv_nu3, isco_r)
        return np.concatenate((k, m.geodesic_acceleration(x, k), [dI]))
    return rhs


def toggling_callback(g, i):
    """ flip within_geometry[i] whenever the surface of `g` is crossed """
    def condition(u, params):
        d = g.signed_distance(u)
        return -d if params.within_geometry[i] else d

    def affect(params, u):
        params.toggle(i)
        return True
    return Callback(condition, affect, direction=-1)


def radiative_transfer_callbacks(geometry):
    cbs = []
    for i, g in enumerate(geometry.components):
        if not g.volumetric:
            cbs += intersection_callbacks(g)
        elif not g.is_optically_thin():
            cbs.append(toggling_callback(g, i))
    return cbs


def init_radiative_transfer_integrator(m, geometry, time_domain, nu=1.0,
                                       callback=None, spec=None):
    """ build an integrator session for the 9 component state """
    if geometry is None:
        raise GeometryRequiredError()
    spec = resolve_spec(spec)
    params = RadiativeTransferParameters(m, geometry)
    cbs = create_callback_set(m, callback=callback, spec=spec)
    cbs += radiative_transfer_callbacks(geometry)
    rhs = radiative_transfer_rhs(geometry, nu, m.isco())
    return GeodesicIntegrator(rhs, time_domain, params, cbs, spec)


def trace_radiative_transfer(m, position, velocity, geometry, time_domain, *,
                             nu=1.0, I0=0.0, mu=0.0, callback=None, spec=None,
                             **kwargs):
    """ Trace geodesics while integrating the intensity along them.

    Args:
        m: the metric
        position: a 4-position shared by all rays
        velocity: a 4-velocity, or an array with one 4-velocity per row
        geometry: the emitting and absorbing geometry; required
        time_domain: (lambda_start, lambda_end)
        nu: frequency of the transferred radiation
        I0: intensity at the start of the trace

    Returns:
        a :class:`~.GeodesicPoint` whose `aux` field is the final intensity,
        or a list of them for a batch
    """
    if geometry is None:
        raise GeometryRequiredError()
    spec = resolve_spec(spec, **kwargs)
    position = np.asarray(position, dtype=float)

    def make_session():
        return init_radiative_transfer_integrator(m, geometry, time_domain,
                                                  nu=nu, callback=callback,
                                                  spec=spec)

    def initial_state(v):
        return np.concatenate((position, v, [I0]))

    velocity = np.asarray(velocity)
    if velocity.ndim == 1:
        v = m.constrain(position, velocity, mu)
        return make_session().reinit_and_solve(initial_state(v))

    velocities = m.constrain_all(position, velocity, mu)

    def trace_one(session, i):
        return session.reinit_and_solve(initial_state(velocities[i]))

    logger.debug(f"radiative transfer along {len(velocity)} geodesics")
    return threaded_map(trace_one, len(velocity), make_session,
                        spec.max_workers)
