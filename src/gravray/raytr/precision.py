#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Inversion of the image plane to disc map

    The functions here answer the inverse questions of ray tracing:

        - which image plane offset, along a given polar angle, lands on a
          chosen disc radius (:func:`find_offset_for_radius` and the batch
          form :func:`impact_parameters_for_radius`)
        - which image plane point sends a ray closest to a chosen target
          position (:func:`impact_parameters_for_target`)
        - how much image plane area maps to a unit of (disc radius, redshift)
          (:func:`jacobian_area_factor`)

    Each of them traces many nearly identical rays and does so through one
    reusable :class:`~.integrator.GeodesicIntegrator` session. Convergence
    problems are not errors: the result is NaN and a warning is logged.

.. Created on Fri Mar 24 08:51:36 2023

.. codeauthor: Michael J. Hayford
"""

import logging
import warnings

import numpy as np
from scipy.optimize import brentq, minimize, newton

from gravray.geom.geometry import ThickDisc
from gravray.util.misc_math import (cartesian_distance, cartesian_velocity,
                                    to_cartesian)
from .integrator import Callback, init_integrator
from .redshift import redshift_point_function
from .sampler import angle_grid, impact_parameters_from_polar
from .statuscodes import StatusCode
from .trace import threaded_map
from .traceerror import DimensionMismatchError
from .tracingspec import resolve_spec

logger = logging.getLogger(__name__)


def projected_radius(gp):
    """ cylindrical radius of the end point of a geodesic """
    return gp.x[1]*np.sin(gp.x[2])


def emission_radius_measure(radius):
    """ signed miss distance of a geodesic from the emission `radius` """
    def measure(gp):
        if gp.status is StatusCode.INTERSECTED_WITH_GEOMETRY:
            return float(np.real(radius - projected_radius(gp)))
        return float(radius)
    return measure


def offset_geometry(d, radius):
    """ the geometry the offset search is solved against """
    if isinstance(d, ThickDisc):
        return d.datum_plane(radius)
    return d


def _secant_root(f, x0, atol):
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            root, results = newton(f, x0, tol=atol, disp=False,
                                   full_output=True)
        except (RuntimeError, ArithmeticError) as err:
            logger.debug(f"secant iteration failed: {err}")
            return np.nan, False
    return root, results.converged


def _bracketed_root(f, offset_max, n, atol):
    """ first sign change of f over [0, offset_max], refined with brentq """
    rs = np.linspace(0.0, offset_max, n)
    f_prev = f(rs[0])
    if f_prev == 0.0:
        return rs[0]
    for a, b in zip(rs[:-1], rs[1:]):
        f_b = f(b)
        if f_b == 0.0:
            return b
        if f_prev*f_b < 0:
            return brentq(f, a, b, xtol=atol)
        f_prev = f_b
    return None


def find_offset_for_radius(m, u, d, radius, theta, *, zero_atol=None,
                           offset_max=None, max_time=None, mu=0.0,
                           alpha0=0.0, beta0=0.0, spec=None, integrator=None):
    """ Find the image plane offset whose ray lands on the disc at `radius`.

    The search runs along the polar angle `theta` about (alpha0, beta0). A
    secant iteration started at offset_max/2 is tried first; if it fails or
    its root does not check out, the offsets in [0, offset_max] are scanned
    for a sign change and the bracket refined with Brent's method.

    Args:
        m: the metric
        u: observer 4-position
        d: the disc geometry; a :class:`~.ThickDisc` is replaced by the plane
           through its surface at `radius`
        radius: target emission radius
        theta: polar angle on the image plane
        zero_atol: root finder tolerance, overrides the TracingSpec value
        offset_max: largest offset searched, overrides the TracingSpec value
        max_time: affine parameter limit, default twice the observer radius
        mu: rest mass, 0 for photons
        spec: :class:`~.TracingSpec`
        integrator: a session built for the planar geometry, reused if given

    Returns:
        (r0, gp): the offset, NaN if none was found, and the geodesic traced
        at it
    """
    spec = resolve_spec(spec, zero_atol=zero_atol, offset_max=offset_max)
    if isinstance(d, ThickDisc):
        return find_offset_for_radius(m, u, offset_geometry(d, radius),
                                      radius, theta, max_time=max_time,
                                      mu=mu, alpha0=alpha0, beta0=beta0,
                                      spec=spec, integrator=integrator)

    u = np.asarray(u, dtype=float)
    if max_time is None:
        max_time = 2*u[1]
    if integrator is None:
        integrator = init_integrator(m, (0.0, max_time), geometry=d,
                                     spec=spec)
    measure = emission_radius_measure(radius)

    def trace_offset(r):
        alpha, beta = impact_parameters_from_polar(r, theta, alpha0, beta0)
        v = m.constrain(u, m.map_impact_parameters(u, alpha, beta), mu)
        return integrator.reinit_and_solve(np.concatenate((u, v)))

    def f(r):
        if r < 0:
            return -spec.negative_offset_penalty*r
        return measure(trace_offset(r))

    def check_root(r0):
        gp = trace_offset(r0)
        residual = measure(gp)
        return abs(residual) <= spec.poor_offset_factor*spec.zero_atol, gp

    gp = None
    r0, converged = _secant_root(f, 0.5*spec.offset_max, spec.zero_atol)
    if r0 < 0:
        logger.warning(f"Root finder found negative radius for r_e = {radius}"
                       f", theta = {theta}")
    if converged and 0.0 <= r0 <= spec.offset_max:
        ok, gp = check_root(r0)
        if ok:
            return r0, gp

    logger.debug(f"secant search failed for r_e = {radius}, theta = {theta};"
                 " bracketing")
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        r0 = _bracketed_root(f, spec.offset_max, spec.bracket_samples,
                             spec.zero_atol)
    if r0 is not None:
        ok, gp = check_root(r0)
        if ok:
            return r0, gp
    else:
        logger.warning(f"No sign change found for r_e = {radius}, "
                       f"theta = {theta} within offset_max = "
                       f"{spec.offset_max}")
        r0 = spec.offset_max

    if gp is None:
        gp = trace_offset(r0)
    logger.warning(f"Poor offset radius found for r_e = {radius}, "
                   f"theta = {theta}: measure = {measure(gp):.3g}, "
                   f"offset_max = {spec.offset_max}")
    return np.nan, gp


def impact_parameters_for_radius_into(alphas, betas, m, u, d, radius, *,
                                      alpha0=0.0, beta0=0.0, max_time=None,
                                      mu=0.0, spec=None, **kwargs):
    """ Fill `alphas` and `betas` with the image of the ring at `radius`.

    The polar angles are evenly spaced over [0, 2*pi), one per buffer entry.
    Offsets are found in parallel, one integrator session per worker thread.
    Entries whose offset search failed are NaN.
    """
    if np.shape(alphas) != np.shape(betas):
        raise DimensionMismatchError(np.shape(alphas), np.shape(betas))
    spec = resolve_spec(spec, **kwargs)
    u = np.asarray(u, dtype=float)
    if max_time is None:
        max_time = 2*u[1]
    thetas = angle_grid(len(alphas))
    plane = offset_geometry(d, radius)

    def make_session():
        return init_integrator(m, (0.0, max_time), geometry=plane, spec=spec)

    def solve(integrator, i):
        r0, gp = find_offset_for_radius(m, u, plane, radius, thetas[i],
                                        max_time=max_time, mu=mu,
                                        alpha0=alpha0, beta0=beta0,
                                        spec=spec, integrator=integrator)
        return r0

    offsets = threaded_map(solve, len(thetas), make_session, spec.max_workers)
    for i, (r0, theta) in enumerate(zip(offsets, thetas)):
        alphas[i], betas[i] = impact_parameters_from_polar(r0, theta,
                                                           alpha0, beta0)
    return alphas, betas


def impact_parameters_for_radius(m, u, d, radius, N=500, **kwargs):
    """ the image of the ring at `radius`, without the failed points

    Returns:
        alphas, betas: arrays of at most N image plane coordinates
    """
    alphas = np.zeros(N)
    betas = np.zeros(N)
    impact_parameters_for_radius_into(alphas, betas, m, u, d, radius,
                                      **kwargs)
    mask = ~(np.isnan(alphas) | np.isnan(betas))
    return alphas[mask], betas[mask]


class TargetObjective:
    """ Closest approach of the ray from image plane point (alpha, beta) to a
    target position.

    Each evaluation traces one ray. The running minimum of the Cartesian
    distance to the target is kept at every step, and every local minimum
    along the ray is located exactly as the zero crossing of the rate of
    change of the distance. The trace stops at the first local minimum
    closer than `d_tol`.
    """

    def __init__(self, target, m, u0, geometry=None, *, d_tol=None,
                 max_time=None, callback=None, mu=0.0, spec=None):
        self.spec = resolve_spec(spec, d_tol=d_tol)
        self.m = m
        self.u0 = np.asarray(u0, dtype=float)
        self.target = np.asarray(target, dtype=float)
        self.target_xyz = to_cartesian(self.target)
        self.mu = mu
        self.closest = np.inf
        if max_time is None:
            max_time = 2*self.u0[1]
        cbs = [self._distance_callback()]
        if callback is not None:
            cbs.append(callback)
        self.integrator = init_integrator(m, (0.0, max_time),
                                          geometry=geometry, callback=cbs,
                                          spec=self.spec)

    def distance(self, x):
        return float(np.real(cartesian_distance(self.target, x)))

    def _distance_callback(self):
        def condition(u, params):
            self.closest = min(self.closest, self.distance(u[:4]))
            k = to_cartesian(u[:4]) - self.target_xyz
            return np.real(k @ cartesian_velocity(u[:4], u[4:8]))

        def affect(params, u):
            d = self.distance(u[:4])
            self.closest = min(self.closest, d)
            return d > self.spec.d_tol
        return Callback(condition, affect, direction=1)

    def trace(self, alpha, beta):
        """ trace the ray from (alpha, beta), resetting the closest distance """
        self.closest = np.inf
        v = self.m.constrain(self.u0,
                             self.m.map_impact_parameters(self.u0, alpha,
                                                          beta), self.mu)
        gp = self.integrator.reinit_and_solve(np.concatenate((self.u0, v)))
        self.closest = min(self.closest, self.distance(gp.x))
        return gp

    def __call__(self, x):
        alpha, beta = x
        self.trace(alpha, beta)
        return self.closest


def make_target_objective(target, m, u0, geometry=None, **kwargs):
    """ return a :class:`TargetObjective`, objective((alpha, beta)) -> distance
    """
    return TargetObjective(target, m, u0, geometry, **kwargs)


def impact_parameters_for_target(target, m, u0, geometry=None, *,
                                 x0=(0.0, 0.0), method='Nelder-Mead',
                                 simplex_size=1.0, options=None, **kwargs):
    """ Find the image plane point whose ray passes closest to `target`.

    The objective is minimized with :func:`scipy.optimize.minimize`; there is
    no guarantee the global minimum is found.

    Returns:
        (alpha, beta, gp, distance): the optimum, the geodesic traced from it
        and its closest approach to the target
    """
    objective = make_target_objective(target, m, u0, geometry, **kwargs)
    x0 = np.asarray(x0, dtype=float)
    options = dict(options) if options else {}
    if method == 'Nelder-Mead' and 'initial_simplex' not in options:
        options['initial_simplex'] = np.array([x0,
                                               x0 + [simplex_size, 0.0],
                                               x0 + [0.0, simplex_size]])
    res = minimize(objective, x0, method=method, options=options)
    logger.debug(f"target optimizer: {res.message} ({res.nfev} traces)")
    alpha, beta = res.x
    gp = objective.trace(alpha, beta)
    return alpha, beta, gp, objective.closest


def jacobian_area_factor(m, u, d, alpha, beta, max_time=None, *, mu=0.0,
                         redshift_pf=None, spec=None, step=1e-20):
    """ |1/det J| of the map (alpha, beta) -> (disc radius, redshift).

    The Jacobian is found by complex-step differentiation: the whole chain,
    from impact parameters through the trace to the redshift, is evaluated
    with a tiny imaginary perturbation of alpha and then of beta, and the
    derivatives read off the imaginary parts.

    Returns NaN if the ray from (alpha, beta) misses the disc.
    """
    u = np.asarray(u, dtype=float)
    if max_time is None:
        max_time = 2*u[1]
    if redshift_pf is None:
        redshift_pf = redshift_point_function(m, u)
    integrator = init_integrator(m, (0.0, max_time), geometry=d, spec=spec)
    u_c = u.astype(complex)

    def radius_and_redshift(a, b):
        v = m.constrain(u_c, m.map_impact_parameters(u_c, a, b), mu)
        gp = integrator.reinit_and_solve(np.concatenate((u_c, v)))
        return gp, np.array([gp.x[1], redshift_pf(gp)])

    gp_a, f_a = radius_and_redshift(alpha + 1j*step, beta)
    gp_b, f_b = radius_and_redshift(alpha, beta + 1j*step)
    for gp in (gp_a, gp_b):
        if gp.status is not StatusCode.INTERSECTED_WITH_GEOMETRY:
            logger.debug(f"({alpha}, {beta}) missed the disc: "
                         f"{gp.status.name}")
            return np.nan
    jac = np.column_stack((np.imag(f_a), np.imag(f_b)))/step
    return abs(1/np.linalg.det(jac))
