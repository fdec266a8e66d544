#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Base class and generic operations for stationary, axisymmetric metrics

    A concrete metric only has to supply its non-zero components

        (g_tt, g_rr, g_thth, g_phph, g_tph)

    and their derivatives with respect to r and theta, along with a handful of
    characteristic radii. Everything else the tracer consumes, i.e. the
    geodesic equation, the locally non-rotating frame, the velocity
    constraint and the circular/plunging orbit four-velocities, is derived
    here from those components.

    All functions accept complex arguments; this is what allows the image
    plane Jacobian to be computed by complex-step differentiation through the
    complete tracing pipeline.

.. Created on Tue Mar 14 09:12:41 2023

.. codeauthor: Michael J. Hayford
"""

import logging
from functools import cached_property

import numpy as np

from gravray.typing import Mat4d, Vec4d

logger = logging.getLogger(__name__)


def metric_matrix(comps):
    """ assemble the 4x4 metric from (g_tt, g_rr, g_thth, g_phph, g_tph) """
    g_tt, g_rr, g_thth, g_phph, g_tph = comps
    g = np.zeros((4, 4), dtype=np.result_type(*comps, float))
    g[0, 0] = g_tt
    g[1, 1] = g_rr
    g[2, 2] = g_thth
    g[3, 3] = g_phph
    g[0, 3] = g[3, 0] = g_tph
    return g


def inverse_metric_matrix(comps):
    """ invert the metric analytically, using its (t, phi) block structure """
    g_tt, g_rr, g_thth, g_phph, g_tph = comps
    det = g_tt*g_phph - g_tph**2
    return metric_matrix((g_phph/det, 1/g_rr, 1/g_thth, g_tt/det, -g_tph/det))


def lnr_basis(g):
    """ Basis vectors of the locally non-rotating frame for the metric `g`.

    Returns the contravariant components of (e_t, e_r, e_theta, e_phi). The
    time-like vector is the four-velocity of the zero angular momentum
    observer, i.e. it rotates with the frame dragging angular velocity
    ``omega = -g_tph/g_phph``.
    """
    g_tt, g_rr, g_thth, g_phph = g[0, 0], g[1, 1], g[2, 2], g[3, 3]
    g_tph = g[0, 3]
    omega = -g_tph/g_phph
    lapse = np.sqrt(-(g_tt - g_tph**2/g_phph))
    zero = 0*lapse
    e_t = np.array([1/lapse, zero, zero, omega/lapse])
    e_r = np.array([zero, 1/np.sqrt(g_rr), zero, zero])
    e_th = np.array([zero, zero, 1/np.sqrt(g_thth), zero])
    e_ph = np.array([zero, zero, zero, 1/np.sqrt(g_phph)])
    return e_t, e_r, e_th, e_ph


def frame_components(g, basis, v):
    """ components of vector `v` measured in the orthonormal `basis` """
    gv = g @ v
    e_t, e_r, e_th, e_ph = basis
    return np.array([-(e_t @ gv), e_r @ gv, e_th @ gv, e_ph @ gv])


def dot(g, u, v):
    """ the scalar product of u and v with respect to the metric g """
    return u @ (g @ v)


class AbstractMetric:
    """ Interface and generic physics of a stationary, axisymmetric metric.

    Subclasses implement:

        - :meth:`components`: (g_tt, g_rr, g_thth, g_phph, g_tph) at (r, theta)
        - :meth:`components_jacobian`: the derivatives of the components with
          respect to r and theta
        - :meth:`inner_radius`: the outer event horizon
        - :meth:`isco`: the innermost stable circular orbit
        - :meth:`keplerian_angular_velocity`: dphi/dt of circular equatorial
          orbits

    Metric instances are immutable after construction and may be shared by
    any number of concurrent traces.
    """

    def __init__(self, M=1.0):
        self.M = M

    def __repr__(self):
        return f"{type(self).__name__}(M={self.M!r})"

    def listobj_str(self):
        o_str = f"{type(self).__name__}: M={self.M}\n"
        o_str += f"inner radius: {self.inner_radius():.6f}   "
        o_str += f"isco: {self.isco():.6f}\n"
        return o_str

    def components(self, r, theta):
        raise NotImplementedError

    def components_jacobian(self, r, theta):
        raise NotImplementedError

    def inner_radius(self):
        raise NotImplementedError

    def isco(self):
        raise NotImplementedError

    def keplerian_angular_velocity(self, r):
        raise NotImplementedError

    def metric(self, x: Vec4d) -> Mat4d:
        """ the covariant metric tensor at position `x` """
        return metric_matrix(self.components(x[1], x[2]))

    def inverse_metric(self, x: Vec4d) -> Mat4d:
        """ the contravariant metric tensor at position `x` """
        return inverse_metric_matrix(self.components(x[1], x[2]))

    def christoffel(self, x):
        """ Connection coefficients Gamma^a_bc at position `x`.

        Returns a (4, 4, 4) array indexed [a, b, c].
        """
        r, theta = x[1], x[2]
        comps = self.components(r, theta)
        jac_r, jac_th = self.components_jacobian(r, theta)
        dtype = np.result_type(*comps, *jac_r, *jac_th, float)
        dg = np.zeros((4, 4, 4), dtype=dtype)
        dg[1] = metric_matrix(jac_r)
        dg[2] = metric_matrix(jac_th)
        # s[d, b, c] = d_b g_dc + d_c g_db - d_d g_bc
        s = np.einsum('bdc->dbc', dg) + np.einsum('cdb->dbc', dg) - dg
        return 0.5*np.einsum('ad,dbc->abc', inverse_metric_matrix(comps), s)

    def geodesic_acceleration(self, x: Vec4d, v: Vec4d) -> Vec4d:
        """ the right hand side of the geodesic equation, dv/dlambda """
        return -np.einsum('abc,b,c->a', self.christoffel(x), v, v)

    def local_frame(self, x):
        """ the locally non-rotating orthonormal frame at `x` """
        return lnr_basis(self.metric(x))

    def constrain(self, x, v, mu=0.0):
        """ Solve for v^t so that g(v, v) = -mu**2, future directed.

        Only the spatial components of `v` are used. `mu` is the rest mass:
        0 for photons, 1 for massive particles normalized per unit mass.
        """
        g = self.metric(x)
        vs = np.asarray(v)[1:]
        a = g[0, 0]
        b = 2*(g[0, 1:] @ vs)
        c = vs @ g[1:, 1:] @ vs + mu**2
        vt = -(b + np.sqrt(b*b - 4*a*c))/(2*a)
        return np.array([vt, *vs])

    def constrain_all(self, x, v, mu=0.0):
        """ apply :meth:`constrain` to a single velocity or rows of velocities

        `x` may be a single position shared by all velocities, or an array
        with one position per velocity row.
        """
        v = np.asarray(v)
        if v.ndim == 1:
            return self.constrain(x, v, mu)
        x = np.asarray(x)
        if x.ndim == 1:
            return np.array([self.constrain(x, vi, mu) for vi in v])
        return np.array([self.constrain(xi, vi, mu) for xi, vi in zip(x, v)])

    def map_impact_parameters(self, x, alpha, beta):
        """ Unconstrained velocity of a ray leaving the image plane at `x`.

        The observer is assumed far from the hole; (alpha, beta) are the
        horizontal and vertical image plane coordinates. The ray initially
        travels radially inward; v^t is filled in by :meth:`constrain`.
        """
        r, theta = x[1], x[2]
        return np.array([0.0, -1.0, beta/r**2, alpha/(r**2*np.sin(theta))])

    def circular_four_velocity(self, r):
        """ four-velocity of the circular equatorial orbit at radius `r` """
        g = self.metric(np.array([0.0, r, np.pi/2, 0.0]))
        omega = self.keplerian_angular_velocity(r)
        ut = 1/np.sqrt(-(g[0, 0] + 2*g[0, 3]*omega + g[3, 3]*omega**2))
        return np.array([ut, 0*ut, 0*ut, omega*ut])

    @cached_property
    def isco_energy_momentum(self):
        """ specific energy and angular momentum of the ISCO orbit """
        r_isco = self.isco()
        u = self.circular_four_velocity(r_isco)
        g = self.metric(np.array([0.0, r_isco, np.pi/2, 0.0]))
        u_cov = g @ u
        return -u_cov[0], u_cov[3]

    def plunging_four_velocity(self, r):
        """ Four-velocity of matter plunging from the ISCO at radius `r`.

        The plunging orbit conserves the ISCO energy and angular momentum;
        the radial component follows from the normalization and is negative,
        i.e. infalling.
        """
        energy, ang_mom = self.isco_energy_momentum
        ginv = self.inverse_metric(np.array([0.0, r, np.pi/2, 0.0]))
        u_t, u_ph = -energy, ang_mom
        ut = ginv[0, 0]*u_t + ginv[0, 3]*u_ph
        uph = ginv[0, 3]*u_t + ginv[3, 3]*u_ph
        q = ginv[0, 0]*u_t**2 + 2*ginv[0, 3]*u_t*u_ph + ginv[3, 3]*u_ph**2
        ur2 = ginv[1, 1]*(-1 - q)
        if np.real(ur2) < 0:
            logger.debug("plunging u^r**2 = %s clamped to 0 at r = %s",
                         np.real(ur2), np.real(r))
            ur2 = 0*ur2
        ur = -np.sqrt(ur2)
        return np.array([ut, ur, 0*ut, uph])
