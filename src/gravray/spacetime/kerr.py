#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" The Kerr and Schwarzschild metrics in Boyer-Lindquist coordinates

    Geometric units are used throughout, G = c = 1; lengths scale with the
    mass M.

.. Created on Tue Mar 14 14:40:02 2023

.. codeauthor: Michael J. Hayford
"""

import numpy as np

from .metric import AbstractMetric


class KerrMetric(AbstractMetric):
    """ Rotating black hole of mass M and spin parameter a (|a| <= M).

    Attributes:
        M: mass
        a: spin; positive values make prograde orbits co-rotate with +phi
    """

    def __init__(self, M=1.0, a=0.0):
        super().__init__(M=M)
        if abs(a) > M:
            raise ValueError(f"spin |a| = {abs(a)} exceeds mass M = {M}")
        self.a = a

    def __repr__(self):
        return f"{type(self).__name__}(M={self.M!r}, a={self.a!r})"

    def listobj_str(self):
        o_str = f"{type(self).__name__}: M={self.M}, a={self.a}\n"
        o_str += f"inner radius: {self.inner_radius():.6f}   "
        o_str += f"isco: {self.isco():.6f}\n"
        return o_str

    def components(self, r, theta):
        M, a = self.M, self.a
        sin_th, cos_th = np.sin(theta), np.cos(theta)
        s2 = sin_th**2
        sigma = r**2 + a**2*cos_th**2
        delta = r**2 - 2*M*r + a**2

        g_tt = -(1 - 2*M*r/sigma)
        g_rr = sigma/delta
        g_thth = sigma
        g_phph = (r**2 + a**2 + 2*M*a**2*r*s2/sigma)*s2
        g_tph = -2*M*a*r*s2/sigma
        return g_tt, g_rr, g_thth, g_phph, g_tph

    def components_jacobian(self, r, theta):
        M, a = self.M, self.a
        sin_th, cos_th = np.sin(theta), np.cos(theta)
        s2 = sin_th**2
        sigma = r**2 + a**2*cos_th**2
        delta = r**2 - 2*M*r + a**2
        sigma2 = sigma**2
        d_sigma_th = -2*a**2*cos_th*sin_th

        # d/dr
        g_tt_r = 2*M*(sigma - 2*r**2)/sigma2
        g_rr_r = (2*r*delta - sigma*(2*r - 2*M))/delta**2
        g_thth_r = 2*r
        g_phph_r = 2*r*s2 + 2*M*a**2*s2**2*(sigma - 2*r**2)/sigma2
        g_tph_r = -2*M*a*s2*(sigma - 2*r**2)/sigma2

        # d/dtheta
        g_tt_th = -2*M*r*d_sigma_th/sigma2
        g_rr_th = d_sigma_th/delta
        g_thth_th = d_sigma_th
        g_phph_th = (2*(r**2 + a**2)*sin_th*cos_th
                     + 2*M*a**2*r*(4*s2*sin_th*cos_th*sigma
                                   - s2**2*d_sigma_th)/sigma2)
        g_tph_th = -2*M*a*r*(2*sin_th*cos_th*sigma - s2*d_sigma_th)/sigma2

        return ((g_tt_r, g_rr_r, g_thth_r, g_phph_r, g_tph_r),
                (g_tt_th, g_rr_th, g_thth_th, g_phph_th, g_tph_th))

    def inner_radius(self):
        return self.M + np.sqrt(self.M**2 - self.a**2)

    def isco(self):
        """ prograde ISCO, Bardeen, Press & Teukolsky (1972) """
        M = self.M
        chi = self.a/M
        z1 = 1 + np.cbrt(1 - chi**2)*(np.cbrt(1 + chi) + np.cbrt(1 - chi))
        z2 = np.sqrt(3*chi**2 + z1**2)
        return M*(3 + z2 - np.sign(chi)*np.sqrt((3 - z1)*(3 + z1 + 2*z2)))

    def keplerian_angular_velocity(self, r):
        sqrt_m = np.sqrt(self.M)
        return sqrt_m/(r**1.5 + self.a*sqrt_m)


class SchwarzschildMetric(KerrMetric):
    """ Non-rotating black hole of mass M.

    The geodesic equation uses the closed form Christoffel symbols, which is
    noticeably faster than the generic connection of :class:`KerrMetric`.
    """

    def __init__(self, M=1.0):
        super().__init__(M=M, a=0.0)

    def __repr__(self):
        return f"{type(self).__name__}(M={self.M!r})"

    def inner_radius(self):
        return 2*self.M

    def isco(self):
        return 6*self.M

    def geodesic_acceleration(self, x, v):
        M = self.M
        r, theta = x[1], x[2]
        vt, vr, vth, vph = v[0], v[1], v[2], v[3]
        f = 1 - 2*M/r
        sin_th, cos_th = np.sin(theta), np.cos(theta)

        at = -2*M/(r**2*f)*vt*vr
        ar = (-M*f/r**2*vt**2 + M/(r**2*f)*vr**2
              + r*f*(vth**2 + sin_th**2*vph**2))
        ath = -2/r*vr*vth + sin_th*cos_th*vph**2
        aph = -2/r*vr*vph - 2*cos_th/sin_th*vth*vph
        return np.array([at, ar, ath, aph])
