#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" miscellaneous functions for working with numpy vectors and floats

    The comparison helpers (:func:`rabs`, :func:`rmin`, :func:`rmax`) decide
    branches on the real part only, so that they stay analytic when fed the
    complex values used for complex-step differentiation.

.. Created on Wed May 23 15:27:06 2018

.. codeauthor: Michael J. Hayford
"""
import numpy as np

from gravray.typing import Vec3d


def rabs(x):
    """ absolute value that keeps the imaginary (derivative) part analytic """
    return -x if np.real(x) < 0 else x


def rmin(a, b):
    """ minimum of a and b, compared on the real part """
    return a if np.real(a) <= np.real(b) else b


def rmax(a, b):
    """ maximum of a and b, compared on the real part """
    return a if np.real(a) >= np.real(b) else b


def to_cartesian(x) -> Vec3d:
    """ return the cartesian point of a spherical position

    `x` may be a 4-position (t, r, theta, phi) or a 3-position
    (r, theta, phi); only the last three entries are used.
    """
    r, theta, phi = x[-3], x[-2], x[-1]
    sin_th = np.sin(theta)
    return np.array([r*sin_th*np.cos(phi),
                     r*sin_th*np.sin(phi),
                     r*np.cos(theta)])


def cartesian_distance(x1, x2):
    """ return the euclidean distance between two spherical positions """
    k = to_cartesian(x1) - to_cartesian(x2)
    return np.sqrt(np.sum(k*k))


def cartesian_velocity(x, v):
    """ cartesian components of the spatial part of `v` at 4-position `x` """
    r, theta, phi = x[1], x[2], x[3]
    dr, dth, dph = v[1], v[2], v[3]
    sin_th, cos_th = np.sin(theta), np.cos(theta)
    sin_ph, cos_ph = np.sin(phi), np.cos(phi)
    return np.array([sin_th*cos_ph*dr + r*cos_th*cos_ph*dth
                     - r*sin_th*sin_ph*dph,
                     sin_th*sin_ph*dr + r*cos_th*sin_ph*dth
                     + r*sin_th*cos_ph*dph,
                     cos_th*dr - r*sin_th*dth])
