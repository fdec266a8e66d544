#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2020 Michael J. Hayford
"""Mappings and distributions of image plane and emission coordinates

.. Created on Tue Mar 24 21:14:31 2020

.. codeauthor: Michael J. Hayford
"""

import numpy as np


def impact_parameters_from_polar(r, theta, alpha0=0.0, beta0=0.0):
    """ image plane (alpha, beta) of polar offset (r, theta) about (alpha0, beta0)
    """
    return r*np.cos(theta) + alpha0, r*np.sin(theta) + beta0


def polar_from_impact_parameters(alpha, beta, alpha0=0.0, beta0=0.0):
    """ polar offset (r, theta) of (alpha, beta) about (alpha0, beta0)

    theta is returned in [0, 2*pi).
    """
    da, db = alpha - alpha0, beta - beta0
    return np.hypot(da, db), np.arctan2(db, da) % (2*np.pi)


def angle_grid(n):
    """ n polar angles evenly spaced over [0, 2*pi), without the duplicate 2*pi
    """
    return np.linspace(0.0, 2*np.pi, n, endpoint=False)


# phi(1) = 1.61803398874989484820458683436563
# phi(2) = 1.32471795724474602596090885447809
def phi(d):
    x = 2.0000
    for i in range(10):
        x = pow(1+x, 1/(d+1))
    return x


def R_2_quasi_random_generator(n):
    """A 2d sequence based on a R**2 quasi-random sequence

    See `The Unreasonable Effectiveness of Quasirandom Sequences
    <http://extremelearning.com.au/unreasonable-effectiveness-of-quasirandom-sequences/ >`
    """
    d = 2
    g = phi(d)
    alpha = np.array([pow(1/g, j+1) % 1 for j in range(d)])
    seed = 0.5
    for i in range(n):
        yield (seed + alpha*(i+1)) % 1


def unit_square_to_sphere(uv):
    """ map a unit square sample to (polar, azimuth) uniform on the sphere """
    cos_chi = 1 - 2*uv[0]
    return np.arccos(cos_chi), 2*np.pi*uv[1]


def sphere_directions(n):
    """ n quasi-random (polar, azimuth) pairs covering the unit sphere """
    return np.array([unit_square_to_sphere(uv)
                     for uv in R_2_quasi_random_generator(n)])
