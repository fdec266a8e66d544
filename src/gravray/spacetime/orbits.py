#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Velocities of disc matter

    Matter outside the ISCO follows circular orbits, matter inside plunges
    towards the horizon with the ISCO energy and angular momentum. Every
    calculation that needs the local fluid velocity goes through
    :func:`disc_four_velocity` so the two regimes are split in exactly one
    place.

.. Created on Wed Mar 15 10:20:55 2023

.. codeauthor: Michael J. Hayford
"""

import numpy as np


def is_plunging(r, isco_r) -> bool:
    """ True if radius `r` lies inside the ISCO radius `isco_r` """
    return np.real(r) < np.real(isco_r)


def disc_four_velocity(m, r, isco_r=None):
    """ four-velocity of disc matter at radius `r` of metric `m`

    Args:
        m: the metric
        r: radius of the disc element
        isco_r: precomputed ISCO radius, or None to ask the metric
    """
    if isco_r is None:
        isco_r = m.isco()
    if is_plunging(r, isco_r):
        return m.plunging_four_velocity(r)
    else:
        return m.circular_four_velocity(r)


def static_four_velocity(m, x):
    """ four-velocity of an observer at rest at position `x` """
    return m.constrain(x, np.zeros(4), mu=1.0)
