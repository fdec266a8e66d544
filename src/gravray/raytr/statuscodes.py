#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Terminal status of a traced geodesic

.. Created on Fri Mar 17 08:45:10 2023

.. codeauthor: Michael J. Hayford
"""

from enum import Enum


class StatusCode(Enum):
    """ classification of how a trace finished """
    NO_STATUS = 0  #: ran to the end of the affine parameter domain
    INTERSECTED_WITH_GEOMETRY = 1  #: hit an accretion geometry
    WITHIN_INNER_BOUNDARY = 2  #: came too close to the horizon
    OUTSIDE_COORDINATE_RANGE = 3  #: escaped past the effective infinity
    OUT_OF_DOMAIN = 4  #: the step size controller failed
