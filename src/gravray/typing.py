#!/usr/bin/env python3
# -*- coding: utf-8 -*-
""" type hints for gravray

Vectors may be real or complex valued; complex arrays carry the forward
derivative used by the Jacobian calculation.

.. codeauthor: Michael J. Hayford
"""
from typing import Callable
from typing import Literal
from typing import Optional
import numpy.typing as npt

Vec3d = npt.NDArray
Vec4d = npt.NDArray
Mat4d = npt.NDArray

# (t, r, theta, phi, v^t, v^r, v^theta, v^phi[, I])
State = npt.NDArray

TimeDomain = tuple[float, float]

Condition = Callable[[State, 'IntegrationParameters'], float]
Affect = Callable[['IntegrationParameters', State], bool]

EventDirection = Literal[-1, 0, 1]

PointFunction = Callable[['GeodesicPoint'], float]
OptionalGeometry = Optional['AccretionGeometry']
