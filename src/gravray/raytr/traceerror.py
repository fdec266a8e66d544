#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2018 Michael J. Hayford
""" Support for ray trace exception handling

    Only configuration and dispatch problems are raised. Convergence problems
    of the image plane solvers are reported by returning NaN and logging a
    warning.

.. Created on Wed Oct 24 15:22:40 2018

.. codeauthor: Michael J. Hayford
"""


class TraceError(Exception):
    """ Exception raised when tracing geodesics """


class DimensionMismatchError(TraceError, ValueError):
    """ Exception raised when output buffers differ in shape """
    def __init__(self, *shapes):
        self.shapes = shapes
        super().__init__("output buffers must have the same dimensions "
                         f"and size, got {', '.join(map(str, shapes))}")


class GeometryRequiredError(TraceError):
    """ Exception raised when radiative transfer is requested without geometry
    """
    def __init__(self):
        super().__init__("Cannot calculate radiative transfer without "
                         "geometry (geometry is None).")


class UnsupportedCombinationError(TraceError, NotImplementedError):
    """ Exception raised when no calculation exists for the given types """
    def __init__(self, operation, *objs):
        self.operation = operation
        self.types = tuple(type(o) for o in objs)
        names = ", ".join(t.__name__ for t in self.types)
        super().__init__(f"{operation} is not implemented for ({names})")


class IntegrationFailedError(TraceError):
    """ Exception raised when the ODE solver gives up on a geodesic """
    def __init__(self, message, state=None):
        super().__init__(message)
        self.state = state
