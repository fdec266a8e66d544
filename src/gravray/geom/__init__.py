""" Package of accretion geometries

    The :mod:`~.geom` subpackage provides the surfaces and volumes that rays
    are traced against, :mod:`~.geometry`. The geometries expose the narrow
    protocol the tracer relies on: a signed distance, an inside test,
    optical thinness, the effect of a crossing and the radiative transfer
    coefficients.
"""
