#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Container class for tracing tolerances and tuning constants

.. Created on Fri Mar 17 09:30:12 2023

.. codeauthor: Michael J. Hayford
"""

import numpy as np


class TracingSpec:
    """ Container class for the settings shared by the tracing operations

    The class attributes hold the package defaults; instances override any of
    them by keyword. Every public tracing function accepts a `spec` argument
    and also lets individual settings be overridden per call.

    Attributes:
        method: name of a :mod:`scipy.integrate` ODE solver, e.g. 'DOP853',
                or an OdeSolver subclass
        abstol: absolute error tolerance of the integrator
        reltol: relative error tolerance of the integrator
        max_step: largest allowed step in affine parameter
        interp_points: number of interior points of every step at which the
                       callback conditions are checked for a crossing
        closest_approach: rays closer than closest_approach*inner_radius are
                          stopped as falling into the horizon
        effective_infinity: rays beyond this radius have escaped
        zero_atol: absolute tolerance of the emission radius root finder
        offset_max: largest image plane offset considered by the root finder
        poor_offset_factor: a root is accepted if its residual is within
                            poor_offset_factor*zero_atol
        negative_offset_penalty: slope of the penalty applied to negative
                                 offsets during root finding
        bracket_samples: number of offsets sampled when searching for a sign
                         change to bracket the emission radius
        d_tol: distance at which the target point optimizer stops a trace
        max_workers: thread pool size for batch operations, None for the
                     :class:`concurrent.futures.ThreadPoolExecutor` default
    """

    method = 'DOP853'
    abstol = 1e-9
    reltol = 1e-9
    max_step = np.inf
    interp_points = 10
    closest_approach = 1.01
    effective_infinity = 1200.0
    zero_atol = 1e-7
    offset_max = 20.0
    poor_offset_factor = 1e4
    negative_offset_penalty = 1000.0
    bracket_samples = 40
    d_tol = 1e-2
    max_workers = None

    _keys = ('method', 'abstol', 'reltol', 'max_step', 'interp_points',
             'closest_approach', 'effective_infinity', 'zero_atol',
             'offset_max', 'poor_offset_factor', 'negative_offset_penalty',
             'bracket_samples', 'd_tol', 'max_workers')

    def __init__(self, **kwargs):
        self.update(**kwargs)

    def __repr__(self):
        args = ", ".join(f"{k}={v!r}" for k, v in vars(self).items())
        return f"{type(self).__name__}({args})"

    def update(self, **kwargs):
        """ override settings; unknown names raise a TypeError """
        for k, v in kwargs.items():
            if k not in TracingSpec._keys:
                raise TypeError(f"'{k}' is not a TracingSpec setting")
            setattr(self, k, v)
        return self

    def copy(self, **kwargs):
        """ return a new spec with these settings plus `kwargs` overrides """
        spec = TracingSpec(**vars(self))
        return spec.update(**kwargs)

    def solver_options(self):
        """ the integration method and the keyword arguments of its solver """
        return {'method': self.method, 'rtol': self.reltol,
                'atol': self.abstol, 'max_step': self.max_step}

    def listobj_str(self):
        o_str = ""
        for k in TracingSpec._keys:
            o_str += f"{k}: {getattr(self, k)}\n"
        return o_str


def resolve_spec(spec=None, **overrides):
    """ return `spec` (or the defaults) with the non-None `overrides` applied
    """
    overrides = {k: v for k, v in overrides.items() if v is not None}
    if spec is None:
        return TracingSpec(**overrides)
    if overrides:
        return spec.copy(**overrides)
    return spec
