#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Supports tracing single geodesics and batches of geodesics

    :func:`tracegeodesics` is the entry point for forward tracing. Batches are
    traced on a :class:`concurrent.futures.ThreadPoolExecutor`; each worker
    thread owns an integrator session that is reinitialized for every ray of
    the batch it picks up.

.. Created on Tue Mar 21 14:40:03 2023

.. codeauthor: Michael J. Hayford
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pandas as pd

from gravray.typing import OptionalGeometry, TimeDomain
from . import GeodesicPoint
from .integrator import init_integrator
from .tracingspec import resolve_spec

logger = logging.getLogger(__name__)


def threaded_map(func, n, make_session, max_workers=None):
    """ Evaluate func(session, i) for i in range(n) on a thread pool.

    Each worker thread calls `make_session` once and reuses the session for
    every index it handles. Results are returned in index order; the first
    exception raised by a worker is reraised here.
    """
    results = [None]*n
    local = threading.local()

    def task(i):
        session = getattr(local, 'session', None)
        if session is None:
            session = local.session = make_session()
        results[i] = func(session, i)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(task, i) for i in range(n)]
        for f in futures:
            f.result()
    return results


def tracegeodesics(m, position, velocity, time_domain: TimeDomain,
                   geometry: OptionalGeometry = None, *,
                   mu=0.0, callback=None, spec=None, trajectories=None,
                   strict=False, **kwargs):
    """ Trace one geodesic, or a batch of them, through the metric `m`.

    The velocity is constrained (v^t solved for) before tracing, so only its
    spatial components need to be meaningful.

    Args:
        m: the metric
        position: a 4-position, or an array with one 4-position per ray
        velocity: a 4-velocity, an array of 4-velocities (one per row), or a
                  function i -> 4-velocity used with `trajectories`
        time_domain: (lambda_start, lambda_end)
        geometry: optional accretion geometry to intersect
        mu: rest mass, 0 for photons
        callback: optional extra :class:`~.integrator.Callback` (or list)
        spec: :class:`~.TracingSpec`; keyword arguments override its settings
        trajectories: number of rays when `velocity` is a function
        strict: raise on solver failure instead of returning OUT_OF_DOMAIN

    Returns:
        a :class:`~.GeodesicPoint`, or a list of them for a batch
    """
    spec = resolve_spec(spec, **kwargs)

    def make_session():
        return init_integrator(m, time_domain, geometry=geometry,
                               callback=callback, spec=spec)

    position = np.asarray(position)
    if callable(velocity):
        if trajectories is None:
            raise TypeError("a velocity function needs the number of "
                            "trajectories")
        velocity = np.array([velocity(i) for i in range(trajectories)])
    else:
        velocity = np.asarray(velocity)
        if velocity.ndim == 1:
            v = m.constrain(position, velocity, mu)
            u0 = np.concatenate((position, v))
            return make_session().reinit_and_solve(u0, strict=strict)

    n = len(velocity)
    if position.ndim > 1 and len(position) != n:
        raise ValueError(f"{len(position)} positions given for "
                         f"{n} velocities")
    velocities = m.constrain_all(position, velocity, mu)
    positions = np.broadcast_to(position, (n, position.shape[-1]))

    def trace_one(session, i):
        u0 = np.concatenate((positions[i], velocities[i]))
        return session.reinit_and_solve(u0, strict=strict)

    logger.debug(f"tracing {n} geodesics")
    return threaded_map(trace_one, n, make_session, spec.max_workers)


def geodesic_points_df(gps):
    """ return a |DataFrame| with one row per :class:`~.GeodesicPoint` """
    rows = []
    for gp in gps:
        x, v = np.real(gp.x), np.real(gp.v)
        rows.append((gp.status.name, np.real(gp.lambda_end),
                     *x, *v, None if gp.aux is None else np.real(gp.aux)))
    df = pd.DataFrame(rows, columns=['status', 'lambda', 't', 'r', 'theta',
                                     'phi', 'v_t', 'v_r', 'v_theta', 'v_phi',
                                     'aux'])
    df.index.names = ['ray']
    return df


def list_geodesic_point(gp: GeodesicPoint):
    """ pretty print the start and end points of a geodesic """
    print(f"status: {gp.status.name}")
    colHeader = "          lambda            t            r        theta" \
                "          phi"
    print(colHeader)
    colFormats = "{:>5s}: {:12.5g} {:12.5g} {:12.6f} {:12.6f} {:12.6f}"
    print(colFormats.format('init', np.real(gp.lambda_init),
                            *np.real(gp.x_init)))
    print(colFormats.format('end', np.real(gp.lambda_end), *np.real(gp.x)))
