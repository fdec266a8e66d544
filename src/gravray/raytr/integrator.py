#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Reusable geodesic integrator sessions and their event callbacks

    A :class:`GeodesicIntegrator` bundles everything needed to trace a
    geodesic except the initial state: the right hand side closure, the
    per-trace :class:`IntegrationParameters`, the event functions and the
    solver options. :meth:`~.GeodesicIntegrator.reinit_and_solve` resets the
    mutable parts and traces a new initial state, so the root finders and
    optimizers, which trace thousands of nearly identical rays, never rebuild
    any of it.

    Events are zero crossings of a :class:`Callback` condition. The solver is
    stepped directly and every accepted step is checked for sign changes at
    the end of the step and at evenly spaced points of its dense output, so a
    ray that enters and leaves a thin volume within one step is still caught.
    A crossing stops the step loop; if the callback's affect asks to carry
    on, integration restarts from the event state. The callback that fired is
    held at the restart point so its crossing is not found a second time.

.. Created on Mon Mar 20 11:18:46 2023

.. codeauthor: Michael J. Hayford
"""

import copy
import logging

import numpy as np
from scipy.integrate import BDF, DOP853, LSODA, RK23, RK45, Radau
from scipy.optimize import brentq

from gravray.typing import Affect, Condition, EventDirection, State, TimeDomain
from . import GeodesicPoint
from .statuscodes import StatusCode
from .traceerror import IntegrationFailedError
from .tracingspec import resolve_spec

logger = logging.getLogger(__name__)

SOLVERS = {'RK23': RK23, 'RK45': RK45, 'DOP853': DOP853, 'Radau': Radau,
           'BDF': BDF, 'LSODA': LSODA}

EPS = np.finfo(float).eps


class IntegrationParameters:
    """ Mutable state of a single trace.

    Attributes:
        metric: the (shared, read only) metric being traced
        status: the :class:`~.StatusCode` of the trace; written once
    """

    def __init__(self, metric):
        self.metric = metric
        self.status = StatusCode.NO_STATUS

    def set_status(self, status):
        """ record the terminal status; later writes are ignored """
        if self.status is StatusCode.NO_STATUS:
            self.status = status
        else:
            logger.debug(f"status already {self.status.name}, "
                         f"ignoring {status.name}")

    def reset(self, u0=None):
        """ prepare for a new trace starting from `u0` """
        self.status = StatusCode.NO_STATUS


class Callback:
    """ A zero crossing condition and the state change it causes.

    Attributes:
        condition: function (u, params) -> value whose sign change is the event
        affect: function (params, u) -> bool, applied at the event; return
                True to continue the integration, False to stop it
        direction: 0 for any crossing, -1 for positive to negative only,
                   +1 for negative to positive only
    """

    def __init__(self, condition: Condition, affect: Affect,
                 direction: EventDirection = 0):
        self.condition = condition
        self.affect = affect
        self.direction = direction
        self._hold_t = None
        self._hold_value = None

    def reset(self):
        self._hold_t = None
        self._hold_value = None

    def hold(self, t, value):
        """ report `value` at affine parameter `t` instead of evaluating """
        self._hold_t = t
        self._hold_value = value

    def event_function(self, params):
        """ the real valued condition as a function of (t, u) """
        def event(t, u):
            if self._hold_t is not None and t == self._hold_t:
                return self._hold_value
            return float(np.real(self.condition(u, params)))
        return event

    def crossed(self, g_old, g_new):
        """ True if the condition went from g_old to g_new in our direction """
        if g_old == g_new:
            return False
        up = g_old <= 0 <= g_new
        down = g_old >= 0 >= g_new
        if self.direction > 0:
            return up
        elif self.direction < 0:
            return down
        return up or down


def status_callback(condition, status, direction):
    """ a callback that stops the trace with `status` """
    def affect(params, u):
        params.set_status(status)
        return False
    return Callback(condition, affect, direction=direction)


def inner_boundary_callback(m, closest_approach):
    r_min = closest_approach*m.inner_radius()

    def condition(u, params):
        return u[1] - r_min
    return status_callback(condition, StatusCode.WITHIN_INNER_BOUNDARY, -1)


def effective_infinity_callback(effective_infinity):
    def condition(u, params):
        return u[1] - effective_infinity
    return status_callback(condition, StatusCode.OUTSIDE_COORDINATE_RANGE, 1)


def intersection_callbacks(geometry):
    """ one callback per geometry component, applying its crossing effect """
    cbs = []
    for g in geometry.components:
        def condition(u, params, g=g):
            return g.signed_distance(u)
        cbs.append(Callback(condition, g.intersection_affect(),
                            direction=g.event_direction))
    return cbs


def as_callback_list(callback):
    if callback is None:
        return []
    elif isinstance(callback, Callback):
        return [callback]
    else:
        return list(callback)


def create_callback_set(m, callback=None, spec=None, geometry=None):
    """ the standard horizon and escape callbacks, plus geometry and user ones
    """
    spec = resolve_spec(spec)
    cbs = [inner_boundary_callback(m, spec.closest_approach),
           effective_infinity_callback(spec.effective_infinity)]
    if geometry is not None:
        cbs += intersection_callbacks(geometry)
    cbs += as_callback_list(callback)
    return cbs


def geodesic_rhs(t, u, params):
    """ dx/dlambda = v, dv/dlambda = geodesic acceleration """
    x, v = u[:4], u[4:8]
    return np.concatenate((v, params.metric.geodesic_acceleration(x, v)))


class GeodesicIntegrator:
    """ A reinitializable integration session.

    Attributes:
        rhs: function (lambda, u, params) -> du/dlambda
        time_domain: (lambda_start, lambda_end)
        params: the :class:`IntegrationParameters` reset before every solve
        callbacks: list of :class:`Callback`; copied, so the session owns
                   its event state
        spec: the :class:`~.TracingSpec` supplying the solver options
        max_restarts: number of non-terminating events allowed per trace

    A session is not thread safe; every worker thread builds its own.
    """

    max_restarts = 1000

    def __init__(self, rhs, time_domain, params, callbacks=(), spec=None):
        self.rhs = rhs
        self.time_domain = time_domain
        self.params = params
        self.callbacks = [copy.copy(cb) for cb in callbacks]
        self.spec = resolve_spec(spec)

        def fun(t, u):
            return rhs(t, u, params)
        self._fun = fun
        self._events = [cb.event_function(params) for cb in self.callbacks]
        self._options = self.spec.solver_options()
        method = self._options.pop('method')
        self._solver = SOLVERS[method] if isinstance(method, str) else method

    def reinit_and_solve(self, u0: State, strict=False) -> GeodesicPoint:
        """ Trace the initial state `u0` and return its :class:`~.GeodesicPoint`.

        Args:
            u0: initial state, position followed by velocity and any
                auxiliary quantities; may be complex
            strict: if True, raise :class:`~.IntegrationFailedError` when the
                    solver fails instead of returning status OUT_OF_DOMAIN
        """
        u0 = np.asarray(u0)
        if not np.iscomplexobj(u0):
            u0 = u0.astype(float)
        self.params.reset(u0)
        for cb in self.callbacks:
            cb.reset()

        t0, t_end = self.time_domain
        t, u = t0, u0
        restarts = 0
        while True:
            t, u, indx, message = self._advance(t, u, t_end)

            if message is not None:
                logger.debug(f"integration failed at lambda={t}: {message}")
                if strict:
                    raise IntegrationFailedError(message, u)
                self.params.set_status(StatusCode.OUT_OF_DOMAIN)
                break

            if indx is None:
                break

            # only the earliest crossing is located
            fired = [indx] + self._coincident_events(t, u, indx)
            stop = None
            for i in fired:
                if not self.callbacks[i].affect(self.params, u):
                    stop = self.callbacks[i]
                    break
            if stop is not None or t >= t_end:
                if np.iscomplexobj(u):
                    cb = stop if stop is not None else self.callbacks[indx]
                    u = self._event_sensitivity(cb, t, u)
                break

            restarts += 1
            if restarts > self.max_restarts:
                logger.debug(f"too many restarts at lambda={t}")
                self.params.set_status(StatusCode.OUT_OF_DOMAIN)
                break
            for i in fired:
                cb = self.callbacks[i]
                cb.hold(t, self._post_event_value(cb, t, u))

        aux = u[8] if len(u) > 8 else None
        return GeodesicPoint(self.params.status, t0, t,
                             np.array(u0[:4]), np.array(u[:4]),
                             np.array(u0[4:8]), np.array(u[4:8]), aux)

    def _advance(self, t, u, t_end):
        """ Integrate from (t, u) up to the first crossing or to t_end.

        Each accepted step is sampled at `interp_points` interior points of
        its dense output and at its end.

        Returns:
            (t, u, index, message): index is the callback that crossed, or
            None; message is the solver's failure message, or None
        """
        solver = self._solver(self._fun, t, u, t_end, **self._options)
        values = [ev(t, u) for ev in self._events]
        n = self.spec.interp_points
        while solver.status == 'running':
            message = solver.step()
            if solver.status == 'failed':
                return solver.t, solver.y, None, message
            if not self._events:
                continue

            sol = solver.dense_output()
            t_prev = solver.t_old
            for ti in np.linspace(solver.t_old, solver.t, n + 2)[1:]:
                y = sol(ti)
                new = [ev(ti, y) for ev in self._events]
                active = [i for i, cb in enumerate(self.callbacks)
                          if cb.crossed(values[i], new[i])]
                if active:
                    return self._locate(sol, t_prev, ti, active) + (None,)
                values, t_prev = new, ti
        return solver.t, solver.y, None, None

    def _locate(self, sol, t_a, t_b, active):
        """ earliest root in [t_a, t_b] of the conditions in `active` """
        t_event, indx = None, None
        for i in active:
            ev = self._events[i]

            def g(s):
                return ev(s, sol(s))
            g_a, g_b = g(t_a), g(t_b)
            if g_b == 0 or np.sign(g_a) == np.sign(g_b):
                te = t_b
            elif g_a == 0:
                te = t_a
            else:
                te = brentq(g, t_a, t_b, xtol=4*EPS, rtol=4*EPS)
            if t_event is None or te < t_event:
                t_event, indx = te, i
        return t_event, sol(t_event), indx

    def _coincident_events(self, t, u, indx):
        """ indices of the other callbacks crossing within a tiny step of t """
        f = np.real(self._fun(t, u))
        ur = np.real(u)
        eps = 1e-8*max(1.0, abs(t))
        coincident = []
        for i, cb in enumerate(self.callbacks):
            if i == indx:
                continue
            g0 = float(np.real(cb.condition(ur - eps*f, self.params)))
            g1 = float(np.real(cb.condition(ur + eps*f, self.params)))
            down = g0 >= 0 and g1 < 0
            up = g0 <= 0 and g1 > 0
            if (cb.direction <= 0 and down) or (cb.direction >= 0 and up):
                coincident.append(i)
        return coincident

    def _post_event_value(self, cb, t, u):
        """ value of the condition just past the crossing, never zero """
        f = np.real(self._fun(t, u))
        ur = np.real(u)
        eps = 1e-8*max(1.0, abs(t))
        value = float(np.real(cb.condition(ur + eps*f, self.params)))
        if value == 0.0:
            value = float(cb.direction) if cb.direction != 0 else 1e-300
        return value

    def _event_sensitivity(self, cb, t, u):
        """ Carry the derivative of the event location into the end state.

        With a complex (complex-step) state, the crossing time found from the
        real part is the same for the perturbed ray. The derivative of that
        time is recovered from the implicit function theorem,
        dlambda = -Im(g)/(dg/dlambda), and applied along the right hand side.
        """
        g = cb.condition(u, self.params)
        g_im = np.imag(g)
        if g_im == 0:
            return u
        f = self._fun(t, u)
        ur, fr = np.real(u), np.real(f)
        eps = 1e-6
        g_plus = np.real(cb.condition(ur + eps*fr, self.params))
        g_minus = np.real(cb.condition(ur - eps*fr, self.params))
        dg_dl = (g_plus - g_minus)/(2*eps)
        if dg_dl == 0:
            return u
        return u - f*(1j*g_im/dg_dl)


def init_integrator(m, time_domain: TimeDomain, geometry=None, callback=None,
                    spec=None, params=None):
    """ build a :class:`GeodesicIntegrator` for plain geodesic tracing

    Args:
        m: the metric
        time_domain: (lambda_start, lambda_end)
        geometry: optional accretion geometry; crossings apply the
                  geometry's intersection affect
        callback: optional :class:`Callback` or list of them
        spec: :class:`~.TracingSpec` with tolerances and limits
        params: :class:`IntegrationParameters` to use, default a new one
    """
    spec = resolve_spec(spec)
    if params is None:
        params = IntegrationParameters(m)
    cbs = create_callback_set(m, callback=callback, spec=spec,
                              geometry=geometry)
    return GeodesicIntegrator(geodesic_rhs, time_domain, params, cbs, spec)
