#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# Copyright © 2023 Michael J. Hayford
""" Accretion geometries that rays can intersect or travel through

    The geometries form a small closed family:

        - :class:`ThinDisc`: an infinitesimally thin annulus in the equatorial
          plane
        - :class:`DatumPlane`: an unbounded plane parallel to the equator
        - :class:`ThickDisc`: an annulus with a height profile H(rho)
        - :class:`CompositeGeometry`: an ordered collection of the above

    Each variant implements the same protocol: :meth:`~.AccretionGeometry.signed_distance`
    (negative inside or below the surface), :meth:`~.AccretionGeometry.is_inside`,
    :meth:`~.AccretionGeometry.intersection_affect` and the radiative transfer
    coefficients. Positions are Boyer-Lindquist 4-positions treated as
    spherical coordinates; rho = r sin(theta) and z = r cos(theta).

    Geometries are read only once constructed and are safely shared between
    concurrent traces.

.. Created on Thu Mar 16 16:02:17 2023

.. codeauthor: Michael J. Hayford
"""

import numpy as np

from gravray.raytr.statuscodes import StatusCode
from gravray.util.misc_math import rabs, rmax, rmin


def cylindrical(x):
    """ return (rho, z) for the 4-position `x` """
    r, theta = x[1], x[2]
    return r*np.sin(theta), r*np.cos(theta)


def terminate_on_intersection(params, u):
    """ affect that records an intersection and stops the integration """
    params.set_status(StatusCode.INTERSECTED_WITH_GEOMETRY)
    return False


class AccretionGeometry:
    """ Base class of the accretion geometries.

    Attributes:
        optically_thin: if True, radiative transfer tests the position against
                        :meth:`is_inside` at every step instead of tracking
                        surface crossings
        absorption: constant absorption coefficient inside the geometry
        emissivity: constant emissivity coefficient inside the geometry
        event_direction: direction of the zero crossing of
                         :meth:`signed_distance` that counts as an
                         intersection, in the convention of
                         :func:`scipy.integrate.solve_ivp`
        volumetric: False for surfaces, which stop a ray even during
                    radiative transfer
    """

    event_direction = -1
    volumetric = True

    def __init__(self, optically_thin=False, absorption=0.0, emissivity=0.0):
        self.optically_thin = optically_thin
        self.absorption = absorption
        self.emissivity = emissivity

    def listobj_str(self):
        o_str = f"{type(self).__name__}: optically thin={self.optically_thin}"
        o_str += f", absorption={self.absorption}, "
        o_str += f"emissivity={self.emissivity}\n"
        return o_str

    @property
    def components(self):
        """ the elementary geometries making up this geometry """
        return (self,)

    def signed_distance(self, x):
        raise NotImplementedError

    def is_inside(self, x) -> bool:
        return np.real(self.signed_distance(x)) < 0

    def is_optically_thin(self) -> bool:
        return self.optically_thin

    def intersection_affect(self):
        """ the state change a surface crossing causes in plain tracing """
        return terminate_on_intersection

    def absorption_coefficient(self, m, x, nu):
        return self.absorption

    def emissivity_coefficient(self, m, x, nu):
        return self.emissivity


class ThinDisc(AccretionGeometry):
    """ Geometrically thin disc in the equatorial plane.

    The signed distance is the height above the midplane; a crossing only
    terminates the ray when it falls within [inner_radius, outer_radius].
    """

    event_direction = 0
    volumetric = False

    def __init__(self, inner_radius=0.0, outer_radius=400.0, **kwargs):
        super().__init__(**kwargs)
        self.inner_radius = inner_radius
        self.outer_radius = outer_radius

    def __repr__(self):
        return (f"{type(self).__name__}({self.inner_radius!r}, "
                f"{self.outer_radius!r})")

    def signed_distance(self, x):
        rho, z = cylindrical(x)
        return z

    def is_inside(self, x) -> bool:
        return False

    def in_annulus(self, x) -> bool:
        rho, z = cylindrical(x)
        return self.inner_radius <= np.real(rho) <= self.outer_radius

    def intersection_affect(self):
        def affect(params, u):
            if self.in_annulus(u):
                return terminate_on_intersection(params, u)
            return True
        return affect


class DatumPlane(AccretionGeometry):
    """ Unbounded plane at constant height z = `height` above the equator. """

    event_direction = 0
    volumetric = False

    def __init__(self, height=0.0, **kwargs):
        super().__init__(**kwargs)
        self.height = height

    def __repr__(self):
        return f"{type(self).__name__}({self.height!r})"

    def signed_distance(self, x):
        rho, z = cylindrical(x)
        return z - self.height

    def is_inside(self, x) -> bool:
        return False


class ThickDisc(AccretionGeometry):
    """ Disc of finite thickness with a height profile.

    Attributes:
        cross_section: callable returning the half-thickness H(rho) of the
                       disc at cylindrical radius rho
        inner_radius: inner edge of the disc, in rho
        outer_radius: outer edge of the disc, in rho

    The disc occupies ``|z| <= H(rho)`` for rho in [inner_radius,
    outer_radius]. The signed distance is the box-like measure
    ``max(|z| - H, inner_radius - rho, rho - outer_radius)``, which is
    continuous across the disc edges.
    """

    def __init__(self, cross_section, inner_radius=0.0, outer_radius=400.0,
                 **kwargs):
        super().__init__(**kwargs)
        self.cross_section = cross_section
        self.inner_radius = inner_radius
        self.outer_radius = outer_radius

    def __repr__(self):
        return (f"{type(self).__name__}({self.cross_section!r}, "
                f"{self.inner_radius!r}, {self.outer_radius!r})")

    def height(self, rho):
        rho_c = rmin(rmax(rho, self.inner_radius), self.outer_radius)
        return self.cross_section(rho_c)

    def signed_distance(self, x):
        rho, z = cylindrical(x)
        d = rabs(z) - self.height(rho)
        d = rmax(d, self.inner_radius - rho)
        return rmax(d, rho - self.outer_radius)

    def datum_plane(self, radius):
        """ the plane through the upper disc surface at `radius` """
        return DatumPlane(height=self.cross_section(radius),
                          optically_thin=self.optically_thin)


class CompositeGeometry(AccretionGeometry):
    """ An ordered collection of geometries.

    Nested composites are flattened, so :attr:`components` only holds
    elementary geometries.
    """

    def __init__(self, *geometries):
        super().__init__()
        comps = []
        for g in geometries:
            comps.extend(g.components)
        if len(comps) == 0:
            raise ValueError("a composite geometry needs at least one component")
        self._components = tuple(comps)
        self.optically_thin = all(g.optically_thin for g in comps)

    def __repr__(self):
        args = ", ".join(repr(g) for g in self._components)
        return f"{type(self).__name__}({args})"

    def listobj_str(self):
        o_str = f"{type(self).__name__}: {len(self._components)} components\n"
        for i, g in enumerate(self._components):
            o_str += f"{i:2d}: " + g.listobj_str()
        return o_str

    def __len__(self):
        return len(self._components)

    def __getitem__(self, key):
        return self._components[key]

    @property
    def components(self):
        return self._components

    def signed_distance(self, x):
        d = self._components[0].signed_distance(x)
        for g in self._components[1:]:
            d = rmin(d, g.signed_distance(x))
        return d

    def is_inside(self, x) -> bool:
        return any(g.is_inside(x) for g in self._components)

    def absorption_coefficient(self, m, x, nu):
        return sum(g.absorption_coefficient(m, x, nu)
                   for g in self._components if g.is_inside(x))

    def emissivity_coefficient(self, m, x, nu):
        return sum(g.emissivity_coefficient(m, x, nu)
                   for g in self._components if g.is_inside(x))
