# -*- coding: utf-8 -*-
""" The **gravray** geodesic tracing and relativistic observables package

    Light paths in a curved spacetime are integrated by the :mod:`~.raytr`
    subpackage. It is supported by the following subpackages:

        - :mod:`~.spacetime`: metric adapters (Kerr, Schwarzschild), local
          frames and circular/plunging orbit four-velocities
        - :mod:`~.geom`: accretion geometries, i.e. thin and thick discs,
          datum planes and composites of these
        - :mod:`~.raytr`: the geodesic integrator, image-plane inversion,
          the Jacobian of the image-plane map and radiative transfer
        - :mod:`~.corona`: corona source models and the reflected flux
          post-processing

    The :mod:`~.util` subpackage provides a variety of different math
    and other miscellaneous calculations.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version(__name__)
except PackageNotFoundError:
    __version__ = 'unknown'


def listobj(obj):
    """ Print wrapper function for listobj_str() method of `obj`.

    listobj() is designed to be used in scripting environments where detailed,
    textual output is supported. It is a wrapper to a call of `listobj_str` on
    `obj`.

    Classes may implement the `listobj_str` method that returns a string
    containing a formatted description of the object. Multi-line strings are
    allowed; each line should end with a newline character. Examples include
    :meth:`.TracingSpec.listobj_str` and :meth:`.KerrMetric.listobj_str`.
    """
    try:
        print(obj.listobj_str())
    except AttributeError:
        print(repr(obj))
