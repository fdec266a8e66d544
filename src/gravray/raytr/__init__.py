""" Package for geodesic ray tracing and calculations

    The :mod:`~.raytr` subpackage provides core classes and functions
    for tracing geodesics and inverting the image plane map. These include:

        - The integrator session and its event callbacks, :mod:`~.integrator`
        - Tracing of single geodesics and batches of geodesics, :mod:`~.trace`
        - Radiative transfer along geodesics, :mod:`~.radtrans`
        - Root finding and optimization of image plane coordinates, and the
          Jacobian of the image plane map, :mod:`~.precision`
        - Redshift point functions, :mod:`~.redshift`
        - Image plane sampling, :mod:`~.sampler`
        - Default tolerances and tuning constants, :mod:`~.tracingspec`
        - Exception classes for reporting ray trace errors, :mod:`~.traceerror`
        - The terminal status of a trace, :mod:`~.statuscodes`
"""

from collections import namedtuple

GeodesicPoint = namedtuple('GeodesicPoint', ['status', 'lambda_init',
                                             'lambda_end', 'x_init', 'x',
                                             'v_init', 'v', 'aux'])
GeodesicPoint.__doc__ = "Start and end points of a traced geodesic"
GeodesicPoint.status.__doc__ = "the StatusCode the trace terminated with"
GeodesicPoint.lambda_init.__doc__ = "affine parameter at the start"
GeodesicPoint.lambda_end.__doc__ = "affine parameter at the end"
GeodesicPoint.x_init.__doc__ = "initial 4-position"
GeodesicPoint.x.__doc__ = "final 4-position"
GeodesicPoint.v_init.__doc__ = "initial 4-velocity"
GeodesicPoint.v.__doc__ = "final 4-velocity"
GeodesicPoint.aux.__doc__ = "traced intensity, or None without radiative transfer"
