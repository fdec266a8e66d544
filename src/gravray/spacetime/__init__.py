""" Package of spacetime metrics and their derived quantities

    The :mod:`~.spacetime` subpackage supplies everything the tracer needs to
    know about the geometry of spacetime:

        - the abstract metric interface and the generic geodesic equation,
          :mod:`~.metric`
        - the Kerr and Schwarzschild metrics in Boyer-Lindquist coordinates,
          :mod:`~.kerr`
        - circular and plunging orbit four-velocities, including the single
          ISCO branch shared by the whole package, :mod:`~.orbits`
"""
