""" package supplying utility functions for math and numpy support

    The :mod:`~gravray.util` subpackage provides miscellaneous functions for
    vector calculations and anything else that doesn't have an obvious home.
    These include:

        - miscellaneous math functions, :mod:`~.misc_math`
"""
