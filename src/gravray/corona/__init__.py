""" Package of corona models and reflected flux calculations

    The :mod:`~.corona` subpackage traces illumination from a corona onto
    the accretion disc and converts the illumination into flux:

        - corona source models and the disc profile container,
          :mod:`~.models`
        - Lorentz factors, energy ratios and the source to disc flux,
          :mod:`~.flux`
"""
