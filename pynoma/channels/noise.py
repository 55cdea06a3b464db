#!/usr/bin/env python
"""Module with the thermal noise power used to set the noise variance of a
:class:`.broadcast.BroadcastChannel`."""

from scipy import constants

from ..util.conversion import linear2dBm

__all__ = ['calc_thermal_noise_power_dBm']


def calc_thermal_noise_power_dBm(T: float, delta_f: float) -> float:
    """
    Calculate the thermal noise power (in dBm) at a receiver with
    temperature `T` (in Celsius degrees) over a bandwidth `delta_f` (in
    Hz).

    Parameters
    ----------
    T : float
        Temperature in Celsius degrees.
    delta_f : float
        Bandwidth in Hz.

    Returns
    -------
    float
        The noise power in dBm.

    Examples
    --------
    >>> print(round(calc_thermal_noise_power_dBm(17, 1.0), 2))
    -173.97
    >>> print(round(calc_thermal_noise_power_dBm(17, 1e6), 2))
    -113.97
    """
    if delta_f <= 0:
        raise ValueError("The bandwidth must be positive.")

    T_kelvin = constants.convert_temperature(T, 'Celsius', 'Kelvin')
    noise_power = constants.k * T_kelvin * delta_f
    return float(linear2dBm(noise_power))
