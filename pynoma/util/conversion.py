#!/usr/bin/env python
"""Module containing conversion functions between linear and dB scales, as
well as between achievable rates and SINRs.
"""

from typing import TypeVar

import numpy as np

__all__ = [
    'dB2Linear', 'linear2dB', 'dBm2Linear', 'linear2dBm', 'rate2sinr'
]

NumberOrArray = TypeVar("NumberOrArray", np.ndarray, float)


def dB2Linear(valueIndB: NumberOrArray) -> NumberOrArray:
    """
    Convert input from dB to linear scale.

    Parameters
    ----------
    valueIndB : float | np.ndarray
        Value in dB

    Returns
    -------
    valueInLinear : float | np.ndarray
        Value in Linear scale.

    Examples
    --------
    >>> dB2Linear(20)
    100.0
    >>> print(dB2Linear(np.array([0, 10])))
    [ 1. 10.]
    """
    return pow(10, valueIndB / 10.0)


def linear2dB(valueInLinear: NumberOrArray) -> NumberOrArray:
    """
    Convert input from linear to dB scale.

    Parameters
    ----------
    valueInLinear : float | np.ndarray
        Value in Linear scale.

    Returns
    -------
    valueIndB : float | np.ndarray
        Value in dB scale.

    Examples
    --------
    >>> print(linear2dB(100))
    20.0
    """
    return 10.0 * np.log10(valueInLinear)  # type: ignore


def dBm2Linear(valueIndBm: NumberOrArray) -> NumberOrArray:
    """
    Convert input from dBm to linear scale (Watts).

    Examples
    --------
    >>> dBm2Linear(30)
    1.0
    """
    return dB2Linear(valueIndBm) / 1000.


def linear2dBm(valueInLinear: NumberOrArray) -> NumberOrArray:
    """
    Convert input from linear scale (Watts) to dBm.

    Examples
    --------
    >>> print(linear2dBm(1.0))
    30.0
    """
    return linear2dB(valueInLinear * 1000.)


def rate2sinr(rate: NumberOrArray) -> NumberOrArray:
    """
    Calculates the SINR (in linear scale) required to achieve the given
    rate (in bits/s/Hz).

    This is the inverse of the rate ``log2(1 + sinr)``.

    Examples
    --------
    >>> rate2sinr(2.0)
    3.0
    """
    return 2**rate - 1  # type: ignore
