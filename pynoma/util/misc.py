#!/usr/bin/env python
"""Module containing miscellaneous functions used in the other modules of
pynoma.
"""

import math
from typing import Optional, Tuple

import numpy as np
from scipy import stats

__all__ = ['randn_c', 'randn_c_RS', 'calc_confidence_interval']


def randn_c(*args: int) -> np.ndarray:
    """
    Generates a random circularly complex gaussian matrix with unit
    variance.

    Parameters
    ----------
    *args : int
        The dimensions of the returned array, passed directly to
        numpy.random.randn.

    Returns
    -------
    np.ndarray
        A random complex numpy array.

    Examples
    --------
    >>> a = randn_c(1, 4, 3)
    >>> a.shape
    (1, 4, 3)
    >>> a.dtype
    dtype('complex128')
    """
    return (1.0 / math.sqrt(2.0)) * (np.random.randn(*args) +
                                     (1j * np.random.randn(*args)))


def randn_c_RS(RS: Optional[np.random.RandomState], *args: int) -> np.ndarray:
    """
    Generates a random circularly complex gaussian matrix with unit
    variance using the provided RandomState object.

    Parameters
    ----------
    RS : np.random.RandomState | None
        The RandomState object used to generate the random values. If it
        is None, then the global numpy RandomState is used.
    *args : int
        The dimensions of the returned array.

    Returns
    -------
    np.ndarray
        A random complex numpy array.
    """
    if RS is None:
        return randn_c(*args)

    return (1.0 / math.sqrt(2.0)) * (RS.randn(*args) + (1j * RS.randn(*args)))


def calc_confidence_interval(mean: float,
                             std: float,
                             n: int,
                             P: float = 95.0) -> Tuple[float, float]:
    """
    Calculate the confidence interval that contains the true mean with
    probability `P` (in %), given the measured `mean` and standard
    deviation `std` over `n` samples.

    The estimated mean is assumed to be normally distributed.

    Parameters
    ----------
    mean : float
        The measured mean value.
    std : float
        The measured standard deviation.
    n : int
        The number of samples.
    P : float
        The desired confidence (in %), between 0 and 100 (exclusive).

    Returns
    -------
    (float, float)
        The interval minimum and maximum values.

    Examples
    --------
    >>> low, high = calc_confidence_interval(2.0, 1.0, 100)
    >>> print(round(low, 4), round(high, 4))
    1.804 2.196
    """
    if not 0 < P < 100:
        raise ValueError("The confidence must be between 0 and 100 %.")

    # Two-sided critical value of the normal distribution
    C = stats.norm.ppf(0.5 + P / 200.0)
    norm_std = std / np.sqrt(n)
    return float(mean - C * norm_std), float(mean + C * norm_std)
