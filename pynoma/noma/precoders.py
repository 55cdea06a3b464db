#!/usr/bin/env python
"""
Helper functions to build precoders for the layer metrics functions in
the :mod:`.terms` module.

None of the functions here optimize the precoder. They only generate,
scale or reorder precoders (and channels) so that they can be evaluated.
"""

from typing import Optional, Tuple

import numpy as np

from ..util.misc import randn_c_RS
from .terms import OrderType, _check_inputs, _check_order

__all__ = [
    'normalize_precoder', 'randomize_precoder', 'sort_by_decoding_order'
]


def normalize_precoder(precoder: np.ndarray, P: float = 1.0) -> np.ndarray:
    """
    Scale the precoder so that its total transmit power is equal to `P`.

    The total transmit power is the squared Frobenius norm of the
    precoder.

    Parameters
    ----------
    precoder : np.ndarray
        The precoder. This is a 2D numpy array with dimension Nt x K.
    P : float
        The desired total transmit power.

    Returns
    -------
    np.ndarray
        The scaled precoder.

    Examples
    --------
    >>> p = normalize_precoder(np.array([[3.0, 0.0], [0.0, 4.0]]), P=2.0)
    >>> print(round(np.linalg.norm(p, 'fro')**2, 10))
    2.0
    """
    if P < 0:
        raise ValueError("The transmit power cannot be negative.")
    norm = np.linalg.norm(precoder, 'fro')
    if norm == 0:
        raise ValueError("Cannot normalize an all zeros precoder.")
    return precoder * (np.sqrt(P) / norm)


def randomize_precoder(Nt: int,
                       K: int,
                       P: float = 1.0,
                       RS: Optional[np.random.RandomState] = None
                       ) -> np.ndarray:
    """
    Generates a random precoder with total transmit power `P`.

    Parameters
    ----------
    Nt : int
        Number of transmit antennas.
    K : int
        Number of users (layers).
    P : float
        Total transmit power.
    RS : np.random.RandomState, optional
        The RandomState object used to generate the precoder. If not
        provided the global numpy RandomState is used.

    Returns
    -------
    np.ndarray
        The precoder. This is a complex 2D numpy array with dimension Nt x
        K.

    Examples
    --------
    >>> p = randomize_precoder(4, 3, P=10.0)
    >>> p.shape
    (4, 3)
    >>> print(round(np.linalg.norm(p, 'fro')**2, 10))
    10.0
    """
    return normalize_precoder(randn_c_RS(RS, Nt, K), P)


def sort_by_decoding_order(bc_channel: np.ndarray, precoder: np.ndarray,
                           order: OrderType
                           ) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sort the channel slices and precoder columns according to the decoding
    order.

    After sorting, the user at position `k` of the decoding order becomes
    user `k`, thus :func:`.terms.noma_terms` can be used instead of
    :func:`.terms.noma_terms_ordered`.

    Parameters
    ----------
    bc_channel : np.ndarray
        The broadcast channel (Nr x Nt x K).
    precoder : np.ndarray
        The precoder (Nt x K).
    order : list[int] | np.ndarray
        The decoding order.

    Returns
    -------
    (np.ndarray, np.ndarray)
        The sorted channel and the sorted precoder.

    Examples
    --------
    >>> H = np.arange(4).reshape([1, 2, 2])
    >>> P = np.array([[1, 2], [3, 4]])
    >>> sorted_H, sorted_P = sort_by_decoding_order(H, P, [1, 0])
    >>> print(sorted_H[0])
    [[1 0]
     [3 2]]
    >>> print(sorted_P)
    [[2 1]
     [4 3]]
    """
    bc_channel, precoder = _check_inputs(bc_channel, precoder)
    order = _check_order(order, precoder.shape[1])
    return bc_channel[:, :, order], precoder[:, order]
