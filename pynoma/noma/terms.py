#!/usr/bin/env python
"""
Module implementing the layer metrics of a superposition coded downlink.

In a NOMA (or rate-splitting) downlink the transmitter superposes one
signal layer per user, each one with its own precoder, and the receivers
decode the layers with successive interference cancellation (SIC)
following a decoding order. The user at position `k` of the decoding order
decodes (and cancels) the layers at positions `0, ..., k-1` before decoding
its own layer at position `k` and stops there.

The functions here compute, for a given channel and precoder, the power
terms seen by each user before decoding each layer, the corresponding MMSE
equalizers and MMSE weights and the achievable rate of each layer, which
is limited by the weakest user among those decoding it.

Cells of the `(user, layer)` matrices corresponding to layers that a user
does not decode are set to `nan`.
"""

import warnings
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

__all__ = [
    'NomaTerms', 'InfeasiblePowerWarning', 'calc_decoding_mask',
    'calc_power_terms', 'calc_power_terms_ordered', 'noma_terms',
    'noma_terms_ordered', 'calc_weighted_sum_rate'
]

OrderType = Union[Sequence[int], np.ndarray]


class NomaTerms(NamedTuple):
    """
    Layer metrics of a superposition coded downlink.

    Attributes
    ----------
    equalizer : np.ndarray
        MMSE equalizer of each user (rows) for each layer (columns). This
        is a complex 2D numpy array.
    mmse_weight : np.ndarray
        MMSE weight of each user (rows) for each layer (columns). This is a
        real 2D numpy array.
    rate : np.ndarray
        Achievable rate of each layer. This is a real 1D numpy array.
    """
    equalizer: np.ndarray
    mmse_weight: np.ndarray
    rate: np.ndarray


class InfeasiblePowerWarning(RuntimeWarning):
    """
    Warning emitted when a user decodes a layer with a non-positive (or
    undefined) residual power, which only happens for inconsistent
    inputs.
    """


# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxx Input checking xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
def _check_order(order: OrderType, K: int) -> np.ndarray:
    """
    Check that `order` is a permutation of `0, ..., K-1`.

    Parameters
    ----------
    order : list[int] | np.ndarray
        The decoding order.
    K : int
        The number of users.

    Returns
    -------
    np.ndarray
        The decoding order as a 1D numpy array of integers.
    """
    order = np.asarray(order)
    if order.ndim != 1 or order.size != K:
        raise ValueError(
            "The decoding order must have one element for each of the "
            "{0} users.".format(K))
    if not np.array_equal(np.sort(order), np.arange(K)):
        raise ValueError(
            "The decoding order must be a permutation of 0, ..., {0}.".format(
                K - 1))
    return order.astype(int)


def _check_inputs(bc_channel: np.ndarray,
                  precoder: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Check the shapes of the channel tensor and of the precoder.

    Parameters
    ----------
    bc_channel : np.ndarray
        The broadcast channel (Nr x Nt x K).
    precoder : np.ndarray
        The precoder (Nt x K).

    Returns
    -------
    (np.ndarray, np.ndarray)
        The channel and the precoder as numpy arrays.
    """
    bc_channel = np.asarray(bc_channel)
    precoder = np.asarray(precoder)

    if bc_channel.ndim != 3:
        raise ValueError("The broadcast channel must be a 3D array with "
                         "dimensions Nr x Nt x K.")
    if precoder.ndim != 2:
        raise ValueError("The precoder must be a 2D array with dimensions "
                         "Nt x K.")

    Nr, Nt, K = bc_channel.shape
    if precoder.shape != (Nt, K):
        msg = ("Shape mismatch: the broadcast channel has {0} transmit "
               "antennas and {1} users, but the precoder shape is {2}.")
        raise ValueError(msg.format(Nt, K, precoder.shape))
    if Nr != 1:
        raise ValueError(
            "Only users with a single receive antenna are supported (the "
            "equalizer of each layer is a scalar), but the broadcast "
            "channel has Nr={0}.".format(Nr))

    return bc_channel, precoder


# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxx Power terms xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
def calc_decoding_mask(order: OrderType) -> np.ndarray:
    """
    Calculates which layers each user decodes.

    The user at position `k` of the decoding order decodes the layers at
    positions `0` to `k`.

    Parameters
    ----------
    order : list[int] | np.ndarray
        The decoding order, where `order[k]` is the user whose own layer
        is at position `k`.

    Returns
    -------
    mask : np.ndarray
        A boolean 2D numpy array where `mask[i, j]` is True if user `i`
        decodes the layer at position `j`.

    Examples
    --------
    >>> print(calc_decoding_mask([0, 1, 2]))
    [[ True False False]
     [ True  True False]
     [ True  True  True]]
    >>> print(calc_decoding_mask([2, 0, 1]))
    [[ True  True False]
     [ True  True  True]
     [ True False False]]
    """
    K = len(order)
    order = _check_order(order, K)

    # Position of each user in the decoding order
    rank = np.empty(K, dtype=int)
    rank[order] = np.arange(K)

    return np.arange(K)[np.newaxis, :] <= rank[:, np.newaxis]


def _calc_received_gains(bc_channel: np.ndarray,
                         precoder: np.ndarray) -> np.ndarray:
    """
    Calculates the gain `h_i^H p_l` of each layer `l` at each user `i`.

    Returns
    -------
    np.ndarray
        A complex 2D numpy array (users x layers).
    """
    # bc_channel[0, :, i] is the (single row) channel of user i
    return bc_channel[0].T.dot(precoder)


def _calc_power_terms_impl(
        gains: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Implementation of :func:`calc_power_terms` without the masking.

    Parameters
    ----------
    gains : np.ndarray
        Gain of each layer (columns) at each user (rows), with the layers
        already sorted according to the decoding order.

    Returns
    -------
    (np.ndarray, np.ndarray)
        The receive power terms and the interference power terms.
    """
    K = gains.shape[1]
    if K == 0:
        return np.empty([0, 0]), np.empty([0, 0])

    with np.errstate(invalid='ignore', over='ignore'):
        rx_power = np.abs(gains)**2

        pow_term = np.empty([K, K])
        pow_term[:, 0] = np.sum(rx_power, axis=1) + 1
        for layer in range(1, K):
            # Perfect SIC removes the power of the previous layer
            pow_term[:, layer] = (pow_term[:, layer - 1] -
                                  rx_power[:, layer - 1])
        int_pow_term = pow_term - rx_power

    return pow_term, int_pow_term


def _calc_power_terms_ordered_impl(
        gains: np.ndarray,
        order: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Implementation of :func:`calc_power_terms_ordered` without the
    masking.

    Parameters
    ----------
    gains : np.ndarray
        Gain of the own layer of each user (columns) at each user (rows).
    order : np.ndarray
        The decoding order.

    Returns
    -------
    (np.ndarray, np.ndarray)
        The receive power terms and the interference power terms.
    """
    K = gains.shape[1]
    if K == 0:
        return np.empty([0, 0]), np.empty([0, 0])

    with np.errstate(invalid='ignore', over='ignore'):
        rx_power = np.abs(gains)**2
        # Column j is the received power of the layer at position j
        layer_power = rx_power[:, order]

        pow_term = np.empty([K, K])
        int_pow_term = np.empty([K, K])
        pow_term[:, 0] = np.sum(rx_power, axis=1) + 1
        int_pow_term[:, 0] = pow_term[:, 0] - layer_power[:, 0]
        for layer in range(1, K):
            pow_term[:, layer] = (pow_term[:, layer - 1] -
                                  layer_power[:, layer - 1])
            int_pow_term[:, layer] = (int_pow_term[:, layer - 1] -
                                      layer_power[:, layer])

    return pow_term, int_pow_term


def _apply_mask(mask: np.ndarray,
                *terms: np.ndarray) -> Tuple[np.ndarray, ...]:
    """Set the cells of the layers a user does not decode to `nan`."""
    return tuple(np.where(mask, term, np.nan) for term in terms)


def calc_power_terms(bc_channel: np.ndarray,
                     precoder: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Calculates the receive power terms and the interference power terms.

    The precoder columns (and the channel slices) must already be sorted
    according to the decoding order, that is, layer `j` is the own layer
    of user `j`.

    Parameters
    ----------
    bc_channel : np.ndarray
        The broadcast channel. This is a 3D numpy array with dimension Nr
        x Nt x K, where Nr must be equal to 1.
    precoder : np.ndarray
        The precoder. This is a 2D numpy array with dimension Nt x K.

    Returns
    -------
    (pow_term, int_pow_term) : (np.ndarray, np.ndarray)
        The receive power terms `T` and the interference power terms `I`.
        `T[i, j]` is the power at user `i` before decoding layer `j` and
        `I[i, j]` is that power without the power of layer `j`. Cells of
        layers not decoded by a user are `nan`.

    Examples
    --------
    >>> H = np.array([[[1, 1], [0, 1]]])
    >>> P = np.eye(2)
    >>> T, I = calc_power_terms(H, P)
    >>> print(T)
    [[ 2. nan]
     [ 3.  2.]]
    >>> print(I)
    [[ 1. nan]
     [ 2.  1.]]
    """
    bc_channel, precoder = _check_inputs(bc_channel, precoder)
    K = precoder.shape[1]
    gains = _calc_received_gains(bc_channel, precoder)
    pow_term, int_pow_term = _calc_power_terms_impl(gains)
    return _apply_mask(calc_decoding_mask(np.arange(K)), pow_term,
                       int_pow_term)


def calc_power_terms_ordered(
        bc_channel: np.ndarray, precoder: np.ndarray,
        order: OrderType) -> Tuple[np.ndarray, np.ndarray]:
    """
    Calculates the receive power terms and the interference power terms
    for an explicit decoding order.

    Parameters
    ----------
    bc_channel : np.ndarray
        The broadcast channel. This is a 3D numpy array with dimension Nr
        x Nt x K, where Nr must be equal to 1.
    precoder : np.ndarray
        The precoder. This is a 2D numpy array with dimension Nt x K, where
        column `i` is the precoder of the own layer of user `i`.
    order : list[int] | np.ndarray
        The decoding order. The layer at position `j` is the own layer of
        user `order[j]`.

    Returns
    -------
    (pow_term, int_pow_term) : (np.ndarray, np.ndarray)
        The receive power terms `T` and the interference power terms
        `I`. Rows correspond to users and columns to positions in the
        decoding order. Cells of layers not decoded by a user are `nan`.

    Notes
    -----
    The interference power term of each layer is obtained from the one of
    the previous layer, instead of from the receive power term as in
    :func:`calc_power_terms`. Both give the same values up to rounding.

    Examples
    --------
    >>> H = np.array([[[1, 1], [0, 1]]])
    >>> P = np.eye(2)
    >>> T, I = calc_power_terms_ordered(H, P, [1, 0])
    >>> print(T)
    [[ 2.  2.]
     [ 3. nan]]
    >>> print(I)
    [[ 2.  1.]
     [ 2. nan]]
    """
    bc_channel, precoder = _check_inputs(bc_channel, precoder)
    order = _check_order(order, precoder.shape[1])
    gains = _calc_received_gains(bc_channel, precoder)
    pow_term, int_pow_term = _calc_power_terms_ordered_impl(gains, order)
    return _apply_mask(calc_decoding_mask(order), pow_term, int_pow_term)


# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxx Equalizers, weights and rates xxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
def _calc_noma_terms(layer_gains: np.ndarray, pow_term: np.ndarray,
                     int_pow_term: np.ndarray, mask: np.ndarray) -> NomaTerms:
    """
    Calculates the equalizers, MMSE weights and layer rates from the power
    terms.

    Parameters
    ----------
    layer_gains : np.ndarray
        Gain of the layer at each position (columns) at each user (rows).
    pow_term : np.ndarray
        The receive power terms (not masked).
    int_pow_term : np.ndarray
        The interference power terms (not masked).
    mask : np.ndarray
        Which layers each user decodes.

    Returns
    -------
    NomaTerms
        The equalizers, MMSE weights and layer rates.
    """
    feasible = (pow_term > 0) & (int_pow_term > 0)
    num_infeasible = np.count_nonzero(mask & ~feasible)
    if num_infeasible > 0:
        msg = ("Non-positive or undefined residual power in {0} decoded "
               "cell(s). The power constraints of the inputs are probably "
               "violated.").format(num_infeasible)
        warnings.warn(msg, InfeasiblePowerWarning)

    pow_term, int_pow_term = _apply_mask(mask, pow_term, int_pow_term)

    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        equalizer = layer_gains.conj() / pow_term
        mmse = int_pow_term / pow_term
        mmse_weight = 1 / mmse
        # pow_term and int_pow_term are real arrays, thus the rate has no
        # imaginary residue
        user_rate = np.log2(pow_term / int_pow_term)

    # A layer can only be decoded at the rate of its weakest decoder
    rate = np.min(user_rate, axis=0, where=mask, initial=np.inf)

    return NomaTerms(equalizer, mmse_weight, rate)


def noma_terms(bc_channel: np.ndarray, precoder: np.ndarray) -> NomaTerms:
    """
    Calculates the MMSE equalizers, the MMSE weights and the achievable
    layer rates of a superposition coded downlink.

    The channel slices and the precoder columns must be sorted according
    to the decoding order: user `i` decodes layers `0` to `i` and its own
    layer is layer `i`.

    Parameters
    ----------
    bc_channel : np.ndarray
        The broadcast channel. This is a 3D numpy array with dimension Nr
        x Nt x K, where Nr must be equal to 1. The noise power is assumed
        to be equal to one.
    precoder : np.ndarray
        The precoder. This is a 2D numpy array with dimension Nt x K.

    Returns
    -------
    NomaTerms
        Named tuple `(equalizer, mmse_weight, rate)`. The equalizer and
        the MMSE weight are K x K arrays (users x layers) with `nan` in the
        cells of layers a user does not decode. The rate is a 1D array
        with the achievable rate of each layer.

    Raises
    ------
    ValueError
        If the shapes of the channel and of the precoder are inconsistent
        or if Nr is not 1. Users with more than one receive antenna are
        not supported, since the equalizer of each layer is a scalar.

    Examples
    --------
    >>> g, u, R = noma_terms(np.ones([1, 1, 1]), np.ones([1, 1]))
    >>> print(u)
    [[2.]]
    >>> print(R)
    [1.]
    """
    bc_channel, precoder = _check_inputs(bc_channel, precoder)
    K = precoder.shape[1]
    gains = _calc_received_gains(bc_channel, precoder)
    pow_term, int_pow_term = _calc_power_terms_impl(gains)
    return _calc_noma_terms(gains, pow_term, int_pow_term,
                            calc_decoding_mask(np.arange(K)))


def noma_terms_ordered(bc_channel: np.ndarray, precoder: np.ndarray,
                       order: OrderType) -> NomaTerms:
    """
    Calculates the MMSE equalizers, the MMSE weights and the achievable
    layer rates of a superposition coded downlink for an explicit decoding
    order.

    Parameters
    ----------
    bc_channel : np.ndarray
        The broadcast channel. This is a 3D numpy array with dimension Nr
        x Nt x K, where Nr must be equal to 1. The noise power is assumed
        to be equal to one.
    precoder : np.ndarray
        The precoder. This is a 2D numpy array with dimension Nt x K, where
        column `i` is the precoder of the own layer of user `i`.
    order : list[int] | np.ndarray
        The decoding order. The layer at position `j` is the own layer of
        user `order[j]`.

    Returns
    -------
    NomaTerms
        Named tuple `(equalizer, mmse_weight, rate)`. Rows of the
        equalizer and the MMSE weight correspond to users and columns to
        positions in the decoding order. `rate[j]` is the achievable rate
        of the layer at position `j`.

    Raises
    ------
    ValueError
        If the shapes of the channel and of the precoder are inconsistent,
        if Nr is not 1 or if `order` is not a permutation of
        `0, ..., K-1`.

    See also
    --------
    noma_terms
    """
    bc_channel, precoder = _check_inputs(bc_channel, precoder)
    order = _check_order(order, precoder.shape[1])
    gains = _calc_received_gains(bc_channel, precoder)
    pow_term, int_pow_term = _calc_power_terms_ordered_impl(gains, order)
    return _calc_noma_terms(gains[:, order], pow_term, int_pow_term,
                            calc_decoding_mask(order))


def calc_weighted_sum_rate(rate: np.ndarray,
                           weights: Optional[np.ndarray] = None) -> float:
    """
    Calculates the weighted sum of the layer rates.

    Parameters
    ----------
    rate : np.ndarray
        The achievable rate of each layer.
    weights : np.ndarray, optional
        The weight of each layer. If not provided, all layers have weight
        one.

    Returns
    -------
    float
        The weighted sum rate.

    Examples
    --------
    >>> calc_weighted_sum_rate(np.array([1.0, 2.0]))
    3.0
    >>> calc_weighted_sum_rate(np.array([1.0, 2.0]), np.array([0.5, 2.0]))
    4.5
    """
    rate = np.asarray(rate)
    if weights is None:
        return float(np.sum(rate))

    weights = np.asarray(weights)
    if weights.shape != rate.shape:
        raise ValueError("There must be one weight for each layer.")
    return float(np.sum(weights * rate))
