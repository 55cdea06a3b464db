#!/usr/bin/env python
"""
Module implementing a Monte Carlo simulation of the achievable layer
rates of a NOMA downlink with random channels and random precoders.

The simulation does not optimize the precoders. It is meant to give the
average layer rates of a given scenario (number of users, number of
transmit antennas and decoding order) as a function of the SNR.
"""

import warnings
from typing import Any, Dict, Optional

import numpy as np

from ..channels.broadcast import BroadcastChannel
from ..noma.precoders import randomize_precoder
from ..noma.terms import InfeasiblePowerWarning
from ..util.conversion import dB2Linear, linear2dB, rate2sinr
from ..util.misc import calc_confidence_interval

__all__ = ['LayerRateResults', 'simulate_layer_rates']


class LayerRateResults:
    """
    Results of the :func:`simulate_layer_rates` simulation.

    Parameters
    ----------
    SNR : np.ndarray
        The simulated SNR values (in dB).
    num_layers : int
        The number of layers (users).

    Attributes
    ----------
    SNR : np.ndarray
        The simulated SNR values (in dB).
    mean_layer_rate : np.ndarray
        Mean rate of each layer (columns) for each SNR (rows).
    mean_sum_rate : np.ndarray
        Mean sum rate for each SNR.
    sum_rate_conf_interval : np.ndarray
        95% confidence interval of the mean sum rate (one row with minimum
        and maximum for each SNR).
    num_trials : np.ndarray
        Number of trials used in the averages for each SNR.
    num_infeasible : np.ndarray
        Number of trials with undefined layer rates for each SNR. These
        trials are not included in the averages.
    """

    def __init__(self, SNR: np.ndarray, num_layers: int) -> None:
        num_snrs = len(SNR)
        self.SNR = np.array(SNR, dtype=float)
        self.mean_layer_rate = np.full([num_snrs, num_layers], np.nan)
        self.mean_sum_rate = np.full(num_snrs, np.nan)
        self.sum_rate_conf_interval = np.full([num_snrs, 2], np.nan)
        self.num_trials = np.zeros(num_snrs, dtype=int)
        self.num_infeasible = np.zeros(num_snrs, dtype=int)

    def __repr__(self) -> str:  # pragma: no cover
        return "{0}(SNR={1}, num_layers={2})".format(
            self.__class__.__name__, self.SNR.tolist(),
            self.mean_layer_rate.shape[1])

    def _update(self, snr_idx: int, layer_rates: np.ndarray,
                num_infeasible: int) -> None:
        """
        Store the results of the trials of one SNR value.

        Parameters
        ----------
        snr_idx : int
            Index of the SNR value.
        layer_rates : np.ndarray
            The layer rates of each feasible trial (trials x layers).
        num_infeasible : int
            Number of trials that were discarded.
        """
        num_trials = layer_rates.shape[0]
        self.num_trials[snr_idx] = num_trials
        self.num_infeasible[snr_idx] = num_infeasible
        if num_trials == 0:
            return

        sum_rates = np.sum(layer_rates, axis=1)
        self.mean_layer_rate[snr_idx] = np.mean(layer_rates, axis=0)
        self.mean_sum_rate[snr_idx] = np.mean(sum_rates)
        self.sum_rate_conf_interval[snr_idx] = calc_confidence_interval(
            float(np.mean(sum_rates)), float(np.std(sum_rates)), num_trials)

    def layer_sinr_dB(self) -> np.ndarray:
        """
        Get the SINR (in dB) equivalent to the mean rate of each layer.

        Returns
        -------
        np.ndarray
            The equivalent SINR of each layer (columns) for each SNR
            (rows).
        """
        with np.errstate(divide='ignore'):
            return linear2dB(rate2sinr(self.mean_layer_rate))


def simulate_layer_rates(
        params: Dict[str, Any],
        RS: Optional[np.random.RandomState] = None) -> LayerRateResults:
    """
    Simulate the mean achievable layer rates as a function of the SNR.

    For each SNR, `rep_max` trials are run. In each trial a Rayleigh
    channel and a random precoder whose total power is equal to the SNR
    (the noise power is one) are drawn and the layer rates are evaluated
    for the configured decoding order.

    Parameters
    ----------
    params : dict
        The simulation parameters (see
        :data:`.parameters.SCENARIO_SPEC`). The keys 'SNR', 'K', 'Nt' and
        'rep_max' are required, while 'order' (empty means that the users
        are decoded in the order of their indexes) and 'seed' are
        optional.
    RS : np.random.RandomState, optional
        RandomState object used to draw the channels and the
        precoders. If not provided, one is created with `params['seed']`.

    Returns
    -------
    LayerRateResults
        The simulation results.
    """
    SNR = np.atleast_1d(np.asarray(params['SNR'], dtype=float))
    K = int(params['K'])
    Nt = int(params['Nt'])
    rep_max = int(params['rep_max'])
    order = params.get('order')
    if order is None or len(order) == 0:
        order = np.arange(K)

    if RS is None:
        RS = np.random.RandomState(params.get('seed'))

    bc_channel = BroadcastChannel()
    bc_channel.set_channel_seed(RS.randint(0, 2**31 - 1))

    results = LayerRateResults(SNR, K)
    for snr_idx, snr in enumerate(SNR):
        P = dB2Linear(snr)
        layer_rates = []
        num_infeasible = 0
        for _ in range(rep_max):
            bc_channel.randomize(1, Nt, K)
            precoder = randomize_precoder(Nt, K, P, RS)
            with warnings.catch_warnings():
                warnings.simplefilter('ignore', InfeasiblePowerWarning)
                rate = bc_channel.calc_noma_terms(precoder, order).rate

            if np.all(np.isfinite(rate)):
                layer_rates.append(rate)
            else:
                num_infeasible += 1

        results._update(snr_idx, np.reshape(layer_rates, [-1, K]),
                        num_infeasible)

    return results
