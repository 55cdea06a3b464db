#!/usr/bin/env python
"""Module containing the broadcast channel of a single cell downlink.

The :class:`BroadcastChannel` class stores the channel from the
transmit antennas of a base station to the receive antennas of each user
as a 3D numpy array with dimension `Nr x Nt x K`, which is the format
expected by the functions in :mod:`pynoma.noma.terms`.
"""

from typing import List, Optional, Union

import numpy as np

from ..noma.terms import NomaTerms, OrderType, noma_terms, noma_terms_ordered
from ..util.conversion import dBm2Linear
from ..util.misc import randn_c_RS
from .noise import calc_thermal_noise_power_dBm

__all__ = ['BroadcastChannel']

# Seed is either int or an array_like type
Seed = Union[int, List[int], np.ndarray]


class BroadcastChannel:
    """
    Stores the (fast fading) channel of a broadcast (downlink) scenario.

    The path loss of each user is also accounted if `set_pathloss` is
    called.

    It is possible to initialize the channel randomly by calling the
    `randomize` method, or from a given 3D array by calling the
    `init_from_channel_tensor` method.

    Examples
    --------
    >>> bc = BroadcastChannel()
    >>> bc.init_from_channel_tensor(np.ones([1, 2, 3]))
    >>> print(bc.Nr, bc.Nt, bc.K)
    1 2 3
    >>> bc.noise_var = 0.5
    >>> print(bc.H_normalized[0, :, 0])
    [1.41421356 1.41421356]
    """

    def __init__(self) -> None:
        # Channel of all users without path loss (Nr x Nt x K)
        self._H_no_pathloss = np.empty([0, 0, 0], dtype=complex)
        # Cached channel with the path loss applied. It is set the first
        # time the H property is read after the path loss is set.
        self._H_with_pathloss: Optional[np.ndarray] = None
        self._pathloss: Optional[np.ndarray] = None
        self._noise_var: Optional[float] = None
        self._RS_channel = np.random.RandomState()

    def __repr__(self) -> str:  # pragma: no cover
        return "{0}(Nr={1}, Nt={2}, K={3})".format(self.__class__.__name__,
                                                   self.Nr, self.Nt, self.K)

    def set_channel_seed(self, seed: Optional[Seed] = None) -> None:
        """
        Set the seed of the RandomState object used to generate the random
        channel (when `randomize` is called).

        Parameters
        ----------
        seed : None | int | array_like
            Random seed initializing the pseudo-random number
            generator. See np.random.RandomState help for more info.
        """
        self._RS_channel.seed(seed)

    @property
    def Nr(self) -> int:
        """Number of receive antennas of each user."""
        return self._H_no_pathloss.shape[0]

    @property
    def Nt(self) -> int:
        """Number of transmit antennas."""
        return self._H_no_pathloss.shape[1]

    @property
    def K(self) -> int:
        """Number of users."""
        return self._H_no_pathloss.shape[2]

    @property
    def H(self) -> np.ndarray:
        """
        Get method for the H property.

        Returns
        -------
        np.ndarray
            The channel of all users (Nr x Nt x K), including the path loss
            if it was set.
        """
        if self._pathloss is None:
            return self._H_no_pathloss

        if self._H_with_pathloss is None:
            # Path loss is a power gain, thus the channel of each user is
            # multiplied by its square root
            self._H_with_pathloss = (self._H_no_pathloss *
                                     np.sqrt(self._pathloss))
            self._H_with_pathloss.setflags(write=False)
        return self._H_with_pathloss

    @property
    def H_normalized(self) -> np.ndarray:
        """
        Get method for the H_normalized property.

        Returns
        -------
        np.ndarray
            The channel of all users divided by the square root of the
            noise variance, such that the noise power at each user is
            equal to one. If the noise variance is not set, this is the
            same as `H`.
        """
        if self._noise_var is None:
            return self.H
        return self.H / np.sqrt(self._noise_var)

    @property
    def pathloss(self) -> Optional[np.ndarray]:
        """
        Get method for the pathloss property.

        Returns
        -------
        None | np.ndarray
            The path loss of each user (if it was set).
        """
        return self._pathloss

    @property
    def noise_var(self) -> Optional[float]:
        """
        Get method for the noise_var property.

        Returns
        -------
        None | float
            The noise variance. If it is None, then unit noise power is
            assumed.
        """
        return self._noise_var

    @noise_var.setter
    def noise_var(self, value: Optional[float]) -> None:
        # nan also fails the comparison
        if value is not None and not value > 0.0:
            raise ValueError("Noise variance must be positive.")
        self._noise_var = value

    def set_thermal_noise(self, T: float, delta_f: float) -> None:
        """
        Set the noise variance to the thermal noise power (in linear
        scale) at temperature `T` (in Celsius degrees) over a bandwidth
        `delta_f` (in Hz).

        The channel and the path loss must then be given in the same
        (linear) power unit, since `H_normalized` divides the channel by
        the square root of the noise variance.

        Parameters
        ----------
        T : float
            Temperature in Celsius degrees.
        delta_f : float
            Bandwidth in Hz.
        """
        self.noise_var = dBm2Linear(calc_thermal_noise_power_dBm(T, delta_f))

    def init_from_channel_tensor(self, bc_channel: np.ndarray) -> None:
        """
        Initializes the broadcast channel from the given 3D array.

        Parameters
        ----------
        bc_channel : np.ndarray
            The channel of all users. This is a 3D numpy array with
            dimension Nr x Nt x K.

        Raises
        ------
        ValueError
            If `bc_channel` is not a 3D array.
        """
        bc_channel = np.array(bc_channel)
        if bc_channel.ndim != 3:
            raise ValueError("The broadcast channel must be a 3D array with "
                             "dimensions Nr x Nt x K.")

        self._H_with_pathloss = None
        self._pathloss = None
        self._H_no_pathloss = bc_channel
        self._H_no_pathloss.setflags(write=False)

    def randomize(self, Nr: int, Nt: int, K: int) -> None:
        """
        Generates a random (Rayleigh fading) channel for all users.

        Each channel coefficient is a circularly symmetric complex
        gaussian variable with unit variance.

        Parameters
        ----------
        Nr : int
            Number of receive antennas of each user.
        Nt : int
            Number of transmit antennas.
        K : int
            Number of users.
        """
        self.init_from_channel_tensor(
            randn_c_RS(self._RS_channel, int(Nr), int(Nt), int(K)))

    def get_Hk(self, k: int) -> np.ndarray:
        """
        Get the channel of user `k` (including the path loss, if any).

        Parameters
        ----------
        k : int
            The user index.

        Returns
        -------
        np.ndarray
            The channel from the transmit antennas to the receive antennas
            of user `k` (Nr x Nt).
        """
        return self.H[:, :, k]

    def set_pathloss(self, pathloss: Optional[np.ndarray] = None) -> None:
        """
        Set the path loss (IN LINEAR SCALE) of each user.

        If you want to disable the path loss, set `pathloss` to None.

        Parameters
        ----------
        pathloss : np.ndarray | None
            A 1D array with the path loss (a power gain in linear scale)
            of each user.
        """
        self._H_with_pathloss = None

        if pathloss is None:
            self._pathloss = None
            return

        pathloss = np.array(pathloss, dtype=float)
        if pathloss.shape != (self.K, ):
            raise ValueError(
                "The path loss must have one element for each of the {0} "
                "users.".format(self.K))
        if np.any(pathloss < 0):
            raise ValueError("The path loss cannot be negative.")

        pathloss.setflags(write=False)
        self._pathloss = pathloss

    def calc_noma_terms(self,
                        precoder: np.ndarray,
                        order: Optional[OrderType] = None) -> NomaTerms:
        """
        Calculates the MMSE equalizers, MMSE weights and layer rates for
        the given precoder.

        The channel referred to unit noise power (`H_normalized`) is used.

        Parameters
        ----------
        precoder : np.ndarray
            The precoder (Nt x K).
        order : list[int] | np.ndarray, optional
            The decoding order. If not provided, the channel and the
            precoder are assumed to be sorted according to the decoding
            order.

        Returns
        -------
        NomaTerms
            The equalizers, MMSE weights and layer rates.

        See also
        --------
        pynoma.noma.terms.noma_terms, pynoma.noma.terms.noma_terms_ordered
        """
        if order is None:
            return noma_terms(self.H_normalized, precoder)
        return noma_terms_ordered(self.H_normalized, precoder, order)
