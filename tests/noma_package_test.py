#!/usr/bin/env python
# -*- coding: utf-8 -*-

# pylint: disable=E1101,E0611
"""
Tests for the modules in the noma package.

Each module has several doctests that we run in addition to the unittests
defined here.
"""

# xxxxxxxxxx Add the parent folder to the python path. xxxxxxxxxxxxxxxxxxxx
import sys
import os
try:
    parent_dir = os.path.split(os.path.abspath(os.path.dirname(__file__)))[0]
    sys.path.append(parent_dir)
except NameError:  # pragma: no cover
    sys.path.append('../')
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx

import unittest
import doctest
import math
import warnings

import numpy as np

from pynoma.noma import precoders, terms
from pynoma.noma.terms import (InfeasiblePowerWarning, calc_decoding_mask,
                               calc_power_terms, calc_power_terms_ordered,
                               calc_weighted_sum_rate, noma_terms,
                               noma_terms_ordered)
from pynoma.noma.precoders import (normalize_precoder, randomize_precoder,
                                   sort_by_decoding_order)
from pynoma.util.misc import randn_c_RS


# UPDATE THIS CLASS if another module is added to the noma package
class NomaDoctestsTestCase(unittest.TestCase):
    """Test case that run all the doctests in the modules of the noma
    package."""

    def test_terms(self):
        """Run doctests in the terms module."""
        doctest.testmod(terms)

    def test_precoders(self):
        """Run doctests in the precoders module."""
        doctest.testmod(precoders)


def _channel_from_rows(*rows):
    """Build a single receive antenna broadcast channel where user `i` has
    the channel row `rows[i]` (that is, `h_i^H`)."""
    return np.array(rows, dtype=complex).T[np.newaxis, :, :]


# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxx Decoding mask xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
class DecodingMaskTestCase(unittest.TestCase):
    def test_identity_order(self):
        mask = calc_decoding_mask(np.arange(4))
        np.testing.assert_array_equal(mask, np.tril(np.ones([4, 4],
                                                            dtype=bool)))

    def test_permuted_order(self):
        order = [3, 0, 2, 1]
        mask = calc_decoding_mask(order)

        # The last user in the order decodes all layers
        self.assertTrue(np.all(mask[order[-1]]))
        # The first user in the order only decodes the first layer
        expected_first = np.array([True, False, False, False])
        np.testing.assert_array_equal(mask[order[0]], expected_first)
        # The user at position k decodes k + 1 layers
        for k, user in enumerate(order):
            self.assertEqual(np.sum(mask[user]), k + 1)

    def test_invalid_order(self):
        with self.assertRaises(ValueError):
            calc_decoding_mask([0, 0, 1])
        with self.assertRaises(ValueError):
            calc_decoding_mask([1, 2, 3])


# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxx Terms Module xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
class PowerTermsTestCase(unittest.TestCase):
    def setUp(self):
        """Called before each test."""
        self.RS = np.random.RandomState(1234)
        self.K = 4
        self.Nt = 3
        self.bc_channel = randn_c_RS(self.RS, 1, self.Nt, self.K)
        self.precoder = randomize_precoder(self.Nt, self.K, 10.0, self.RS)

    def test_single_user(self):
        h = randn_c_RS(self.RS, 1, 3, 1)
        p = randn_c_RS(self.RS, 3, 1)
        T, I = calc_power_terms(h, p)

        expected_T = np.abs(h[0, :, 0].dot(p[:, 0]))**2 + 1
        self.assertAlmostEqual(T[0, 0], expected_T)
        self.assertAlmostEqual(I[0, 0], 1.0)

        g, u, R = noma_terms(h, p)
        self.assertAlmostEqual(R[0], math.log2(expected_T))
        self.assertAlmostEqual(u[0, 0], expected_T)
        self.assertAlmostEqual(g[0, 0],
                               np.conj(h[0, :, 0].dot(p[:, 0])) / expected_T)

    def test_monotonicity_and_non_negativity(self):
        T, I = calc_power_terms(self.bc_channel, self.precoder)
        mask = calc_decoding_mask(np.arange(self.K))

        for i in range(self.K):
            for j in range(1, i + 1):
                self.assertLessEqual(T[i, j], T[i, j - 1] + 1e-12)

        self.assertTrue(np.all(T[mask] >= 0))
        self.assertTrue(np.all(I[mask] >= -1e-12))
        self.assertTrue(np.all(T[mask] >= I[mask]))
        # The noise power is always there
        self.assertTrue(np.all(I[mask] >= 1 - 1e-12))

        R = noma_terms(self.bc_channel, self.precoder).rate
        self.assertTrue(np.all(R >= 0))

    def test_masking(self):
        g, u, R = noma_terms(self.bc_channel, self.precoder)
        T, I = calc_power_terms(self.bc_channel, self.precoder)
        invalid = ~calc_decoding_mask(np.arange(self.K))

        self.assertTrue(np.all(np.isnan(T[invalid])))
        self.assertTrue(np.all(np.isnan(I[invalid])))
        self.assertTrue(np.all(np.isnan(g[invalid])))
        self.assertTrue(np.all(np.isnan(u[invalid])))
        self.assertFalse(np.any(np.isnan(g[~invalid])))
        self.assertFalse(np.any(np.isnan(u[~invalid])))
        self.assertFalse(np.any(np.isnan(R)))

    def test_masking_ordered(self):
        order = [2, 0, 3, 1]
        g, u, _ = noma_terms_ordered(self.bc_channel, self.precoder, order)
        invalid = ~calc_decoding_mask(order)

        self.assertTrue(np.all(np.isnan(g[invalid])))
        self.assertTrue(np.all(np.isnan(u[invalid])))
        self.assertFalse(np.any(np.isnan(u[~invalid])))

    def test_layer_rate_is_minimum_over_decoding_users(self):
        T, I = calc_power_terms(self.bc_channel, self.precoder)
        user_rate = np.log2(T / I)
        R = noma_terms(self.bc_channel, self.precoder).rate

        for j in range(self.K):
            decoders = np.arange(j, self.K)
            self.assertAlmostEqual(R[j], np.min(user_rate[decoders, j]))

        # Only the last user decodes the last layer
        self.assertEqual(R[-1], user_rate[-1, -1])

    def test_mmse_and_weights(self):
        g, u, _ = noma_terms(self.bc_channel, self.precoder)
        T, I = calc_power_terms(self.bc_channel, self.precoder)
        mask = calc_decoding_mask(np.arange(self.K))
        gains = self.bc_channel[0].T.dot(self.precoder)

        np.testing.assert_array_almost_equal(u[mask], (T / I)[mask])
        np.testing.assert_array_almost_equal(g[mask],
                                             (gains.conj() / T)[mask])

    def test_concrete_two_users(self):
        # Both users have the channel [1, 0]
        H = _channel_from_rows([1, 0], [1, 0])

        # Orthogonal unit norm precoders
        P = np.eye(2)
        T, I = calc_power_terms(H, P)
        np.testing.assert_array_almost_equal(T[:, 0], [2.0, 2.0])
        g, u, R = noma_terms(H, P)
        np.testing.assert_array_almost_equal(R, [1.0, 0.0])
        self.assertAlmostEqual(g[0, 0], 0.5)

        # Non orthogonal precoders: the second layer now reaches the users
        P2 = np.array([[1, 1 / math.sqrt(2)], [0, 1 / math.sqrt(2)]])
        T2, I2 = calc_power_terms(H, P2)
        np.testing.assert_array_almost_equal(T2[:, 0], [2.5, 2.5])
        np.testing.assert_array_almost_equal(I2[:, 0], [1.5, 1.5])
        self.assertAlmostEqual(T2[1, 1], 1.5)
        self.assertAlmostEqual(I2[1, 1], 1.0)

        g2, _, R2 = noma_terms(H, P2)
        np.testing.assert_array_almost_equal(
            R2, [math.log2(5 / 3), math.log2(1.5)])
        self.assertNotAlmostEqual(R[1], R2[1])
        self.assertAlmostEqual(g2[0, 0], 0.4)
        self.assertAlmostEqual(g2[1, 1], (1 / math.sqrt(2)) / 1.5)

    def test_power_scaling(self):
        H = _channel_from_rows([1, 0], [1, 1])
        P = np.eye(2)

        _, u, R = noma_terms(H, P)
        np.testing.assert_array_almost_equal(R, [math.log2(1.5), 1.0])

        # Doubling the transmit power
        _, u2, R2 = noma_terms(H, P * math.sqrt(2))
        np.testing.assert_array_almost_equal(
            R2, [math.log2(5 / 3), math.log2(3)])

        # Each user rate (log2 of the MMSE weight) increases by at most
        # log2(2) = 1 bit
        mask = calc_decoding_mask(np.arange(2))
        increase = np.log2(u2[mask]) - np.log2(u[mask])
        self.assertTrue(np.all(increase >= 0))
        self.assertTrue(np.all(increase <= 1.0 + 1e-12))
        np.testing.assert_array_almost_equal(
            increase,
            [math.log2(3) - 1, math.log2(5 / 3) - math.log2(1.5),
             math.log2(3) - 1])

    def test_infeasible_inputs_do_not_raise(self):
        precoder = self.precoder.copy()
        precoder[0, 1] = np.inf

        with self.assertWarns(InfeasiblePowerWarning):
            g, u, R = noma_terms(self.bc_channel, precoder)

        self.assertEqual(g.shape, (self.K, self.K))
        self.assertEqual(u.shape, (self.K, self.K))
        self.assertFalse(np.all(np.isfinite(R)))

    def test_feasible_inputs_do_not_warn(self):
        with warnings.catch_warnings():
            warnings.simplefilter('error')
            noma_terms(self.bc_channel, self.precoder)
            noma_terms_ordered(self.bc_channel, self.precoder, [1, 3, 0, 2])

    def test_shape_mismatch(self):
        # Channel must be 3D
        with self.assertRaises(ValueError):
            noma_terms(self.bc_channel[0], self.precoder)
        # Number of users of the channel and the precoder must match
        with self.assertRaises(ValueError):
            noma_terms(self.bc_channel, self.precoder[:, :-1])
        # Number of transmit antennas must match
        with self.assertRaises(ValueError):
            noma_terms(self.bc_channel, self.precoder[:-1])
        # Only a single receive antenna is supported
        with self.assertRaises(ValueError):
            noma_terms(np.concatenate([self.bc_channel, self.bc_channel]),
                       self.precoder)
        # Order must have one element per user
        with self.assertRaises(ValueError):
            noma_terms_ordered(self.bc_channel, self.precoder, [0, 1, 2])
        with self.assertRaises(ValueError):
            noma_terms_ordered(self.bc_channel, self.precoder, [0, 1, 1, 2])


    def test_no_users(self):
        H = np.zeros([1, 2, 0])
        P = np.zeros([2, 0])

        T, I = calc_power_terms(H, P)
        self.assertEqual(T.shape, (0, 0))
        self.assertEqual(I.shape, (0, 0))

        for g, u, R in (noma_terms(H, P), noma_terms_ordered(H, P, [])):
            self.assertEqual(g.shape, (0, 0))
            self.assertEqual(u.shape, (0, 0))
            self.assertEqual(R.shape, (0, ))

        T, I = calc_power_terms_ordered(H, P, [])
        self.assertEqual(T.shape, (0, 0))
        self.assertEqual(calc_weighted_sum_rate(noma_terms(H, P).rate), 0.0)


class OrderedTermsTestCase(unittest.TestCase):
    def setUp(self):
        """Called before each test."""
        RS = np.random.RandomState(42)
        self.K = 3
        self.Nt = 4
        self.bc_channel = randn_c_RS(RS, 1, self.Nt, self.K)
        self.precoder = randomize_precoder(self.Nt, self.K, 5.0, RS)

    def test_identity_order_equals_sorted_version(self):
        identity = np.arange(self.K)

        T1, I1 = calc_power_terms(self.bc_channel, self.precoder)
        T2, I2 = calc_power_terms_ordered(self.bc_channel, self.precoder,
                                          identity)
        np.testing.assert_allclose(T1, T2)
        np.testing.assert_allclose(I1, I2)

        g1, u1, R1 = noma_terms(self.bc_channel, self.precoder)
        g2, u2, R2 = noma_terms_ordered(self.bc_channel, self.precoder,
                                        identity)
        np.testing.assert_allclose(g1, g2)
        np.testing.assert_allclose(u1, u2)
        np.testing.assert_allclose(R1, R2)

    def test_permuted_order_equals_sorted_inputs(self):
        for order in ([2, 0, 1], [1, 2, 0], [2, 1, 0]):
            sorted_H, sorted_P = sort_by_decoding_order(
                self.bc_channel, self.precoder, order)
            g1, u1, R1 = noma_terms(sorted_H, sorted_P)
            g2, u2, R2 = noma_terms_ordered(self.bc_channel, self.precoder,
                                            order)

            # Row k of the sorted version corresponds to user order[k]
            np.testing.assert_allclose(g2[order], g1)
            np.testing.assert_allclose(u2[order], u1)
            np.testing.assert_allclose(R2, R1)

            T1, I1 = calc_power_terms(sorted_H, sorted_P)
            T2, I2 = calc_power_terms_ordered(self.bc_channel,
                                              self.precoder, order)
            np.testing.assert_allclose(T2[order], T1)
            np.testing.assert_allclose(I2[order], I1)

    def test_weighted_sum_rate(self):
        R = noma_terms(self.bc_channel, self.precoder).rate
        self.assertAlmostEqual(calc_weighted_sum_rate(R), np.sum(R))
        weights = np.array([1.0, 0.0, 2.0])
        self.assertAlmostEqual(calc_weighted_sum_rate(R, weights),
                               R[0] + 2 * R[2])
        with self.assertRaises(ValueError):
            calc_weighted_sum_rate(R, np.ones(2))


# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxx Precoders Module xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
class PrecodersTestCase(unittest.TestCase):
    def test_normalize_precoder(self):
        p = np.array([[1 + 1j, 2], [0, -1j]])
        p_norm = normalize_precoder(p, 4.0)
        self.assertAlmostEqual(np.linalg.norm(p_norm, 'fro')**2, 4.0)
        # The direction of the precoder is not changed
        np.testing.assert_array_almost_equal(
            p_norm / np.linalg.norm(p_norm), p / np.linalg.norm(p))

        with self.assertRaises(ValueError):
            normalize_precoder(np.zeros([2, 2]))
        with self.assertRaises(ValueError):
            normalize_precoder(p, -1.0)

    def test_randomize_precoder(self):
        p1 = randomize_precoder(3, 2, 2.0, np.random.RandomState(10))
        p2 = randomize_precoder(3, 2, 2.0, np.random.RandomState(10))
        self.assertEqual(p1.shape, (3, 2))
        self.assertTrue(np.iscomplexobj(p1))
        self.assertAlmostEqual(np.linalg.norm(p1, 'fro')**2, 2.0)
        np.testing.assert_array_equal(p1, p2)

    def test_sort_by_decoding_order(self):
        RS = np.random.RandomState(3)
        H = randn_c_RS(RS, 1, 2, 3)
        P = randn_c_RS(RS, 2, 3)
        order = [1, 2, 0]
        sorted_H, sorted_P = sort_by_decoding_order(H, P, order)

        for k, user in enumerate(order):
            np.testing.assert_array_equal(sorted_H[:, :, k], H[:, :, user])
            np.testing.assert_array_equal(sorted_P[:, k], P[:, user])

        with self.assertRaises(ValueError):
            sort_by_decoding_order(H, P, [0, 1])


if __name__ == "__main__":
    unittest.main()
