#!/usr/bin/env python
"""
Package with the layer metrics of superposition coded (NOMA and
rate-splitting) downlink transmission.

The :mod:`.terms` module computes the MMSE equalizers, MMSE weights and
achievable layer rates for a given channel and precoder, while the
:mod:`.precoders` module has helpers to build the precoders.
"""

from . import precoders, terms
