#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
The Pynoma library computes the MMSE equalizers, MMSE weights and
achievable layer rates of superposition coded (NOMA and rate-splitting)
downlink transmission, as well as a few helpers to simulate them.
"""

__version__ = "0.1.0"

from . import channels, noma, simulations, util
