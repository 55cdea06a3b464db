#!/usr/bin/env python
"""
Module containing the Monte Carlo simulation of the layer rates and the
handling of its parameters.

More specifically, the :mod:`.simulations` package implements:
 - :func:`.parameters.load_scenario_file`
 - :func:`.montecarlo.simulate_layer_rates`
 - :class:`.montecarlo.LayerRateResults`
"""

from .montecarlo import *
from .parameters import *
