#!/usr/bin/env python
"""Package with the channel related modules."""

from . import broadcast, noise
