#!/usr/bin/env python
"""Package with utility modules used in the rest of pynoma."""

from . import conversion, misc
