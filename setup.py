#!/usr/bin/env python
# -*- coding: utf-8 -*-

# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# - Run the command "python -m pytest tests" to run the tests.
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx

import os
import re

from setuptools import find_packages, setup


# xxxxxxxxxx Get the project version xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
def get_version():
    """Get the project version.

    The version is read from pynoma/__init__.py without importing the
    package, since its dependencies may not be installed yet.
    """
    with open(os.path.join(os.path.dirname(__file__), "pynoma",
                           "__init__.py")) as f:
        match = re.search(r'^__version__ = "([^"]+)"', f.read(), re.M)
    return match.group(1)


# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx

# xxxxxxxxxx Get a listof the packages in the project xxxxxxxxxxxxxxxxxxxxx
packages = find_packages(where='.', include=['pynoma', 'pynoma.*'])


# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# Utility function to read the README file. Used for the long_description.
def read(fname):
    with open(os.path.join(os.path.dirname(__file__), fname)) as f:
        return f.read()


doc_requires = ["sphinx", "sphinx_rtd_theme"]
test_requires = ["pytest"]

# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxx Setup Configuration xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
# xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
setup(
    # xxxxxxxxxx Basic Package Information xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
    name="pynoma",
    version=get_version(),
    license="GNU General Public License (GPL)",
    keywords='NOMA rate-splitting SIC MMSE precoder downlink',
    description=("MMSE equalizers, MMSE weights and achievable layer rates "
                 "of superposition coded downlink transmission."),
    long_description=read("README.md"),
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Telecommunications Industry",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: GNU General Public License (GPL)",
        "Programming Language :: Python :: 3",
        "Topic :: Scientific/Engineering",
    ],
    # xxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxxx
    packages=packages,
    python_requires=">=3.7",
    install_requires=[
        "numpy>=1.17",
        "scipy",
        "matplotlib",
        "configobj",
    ],
    # Use 'pip install pynoma[dev]' or 'pip install -e ".[dev]"'
    extras_require={
        "docs": doc_requires,
        "tests": test_requires,
        "dev": doc_requires + test_requires
    },
)
