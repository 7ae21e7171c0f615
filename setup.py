#!/usr/bin/env python

"""
    TableSpan
    =========

    TableSpan edits tables whose cells span several rows and columns.

"""

import sys

from setuptools import setup

if sys.version_info.major < 3:
    raise RuntimeError(
        'TableSpan does not support Python 2.x. Please use Python 3.')

setup()
