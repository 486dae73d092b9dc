# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
aocbench: build, run and benchmark a year of puzzle solutions.

Every day of the year lives in its own folder and can be written in any
language with a registered toolchain. aocbench finds those folders, builds
them, runs each one a few times, pulls the answers out of whatever the
program printed and produces a single report with timings.
"""

__version__ = "0.1.0"
