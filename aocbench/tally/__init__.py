# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
aocbench tally package.

Turns a year folder full of day solutions into one report:
"Does every day build, does it give the accepted answers, and how fast?"

Subsystems:
  - discovery: mapping day numbers to folders
  - parsing: `.parse.yaml` files and answer/time extraction
  - stages: compile, verify and benchmark, each run across days in parallel
  - metrics: per-part totals, means, medians and the slowest day
  - reporting: the final rows, report.json and report.txt
"""
