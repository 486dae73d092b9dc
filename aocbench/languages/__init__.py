# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Language support for aocbench.

Rust and Python are built in. Anything else is described in a
`.languages.yaml` toolchain file and handled by ToolchainCapability.
"""
