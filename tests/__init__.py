# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
rentalsystem test suite.

Unit tests mirror the package layout under ``unit/``; ``integration/``
exercises whole load/mutate/save cycles against files on disk.
"""
