# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Report data as pandas DataFrames and Series.
"""

from .summary import (
    host_performance_frame,
    income_summary,
    property_status_frame,
    tenant_payment_history_frame,
)

__all__ = [
    "host_performance_frame",
    "income_summary",
    "property_status_frame",
    "tenant_payment_history_frame",
]
