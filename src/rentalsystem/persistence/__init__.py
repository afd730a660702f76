# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Flat-file persistence: record layouts, row codec, CSV store and the
reconciler that replays them into the relationship graph.
"""

from .codec import RecordCodec
from .reconciler import LoadReport, LoadStage, Reconciler, StageResult
from .records import (
    AGREEMENT_TENANTS,
    AGREEMENTS,
    ALL_SCHEMAS,
    HOSTS,
    OWNERS,
    PAYMENTS,
    PROPERTIES,
    PROPERTY_HOSTS,
    PROPERTY_TENANTS,
    TENANTS,
    RecordSchema,
)
from .store import FlatFileStore

__all__ = [
    "RecordCodec",
    "FlatFileStore",
    "LoadReport",
    "LoadStage",
    "Reconciler",
    "StageResult",
    "RecordSchema",
    "ALL_SCHEMAS",
    "OWNERS",
    "HOSTS",
    "TENANTS",
    "PROPERTIES",
    "PROPERTY_HOSTS",
    "PROPERTY_TENANTS",
    "AGREEMENTS",
    "AGREEMENT_TENANTS",
    "PAYMENTS",
]
