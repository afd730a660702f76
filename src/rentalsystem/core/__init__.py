# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Core building blocks: error hierarchy, primitives and the relationship graph.
"""

from . import primitives
from .errors import (
    DataInconsistencyError,
    DuplicateKeyError,
    InvalidArgumentError,
    NotFoundError,
    RentalSystemError,
    StorageError,
    ValidationError,
)
from .graph import LinkSet, RelationshipGraph

__all__ = [
    "primitives",
    "RentalSystemError",
    "ValidationError",
    "InvalidArgumentError",
    "DuplicateKeyError",
    "NotFoundError",
    "DataInconsistencyError",
    "StorageError",
    "LinkSet",
    "RelationshipGraph",
]
