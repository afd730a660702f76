# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Exception hierarchy for rental record operations.

Managers raise these before touching any state, so a caller that catches one
can rely on the in-memory graph being exactly as it was before the call.
The reconciler catches ``DataInconsistencyError`` and ``ValidationError`` per
record while loading and lets ``StorageError`` propagate.
"""

from __future__ import annotations


class RentalSystemError(Exception):
    """Base exception for all rentalsystem errors."""

    pass


class ValidationError(RentalSystemError, ValueError):
    """Field or business rule validation failed (bad email, refused delete...)."""

    pass


class InvalidArgumentError(ValidationError):
    """Unknown sort criterion or enum token."""

    pass


class DuplicateKeyError(RentalSystemError):
    """An id, or an email within one role, is already registered."""

    pass


class NotFoundError(RentalSystemError, LookupError):
    """Referenced id does not resolve to a stored entity."""

    pass


class DataInconsistencyError(RentalSystemError):
    """A stored record references something that cannot be resolved."""

    pass


class StorageError(RentalSystemError, OSError):
    """Storage location is missing, unreadable or unwritable."""

    pass
