# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Core Primitives

Base models, enums, settings and validation helpers shared by every other
module in rentalsystem.
"""

from .enums import (
    AgreementSortKey,
    AgreementStatus,
    PersonSortKey,
    PropertyKind,
    PropertySortKey,
    PropertyStatus,
    RentalPeriod,
    declaration_rank,
    parse_token,
)
from .model import Entity, Model
from .settings import AgreementSettings, GlobalSettings, StorageSettings
from .validation import (
    EMAIL_PATTERN,
    is_valid_email,
    normalize_email,
    require_text,
    unique_ordered,
    validate_date_ordering,
    validate_email,
)

__all__ = [
    "Model",
    "Entity",
    "AgreementSortKey",
    "AgreementStatus",
    "PersonSortKey",
    "PropertyKind",
    "PropertySortKey",
    "PropertyStatus",
    "RentalPeriod",
    "declaration_rank",
    "parse_token",
    "AgreementSettings",
    "GlobalSettings",
    "StorageSettings",
    "EMAIL_PATTERN",
    "is_valid_email",
    "normalize_email",
    "require_text",
    "unique_ordered",
    "validate_date_ordering",
    "validate_email",
]
