# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Column layouts of the flat record files.

Each file stores one row per entity or per edge with positional columns.
``legacy_columns`` are trailing columns accepted when reading older files
and never written.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..core.primitives import StorageSettings

Row = Dict[str, str]


@dataclass(frozen=True, slots=True)
class RecordSchema:
    """Name, file setting and columns of one record file."""

    name: str
    file_setting: str
    columns: Tuple[str, ...]
    legacy_columns: Tuple[str, ...] = ()

    @property
    def read_columns(self) -> Tuple[str, ...]:
        return self.columns + self.legacy_columns

    def filename(self, settings: StorageSettings) -> str:
        return getattr(settings, self.file_setting)

    def blank_row(self) -> Row:
        return {column: "" for column in self.columns}


PERSON_COLUMNS = ("id", "full_name", "date_of_birth", "contact_email")

OWNERS = RecordSchema("owners", "owners_file", PERSON_COLUMNS)
HOSTS = RecordSchema("hosts", "hosts_file", PERSON_COLUMNS)
TENANTS = RecordSchema("tenants", "tenants_file", PERSON_COLUMNS)

PROPERTIES = RecordSchema(
    "properties",
    "properties_file",
    (
        "id",
        "type",
        "address",
        "price",
        "status",
        "owner_id",
        "bedrooms",
        "has_garden",
        "pet_friendly",
        "business_type",
        "parking_spaces",
        "square_footage",
    ),
    legacy_columns=("host_ids",),
)

PROPERTY_HOSTS = RecordSchema(
    "property_hosts", "property_hosts_file", ("property_id", "host_id")
)
PROPERTY_TENANTS = RecordSchema(
    "property_tenants", "property_tenants_file", ("property_id", "tenant_id")
)

AGREEMENTS = RecordSchema(
    "agreements",
    "agreements_file",
    (
        "id",
        "property_id",
        "tenant_ids",
        "owner_id",
        "host_id",
        "start_date",
        "end_date",
        "rent_amount",
        "rental_period",
        "status",
    ),
)

AGREEMENT_TENANTS = RecordSchema(
    "agreement_tenants", "agreement_tenants_file", ("agreement_id", "tenant_id")
)

PAYMENTS = RecordSchema(
    "payments",
    "payments_file",
    ("id", "agreement_id", "tenant_id", "date", "amount", "method"),
)

ALL_SCHEMAS = (
    OWNERS,
    HOSTS,
    TENANTS,
    PROPERTIES,
    PROPERTY_HOSTS,
    PROPERTY_TENANTS,
    AGREEMENTS,
    AGREEMENT_TENANTS,
    PAYMENTS,
)
