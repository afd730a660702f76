# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Conversion between entity models and flat string rows.

Decoding raises ``ValidationError`` for malformed values and lets pydantic's
own validation error through for values the models reject; the reconciler
treats both as a skipped record.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Tuple, Type

from ..core.errors import ValidationError
from ..core.primitives import (
    AgreementStatus,
    PropertyKind,
    PropertyStatus,
    RentalPeriod,
    StorageSettings,
    parse_token,
    unique_ordered,
)
from ..entities import (
    CommercialDetails,
    Payment,
    Person,
    Property,
    RentalAgreement,
    ResidentialDetails,
)
from .records import AGREEMENTS, PAYMENTS, PERSON_COLUMNS, PROPERTIES, Row

_TRUE = frozenset({"true", "yes", "1", "y"})
_FALSE = frozenset({"false", "no", "0", "n", ""})


class RecordCodec:
    """Encodes and decodes rows using the storage format settings."""

    def __init__(self, settings: StorageSettings):
        self.settings = settings

    # --- scalar values ---------------------------------------------------

    def format_date(self, value: date) -> str:
        return value.strftime(self.settings.date_format)

    def parse_date(self, text: str, field: str = "date") -> date:
        try:
            return datetime.strptime(text.strip(), self.settings.date_format).date()
        except ValueError:
            raise ValidationError(f"Invalid {field}: {text!r}") from None

    @staticmethod
    def format_bool(value: bool) -> str:
        return "true" if value else "false"

    @staticmethod
    def parse_bool(text: str, field: str = "flag") -> bool:
        token = text.strip().lower()
        if token in _TRUE:
            return True
        if token in _FALSE:
            return False
        raise ValidationError(f"Invalid {field}: {text!r}")

    @staticmethod
    def format_number(value: float) -> str:
        return str(float(value))

    @staticmethod
    def parse_float(text: str, field: str = "amount") -> float:
        try:
            return float(text.strip())
        except ValueError:
            raise ValidationError(f"Invalid {field}: {text!r}") from None

    @staticmethod
    def parse_int(text: str, field: str = "count") -> int:
        token = text.strip()
        if not token:
            return 0
        try:
            return int(float(token))
        except ValueError:
            raise ValidationError(f"Invalid {field}: {text!r}") from None

    def split_ids(self, text: str) -> List[str]:
        """Non-empty ids of a separator-joined list, repeats dropped."""
        parts = (part.strip() for part in text.split(self.settings.list_separator))
        return unique_ordered(part for part in parts if part)

    def join_ids(self, ids: List[str]) -> str:
        return self.settings.list_separator.join(ids)

    # --- people ----------------------------------------------------------

    def person_row(self, person: Person) -> Row:
        return dict(
            zip(
                PERSON_COLUMNS,
                (
                    person.id,
                    person.full_name,
                    self.format_date(person.date_of_birth),
                    person.contact_email,
                ),
            )
        )

    def person_from_row(self, person_type: Type[Person], row: Row) -> Person:
        return person_type(
            id=row["id"].strip(),
            full_name=row["full_name"].strip(),
            date_of_birth=self.parse_date(row["date_of_birth"], "date_of_birth"),
            contact_email=row["contact_email"].strip(),
        )

    # --- properties ------------------------------------------------------

    def property_row(self, prop: Property) -> Row:
        row = PROPERTIES.blank_row()
        row.update(
            id=prop.id,
            type=prop.kind.value,
            address=prop.address,
            price=self.format_number(prop.price),
            status=prop.status.value,
            owner_id=prop.owner_id,
        )
        details = prop.details
        if isinstance(details, ResidentialDetails):
            row.update(
                bedrooms=str(details.bedrooms),
                has_garden=self.format_bool(details.has_garden),
                pet_friendly=self.format_bool(details.pet_friendly),
            )
        else:
            row.update(
                business_type=details.business_type,
                parking_spaces=str(details.parking_spaces),
                square_footage=self.format_number(details.square_footage),
            )
        return row

    def property_from_row(self, row: Row) -> Tuple[Property, List[str]]:
        """Property plus any host ids carried in the legacy inline column."""
        kind = parse_token(PropertyKind, row["type"])
        if kind is PropertyKind.RESIDENTIAL:
            details = ResidentialDetails(
                bedrooms=self.parse_int(row["bedrooms"], "bedrooms"),
                has_garden=self.parse_bool(row["has_garden"], "has_garden"),
                pet_friendly=self.parse_bool(row["pet_friendly"], "pet_friendly"),
            )
        else:
            details = CommercialDetails(
                business_type=row["business_type"].strip(),
                parking_spaces=self.parse_int(row["parking_spaces"], "parking_spaces"),
                square_footage=self.parse_float(row["square_footage"] or "0", "square_footage"),
            )
        prop = Property(
            id=row["id"].strip(),
            address=row["address"].strip(),
            price=self.parse_float(row["price"], "price"),
            status=parse_token(PropertyStatus, row["status"]),
            owner_id=row["owner_id"].strip(),
            details=details,
        )
        return prop, self.split_ids(row.get("host_ids", ""))

    # --- agreements ------------------------------------------------------

    def agreement_row(self, agreement: RentalAgreement) -> Row:
        return dict(
            zip(
                AGREEMENTS.columns,
                (
                    agreement.id,
                    agreement.property_id,
                    agreement.main_tenant_id,
                    agreement.owner_id,
                    agreement.host_id,
                    self.format_date(agreement.start_date),
                    self.format_date(agreement.end_date),
                    self.format_number(agreement.rent_amount),
                    agreement.rental_period.value,
                    agreement.status.value,
                ),
            )
        )

    def agreement_from_row(self, row: Row) -> Tuple[RentalAgreement, List[str]]:
        """
        Agreement without sub-tenants, plus the sub-tenant ids of the row.

        The tenant column holds the main tenant id, optionally followed by
        sub-tenant ids in the older combined ``main;sub1;sub2`` form.
        """
        tenant_ids = self.split_ids(row["tenant_ids"])
        if not tenant_ids:
            raise ValidationError(f"Agreement {row['id']!r} has no main tenant")
        agreement = RentalAgreement(
            id=row["id"].strip(),
            property_id=row["property_id"].strip(),
            main_tenant_id=tenant_ids[0],
            owner_id=row["owner_id"].strip(),
            host_id=row["host_id"].strip(),
            start_date=self.parse_date(row["start_date"], "start_date"),
            end_date=self.parse_date(row["end_date"], "end_date"),
            rent_amount=self.parse_float(row["rent_amount"], "rent_amount"),
            rental_period=parse_token(RentalPeriod, row["rental_period"]),
            status=parse_token(AgreementStatus, row["status"]),
        )
        return agreement, tenant_ids[1:]

    # --- payments --------------------------------------------------------

    def payment_row(self, payment: Payment) -> Row:
        return dict(
            zip(
                PAYMENTS.columns,
                (
                    payment.id,
                    payment.agreement_id,
                    payment.tenant_id,
                    self.format_date(payment.payment_date),
                    self.format_number(payment.amount),
                    payment.method,
                ),
            )
        )

    def payment_from_row(self, row: Row) -> Payment:
        return Payment(
            id=row["id"].strip(),
            agreement_id=row["agreement_id"].strip(),
            tenant_id=row["tenant_id"].strip(),
            payment_date=self.parse_date(row["date"], "date"),
            amount=self.parse_float(row["amount"], "amount"),
            method=row["method"].strip(),
        )
