# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date

import pytest

from rentalsystem.core.errors import InvalidArgumentError, ValidationError
from rentalsystem.core.primitives import AgreementStatus, PropertyStatus, StorageSettings
from rentalsystem.entities import CommercialDetails, Owner, ResidentialDetails
from rentalsystem.persistence import RecordCodec
from tests.conftest import (
    make_agreement,
    make_commercial,
    make_owner,
    make_payment,
    make_residential,
)


@pytest.fixture
def codec() -> RecordCodec:
    return RecordCodec(StorageSettings())


class TestScalars:
    """Dates, booleans, numbers and id lists."""

    def test_dates(self, codec):
        assert codec.format_date(date(2024, 3, 9)) == "2024-03-09"
        assert codec.parse_date(" 2024-03-09 ") == date(2024, 3, 9)
        with pytest.raises(ValidationError):
            codec.parse_date("09/03/2024")

    def test_custom_date_format(self):
        codec = RecordCodec(StorageSettings(date_format="%d/%m/%Y"))
        assert codec.format_date(date(2024, 3, 9)) == "09/03/2024"
        assert codec.parse_date("09/03/2024") == date(2024, 3, 9)

    @pytest.mark.parametrize("text, expected", [("true", True), ("YES", True), ("1", True),
                                                ("false", False), ("no", False), ("", False)])
    def test_booleans(self, codec, text, expected):
        assert codec.parse_bool(text) is expected

    def test_bad_boolean(self, codec):
        with pytest.raises(ValidationError):
            codec.parse_bool("maybe")

    def test_numbers(self, codec):
        assert codec.format_number(1500) == "1500.0"
        assert codec.parse_float("1500.50") == 1500.5
        assert codec.parse_int("3") == 3
        assert codec.parse_int("") == 0
        with pytest.raises(ValidationError):
            codec.parse_float("lots")

    def test_id_lists(self, codec):
        assert codec.split_ids("T1; T2;;T1") == ["T1", "T2"]
        assert codec.split_ids("") == []
        assert codec.join_ids(["T1", "T2"]) == "T1;T2"


class TestEntityRows:
    """Entity to row and back."""

    def test_person(self, codec):
        owner = make_owner("O1", "Olivia Owner", "olivia@example.com", date(1970, 1, 2))
        row = codec.person_row(owner)
        assert row == {
            "id": "O1",
            "full_name": "Olivia Owner",
            "date_of_birth": "1970-01-02",
            "contact_email": "olivia@example.com",
        }
        restored = codec.person_from_row(Owner, row)
        assert restored.model_dump() == owner.model_dump()

    def test_residential_property(self, codec):
        prop = make_residential("P1", "O1", bedrooms=3, has_garden=True)
        row = codec.property_row(prop)
        assert row["type"] == "RESIDENTIAL"
        assert row["has_garden"] == "true"
        assert row["pet_friendly"] == "false"
        assert row["business_type"] == ""
        assert "host_ids" not in row
        restored, host_ids = codec.property_from_row({**row, "host_ids": ""})
        assert restored.model_dump() == prop.model_dump()
        assert host_ids == []

    def test_commercial_property(self, codec):
        prop = make_commercial("P2", "O1", business_type="Bakery", square_footage=640.5)
        row = codec.property_row(prop)
        assert row["bedrooms"] == ""
        assert row["square_footage"] == "640.5"
        restored, _ = codec.property_from_row(row)
        assert isinstance(restored.details, CommercialDetails)
        assert restored.model_dump() == prop.model_dump()

    def test_property_with_legacy_host_column(self, codec):
        row = codec.property_row(make_residential("P1", "O1"))
        row["host_ids"] = "H1;H2"
        _, host_ids = codec.property_from_row(row)
        assert host_ids == ["H1", "H2"]

    def test_property_tokens_any_case(self, codec):
        row = codec.property_row(make_residential("P1", "O1"))
        row.update(type="residential", status="rented")
        restored, _ = codec.property_from_row(row)
        assert isinstance(restored.details, ResidentialDetails)
        assert restored.status is PropertyStatus.RENTED

    def test_unknown_property_type(self, codec):
        row = codec.property_row(make_residential("P1", "O1"))
        row["type"] = "Castle"
        with pytest.raises(InvalidArgumentError):
            codec.property_from_row(row)

    def test_agreement_writes_main_tenant_only(self, codec):
        agreement = make_agreement(sub_tenant_ids=["T2", "T3"]).model_copy(
            update={"status": AgreementStatus.ACTIVE}
        )
        row = codec.agreement_row(agreement)
        assert row["tenant_ids"] == "T1"
        assert row["rent_amount"] == "1200.0"
        assert row["status"] == "ACTIVE"
        restored, subs = codec.agreement_from_row(row)
        assert restored.main_tenant_id == "T1"
        assert restored.sub_tenant_ids == ()
        assert subs == []

    def test_agreement_reads_combined_tenant_list(self, codec):
        row = codec.agreement_row(make_agreement())
        row["tenant_ids"] = "T1;T2;T3"
        restored, subs = codec.agreement_from_row(row)
        assert restored.main_tenant_id == "T1"
        assert subs == ["T2", "T3"]

    def test_agreement_without_tenant(self, codec):
        row = codec.agreement_row(make_agreement())
        row["tenant_ids"] = ""
        with pytest.raises(ValidationError):
            codec.agreement_from_row(row)

    def test_payment(self, codec):
        payment = make_payment(amount=99.5, method="Card, contactless")
        row = codec.payment_row(payment)
        assert row["date"] == "2024-02-01"
        assert codec.payment_from_row(row).model_dump() == payment.model_dump()
