# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest
from pydantic import ValidationError

from rentalsystem.core.primitives import PropertyKind, PropertyStatus
from rentalsystem.entities import CommercialDetails, Property, ResidentialDetails


class TestPropertyVariants:
    """Residential and commercial details as a tagged union."""

    def test_residential_factory(self):
        prop = Property.residential("P1", "1 Main Street", 1500, "O1", bedrooms=3, has_garden=True)
        assert prop.kind is PropertyKind.RESIDENTIAL
        assert prop.is_residential and not prop.is_commercial
        assert isinstance(prop.details, ResidentialDetails)
        assert prop.details.bedrooms == 3
        assert prop.status is PropertyStatus.AVAILABLE

    def test_commercial_factory(self):
        prop = Property.commercial(
            "P2", "9 Dock Road", 5000, "O1", business_type="Warehouse", square_footage=2000
        )
        assert prop.kind is PropertyKind.COMMERCIAL
        assert isinstance(prop.details, CommercialDetails)
        assert prop.details.business_type == "Warehouse"

    def test_details_resolved_from_dict_by_kind(self):
        prop = Property(
            id="P3",
            address="3 Side Street",
            price=900,
            owner_id="O1",
            details={"kind": "COMMERCIAL", "business_type": "Cafe", "parking_spaces": 2},
        )
        assert isinstance(prop.details, CommercialDetails)
        assert prop.details.parking_spaces == 2

    def test_unknown_kind_rejected(self):
        with pytest.raises(ValidationError):
            Property(
                id="P3",
                address="3 Side Street",
                price=900,
                owner_id="O1",
                details={"kind": "INDUSTRIAL"},
            )


class TestPropertyValidation:
    """Field constraints."""

    def test_negative_price_rejected(self):
        with pytest.raises(ValidationError):
            Property.residential("P1", "1 Main Street", -1, "O1")

    def test_owner_required(self):
        with pytest.raises(ValidationError):
            Property.residential("P1", "1 Main Street", 100, "")

    def test_negative_bedrooms_rejected(self):
        with pytest.raises(ValidationError):
            ResidentialDetails(bedrooms=-2)

    def test_status_accepts_value_string(self):
        prop = Property(
            id="P1",
            address="1 Main Street",
            price=100,
            owner_id="O1",
            status="UNDER_MAINTENANCE",
            details=ResidentialDetails(),
        )
        assert prop.status is PropertyStatus.UNDER_MAINTENANCE
