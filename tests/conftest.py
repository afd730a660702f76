# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Test utilities and fixtures for rentalsystem testing.

Factory helpers build valid entities with sensible defaults so each test
only spells out the fields it cares about. The ``system`` fixture runs on a
controllable clock pinned to 2024-06-01 and stores files under ``tmp_path``.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Sequence

import pytest

from rentalsystem.core.primitives import (
    AgreementSettings,
    GlobalSettings,
    PropertyStatus,
    RentalPeriod,
    StorageSettings,
)
from rentalsystem.entities import Host, Owner, Payment, Property, RentalAgreement, Tenant
from rentalsystem.system import RentalSystem

FIXED_TODAY = date(2024, 6, 1)


class Clock:
    """Callable clock whose date tests can move."""

    def __init__(self, today: date):
        self.today = today

    def __call__(self) -> date:
        return self.today


# Entity factories
def make_owner(
    id: str = "O1",
    full_name: str = "Olivia Owner",
    contact_email: str = "",
    date_of_birth: date = date(1970, 1, 1),
) -> Owner:
    return Owner(
        id=id,
        full_name=full_name,
        date_of_birth=date_of_birth,
        contact_email=contact_email or f"{id.lower()}@owners.example.com",
    )


def make_host(
    id: str = "H1",
    full_name: str = "Harry Host",
    contact_email: str = "",
    date_of_birth: date = date(1980, 5, 5),
) -> Host:
    return Host(
        id=id,
        full_name=full_name,
        date_of_birth=date_of_birth,
        contact_email=contact_email or f"{id.lower()}@hosts.example.com",
    )


def make_tenant(
    id: str = "T1",
    full_name: str = "Tina Tenant",
    contact_email: str = "",
    date_of_birth: date = date(1990, 9, 9),
) -> Tenant:
    return Tenant(
        id=id,
        full_name=full_name,
        date_of_birth=date_of_birth,
        contact_email=contact_email or f"{id.lower()}@tenants.example.com",
    )


def make_residential(
    id: str = "P1",
    owner_id: str = "O1",
    address: str = "1 Main Street",
    price: float = 1500.0,
    bedrooms: int = 2,
    has_garden: bool = False,
    pet_friendly: bool = False,
    status: PropertyStatus = PropertyStatus.AVAILABLE,
) -> Property:
    return Property.residential(
        id,
        address,
        price,
        owner_id,
        bedrooms=bedrooms,
        has_garden=has_garden,
        pet_friendly=pet_friendly,
        status=status,
    )


def make_commercial(
    id: str = "P2",
    owner_id: str = "O1",
    address: str = "99 Market Road",
    price: float = 4200.0,
    business_type: str = "Retail",
    parking_spaces: int = 4,
    square_footage: float = 850.0,
    status: PropertyStatus = PropertyStatus.AVAILABLE,
) -> Property:
    return Property.commercial(
        id,
        address,
        price,
        owner_id,
        business_type=business_type,
        parking_spaces=parking_spaces,
        square_footage=square_footage,
        status=status,
    )


def make_agreement(
    id: str = "A1",
    property_id: str = "P1",
    main_tenant_id: str = "T1",
    owner_id: str = "O1",
    host_id: str = "H1",
    start_date: date = date(2024, 1, 1),
    end_date: date = date(2024, 12, 31),
    rent_amount: float = 1200.0,
    sub_tenant_ids: Sequence[str] = (),
    rental_period: RentalPeriod = RentalPeriod.MONTHLY,
) -> RentalAgreement:
    return RentalAgreement(
        id=id,
        property_id=property_id,
        main_tenant_id=main_tenant_id,
        sub_tenant_ids=tuple(sub_tenant_ids),
        owner_id=owner_id,
        host_id=host_id,
        start_date=start_date,
        end_date=end_date,
        rent_amount=rent_amount,
        rental_period=rental_period,
    )


def make_payment(
    id: str = "PAY1",
    agreement_id: str = "A1",
    tenant_id: str = "T1",
    payment_date: date = date(2024, 2, 1),
    amount: float = 1200.0,
    method: str = "Bank transfer",
) -> Payment:
    return Payment(
        id=id,
        agreement_id=agreement_id,
        tenant_id=tenant_id,
        payment_date=payment_date,
        amount=amount,
        method=method,
    )


def populate(system: RentalSystem) -> RentalSystem:
    """
    Load a small but fully linked data set.

    Two owners with one property each, two hosts (H1 manages both
    properties), three tenants, an ACTIVE agreement A1 on P1 (main T1, sub
    T2) with two payments and a NEW agreement A2 on P2 (main T3).
    """
    system.owners.add(make_owner("O1", "Olivia Owner"))
    system.owners.add(make_owner("O2", "Oscar Owner"))
    system.hosts.add(make_host("H1", "Harry Host"))
    system.hosts.add(make_host("H2", "Hannah Host"))
    system.tenants.add(make_tenant("T1", "Tina Tenant"))
    system.tenants.add(make_tenant("T2", "Tom Tenant"))
    system.tenants.add(make_tenant("T3", "Tara Tenant"))
    system.properties.add(make_residential("P1", "O1", status=PropertyStatus.RENTED))
    system.properties.add(make_commercial("P2", "O2"))
    system.properties.add_host("P1", "H1")
    system.properties.add_host("P2", "H1")
    system.properties.add_host("P2", "H2")
    system.agreements.add(make_agreement("A1", "P1", "T1", "O1", "H1", sub_tenant_ids=["T2"]))
    system.agreements.add(
        make_agreement(
            "A2",
            "P2",
            "T3",
            "O2",
            "H2",
            start_date=date(2024, 7, 1),
            end_date=date(2025, 6, 30),
            rent_amount=3000.0,
        )
    )
    system.agreements.record_payment(make_payment("PAY1", "A1", "T1", date(2024, 2, 1)))
    system.agreements.record_payment(
        make_payment("PAY2", "A1", "T2", date(2024, 3, 1), amount=600.0, method="Cash")
    )
    return system


@pytest.fixture
def fixed_today() -> date:
    return FIXED_TODAY


@pytest.fixture
def clock(fixed_today: date) -> Clock:
    return Clock(fixed_today)


@pytest.fixture
def storage_settings(tmp_path: Path) -> StorageSettings:
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    return StorageSettings(data_dir=data_dir)


@pytest.fixture
def settings(storage_settings: StorageSettings) -> GlobalSettings:
    return GlobalSettings(storage=storage_settings, agreements=AgreementSettings())


@pytest.fixture
def system(settings: GlobalSettings, clock: Clock) -> RentalSystem:
    return RentalSystem(settings, clock=clock)


@pytest.fixture
def populated_system(system: RentalSystem) -> RentalSystem:
    return populate(system)
