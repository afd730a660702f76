# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar

from ..errors import InvalidArgumentError

E = TypeVar("E", bound=Enum)


class PropertyStatus(str, Enum):
    """Availability of a property."""

    AVAILABLE = "AVAILABLE"
    RENTED = "RENTED"
    UNDER_MAINTENANCE = "UNDER_MAINTENANCE"


class PropertyKind(str, Enum):
    """Discriminator for the property detail variants."""

    RESIDENTIAL = "RESIDENTIAL"
    COMMERCIAL = "COMMERCIAL"


class RentalPeriod(str, Enum):
    """How often rent falls due."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    FORTNIGHTLY = "FORTNIGHTLY"
    MONTHLY = "MONTHLY"


class AgreementStatus(str, Enum):
    """
    Lifecycle of a rental agreement.

    Derived from the agreement dates against today's date; COMPLETED is
    terminal once reached.
    """

    NEW = "NEW"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"


class PersonSortKey(str, Enum):
    """Sort criteria accepted by the owner, host and tenant managers."""

    ID = "id"
    NAME = "name"
    DOB = "dob"
    EMAIL = "email"


class PropertySortKey(str, Enum):
    """Sort criteria accepted by the property manager."""

    ID = "id"
    TYPE = "type"
    ADDRESS = "address"
    PRICE = "price"
    STATUS = "status"
    OWNER = "owner"  # owner's full name


class AgreementSortKey(str, Enum):
    """Sort criteria accepted by the rental agreement manager."""

    ID = "id"
    PROPERTY_ID = "propertyid"
    TENANT_NAME = "tenantname"  # main tenant
    OWNER_NAME = "ownername"
    HOST_NAME = "hostname"
    START_DATE = "startdate"
    END_DATE = "enddate"
    RENT_AMOUNT = "rentamount"
    STATUS = "status"


def parse_token(enum_cls: Type[E], token: object) -> E:
    """
    Resolve a case-insensitive token to a member of ``enum_cls``.

    Accepts a member, a member value or a member name. Surrounding whitespace
    is ignored.

    Raises:
        InvalidArgumentError: If the token matches no member
    """
    if isinstance(token, enum_cls):
        return token
    text = str(token).strip().lower()
    for member in enum_cls:
        if text == str(member.value).lower() or text == member.name.lower():
            return member
    choices = ", ".join(str(member.value) for member in enum_cls)
    raise InvalidArgumentError(
        f"Invalid {enum_cls.__name__} value {token!r}; expected one of: {choices}"
    )


def declaration_rank(member: Enum) -> int:
    """Position of ``member`` in its enum's declaration order."""
    return list(type(member)).index(member)
