# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from typing import Literal, Union

from pydantic import Field
from typing_extensions import Annotated

from ..core.primitives import Entity, Model, PropertyKind, PropertyStatus


class ResidentialDetails(Model):
    """Fields specific to homes and apartments."""

    kind: Literal["RESIDENTIAL"] = "RESIDENTIAL"
    bedrooms: int = Field(default=0, ge=0)
    has_garden: bool = False
    pet_friendly: bool = False


class CommercialDetails(Model):
    """Fields specific to shops, offices and other business premises."""

    kind: Literal["COMMERCIAL"] = "COMMERCIAL"
    business_type: str = ""
    parking_spaces: int = Field(default=0, ge=0)
    square_footage: float = Field(default=0.0, ge=0)


PropertyDetails = Annotated[
    Union[ResidentialDetails, CommercialDetails], Field(discriminator="kind")
]


class Property(Entity):
    """
    A rentable property with exactly one owner.

    Hosts, occupants and rental history are edges in the relationship graph;
    only the owner id travels with the record so that it can be validated on
    construction and reassigned through an update.
    """

    address: str = Field(..., min_length=1)
    price: float = Field(..., ge=0)
    status: PropertyStatus = PropertyStatus.AVAILABLE
    owner_id: str = Field(..., min_length=1)
    details: PropertyDetails

    @property
    def kind(self) -> PropertyKind:
        return PropertyKind(self.details.kind)

    @property
    def is_residential(self) -> bool:
        return self.kind is PropertyKind.RESIDENTIAL

    @property
    def is_commercial(self) -> bool:
        return self.kind is PropertyKind.COMMERCIAL

    @classmethod
    def residential(
        cls,
        id: str,
        address: str,
        price: float,
        owner_id: str,
        bedrooms: int = 0,
        has_garden: bool = False,
        pet_friendly: bool = False,
        status: PropertyStatus = PropertyStatus.AVAILABLE,
    ) -> "Property":
        return cls(
            id=id,
            address=address,
            price=price,
            owner_id=owner_id,
            status=status,
            details=ResidentialDetails(
                bedrooms=bedrooms, has_garden=has_garden, pet_friendly=pet_friendly
            ),
        )

    @classmethod
    def commercial(
        cls,
        id: str,
        address: str,
        price: float,
        owner_id: str,
        business_type: str = "",
        parking_spaces: int = 0,
        square_footage: float = 0.0,
        status: PropertyStatus = PropertyStatus.AVAILABLE,
    ) -> "Property":
        return cls(
            id=id,
            address=address,
            price=price,
            owner_id=owner_id,
            status=status,
            details=CommercialDetails(
                business_type=business_type,
                parking_spaces=parking_spaces,
                square_footage=square_footage,
            ),
        )
