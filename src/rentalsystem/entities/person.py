# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date
from typing import ClassVar

from pydantic import Field

from ..core.primitives import Entity


class Person(Entity):
    """
    Common identity fields for owners, hosts and tenants.

    The email format is checked by the person managers, which also enforce
    per-role uniqueness.
    """

    role: ClassVar[str] = "person"

    full_name: str = Field(..., min_length=1)
    date_of_birth: date
    contact_email: str


class Owner(Person):
    """Owns properties and is party to the agreements on them."""

    role: ClassVar[str] = "owner"


class Host(Person):
    """Manages properties on behalf of their owners and administers agreements."""

    role: ClassVar[str] = "host"


class Tenant(Person):
    """Rents properties under agreements, as main tenant or sub-tenant."""

    role: ClassVar[str] = "tenant"
