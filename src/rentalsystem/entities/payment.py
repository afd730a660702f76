# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from datetime import date

from pydantic import Field

from ..core.primitives import Entity


class Payment(Entity):
    """A rent payment made by a tenant against an agreement."""

    agreement_id: str = Field(..., min_length=1)
    tenant_id: str = Field(..., min_length=1)
    payment_date: date
    amount: float = Field(..., ge=0)
    method: str = ""
