# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Tuple

from pydantic import Field, model_validator

from ..core.primitives import (
    AgreementStatus,
    Entity,
    RentalPeriod,
    validate_date_ordering,
)

logger = logging.getLogger(__name__)


def derive_status(
    start_date: date,
    end_date: date,
    today: date,
    current: AgreementStatus = AgreementStatus.NEW,
) -> AgreementStatus:
    """
    Status an agreement should have on ``today``.

    Before the start date the agreement is NEW, within its dates (inclusive)
    it is ACTIVE and after the end date it is COMPLETED. A COMPLETED
    agreement never goes back.
    """
    if current is AgreementStatus.COMPLETED:
        return AgreementStatus.COMPLETED
    if today < start_date:
        return AgreementStatus.NEW
    if today > end_date:
        return AgreementStatus.COMPLETED
    return AgreementStatus.ACTIVE


class RentalAgreement(Entity):
    """
    Rental of one property to a main tenant and optional sub-tenants.

    The main tenant is never listed among the sub-tenants; a sub-tenant list
    that contains it, or contains repeats, is cleaned on construction with a
    warning rather than rejected. The end date may not precede the start
    date unless the agreement is COMPLETED.
    """

    property_id: str = Field(..., min_length=1)
    main_tenant_id: str = Field(..., min_length=1)
    sub_tenant_ids: Tuple[str, ...] = ()
    owner_id: str = Field(..., min_length=1)
    host_id: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    rent_amount: float = Field(..., ge=0)
    rental_period: RentalPeriod = RentalPeriod.MONTHLY
    status: AgreementStatus = AgreementStatus.NEW

    @model_validator(mode="before")
    @classmethod
    def _exclude_main_tenant(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        subs = data.get("sub_tenant_ids")
        if not subs:
            return data
        main = data.get("main_tenant_id")
        kept = []
        for tenant_id in subs:
            if tenant_id == main:
                logger.warning(
                    f"Agreement {data.get('id')}: main tenant {main} dropped from sub-tenants"
                )
            elif tenant_id in kept:
                logger.warning(
                    f"Agreement {data.get('id')}: duplicate sub-tenant {tenant_id} dropped"
                )
            else:
                kept.append(tenant_id)
        return {**data, "sub_tenant_ids": tuple(kept)}

    @model_validator(mode="after")
    def _check_term(self) -> "RentalAgreement":
        # terminating before the start date leaves end < start
        if not self.is_completed:
            validate_date_ordering(self.start_date, self.end_date)
        return self

    @property
    def tenant_ids(self) -> Tuple[str, ...]:
        """Main tenant first, then sub-tenants in order."""
        return (self.main_tenant_id,) + tuple(self.sub_tenant_ids)

    @property
    def is_completed(self) -> bool:
        return self.status is AgreementStatus.COMPLETED

    def status_on(self, today: date) -> AgreementStatus:
        return derive_status(self.start_date, self.end_date, today, self.status)
