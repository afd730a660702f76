# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Report data for rental records.

Every function returns pandas objects with plain values; rendering them as
tables or text is left to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

if TYPE_CHECKING:
    from ..system import RentalSystem

PROPERTY_STATUS_COLUMNS = ["property_id", "type", "address", "status", "owner", "hosts"]
PAYMENT_HISTORY_COLUMNS = ["payment_id", "date", "amount", "method", "agreement_id"]
HOST_PERFORMANCE_COLUMNS = [
    "host_id",
    "name",
    "managed_properties",
    "active_agreements",
    "total_rent",
]


def property_status_frame(system: "RentalSystem") -> pd.DataFrame:
    """One row per property with its status, owner and hosts."""
    rows = []
    for prop in system.properties.list():
        owner = system.owners.find(prop.owner_id)
        hosts = system.properties.hosts_of(prop.id)
        rows.append(
            {
                "property_id": prop.id,
                "type": prop.kind.value,
                "address": prop.address,
                "status": prop.status.value,
                "owner": f"{prop.owner_id} - {owner.full_name}" if owner else prop.owner_id,
                "hosts": ", ".join(f"{h.id} - {h.full_name}" for h in hosts),
            }
        )
    return pd.DataFrame(rows, columns=PROPERTY_STATUS_COLUMNS)


def tenant_payment_history_frame(system: "RentalSystem", tenant_id: str) -> pd.DataFrame:
    """
    Payments made by one tenant, oldest first.

    Raises:
        NotFoundError: If the tenant does not exist
    """
    payments = sorted(system.tenants.payments(tenant_id), key=lambda p: (p.payment_date, p.id))
    return pd.DataFrame(
        [
            {
                "payment_id": p.id,
                "date": p.payment_date,
                "amount": p.amount,
                "method": p.method,
                "agreement_id": p.agreement_id,
            }
            for p in payments
        ],
        columns=PAYMENT_HISTORY_COLUMNS,
    )


def host_performance_frame(system: "RentalSystem") -> pd.DataFrame:
    """Managed property count, live agreements and their rent, per host."""
    active = system.agreements.active()
    rows = []
    for host in system.hosts.list():
        hosted = [a for a in active if a.host_id == host.id]
        rows.append(
            {
                "host_id": host.id,
                "name": host.full_name,
                "managed_properties": len(system.graph.managed_properties(host.id)),
                "active_agreements": len(hosted),
                "total_rent": float(sum(a.rent_amount for a in hosted)),
            }
        )
    return pd.DataFrame(rows, columns=HOST_PERFORMANCE_COLUMNS)


def income_summary(system: "RentalSystem") -> pd.Series:
    """Headline income and occupancy figures."""
    total = system.properties.total_count()
    occupied = system.properties.occupied_count()
    return pd.Series(
        {
            "total_rental_income": float(system.agreements.total_rental_income()),
            "active_agreements": system.agreements.active_count(),
            "total_properties": total,
            "occupied_properties": occupied,
            "occupancy_rate": occupied / total if total else 0.0,
        },
        dtype=object,
    )
