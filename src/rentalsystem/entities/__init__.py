# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Entity models: people, properties, rental agreements and payments.

All models are immutable. Changing a record means building an edited copy
(``model_copy(update=...)``) and handing it to the owning manager.
"""

from .agreement import RentalAgreement, derive_status
from .payment import Payment
from .person import Host, Owner, Person, Tenant
from .property import CommercialDetails, Property, PropertyDetails, ResidentialDetails

__all__ = [
    "Person",
    "Owner",
    "Host",
    "Tenant",
    "Property",
    "PropertyDetails",
    "ResidentialDetails",
    "CommercialDetails",
    "RentalAgreement",
    "derive_status",
    "Payment",
]
