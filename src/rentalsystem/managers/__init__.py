# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Entity managers: id-indexed stores that keep the relationship graph in step
with every add, update and delete.
"""

from .agreement import AgreementManager
from .base import EntityManager
from .people import HostManager, OwnerManager, PersonManager, TenantManager
from .property import PropertyManager

__all__ = [
    "EntityManager",
    "PersonManager",
    "OwnerManager",
    "HostManager",
    "TenantManager",
    "PropertyManager",
    "AgreementManager",
]
