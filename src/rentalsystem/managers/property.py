# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, List, Optional

from ..core.errors import NotFoundError
from ..core.primitives import PropertySortKey, PropertyStatus, parse_token, require_text
from ..entities import Host, Owner, Property, RentalAgreement, Tenant
from .base import EntityManager

logger = logging.getLogger(__name__)


class PropertyManager(EntityManager[Property]):
    """
    Properties and their owner, host and occupant edges.

    The owner edge follows ``Property.owner_id``: adding a property links it
    to its owner and an update that changes ``owner_id`` moves the edge.
    Hosts and occupants are linked explicitly through ``add_host`` and
    ``add_tenant`` (or by agreements) and survive updates of the record.

    Deleting a property keeps the agreements made on it. They still name the
    removed property, are written on save and are skipped on the next load
    together with their payments.
    """

    entity_type = Property
    label = "Property"
    sort_keys = PropertySortKey

    def _check(self, entity: Property, previous: Optional[Property]) -> None:
        require_text(entity.address, "address")
        if not self.system.owners.exists(entity.owner_id):
            raise NotFoundError(
                f"Owner {entity.owner_id} for property {entity.id} not found"
            )

    def _link(self, entity: Property) -> None:
        self.graph.set_owner(entity.id, entity.owner_id)

    def _unlink(self, entity: Property) -> None:
        self.graph.clear_owner(entity.id)

    def _detach(self, entity: Property) -> None:
        hosts = self.graph.hosts_of(entity.id)
        occupants = self.graph.occupants(entity.id)
        self.graph.forget_property(entity.id)
        logger.info(
            f"Property {entity.id} detached from owner {entity.owner_id}, "
            f"{len(hosts)} host(s) and {len(occupants)} tenant(s)"
        )

    def _sort_value(self, entity: Property, key: Enum) -> Any:
        if key is PropertySortKey.TYPE:
            return entity.kind.value
        if key is PropertySortKey.ADDRESS:
            return entity.address
        if key is PropertySortKey.PRICE:
            return entity.price
        if key is PropertySortKey.STATUS:
            return entity.status
        if key is PropertySortKey.OWNER:
            owner = self.system.owners.find(entity.owner_id)
            return owner.full_name if owner else ""
        return entity.id

    def _search_fields(self, entity: Property) -> Iterable[str]:
        owner = self.system.owners.find(entity.owner_id)
        return (entity.id, entity.address, owner.full_name if owner else "")

    # --- relationship operations ----------------------------------------

    def add_host(self, property_id: str, host_id: str) -> bool:
        """
        Let a host manage a property.

        Returns False when the host already manages it.

        Raises:
            NotFoundError: If the property or host does not exist
        """
        self.get(property_id)
        self.system.hosts.get(host_id)
        return self.graph.add_host(property_id, host_id)

    def remove_host(self, property_id: str, host_id: str) -> bool:
        self.get(property_id)
        self.system.hosts.get(host_id)
        return self.graph.remove_host(property_id, host_id)

    def add_tenant(self, property_id: str, tenant_id: str) -> bool:
        """Record a tenant as occupying a property; False if already there."""
        self.get(property_id)
        self.system.tenants.get(tenant_id)
        return self.graph.add_occupant(property_id, tenant_id)

    def remove_tenant(self, property_id: str, tenant_id: str) -> bool:
        self.get(property_id)
        self.system.tenants.get(tenant_id)
        return self.graph.remove_occupant(property_id, tenant_id)

    def reassign_owner(self, property_id: str, owner_id: str) -> Property:
        """Move a property to another owner; hosts and occupants are kept."""
        current = self.get(property_id)
        return self.update(current.model_copy(update={"owner_id": owner_id}))

    def set_status(self, property_id: str, status: Any) -> Property:
        current = self.get(property_id)
        return self.update(current.model_copy(update={"status": parse_token(PropertyStatus, status)}))

    # --- relationship queries -------------------------------------------

    def owner_of(self, property_id: str) -> Optional[Owner]:
        self.get(property_id)
        return self.system.owners.find(self.graph.owner_of(property_id))

    def hosts_of(self, property_id: str) -> List[Host]:
        self.get(property_id)
        return self.system.hosts.resolve(self.graph.hosts_of(property_id))

    def tenants_of(self, property_id: str) -> List[Tenant]:
        self.get(property_id)
        return self.system.tenants.resolve(self.graph.occupants(property_id))

    def rental_history(self, property_id: str) -> List[RentalAgreement]:
        self.get(property_id)
        return self.system.agreements.resolve(self.graph.rental_history(property_id))

    # --- statistics ------------------------------------------------------

    def available(self) -> List[Property]:
        return [p for p in self._entities.values() if p.status is PropertyStatus.AVAILABLE]

    def total_count(self) -> int:
        return len(self._entities)

    def occupied_count(self) -> int:
        return sum(1 for p in self._entities.values() if p.status is PropertyStatus.RENTED)
