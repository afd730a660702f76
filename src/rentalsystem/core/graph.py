# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Relationship graph for rental records.

Entities are immutable and never point at each other. Every reference between
two records is an edge held here, once, in a ``LinkSet`` that indexes it in
both directions. Symmetry therefore holds by construction: asking a host for
its properties and asking a property for its hosts read the same edge.

Edge kinds:

- ownership: owner -> property (a property has at most one owner edge)
- management: host -> property
- occupancy: property -> tenant
- tenancy: tenant -> agreement (main and sub-tenants)
- administration: host -> agreement
- parties: owner -> agreement
- history: property -> agreement (append-only while the property exists)
- tenant_payments: tenant -> payment
- agreement_payments: agreement -> payment

Cooperating hosts and owners are derived from ownership and management on
demand and never stored.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


class LinkSet:
    """
    Ordered many-to-many edge set indexed from both ends.

    Neighbours are kept in insertion order and never repeat. Linking an
    existing edge or unlinking a missing one is a no-op that returns False.
    """

    def __init__(self, name: str, left: str, right: str):
        self.name = name
        self.left = left
        self.right = right
        self._forward: Dict[str, Dict[str, None]] = {}
        self._backward: Dict[str, Dict[str, None]] = {}

    def link(self, left_id: str, right_id: str) -> bool:
        rights = self._forward.setdefault(left_id, {})
        if right_id in rights:
            return False
        rights[right_id] = None
        self._backward.setdefault(right_id, {})[left_id] = None
        logger.debug(f"{self.name}: linked {self.left} {left_id} -> {self.right} {right_id}")
        return True

    def unlink(self, left_id: str, right_id: str) -> bool:
        rights = self._forward.get(left_id)
        if rights is None or right_id not in rights:
            return False
        del rights[right_id]
        if not rights:
            del self._forward[left_id]
        lefts = self._backward[right_id]
        del lefts[left_id]
        if not lefts:
            del self._backward[right_id]
        logger.debug(
            f"{self.name}: unlinked {self.left} {left_id} -> {self.right} {right_id}"
        )
        return True

    def has(self, left_id: str, right_id: str) -> bool:
        return right_id in self._forward.get(left_id, {})

    def right_of(self, left_id: str) -> List[str]:
        """Right-hand neighbours of ``left_id`` in link order."""
        return list(self._forward.get(left_id, {}))

    def left_of(self, right_id: str) -> List[str]:
        """Left-hand neighbours of ``right_id`` in link order."""
        return list(self._backward.get(right_id, {}))

    def drop_left(self, left_id: str) -> List[str]:
        """Remove every edge leaving ``left_id``; return the detached rights."""
        rights = self.right_of(left_id)
        for right_id in rights:
            self.unlink(left_id, right_id)
        return rights

    def drop_right(self, right_id: str) -> List[str]:
        """Remove every edge entering ``right_id``; return the detached lefts."""
        lefts = self.left_of(right_id)
        for left_id in lefts:
            self.unlink(left_id, right_id)
        return lefts

    def edges(self) -> List[Tuple[str, str]]:
        return [
            (left_id, right_id)
            for left_id, rights in self._forward.items()
            for right_id in rights
        ]

    def mentions(self, entity_id: str) -> bool:
        return entity_id in self._forward or entity_id in self._backward

    def clear(self) -> None:
        self._forward.clear()
        self._backward.clear()

    def __len__(self) -> int:
        return sum(len(rights) for rights in self._forward.values())

    def __contains__(self, edge: object) -> bool:
        if not isinstance(edge, tuple) or len(edge) != 2:
            return False
        return self.has(*edge)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.edges())

    def __repr__(self) -> str:
        return f"LinkSet({self.name!r}, edges={len(self)})"


class RelationshipGraph:
    """
    Single registrar for every edge between rental records.

    Managers mutate relationships only through these methods. Ids are
    namespaced by the edge kind, so an owner and a property may share an id
    without their edges colliding.
    """

    def __init__(self):
        self.ownership = LinkSet("ownership", "owner", "property")
        self.management = LinkSet("management", "host", "property")
        self.occupancy = LinkSet("occupancy", "property", "tenant")
        self.tenancy = LinkSet("tenancy", "tenant", "agreement")
        self.administration = LinkSet("administration", "host", "agreement")
        self.parties = LinkSet("parties", "owner", "agreement")
        self.history = LinkSet("history", "property", "agreement")
        self.tenant_payments = LinkSet("tenant_payments", "tenant", "payment")
        self.agreement_payments = LinkSet("agreement_payments", "agreement", "payment")

    @property
    def link_sets(self) -> List[LinkSet]:
        return [
            self.ownership,
            self.management,
            self.occupancy,
            self.tenancy,
            self.administration,
            self.parties,
            self.history,
            self.tenant_payments,
            self.agreement_payments,
        ]

    # --- ownership -------------------------------------------------------

    def set_owner(self, property_id: str, owner_id: str) -> None:
        """Make ``owner_id`` the only owner of ``property_id``."""
        for previous in self.ownership.left_of(property_id):
            if previous != owner_id:
                self.ownership.unlink(previous, property_id)
        self.ownership.link(owner_id, property_id)

    def clear_owner(self, property_id: str) -> Optional[str]:
        previous = self.ownership.drop_right(property_id)
        return previous[0] if previous else None

    def owner_of(self, property_id: str) -> Optional[str]:
        owners = self.ownership.left_of(property_id)
        return owners[0] if owners else None

    def owned_properties(self, owner_id: str) -> List[str]:
        return self.ownership.right_of(owner_id)

    # --- management ------------------------------------------------------

    def add_host(self, property_id: str, host_id: str) -> bool:
        return self.management.link(host_id, property_id)

    def remove_host(self, property_id: str, host_id: str) -> bool:
        return self.management.unlink(host_id, property_id)

    def hosts_of(self, property_id: str) -> List[str]:
        return self.management.left_of(property_id)

    def managed_properties(self, host_id: str) -> List[str]:
        return self.management.right_of(host_id)

    def cooperating_hosts(self, owner_id: str) -> List[str]:
        """Hosts managing at least one property owned by ``owner_id``."""
        hosts: Dict[str, None] = {}
        for property_id in self.owned_properties(owner_id):
            for host_id in self.hosts_of(property_id):
                hosts[host_id] = None
        return list(hosts)

    def cooperating_owners(self, host_id: str) -> List[str]:
        """Owners of at least one property managed by ``host_id``."""
        owners: Dict[str, None] = {}
        for property_id in self.managed_properties(host_id):
            owner_id = self.owner_of(property_id)
            if owner_id is not None:
                owners[owner_id] = None
        return list(owners)

    # --- occupancy -------------------------------------------------------

    def add_occupant(self, property_id: str, tenant_id: str) -> bool:
        return self.occupancy.link(property_id, tenant_id)

    def remove_occupant(self, property_id: str, tenant_id: str) -> bool:
        return self.occupancy.unlink(property_id, tenant_id)

    def occupants(self, property_id: str) -> List[str]:
        return self.occupancy.right_of(property_id)

    def rented_properties(self, tenant_id: str) -> List[str]:
        return self.occupancy.left_of(tenant_id)

    # --- agreements ------------------------------------------------------

    def register_agreement(
        self,
        agreement_id: str,
        property_id: str,
        owner_id: str,
        host_id: str,
        tenant_ids: List[str],
    ) -> None:
        """Index an agreement on its property, owner, host and tenants."""
        self.history.link(property_id, agreement_id)
        self.parties.link(owner_id, agreement_id)
        self.administration.link(host_id, agreement_id)
        for tenant_id in tenant_ids:
            self.tenancy.link(tenant_id, agreement_id)

    def unregister_agreement(self, agreement_id: str, keep_history: bool = False) -> None:
        """Remove every index entry for ``agreement_id``."""
        self.parties.drop_right(agreement_id)
        self.administration.drop_right(agreement_id)
        self.tenancy.drop_right(agreement_id)
        if not keep_history:
            self.history.drop_right(agreement_id)

    def rental_history(self, property_id: str) -> List[str]:
        return self.history.right_of(property_id)

    def agreements_of_tenant(self, tenant_id: str) -> List[str]:
        return self.tenancy.right_of(tenant_id)

    def agreements_of_owner(self, owner_id: str) -> List[str]:
        return self.parties.right_of(owner_id)

    def agreements_of_host(self, host_id: str) -> List[str]:
        return self.administration.right_of(host_id)

    # --- payments --------------------------------------------------------

    def record_payment(self, payment_id: str, agreement_id: str, tenant_id: str) -> None:
        self.agreement_payments.link(agreement_id, payment_id)
        self.tenant_payments.link(tenant_id, payment_id)

    def forget_payment(self, payment_id: str) -> None:
        self.agreement_payments.drop_right(payment_id)
        self.tenant_payments.drop_right(payment_id)

    def payments_of_agreement(self, agreement_id: str) -> List[str]:
        return self.agreement_payments.right_of(agreement_id)

    def payments_of_tenant(self, tenant_id: str) -> List[str]:
        return self.tenant_payments.right_of(tenant_id)

    # --- whole-entity removal -------------------------------------------

    def forget_owner(self, owner_id: str) -> None:
        self.ownership.drop_left(owner_id)
        self.parties.drop_left(owner_id)

    def forget_host(self, host_id: str) -> List[str]:
        """Drop a host; return the properties it no longer manages."""
        self.administration.drop_left(host_id)
        return self.management.drop_left(host_id)

    def forget_tenant(self, tenant_id: str) -> None:
        self.occupancy.drop_right(tenant_id)
        self.tenancy.drop_left(tenant_id)
        self.tenant_payments.drop_left(tenant_id)

    def forget_property(self, property_id: str) -> None:
        self.ownership.drop_right(property_id)
        self.management.drop_right(property_id)
        self.occupancy.drop_left(property_id)
        self.history.drop_left(property_id)

    def mentions(self, entity_id: str) -> List[str]:
        """Names of the edge kinds that still reference ``entity_id``."""
        return [links.name for links in self.link_sets if links.mentions(entity_id)]

    def clear(self) -> None:
        for links in self.link_sets:
            links.clear()

    def __repr__(self) -> str:
        counts = ", ".join(f"{links.name}={len(links)}" for links in self.link_sets)
        return f"RelationshipGraph({counts})"
