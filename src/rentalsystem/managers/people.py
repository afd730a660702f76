# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Iterable, List, Optional, TypeVar

from ..core.errors import DuplicateKeyError, ValidationError
from ..core.primitives import (
    PersonSortKey,
    normalize_email,
    require_text,
    validate_email,
)
from ..entities import Host, Owner, Payment, Person, Property, RentalAgreement, Tenant
from .base import EntityManager

logger = logging.getLogger(__name__)

P = TypeVar("P", bound=Person)


class PersonManager(EntityManager[P]):
    """
    Shared behaviour of the owner, host and tenant managers.

    Emails must be well formed and unique within the role, compared without
    regard to case. The same address may belong to an owner and a tenant.
    """

    sort_keys = PersonSortKey

    def is_email_taken(self, email: str, exclude_id: Optional[str] = None) -> bool:
        return self.get_by_email(email, exclude_id=exclude_id) is not None

    def get_by_email(self, email: str, exclude_id: Optional[str] = None) -> Optional[P]:
        """Stored person with this email (any case), or None."""
        wanted = normalize_email(email or "")
        for person in self._entities.values():
            if person.id == exclude_id:
                continue
            if normalize_email(person.contact_email) == wanted:
                return person
        return None

    def _check(self, entity: P, previous: Optional[P]) -> None:
        require_text(entity.full_name, "full_name")
        validate_email(entity.contact_email)
        if self.is_email_taken(entity.contact_email, exclude_id=entity.id):
            raise DuplicateKeyError(
                f"Email {entity.contact_email} is already used by another {self.label}"
            )

    def _sort_value(self, entity: P, key: Enum) -> Any:
        if key is PersonSortKey.NAME:
            return entity.full_name
        if key is PersonSortKey.DOB:
            return entity.date_of_birth
        if key is PersonSortKey.EMAIL:
            return entity.contact_email
        return entity.id

    def _search_fields(self, entity: P) -> Iterable[str]:
        return (entity.id, entity.full_name, entity.contact_email)


class OwnerManager(PersonManager[Owner]):
    """Owners and their owned properties."""

    entity_type = Owner
    label = "Owner"

    def _check_delete(self, entity: Owner) -> None:
        owned = self.graph.owned_properties(entity.id)
        if owned:
            raise ValidationError(
                f"Owner {entity.id} still owns properties {', '.join(owned)}; "
                f"reassign or delete them first"
            )

    def _detach(self, entity: Owner) -> None:
        self.graph.forget_owner(entity.id)

    def owned_properties(self, owner_id: str) -> List[Property]:
        self.get(owner_id)
        return self.system.properties.resolve(self.graph.owned_properties(owner_id))

    def cooperating_hosts(self, owner_id: str) -> List[Host]:
        self.get(owner_id)
        return self.system.hosts.resolve(self.graph.cooperating_hosts(owner_id))

    def agreements(self, owner_id: str) -> List[RentalAgreement]:
        self.get(owner_id)
        return self.system.agreements.resolve(self.graph.agreements_of_owner(owner_id))


class HostManager(PersonManager[Host]):
    """
    Hosts and the properties they manage.

    Deleting a host unlinks it from its properties but keeps its agreements,
    which still name the removed host. Those agreements are written on save
    and skipped on the next load, together with their payments.
    """

    entity_type = Host
    label = "Host"

    def _detach(self, entity: Host) -> None:
        released = self.graph.forget_host(entity.id)
        if released:
            logger.info(f"Host {entity.id} unlinked from properties {', '.join(released)}")

    def managed_properties(self, host_id: str) -> List[Property]:
        self.get(host_id)
        return self.system.properties.resolve(self.graph.managed_properties(host_id))

    def cooperating_owners(self, host_id: str) -> List[Owner]:
        self.get(host_id)
        return self.system.owners.resolve(self.graph.cooperating_owners(host_id))

    def agreements(self, host_id: str) -> List[RentalAgreement]:
        self.get(host_id)
        return self.system.agreements.resolve(self.graph.agreements_of_host(host_id))


class TenantManager(PersonManager[Tenant]):
    """
    Tenants, their agreements, occupancy and payments.

    Deleting a tenant drops it from the sub-tenants of its agreements. An
    agreement naming it as main tenant is kept with that id and written on
    save, but the next load skips it and its payments. Payments the removed
    tenant made on other agreements are skipped on load as well.
    """

    entity_type = Tenant
    label = "Tenant"

    def _detach(self, entity: Tenant) -> None:
        agreements = self.system.agreements
        for agreement in agreements.resolve(self.graph.agreements_of_tenant(entity.id)):
            if entity.id in agreement.sub_tenant_ids:
                agreements._drop_sub_tenant(agreement, entity.id)
        self.graph.forget_tenant(entity.id)

    def agreements(self, tenant_id: str) -> List[RentalAgreement]:
        self.get(tenant_id)
        return self.system.agreements.resolve(self.graph.agreements_of_tenant(tenant_id))

    def rented_properties(self, tenant_id: str) -> List[Property]:
        self.get(tenant_id)
        return self.system.properties.resolve(self.graph.rented_properties(tenant_id))

    def payments(self, tenant_id: str) -> List[Payment]:
        self.get(tenant_id)
        return self.system.agreements.payments_for_tenant(tenant_id)
