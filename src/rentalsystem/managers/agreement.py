# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Rental agreement manager and the agreement status state machine.

Status follows the calendar: NEW before the start date, ACTIVE from start to
end (inclusive) and COMPLETED afterwards. ``terminate`` completes an
agreement early. Once COMPLETED an agreement never changes status again,
neither through ``update`` nor through ``refresh_statuses``.

Every tenant of a live (not COMPLETED) agreement occupies the agreement's
property. Completing, deleting or shrinking an agreement releases a tenant's
occupancy unless another live agreement on the same property still lists
that tenant.

Payments are stored here as well, indexed on their agreement and tenant.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from ..core.errors import DuplicateKeyError, NotFoundError, ValidationError
from ..core.primitives import AgreementSortKey, AgreementStatus
from ..entities import Payment, RentalAgreement, derive_status
from .base import EntityManager

if TYPE_CHECKING:
    from ..system import RentalSystem

logger = logging.getLogger(__name__)


class AgreementManager(EntityManager[RentalAgreement]):
    """Rental agreements, their tenants and their payments."""

    entity_type = RentalAgreement
    label = "Rental agreement"
    sort_keys = AgreementSortKey

    def __init__(self, system: "RentalSystem"):
        super().__init__(system)
        self._payments: Dict[str, Payment] = {}

    @property
    def today(self) -> date:
        return self.system.clock()

    # --- lifecycle -------------------------------------------------------

    def add(self, entity: RentalAgreement, keep_stored_status: bool = False) -> RentalAgreement:
        """
        Store a new agreement and wire it to its property, people and tenants.

        The stored status is derived from today's date unless
        ``keep_stored_status`` is set (used when loading stored records). The
        stored instance is returned and may differ from ``entity`` in status.
        """
        self._require_type(entity)
        if not keep_stored_status:
            entity = entity.model_copy(update={"status": entity.status_on(self.today)})
        return super().add(entity)

    def update(self, entity: RentalAgreement) -> RentalAgreement:
        """Replace an agreement; status is re-derived from the new dates."""
        self._require_type(entity)
        previous = self.get(entity.id)
        sticky = previous.is_completed or entity.is_completed
        status = derive_status(
            entity.start_date,
            entity.end_date,
            self.today,
            AgreementStatus.COMPLETED if sticky else AgreementStatus.NEW,
        )
        updated = super().update(entity.model_copy(update={"status": status}))
        if previous.property_id != updated.property_id:
            self.graph.history.unlink(previous.property_id, updated.id)
        return updated

    def clear(self) -> None:
        super().clear()
        self._payments.clear()

    def _check(self, entity: RentalAgreement, previous: Optional[RentalAgreement]) -> None:
        self.system.properties.get(entity.property_id)
        self.system.owners.get(entity.owner_id)
        self.system.hosts.get(entity.host_id)
        for tenant_id in entity.tenant_ids:
            self.system.tenants.get(tenant_id)

    def _link(self, entity: RentalAgreement) -> None:
        self.graph.register_agreement(
            entity.id,
            entity.property_id,
            entity.owner_id,
            entity.host_id,
            list(entity.tenant_ids),
        )
        if not entity.is_completed:
            for tenant_id in entity.tenant_ids:
                self.graph.add_occupant(entity.property_id, tenant_id)

    def _unlink(self, entity: RentalAgreement) -> None:
        self._release(entity, entity.tenant_ids)
        self.graph.unregister_agreement(entity.id, keep_history=True)

    def _detach(self, entity: RentalAgreement) -> None:
        self._release(entity, entity.tenant_ids)
        self.graph.unregister_agreement(entity.id)
        for payment_id in self.graph.payments_of_agreement(entity.id):
            self.graph.forget_payment(payment_id)
            self._payments.pop(payment_id, None)

    def _release(self, agreement: RentalAgreement, tenant_ids: Iterable[str]) -> None:
        """Remove occupancy edges no other live agreement on the property needs."""
        for tenant_id in tenant_ids:
            still_needed = any(
                other.id != agreement.id
                and other.property_id == agreement.property_id
                and not other.is_completed
                and tenant_id in other.tenant_ids
                for other in self.resolve(self.graph.agreements_of_tenant(tenant_id))
            )
            if not still_needed:
                self.graph.remove_occupant(agreement.property_id, tenant_id)

    def _store(self, entity: RentalAgreement) -> RentalAgreement:
        self._entities[entity.id] = entity
        return entity

    # --- state machine ---------------------------------------------------

    def terminate(self, agreement_id: str) -> RentalAgreement:
        """
        End an agreement today.

        Status becomes COMPLETED and the end date becomes today's date. The
        tenants no longer occupy the property; the agreement itself and its
        payments are kept.
        """
        agreement = self.get(agreement_id)
        today = self.today
        terminated = agreement.model_copy(
            update={"status": AgreementStatus.COMPLETED, "end_date": today}
        )
        self._store(terminated)
        self._release(terminated, terminated.tenant_ids)
        logger.info(f"Rental agreement {agreement_id} terminated on {today.isoformat()}")
        return terminated

    def extend(self, agreement_id: str, days: int) -> RentalAgreement:
        """
        Push the end date back by ``days``; the status is left as it is.

        Raises:
            ValidationError: If ``days`` is negative
        """
        agreement = self.get(agreement_id)
        if days < 0:
            raise ValidationError(f"Cannot extend by a negative number of days ({days})")
        extended = agreement.model_copy(
            update={"end_date": agreement.end_date + timedelta(days=days)}
        )
        self._store(extended)
        logger.info(
            f"Rental agreement {agreement_id} extended by {days} day(s) "
            f"to {extended.end_date.isoformat()}"
        )
        return extended

    def refresh_statuses(self) -> List[str]:
        """
        Re-derive every status from today's date.

        Returns the ids whose status changed. With autosave enabled the
        agreements file and the property tenant join file are rewritten
        when anything changed.
        """
        today = self.today
        changed: List[str] = []
        for agreement in list(self._entities.values()):
            status = agreement.status_on(today)
            if status is agreement.status:
                continue
            refreshed = self._store(agreement.model_copy(update={"status": status}))
            if refreshed.is_completed:
                self._release(refreshed, refreshed.tenant_ids)
            changed.append(agreement.id)
            logger.debug(f"Rental agreement {agreement.id}: {agreement.status.value} -> {status.value}")
        if changed:
            logger.info(f"Refreshed {len(changed)} rental agreement status(es)")
            if self.system.settings.agreements.autosave:
                self.system.reconciler.save_agreements()
                self.system.reconciler.save_property_tenants()
        return changed

    # --- sub-tenants -----------------------------------------------------

    def add_sub_tenant(self, agreement_id: str, tenant_id: str) -> bool:
        """
        Add a sub-tenant to an agreement.

        Returns False, leaving everything unchanged, when the tenant is the
        main tenant or already a sub-tenant.

        Raises:
            NotFoundError: If the agreement or tenant does not exist
        """
        agreement = self.get(agreement_id)
        self.system.tenants.get(tenant_id)
        if tenant_id == agreement.main_tenant_id:
            logger.warning(
                f"Tenant {tenant_id} is the main tenant of agreement {agreement_id}; "
                f"not added as sub-tenant"
            )
            return False
        if tenant_id in agreement.sub_tenant_ids:
            logger.warning(
                f"Tenant {tenant_id} is already a sub-tenant of agreement {agreement_id}"
            )
            return False
        updated = self._store(
            agreement.model_copy(
                update={"sub_tenant_ids": tuple(agreement.sub_tenant_ids) + (tenant_id,)}
            )
        )
        self.graph.tenancy.link(tenant_id, agreement_id)
        if not updated.is_completed and self.system.properties.exists(updated.property_id):
            self.graph.add_occupant(updated.property_id, tenant_id)
        return True

    def remove_sub_tenant(self, agreement_id: str, tenant_id: str) -> bool:
        """
        Remove a sub-tenant from an agreement.

        Returns False when the tenant is not a sub-tenant of it.

        Raises:
            NotFoundError: If the agreement or tenant does not exist
        """
        agreement = self.get(agreement_id)
        self.system.tenants.get(tenant_id)
        if tenant_id not in agreement.sub_tenant_ids:
            logger.warning(
                f"Tenant {tenant_id} is not a sub-tenant of agreement {agreement_id}"
            )
            return False
        self._drop_sub_tenant(agreement, tenant_id)
        return True

    def _drop_sub_tenant(self, agreement: RentalAgreement, tenant_id: str) -> RentalAgreement:
        updated = self._store(
            agreement.model_copy(
                update={
                    "sub_tenant_ids": tuple(
                        t for t in agreement.sub_tenant_ids if t != tenant_id
                    )
                }
            )
        )
        self.graph.tenancy.unlink(tenant_id, agreement.id)
        self._release(updated, [tenant_id])
        return updated

    def all_tenant_ids(self, agreement_id: str) -> List[str]:
        """Main tenant first, then sub-tenants."""
        return list(self.get(agreement_id).tenant_ids)

    # --- queries ---------------------------------------------------------

    def active(self) -> List[RentalAgreement]:
        today = self.today
        return [
            a
            for a in self._entities.values()
            if a.status is AgreementStatus.ACTIVE and a.end_date >= today
        ]

    def expired(self) -> List[RentalAgreement]:
        today = self.today
        return [a for a in self._entities.values() if a.is_completed or a.end_date < today]

    def active_count(self) -> int:
        return len(self.active())

    def total_rental_income(self) -> float:
        """Sum of rent over every ACTIVE agreement."""
        return sum(
            a.rent_amount
            for a in self._entities.values()
            if a.status is AgreementStatus.ACTIVE
        )

    def find_active_for_property(self, property_id: str) -> Optional[RentalAgreement]:
        for agreement in self._entities.values():
            if agreement.property_id == property_id and agreement.status is AgreementStatus.ACTIVE:
                return agreement
        return None

    def for_property(self, property_id: str) -> List[RentalAgreement]:
        return [a for a in self._entities.values() if a.property_id == property_id]

    def _sort_value(self, entity: RentalAgreement, key: Enum) -> Any:
        if key is AgreementSortKey.PROPERTY_ID:
            return entity.property_id
        if key is AgreementSortKey.TENANT_NAME:
            return self._name_of(self.system.tenants, entity.main_tenant_id)
        if key is AgreementSortKey.OWNER_NAME:
            return self._name_of(self.system.owners, entity.owner_id)
        if key is AgreementSortKey.HOST_NAME:
            return self._name_of(self.system.hosts, entity.host_id)
        if key is AgreementSortKey.START_DATE:
            return entity.start_date
        if key is AgreementSortKey.END_DATE:
            return entity.end_date
        if key is AgreementSortKey.RENT_AMOUNT:
            return entity.rent_amount
        if key is AgreementSortKey.STATUS:
            return entity.status
        return entity.id

    def _search_fields(self, entity: RentalAgreement) -> Iterable[str]:
        prop = self.system.properties.find(entity.property_id)
        return (
            entity.id,
            prop.address if prop else "",
            self._name_of(self.system.tenants, entity.main_tenant_id),
            self._name_of(self.system.owners, entity.owner_id),
            self._name_of(self.system.hosts, entity.host_id),
        )

    @staticmethod
    def _name_of(manager: Any, person_id: str) -> str:
        person = manager.find(person_id)
        return person.full_name if person else ""

    # --- payments --------------------------------------------------------

    def record_payment(self, payment: Payment) -> Payment:
        """
        Store a payment against an agreement.

        Raises:
            DuplicateKeyError: If the payment id is already stored
            NotFoundError: If the agreement or tenant does not exist
        """
        if not isinstance(payment, Payment):
            raise ValidationError(f"Expected Payment, got {type(payment).__name__}")
        if payment.id in self._payments:
            raise DuplicateKeyError(f"Payment {payment.id} already exists")
        agreement = self.get(payment.agreement_id)
        self.system.tenants.get(payment.tenant_id)
        if payment.tenant_id not in agreement.tenant_ids:
            logger.warning(
                f"Payment {payment.id}: tenant {payment.tenant_id} is not a party "
                f"to agreement {agreement.id}"
            )
        self._payments[payment.id] = payment
        self.graph.record_payment(payment.id, payment.agreement_id, payment.tenant_id)
        logger.debug(f"Recorded payment {payment.id} for agreement {payment.agreement_id}")
        return payment

    def delete_payment(self, payment_id: str) -> Payment:
        payment = self.get_payment(payment_id)
        self.graph.forget_payment(payment_id)
        del self._payments[payment_id]
        return payment

    def get_payment(self, payment_id: str) -> Payment:
        try:
            return self._payments[payment_id]
        except KeyError:
            raise NotFoundError(f"Payment {payment_id} not found") from None

    def find_payment(self, payment_id: str) -> Optional[Payment]:
        return self._payments.get(payment_id)

    def payments(self, agreement_id: str) -> List[Payment]:
        """Payments made against an agreement, in recording order."""
        self.get(agreement_id)
        return self._resolve_payments(self.graph.payments_of_agreement(agreement_id))

    def payments_for_tenant(self, tenant_id: str) -> List[Payment]:
        return self._resolve_payments(self.graph.payments_of_tenant(tenant_id))

    def list_payments(self) -> List[Payment]:
        return list(self._payments.values())

    def payment_count(self) -> int:
        return len(self._payments)

    def _resolve_payments(self, payment_ids: Iterable[str]) -> List[Payment]:
        return [self._payments[i] for i in payment_ids if i in self._payments]
