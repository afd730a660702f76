# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Persistence reconciler: rebuilds the relationship graph from flat files and
writes it back.

Storage cannot hold cycles, so scalar fields go into one row per entity and
every many-to-many link into a join file. Loading replays those files in
dependency order:

1. owners, hosts, tenants
2. properties (owner resolved; legacy inline host ids wired)
3. property -> host joins
4. property -> tenant joins
5. rental agreements (stored status kept)
6. agreement -> sub-tenant joins
7. payments

Each stage refuses to run before the stages it depends on. Within a stage a
record that fails validation or references an unknown id is logged, counted
as skipped and the stage carries on.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Iterable, List, Optional, Tuple

from ..core.errors import DataInconsistencyError, RentalSystemError
from ..entities import Host, Owner, Person, Tenant
from .codec import RecordCodec
from .records import (
    AGREEMENT_TENANTS,
    AGREEMENTS,
    HOSTS,
    OWNERS,
    PAYMENTS,
    PROPERTIES,
    PROPERTY_HOSTS,
    PROPERTY_TENANTS,
    TENANTS,
    RecordSchema,
    Row,
)
from .store import FlatFileStore

if TYPE_CHECKING:
    from ..managers import PersonManager
    from ..system import RentalSystem

logger = logging.getLogger(__name__)


class LoadStage(str, Enum):
    """Load stages in the order they must run."""

    OWNERS = "owners"
    HOSTS = "hosts"
    TENANTS = "tenants"
    PROPERTIES = "properties"
    PROPERTY_HOSTS = "property_hosts"
    PROPERTY_TENANTS = "property_tenants"
    AGREEMENTS = "agreements"
    AGREEMENT_TENANTS = "agreement_tenants"
    PAYMENTS = "payments"


# Owners, hosts and tenants share step 1 and may load in any order.
_STEP = {
    LoadStage.OWNERS: 1,
    LoadStage.HOSTS: 1,
    LoadStage.TENANTS: 1,
    LoadStage.PROPERTIES: 2,
    LoadStage.PROPERTY_HOSTS: 3,
    LoadStage.PROPERTY_TENANTS: 4,
    LoadStage.AGREEMENTS: 5,
    LoadStage.AGREEMENT_TENANTS: 6,
    LoadStage.PAYMENTS: 7,
}


@dataclass
class StageResult:
    """Outcome of one load stage."""

    stage: LoadStage
    loaded: int = 0
    """Records applied to the graph"""

    skipped: int = 0
    """Records rejected and left out"""

    duplicates: int = 0
    """Join records already applied by an earlier stage"""

    errors: List[str] = field(default_factory=list)
    """One message per skipped record"""

    def __str__(self) -> str:
        text = f"{self.stage.value}: {self.loaded} loaded, {self.skipped} skipped"
        if self.duplicates:
            text += f", {self.duplicates} already linked"
        return text


@dataclass
class LoadReport:
    """Outcome of a full load, stage by stage."""

    stages: Dict[LoadStage, StageResult] = field(default_factory=dict)

    def add(self, result: StageResult) -> None:
        self.stages[result.stage] = result

    @property
    def total_loaded(self) -> int:
        return sum(result.loaded for result in self.stages.values())

    @property
    def total_skipped(self) -> int:
        return sum(result.skipped for result in self.stages.values())

    @property
    def clean(self) -> bool:
        """True when no record was skipped."""
        return self.total_skipped == 0

    def __getitem__(self, stage: LoadStage) -> StageResult:
        return self.stages[LoadStage(stage)]

    def __str__(self) -> str:
        return (
            f"Loaded {self.total_loaded} record(s), skipped {self.total_skipped} "
            f"across {len(self.stages)} stage(s)"
        )

    def summary_report(self) -> str:
        """One line per stage followed by any skip reasons."""
        lines = ["Load summary:"]
        for result in self.stages.values():
            lines.append(f"  {result}")
        problems = [
            f"  - [{result.stage.value}] {message}"
            for result in self.stages.values()
            for message in result.errors
        ]
        if problems:
            lines.append("Skipped records:")
            lines.extend(problems)
        return "\n".join(lines)


class Reconciler:
    """
    Loads every record file into a system's managers and saves them back.

    Saved rows are sorted by id, and join rows by parent id with children
    in their stored order, so saving an unchanged graph twice produces
    identical files.
    """

    def __init__(self, system: "RentalSystem"):
        self.system = system
        self.store = FlatFileStore(system.settings.storage)
        self.codec = RecordCodec(system.settings.storage)
        self._completed: Dict[LoadStage, StageResult] = {}

    @property
    def completed_stages(self) -> List[LoadStage]:
        return list(self._completed)

    def reset(self) -> None:
        """Forget which stages have run; the next load starts from step 1."""
        self._completed.clear()

    # --- load ------------------------------------------------------------

    def load_all(
        self, progress: Optional[Callable[[str, int, int], None]] = None
    ) -> LoadReport:
        """Run every load stage in order and collect their results."""
        report = LoadReport()
        steps = self.load_steps()
        for index, (stage, load) in enumerate(steps, start=1):
            if progress is not None:
                progress(f"load {stage.value}", index, len(steps))
            report.add(load())
        logger.info(str(report))
        return report

    def load_steps(self) -> List[Tuple[LoadStage, Callable[[], StageResult]]]:
        return [
            (LoadStage.OWNERS, self.load_owners),
            (LoadStage.HOSTS, self.load_hosts),
            (LoadStage.TENANTS, self.load_tenants),
            (LoadStage.PROPERTIES, self.load_properties),
            (LoadStage.PROPERTY_HOSTS, self.load_property_hosts),
            (LoadStage.PROPERTY_TENANTS, self.load_property_tenants),
            (LoadStage.AGREEMENTS, self.load_agreements),
            (LoadStage.AGREEMENT_TENANTS, self.load_agreement_sub_tenants),
            (LoadStage.PAYMENTS, self.load_payments),
        ]

    def load_owners(self) -> StageResult:
        return self._load_people(LoadStage.OWNERS, OWNERS, Owner, self.system.owners)

    def load_hosts(self) -> StageResult:
        return self._load_people(LoadStage.HOSTS, HOSTS, Host, self.system.hosts)

    def load_tenants(self) -> StageResult:
        return self._load_people(LoadStage.TENANTS, TENANTS, Tenant, self.system.tenants)

    def _load_people(
        self,
        stage: LoadStage,
        schema: RecordSchema,
        person_type: type,
        manager: "PersonManager",
    ) -> StageResult:
        def apply(row: Row) -> bool:
            person: Person = self.codec.person_from_row(person_type, row)
            manager.add(person)
            return True

        return self._run(stage, schema, apply)

    def load_properties(self) -> StageResult:
        properties = self.system.properties

        def apply(row: Row) -> bool:
            prop, host_ids = self.codec.property_from_row(row)
            if not self.system.owners.exists(prop.owner_id):
                raise DataInconsistencyError(
                    f"Property {prop.id}: owner {prop.owner_id} not found"
                )
            properties.add(prop)
            for host_id in host_ids:
                if self.system.hosts.exists(host_id):
                    properties.add_host(prop.id, host_id)
                else:
                    logger.warning(
                        f"Property {prop.id}: inline host {host_id} not found; link skipped"
                    )
            return True

        return self._run(LoadStage.PROPERTIES, PROPERTIES, apply)

    def load_property_hosts(self) -> StageResult:
        def apply(row: Row) -> bool:
            property_id, host_id = self._join_ids(row, "property_id", "host_id")
            self._require(self.system.properties, "Property", property_id)
            self._require(self.system.hosts, "Host", host_id)
            return self.system.properties.add_host(property_id, host_id)

        return self._run(LoadStage.PROPERTY_HOSTS, PROPERTY_HOSTS, apply)

    def load_property_tenants(self) -> StageResult:
        def apply(row: Row) -> bool:
            property_id, tenant_id = self._join_ids(row, "property_id", "tenant_id")
            self._require(self.system.properties, "Property", property_id)
            self._require(self.system.tenants, "Tenant", tenant_id)
            return self.system.properties.add_tenant(property_id, tenant_id)

        return self._run(LoadStage.PROPERTY_TENANTS, PROPERTY_TENANTS, apply)

    def load_agreements(self) -> StageResult:
        agreements = self.system.agreements

        def apply(row: Row) -> bool:
            agreement, sub_tenant_ids = self.codec.agreement_from_row(row)
            self._require(self.system.properties, "Property", agreement.property_id)
            self._require(self.system.owners, "Owner", agreement.owner_id)
            self._require(self.system.hosts, "Host", agreement.host_id)
            self._require(self.system.tenants, "Tenant", agreement.main_tenant_id)
            agreements.add(agreement, keep_stored_status=True)
            for tenant_id in sub_tenant_ids:
                if tenant_id == agreement.main_tenant_id:
                    continue
                if self.system.tenants.exists(tenant_id):
                    agreements.add_sub_tenant(agreement.id, tenant_id)
                else:
                    logger.warning(
                        f"Agreement {agreement.id}: sub-tenant {tenant_id} not found; skipped"
                    )
            return True

        return self._run(LoadStage.AGREEMENTS, AGREEMENTS, apply)

    def load_agreement_sub_tenants(self) -> StageResult:
        agreements = self.system.agreements

        def apply(row: Row) -> bool:
            agreement_id, tenant_id = self._join_ids(row, "agreement_id", "tenant_id")
            agreement = self._require(agreements, "Agreement", agreement_id)
            self._require(self.system.tenants, "Tenant", tenant_id)
            if tenant_id in agreement.tenant_ids:
                return False
            return agreements.add_sub_tenant(agreement_id, tenant_id)

        return self._run(LoadStage.AGREEMENT_TENANTS, AGREEMENT_TENANTS, apply)

    def load_payments(self) -> StageResult:
        agreements = self.system.agreements

        def apply(row: Row) -> bool:
            payment = self.codec.payment_from_row(row)
            self._require(agreements, "Agreement", payment.agreement_id)
            self._require(self.system.tenants, "Tenant", payment.tenant_id)
            agreements.record_payment(payment)
            return True

        return self._run(LoadStage.PAYMENTS, PAYMENTS, apply)

    def _run(
        self,
        stage: LoadStage,
        schema: RecordSchema,
        apply: Callable[[Row], bool],
    ) -> StageResult:
        """
        Apply ``apply`` to every row of ``schema``'s file.

        ``apply`` returns False for a join record that was already linked.
        """
        self._check_prerequisites(stage)
        result = StageResult(stage)
        for number, row in enumerate(self.store.read(schema), start=1):
            try:
                if apply(row):
                    result.loaded += 1
                else:
                    result.duplicates += 1
            except (RentalSystemError, ValueError) as e:
                message = f"row {number}: {e}"
                logger.warning(f"Skipping {schema.name} {message}")
                result.skipped += 1
                result.errors.append(message)
        self._completed[stage] = result
        logger.info(f"Loaded {result}")
        return result

    def _check_prerequisites(self, stage: LoadStage) -> None:
        missing = [
            earlier.value
            for earlier, step in _STEP.items()
            if step < _STEP[stage] and earlier not in self._completed
        ]
        if missing:
            raise RuntimeError(
                f"Cannot load {stage.value} before {', '.join(missing)}"
            )

    @staticmethod
    def _join_ids(row: Row, left: str, right: str) -> Tuple[str, str]:
        left_id, right_id = row[left].strip(), row[right].strip()
        if not left_id or not right_id:
            raise DataInconsistencyError(f"Join record with empty id: {left_id!r}, {right_id!r}")
        return left_id, right_id

    @staticmethod
    def _require(manager, label: str, entity_id: str):
        entity = manager.find(entity_id)
        if entity is None:
            raise DataInconsistencyError(f"{label} {entity_id} not found")
        return entity

    # --- save ------------------------------------------------------------

    def save_all(
        self, progress: Optional[Callable[[str, int, int], None]] = None
    ) -> None:
        """Write every record file from the current graph."""
        steps = self.save_steps()
        for index, (name, save) in enumerate(steps, start=1):
            if progress is not None:
                progress(f"save {name}", index, len(steps))
            save()
        logger.info(f"Saved all records to {self.store.data_dir}")

    def save_steps(self) -> List[Tuple[str, Callable[[], object]]]:
        return [
            (OWNERS.name, self.save_owners),
            (HOSTS.name, self.save_hosts),
            (TENANTS.name, self.save_tenants),
            (PROPERTIES.name, self.save_properties),
            (PROPERTY_HOSTS.name, self.save_property_hosts),
            (PROPERTY_TENANTS.name, self.save_property_tenants),
            (AGREEMENTS.name, self.save_agreements),
            (AGREEMENT_TENANTS.name, self.save_agreement_sub_tenants),
            (PAYMENTS.name, self.save_payments),
        ]

    def owner_records(self) -> List[Row]:
        return [self.codec.person_row(p) for p in _by_id(self.system.owners)]

    def host_records(self) -> List[Row]:
        return [self.codec.person_row(p) for p in _by_id(self.system.hosts)]

    def tenant_records(self) -> List[Row]:
        return [self.codec.person_row(p) for p in _by_id(self.system.tenants)]

    def property_records(self) -> List[Row]:
        return [self.codec.property_row(p) for p in _by_id(self.system.properties)]

    def property_host_records(self) -> List[Row]:
        graph = self.system.graph
        return [
            {"property_id": prop.id, "host_id": host_id}
            for prop in _by_id(self.system.properties)
            for host_id in graph.hosts_of(prop.id)
        ]

    def property_tenant_records(self) -> List[Row]:
        graph = self.system.graph
        return [
            {"property_id": prop.id, "tenant_id": tenant_id}
            for prop in _by_id(self.system.properties)
            for tenant_id in graph.occupants(prop.id)
        ]

    def agreement_records(self) -> List[Row]:
        return [self.codec.agreement_row(a) for a in _by_id(self.system.agreements)]

    def agreement_sub_tenant_records(self) -> List[Row]:
        return [
            {"agreement_id": agreement.id, "tenant_id": tenant_id}
            for agreement in _by_id(self.system.agreements)
            for tenant_id in agreement.sub_tenant_ids
        ]

    def payment_records(self) -> List[Row]:
        payments = sorted(self.system.agreements.list_payments(), key=lambda p: p.id)
        return [self.codec.payment_row(p) for p in payments]

    def save_owners(self, records: Optional[List[Row]] = None) -> None:
        self._save(OWNERS, records, self.owner_records)

    def save_hosts(self, records: Optional[List[Row]] = None) -> None:
        self._save(HOSTS, records, self.host_records)

    def save_tenants(self, records: Optional[List[Row]] = None) -> None:
        self._save(TENANTS, records, self.tenant_records)

    def save_properties(self, records: Optional[List[Row]] = None) -> None:
        self._save(PROPERTIES, records, self.property_records)

    def save_property_hosts(self, records: Optional[List[Row]] = None) -> None:
        self._save(PROPERTY_HOSTS, records, self.property_host_records)

    def save_property_tenants(self, records: Optional[List[Row]] = None) -> None:
        self._save(PROPERTY_TENANTS, records, self.property_tenant_records)

    def save_agreements(self, records: Optional[List[Row]] = None) -> None:
        self._save(AGREEMENTS, records, self.agreement_records)

    def save_agreement_sub_tenants(self, records: Optional[List[Row]] = None) -> None:
        self._save(AGREEMENT_TENANTS, records, self.agreement_sub_tenant_records)

    def save_payments(self, records: Optional[List[Row]] = None) -> None:
        self._save(PAYMENTS, records, self.payment_records)

    def _save(
        self,
        schema: RecordSchema,
        records: Optional[List[Row]],
        build: Callable[[], List[Row]],
    ) -> None:
        rows = build() if records is None else records
        path = self.store.write(schema, rows)
        logger.info(f"Saved {len(rows)} {schema.name} record(s) to {path.name}")


def _by_id(entities: Iterable):
    return sorted(entities, key=lambda entity: entity.id)
