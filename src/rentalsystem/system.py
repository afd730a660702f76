# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
RentalSystem: one relationship graph, five managers and the reconciler
wired together.

Example:
    ```python
    from datetime import date
    from rentalsystem import RentalSystem
    from rentalsystem.entities import Owner, Property

    system = RentalSystem()
    system.owners.add(
        Owner(id="O1", full_name="Ada Lovelace",
              date_of_birth=date(1980, 1, 1), contact_email="ada@example.com")
    )
    system.properties.add(Property.residential("P1", "1 Main St", 1500, "O1", bedrooms=2))
    system.save()
    ```
"""

from __future__ import annotations

import logging
import threading
from datetime import date
from typing import Callable, List, Optional

from .core.graph import RelationshipGraph
from .core.primitives import GlobalSettings
from .managers import (
    AgreementManager,
    HostManager,
    OwnerManager,
    PropertyManager,
    TenantManager,
)
from .persistence import LoadReport, Reconciler

logger = logging.getLogger(__name__)

Progress = Callable[[str, int, int], None]

# Attributes holding the graph-bound managers and the reconciler
_COMPONENTS = ("owners", "hosts", "tenants", "properties", "agreements", "reconciler")


class RentalSystem:
    """
    Entry point holding every manager over a shared relationship graph.

    Args:
        settings: Storage and agreement settings; defaults apply when omitted
        clock: Returns today's date; agreement statuses are derived from it
    """

    def __init__(
        self,
        settings: Optional[GlobalSettings] = None,
        clock: Optional[Callable[[], date]] = None,
    ):
        self.settings = settings or GlobalSettings()
        self.clock = clock or date.today
        self.graph = RelationshipGraph()
        self.owners = OwnerManager(self)
        self.hosts = HostManager(self)
        self.tenants = TenantManager(self)
        self.properties = PropertyManager(self)
        self.agreements = AgreementManager(self)
        self.reconciler = Reconciler(self)

    @property
    def managers(self) -> list:
        return [self.owners, self.hosts, self.tenants, self.properties, self.agreements]

    def clear(self) -> None:
        """Forget every record and edge."""
        for manager in self.managers:
            manager.clear()
        self.graph.clear()
        self.reconciler.reset()

    def load(self, progress: Optional[Progress] = None) -> LoadReport:
        """
        Replace the in-memory records with the contents of the data directory.

        The files are loaded into a fresh graph and fresh managers, which
        replace the current ones only after every stage has run. A load that
        raises leaves the current records and edges untouched.

        Raises:
            StorageError: If the data directory or a required file is missing
        """
        staged = RentalSystem(self.settings, clock=self.clock)
        report = staged.reconciler.load_all(progress)
        self._adopt(staged)
        if self.settings.agreements.refresh_statuses_on_load:
            self.agreements.refresh_statuses()
        return report

    def _adopt(self, staged: "RentalSystem") -> None:
        self.graph = staged.graph
        for name in _COMPONENTS:
            component = getattr(staged, name)
            component.system = self
            setattr(self, name, component)

    def save(self, background: bool = False, progress: Optional[Progress] = None) -> None:
        """
        Write every record file.

        With ``background`` the files are written on a worker thread, leaving
        the calling thread free to drive a progress display; the call still
        returns only after the worker finishes and re-raises its error.
        """
        if not background:
            self.reconciler.save_all(progress)
            return

        errors: List[BaseException] = []

        def run() -> None:
            try:
                self.reconciler.save_all(progress)
            except BaseException as e:  # re-raised on the calling thread
                errors.append(e)

        worker = threading.Thread(target=run, name="rentalsystem-save")
        worker.start()
        worker.join()
        if errors:
            raise errors[0]

    def dangling_references(self) -> List[str]:
        """
        Edges whose endpoints are no longer stored, as readable descriptions.

        Empty for a consistent graph.
        """
        lookup = {
            "owner": self.owners.exists,
            "host": self.hosts.exists,
            "tenant": self.tenants.exists,
            "property": self.properties.exists,
            "agreement": self.agreements.exists,
            "payment": lambda i: self.agreements.find_payment(i) is not None,
        }
        problems = []
        for links in self.graph.link_sets:
            for left_id, right_id in links.edges():
                if not lookup[links.left](left_id):
                    problems.append(f"{links.name}: {links.left} {left_id} missing")
                if not lookup[links.right](right_id):
                    problems.append(f"{links.name}: {links.right} {right_id} missing")
        return problems

    def __repr__(self) -> str:
        counts = ", ".join(
            f"{type(manager).__name__}={len(manager)}" for manager in self.managers
        )
        return f"RentalSystem({counts})"
