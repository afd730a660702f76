# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pathlib import Path

from pydantic import Field

from .model import Model


class StorageSettings(Model):
    """
    Location and format of the flat record files.

    Every file lives directly under ``data_dir``. Reading requires the
    directory to exist; a missing file inside it loads as empty when
    ``create_missing`` is set.
    """

    data_dir: Path = Path("data")
    owners_file: str = "owners.csv"
    hosts_file: str = "hosts.csv"
    tenants_file: str = "tenants.csv"
    properties_file: str = "properties.csv"
    property_hosts_file: str = "properties_hosts.csv"
    property_tenants_file: str = "properties_tenants.csv"
    agreements_file: str = "rental_agreements.csv"
    agreement_tenants_file: str = "rental_agreements_tenants.csv"
    payments_file: str = "payments.csv"
    date_format: str = Field(
        default="%Y-%m-%d", description="strftime/strptime pattern for dates."
    )
    list_separator: str = Field(
        default=";", min_length=1, description="Separator inside id list columns."
    )
    has_header: bool = Field(
        default=True, description="Files carry a header row (written and skipped)."
    )
    create_missing: bool = Field(
        default=True,
        description="Treat a missing file as empty instead of failing the load.",
    )

    def path_for(self, filename: str) -> Path:
        """Full path of ``filename`` inside the data directory."""
        return Path(self.data_dir) / filename


class AgreementSettings(Model):
    """Settings for rental agreement status handling."""

    refresh_statuses_on_load: bool = Field(
        default=False,
        description="Re-derive agreement statuses from today's date after a load.",
    )
    autosave: bool = Field(
        default=False,
        description="Persist agreements after refresh_statuses() changes any status.",
    )


class GlobalSettings(Model):
    """Top-level settings container."""

    storage: StorageSettings = Field(default_factory=StorageSettings)
    agreements: AgreementSettings = Field(default_factory=AgreementSettings)
