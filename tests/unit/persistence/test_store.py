# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import logging

import pytest

from rentalsystem.core.errors import StorageError
from rentalsystem.core.primitives import StorageSettings
from rentalsystem.persistence import OWNERS, PROPERTIES, PROPERTY_HOSTS, FlatFileStore


def _owner_row(owner_id: str, name: str = "Olivia Owner") -> dict:
    return {
        "id": owner_id,
        "full_name": name,
        "date_of_birth": "1970-01-01",
        "contact_email": f"{owner_id.lower()}@example.com",
    }


class TestWrite:
    """Canonical CSV output."""

    def test_writes_header_and_rows(self, storage_settings):
        store = FlatFileStore(storage_settings)
        path = store.write(OWNERS, [_owner_row("O1"), _owner_row("O2", "Smith, Jane")])
        lines = path.read_text().splitlines()
        assert lines[0] == "id,full_name,date_of_birth,contact_email"
        assert lines[1] == "O1,Olivia Owner,1970-01-01,o1@example.com"
        assert lines[2] == 'O2,"Smith, Jane",1970-01-01,o2@example.com'
        assert not path.with_name(path.name + ".tmp").exists()

    def test_headerless(self, storage_settings):
        settings = storage_settings.model_copy(update={"has_header": False})
        path = FlatFileStore(settings).write(OWNERS, [_owner_row("O1")])
        assert path.read_text() == "O1,Olivia Owner,1970-01-01,o1@example.com\n"

    def test_creates_data_dir(self, tmp_path):
        settings = StorageSettings(data_dir=tmp_path / "new" / "dir")
        path = FlatFileStore(settings).write(PROPERTY_HOSTS, [])
        assert path.exists()
        assert path.read_text().strip() == "property_id,host_id"


class TestRead:
    """Tolerant CSV input."""

    def test_reads_written_rows(self, storage_settings):
        store = FlatFileStore(storage_settings)
        rows = [_owner_row("007", "Smith, Jane")]
        store.write(OWNERS, rows)
        assert store.read(OWNERS) == rows

    def test_headerless_file(self, storage_settings):
        settings = storage_settings.model_copy(update={"has_header": False})
        (settings.data_dir / "owners.csv").write_text(
            "O1,Olivia Owner,1970-01-01,o1@example.com\n"
        )
        rows = FlatFileStore(settings).read(OWNERS)
        assert [row["id"] for row in rows] == ["O1"]

    def test_missing_file_is_empty(self, storage_settings, caplog):
        with caplog.at_level(logging.WARNING):
            assert FlatFileStore(storage_settings).read(OWNERS) == []
        assert "owners.csv" in caplog.text

    def test_missing_file_without_create_missing(self, storage_settings):
        settings = storage_settings.model_copy(update={"create_missing": False})
        with pytest.raises(StorageError):
            FlatFileStore(settings).read(OWNERS)

    def test_missing_directory(self, tmp_path):
        settings = StorageSettings(data_dir=tmp_path / "absent")
        with pytest.raises(StorageError):
            FlatFileStore(settings).read(OWNERS)

    def test_empty_file(self, storage_settings):
        (storage_settings.data_dir / "owners.csv").write_text("")
        assert FlatFileStore(storage_settings).read(OWNERS) == []

    def test_short_rows_are_padded(self, storage_settings):
        (storage_settings.data_dir / "properties.csv").write_text(
            "header\n"
            "P1,RESIDENTIAL,1 Main Street,1500.0,AVAILABLE,O1,2,true,false\n"
        )
        rows = FlatFileStore(storage_settings).read(PROPERTIES)
        assert rows[0]["pet_friendly"] == "false"
        assert rows[0]["business_type"] == ""
        assert rows[0]["host_ids"] == ""

    def test_legacy_trailing_column_is_read(self, storage_settings):
        (storage_settings.data_dir / "properties.csv").write_text(
            "header\n"
            "P1,RESIDENTIAL,1 Main Street,1500.0,AVAILABLE,O1,2,true,false,,,,H1;H2\n"
        )
        rows = FlatFileStore(storage_settings).read(PROPERTIES)
        assert rows[0]["host_ids"] == "H1;H2"

    def test_overlong_row_truncated(self, storage_settings, caplog):
        (storage_settings.data_dir / "properties_hosts.csv").write_text(
            "property_id,host_id\nP1,H1\nP2,H2,extra\nP3,H3\n"
        )
        with caplog.at_level(logging.WARNING, logger="rentalsystem.persistence.store"):
            rows = FlatFileStore(storage_settings).read(PROPERTY_HOSTS)
        assert [(r["property_id"], r["host_id"]) for r in rows] == [
            ("P1", "H1"),
            ("P2", "H2"),
            ("P3", "H3"),
        ]
        assert all(set(r) == {"property_id", "host_id"} for r in rows)
        assert any(
            r.name == "rentalsystem.persistence.store" and r.levelno == logging.WARNING
            for r in caplog.records
        )
