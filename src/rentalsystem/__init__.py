# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
rentalsystem - Rental property records kept consistent in memory and on disk

Owners, hosts, tenants, properties, rental agreements and payments form a
cyclic graph of references. This package keeps that graph symmetric while
records are added, updated and deleted, and rebuilds it from flat CSV files
that store the many-to-many links as separate join records.

Key Entry Points:
- rentalsystem.system.RentalSystem - Wired managers plus load/save
- rentalsystem.entities.* - Immutable entity models
- rentalsystem.managers.* - Per-kind managers with cascading mutations
- rentalsystem.persistence.* - Flat-file reconciler
- rentalsystem.reporting.* - Report data as DataFrames

Example Usage:
    ```python
    from rentalsystem import RentalSystem
    from rentalsystem.core.primitives import GlobalSettings, StorageSettings

    system = RentalSystem(GlobalSettings(storage=StorageSettings(data_dir="data")))
    report = system.load()
    print(report)
    print(system.agreements.total_rental_income())
    system.save()
    ```
"""

import importlib
import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

# Public API surface (lazy-loaded on first attribute access)
__all__ = [  # noqa: F822 - lazy loading
    "RentalSystem",
    "core",
    "entities",
    "managers",
    "persistence",
    "reporting",
    "system",
]


_LAZY_MODULES = {
    "core": "rentalsystem.core",
    "entities": "rentalsystem.entities",
    "managers": "rentalsystem.managers",
    "persistence": "rentalsystem.persistence",
    "reporting": "rentalsystem.reporting",
    "system": "rentalsystem.system",
}

_LAZY_ATTRIBUTES = {
    "RentalSystem": ("rentalsystem.system", "RentalSystem"),
}


def __getattr__(name: str):
    if name in _LAZY_MODULES:
        module = importlib.import_module(_LAZY_MODULES[name])
        globals()[name] = module
        return module
    if name in _LAZY_ATTRIBUTES:
        module_name, attribute = _LAZY_ATTRIBUTES[name]
        value = getattr(importlib.import_module(module_name), attribute)
        globals()[name] = value
        return value
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def __dir__():
    return sorted(list(globals().keys()) + __all__)
