# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Generic manager contract shared by every entity kind.

A manager owns the id-indexed store of one entity kind and is the only code
that changes it. Every operation validates first and mutates second, so a
raised error always leaves both the store and the relationship graph
untouched. Subclasses supply the kind-specific pieces through hooks:

- ``_check``: validation of a new or replacement record
- ``_link`` / ``_unlink``: relationship edges carried by a record's fields
- ``_check_delete`` / ``_detach``: delete refusal and cascading cleanup
- ``_sort_value`` / ``_search_fields``: listing support
"""

from __future__ import annotations

import logging
from abc import ABC
from enum import Enum
from typing import (
    TYPE_CHECKING,
    Any,
    ClassVar,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Type,
    TypeVar,
)

from ..core.errors import DuplicateKeyError, NotFoundError, ValidationError
from ..core.graph import RelationshipGraph
from ..core.primitives import Entity, declaration_rank, parse_token

if TYPE_CHECKING:
    from ..system import RentalSystem

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Entity)


def sort_value(value: Any) -> Any:
    """Natural ordering key: enums by declaration order, None first."""
    if isinstance(value, Enum):
        return (1, declaration_rank(value))
    if value is None:
        return (0, "")
    return (1, value)


class EntityManager(ABC, Generic[E]):
    """
    In-memory store of one entity kind wired into the relationship graph.

    Args:
        system: The owning system, giving access to the graph, the clock and
            the sibling managers used for foreign key checks and cascades.
    """

    entity_type: ClassVar[Type[Entity]] = Entity
    label: ClassVar[str] = "entity"
    sort_keys: ClassVar[Type[Enum]]

    def __init__(self, system: "RentalSystem"):
        self.system = system
        self._entities: Dict[str, E] = {}

    @property
    def graph(self) -> RelationshipGraph:
        return self.system.graph

    # --- mutations -------------------------------------------------------

    def add(self, entity: E) -> E:
        """
        Store a new entity and wire its relationships.

        Raises:
            DuplicateKeyError: If the id is already stored
            ValidationError: If a field or business rule check fails
            NotFoundError: If a referenced id does not resolve
        """
        self._require_type(entity)
        if entity.id in self._entities:
            raise DuplicateKeyError(f"{self.label} {entity.id} already exists")
        self._check(entity, None)
        self._entities[entity.id] = entity
        self._link(entity)
        logger.debug(f"Added {self.label} {entity.id}")
        return entity

    def update(self, entity: E) -> E:
        """
        Replace a stored entity, unwiring the old record and wiring the new.

        Raises:
            NotFoundError: If no entity with this id is stored
            ValidationError: If a field or business rule check fails
        """
        self._require_type(entity)
        previous = self.get(entity.id)
        self._check(entity, previous)
        self._unlink(previous)
        self._entities[entity.id] = entity
        self._link(entity)
        logger.debug(f"Updated {self.label} {entity.id}")
        return entity

    def delete(self, entity_id: str) -> E:
        """
        Remove an entity after detaching it from every collaborator.

        Returns the removed entity.

        Raises:
            NotFoundError: If no entity with this id is stored
        """
        entity = self.get(entity_id)
        self._check_delete(entity)
        self._detach(entity)
        del self._entities[entity_id]
        logger.info(f"Deleted {self.label} {entity_id}")
        return entity

    def clear(self) -> None:
        """Drop every stored entity without cascading; used before a reload."""
        self._entities.clear()

    # --- queries ---------------------------------------------------------

    def get(self, entity_id: str) -> E:
        try:
            return self._entities[entity_id]
        except KeyError:
            raise NotFoundError(f"{self.label} {entity_id} not found") from None

    def find(self, entity_id: Optional[str]) -> Optional[E]:
        if entity_id is None:
            return None
        return self._entities.get(entity_id)

    def exists(self, entity_id: str) -> bool:
        return entity_id in self._entities

    def list(self) -> List[E]:
        """All entities in insertion order."""
        return list(self._entities.values())

    def count(self) -> int:
        return len(self._entities)

    def sorted(self, criterion: Any) -> List[E]:
        """
        Entities ordered by a named criterion (stable, ascending).

        Raises:
            InvalidArgumentError: If the criterion is not recognised
        """
        key = parse_token(self.sort_keys, criterion)
        return sorted(
            self._entities.values(),
            key=lambda entity: sort_value(self._sort_value(entity, key)),
        )

    def search(self, keyword: str) -> List[E]:
        """Entities with a searchable field containing ``keyword`` (any case)."""
        needle = (keyword or "").strip().casefold()
        return [
            entity
            for entity in self._entities.values()
            if any(needle in (field or "").casefold() for field in self._search_fields(entity))
        ]

    def resolve(self, entity_ids: Iterable[str]) -> List[E]:
        """Stored entities for ``entity_ids``, skipping ids that no longer resolve."""
        return [self._entities[i] for i in entity_ids if i in self._entities]

    def __len__(self) -> int:
        return len(self._entities)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Entity):
            return isinstance(item, self.entity_type) and item.id in self._entities
        return item in self._entities

    def __iter__(self) -> Iterator[E]:
        return iter(list(self._entities.values()))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(count={len(self)})"

    # --- hooks -----------------------------------------------------------

    def _require_type(self, entity: Any) -> None:
        if not isinstance(entity, self.entity_type):
            raise ValidationError(
                f"Expected {self.entity_type.__name__}, got {type(entity).__name__}"
            )

    def _check(self, entity: E, previous: Optional[E]) -> None:
        pass

    def _link(self, entity: E) -> None:
        pass

    def _unlink(self, entity: E) -> None:
        pass

    def _check_delete(self, entity: E) -> None:
        pass

    def _detach(self, entity: E) -> None:
        pass

    def _sort_value(self, entity: E, key: Enum) -> Any:
        return entity.id

    def _search_fields(self, entity: E) -> Iterable[str]:
        return (entity.id,)
