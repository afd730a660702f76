# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Model(BaseModel):
    """Base Pydantic model with common configuration.

    Immutable models; every reference between records is held by the
    relationship graph, never by the models themselves.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra="forbid",
    )


class Entity(Model):
    """
    Base for records stored under a string id.

    Two entities are equal when they are of the same kind and share an id,
    whatever their other field values; a stored record and its edited copy
    therefore compare equal.
    """

    id: str = Field(..., min_length=1)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Entity):
            return NotImplemented
        return type(self) is type(other) and self.id == other.id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self.id))
