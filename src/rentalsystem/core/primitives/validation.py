# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Identity and field validation shared by the managers.

Email format and uniqueness are checked by the person managers rather than in
the models, so a bad address surfaces as a package ``ValidationError`` and
leaves the manager untouched.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Iterable, List

from ..errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9+_.-]+@[A-Za-z0-9.-]+$")


def is_valid_email(email: str) -> bool:
    """True when ``email`` looks like ``local@domain``."""
    return bool(email) and EMAIL_PATTERN.match(email) is not None


def validate_email(email: str) -> str:
    """Return ``email`` unchanged, or raise ValidationError if malformed."""
    if not is_valid_email(email):
        raise ValidationError(f"Invalid email address: {email!r}")
    return email


def normalize_email(email: str) -> str:
    """Key used for case-insensitive email comparison."""
    return email.strip().casefold()


def require_text(value: str, field: str) -> str:
    """Reject empty or whitespace-only text fields."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} must not be empty")
    return value


def unique_ordered(values: Iterable[str]) -> List[str]:
    """Drop repeated values, keeping first occurrences in order."""
    return list(dict.fromkeys(values))


def validate_date_ordering(
    start: date,
    end: date,
    start_field: str = "start_date",
    end_field: str = "end_date",
) -> None:
    """
    Reject a date range that ends before it starts.

    A range starting and ending on the same day is valid.

    Raises:
        ValidationError: If ``end`` is earlier than ``start``
    """
    if end < start:
        raise ValidationError(
            f"{end_field} ({end.isoformat()}) must not be before {start_field} ({start.isoformat()})"
        )
