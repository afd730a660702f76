# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import pytest

from rentalsystem.core.errors import ValidationError
from rentalsystem.core.primitives import (
    is_valid_email,
    normalize_email,
    require_text,
    unique_ordered,
    validate_email,
)


@pytest.mark.parametrize(
    "email",
    ["ada@example.com", "first.last+tag@mail.example.org", "a_b-c@host"],
)
def test_valid_emails(email):
    assert is_valid_email(email)
    assert validate_email(email) == email


@pytest.mark.parametrize(
    "email",
    ["", "no-at-sign", "two@@example.com", "spaces in@example.com", "@example.com"],
)
def test_invalid_emails(email):
    assert not is_valid_email(email)
    with pytest.raises(ValidationError):
        validate_email(email)


def test_normalize_email_ignores_case_and_padding():
    assert normalize_email("  Ada@Example.COM ") == "ada@example.com"


def test_require_text_rejects_blank():
    assert require_text("x", "field") == "x"
    with pytest.raises(ValidationError, match="address"):
        require_text("   ", "address")


def test_unique_ordered_keeps_first_occurrence():
    assert unique_ordered(["b", "a", "b", "c", "a"]) == ["b", "a", "c"]
