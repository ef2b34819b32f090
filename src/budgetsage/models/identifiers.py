"""Identifier generation for ledger records."""

from __future__ import annotations

from uuid import uuid4


def new_id() -> str:
    """Return a short random identifier."""
    return uuid4().hex[:12]
