"""Identifier generation."""

import uuid


def new_id() -> str:
    """Return a globally unique string id."""
    return str(uuid.uuid4())
