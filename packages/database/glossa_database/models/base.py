"""
Declarative base and common helpers.
"""

import uuid

from sqlalchemy.orm import DeclarativeBase


def generate_uuid() -> str:
    """Generate a string UUID4 for primary keys."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base for all models."""
