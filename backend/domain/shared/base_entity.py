"""
Base Entity class for all domain entities.

Entities have identity and lifecycle.
Two entities are equal if they have the same ID.
"""

from __future__ import annotations
from abc import ABC
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional
from uuid import UUID, uuid4


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Entity(ABC):
    """
    Base class for all domain entities.

    Entities are objects that have a distinct identity that runs through time
    and different representations. They are defined by their identity, not their attributes.
    """

    id: Optional[UUID] = field(default_factory=uuid4)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Entity):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} id={self.id}>"

    def touch(self, now: Optional[datetime] = None) -> None:
        """Bump the modification timestamp."""
        self.updated_at = now or utcnow()


@dataclass(eq=False)
class AuditableEntity(Entity):
    """
    Entity that records who created and approved it.

    The ERP passes these as display names, not user references.
    """

    created_by: Optional[str] = None
    approved_by: Optional[str] = None
