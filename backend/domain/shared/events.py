"""
Domain Events.

Domain events are records of significant business occurrences.
They are used for decoupling and eventual consistency.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from .base_entity import utcnow


@dataclass(frozen=True)
class DomainEvent:
    """
    Base class for all domain events.

    Domain events are immutable records of something that happened in the domain.
    They are used for:
    - Triggering side effects (recalculations, notifications)
    - Audit trail
    """

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=utcnow)

    @property
    def event_type(self) -> str:
        """Get the event type name."""
        return self.__class__.__name__


# =============================================================================
# BOM EVENTS
# =============================================================================

@dataclass(frozen=True)
class BOMDocumentCreated(DomainEvent):
    """Event raised when a BOM document is created."""

    bom_id: Optional[UUID] = None
    bom_number: str = ""
    total_material_cost: Decimal = Decimal('0')


@dataclass(frozen=True)
class BOMDocumentRevised(DomainEvent):
    """Event raised when a BOM document is re-submitted and saved."""

    bom_id: Optional[UUID] = None
    bom_number: str = ""
    old_revision: int = 0
    new_revision: int = 0
    old_total: Decimal = Decimal('0')
    new_total: Decimal = Decimal('0')
    reason: Optional[str] = None


@dataclass(frozen=True)
class BOMDocumentDeleted(DomainEvent):
    """Event raised when a BOM document is removed."""

    bom_id: Optional[UUID] = None
    bom_number: str = ""
