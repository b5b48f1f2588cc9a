"""
Shared Value Objects used across multiple domains.

Value Objects are immutable objects that describe characteristics of a thing.
Two value objects are equal if all their properties are equal.
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from enum import Enum
from typing import Any, Optional


MONEY_QUANTUM = Decimal('0.01')


# =============================================================================
# ENUMERATIONS
# =============================================================================

class BOMType(str, Enum):
    """Purpose of a bill of materials."""

    MANUFACTURING = "MANUFACTURING"
    ENGINEERING = "ENGINEERING"
    SALES = "SALES"
    SERVICE = "SERVICE"

    @classmethod
    def choices(cls) -> list[tuple[str, str]]:
        return [(c.value, c.value.title()) for c in cls]


class BOMStatus(str, Enum):
    """Lifecycle status of a BOM document."""

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    OBSOLETE = "OBSOLETE"
    ARCHIVED = "ARCHIVED"

    @property
    def is_editable(self) -> bool:
        return self in (BOMStatus.DRAFT, BOMStatus.ACTIVE, BOMStatus.INACTIVE)

    @classmethod
    def choices(cls) -> list[tuple[str, str]]:
        return [(c.value, c.value.title()) for c in cls]


# =============================================================================
# VALUE OBJECTS
# =============================================================================

def to_decimal(value: Any) -> Optional[Decimal]:
    """
    Convert a wire value to Decimal.

    Returns None when the value is missing or not a number at all.
    NaN and infinities are returned as-is so callers can reject them explicitly.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None


def round_money(value: Decimal) -> Decimal:
    """Round a monetary value to 2 places, half up."""
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Money:
    """
    Value object representing monetary amount.
    Immutable; currency is carried but never converted.
    """

    amount: Decimal
    currency: Optional[str] = None

    def __post_init__(self):
        if not self.amount.is_finite():
            raise ValueError("Amount must be a finite number")

    @classmethod
    def of(cls, quantity: Decimal, rate: Decimal, currency: Optional[str] = None) -> Money:
        """Line amount for ``quantity`` units priced at ``rate``."""
        return cls(round_money(quantity * rate), currency)

    def __add__(self, other: Money) -> Money:
        currency = self.currency if self.currency == other.currency else None
        return Money(self.amount + other.amount, currency)

    def __str__(self) -> str:
        if self.currency:
            return f"{self.amount:.2f} {self.currency}"
        return f"{self.amount:.2f}"
