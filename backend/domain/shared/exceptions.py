"""
Domain Exceptions.

Custom exceptions for domain-level errors.
These exceptions represent business rule violations.
"""

from typing import Optional, Any, Dict, List


class DomainException(Exception):
    """Base exception for all domain errors."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.code = code or "DOMAIN_ERROR"
        self.details = details or {}


class EntityNotFoundException(DomainException):
    """Raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        super().__init__(
            message=f"{entity_type} with id '{entity_id}' not found",
            code="ENTITY_NOT_FOUND",
            details={"entity_type": entity_type, "entity_id": str(entity_id)}
        )


class ValidationException(DomainException):
    """Raised when validation of a single field fails."""

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            details={"field": field, "value": str(value) if value is not None else None}
        )


class BOMValidationException(DomainException):
    """
    Raised when a submitted BOM tree fails structural validation.

    Carries every per-node problem found, so the caller can fix the whole
    submission in one round trip.
    """

    def __init__(self, problems: List[Any], message: Optional[str] = None):
        super().__init__(
            message=message or f"BOM item tree is invalid ({len(problems)} problem(s))",
            code="VALIDATION_ERROR",
            details={"problems": [p.as_dict() if hasattr(p, "as_dict") else p for p in problems]}
        )
        self.problems = list(problems)


class NumericException(BOMValidationException):
    """Raised when a quantity, rate or amount is not a finite number."""


class DuplicateBomNumberException(DomainException):
    """Raised by the store when a generated bomNumber is already taken."""

    def __init__(self, bom_number: str):
        super().__init__(
            message=f"BOM number '{bom_number}' already exists",
            code="DUPLICATE_BOM_NUMBER",
            details={"bom_number": bom_number}
        )
        self.bom_number = bom_number


class SequenceAllocationException(DomainException):
    """Raised when a document number could not be allocated."""

    def __init__(self, scope_key: str, attempts: int = 1):
        super().__init__(
            message=f"Could not allocate a document number for '{scope_key}' "
                    f"after {attempts} attempt(s)",
            code="SEQUENCE_ALLOCATION_ERROR",
            details={"scope_key": scope_key, "attempts": attempts}
        )
        self.scope_key = scope_key
        self.attempts = attempts
