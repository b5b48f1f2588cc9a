"""
BOM Domain - Repository Interfaces.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
from uuid import UUID

from .aggregates import BOMDocument
from .entities import BOMVersion


class BOMDocumentRepository(ABC):
    """Repository interface for the BOMDocument aggregate."""

    @abstractmethod
    def insert(self, document: BOMDocument) -> UUID:
        """
        Persist a new document and return the id the store assigned.

        Raises DuplicateBomNumberException if the number is already taken.
        """
        pass

    @abstractmethod
    def find_by_id(self, bom_id: UUID) -> Optional[BOMDocument]:
        """Get BOM document by ID."""
        pass

    @abstractmethod
    def update(self, document: BOMDocument, previous: Optional[BOMVersion] = None) -> None:
        """
        Replace the stored document wholesale.

        When ``previous`` is given it is stored in the same write.
        """
        pass

    @abstractmethod
    def delete(self, bom_id: UUID) -> bool:
        """Delete BOM document; False if it did not exist."""
        pass

    @abstractmethod
    def list_versions(self, bom_id: UUID) -> List[BOMVersion]:
        """Prior snapshots of a document, newest first."""
        pass


class SequenceAllocator(ABC):
    """Atomic, persistence-backed counter used for document numbers."""

    @abstractmethod
    def allocate(self, scope_key: str) -> int:
        """
        Increment the counter for ``scope_key`` and return the new value.

        Raises SequenceAllocationException on a transient failure.
        """
        pass
