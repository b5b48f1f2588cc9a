"""
BOM document service.

Runs a submission through the Node Validator and Cost Aggregator, assembles
the document and hands it to the repository. Document numbers come from an
atomic sequence; a collision on insert is retried with a fresh number.
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Callable, List, Optional, Tuple
from uuid import UUID
import logging

from domain.bom import (
    BOMDocument,
    BOMHeader,
    BOMVersion,
    CostRollup,
    DEFAULT_MAX_DEPTH,
    ValidationResult,
    aggregate,
    format_bom_number,
    sequence_scope,
    validate_items,
)
from domain.bom.numbering import DEFAULT_PREFIX
from domain.bom.repositories import BOMDocumentRepository, SequenceAllocator
from domain.shared.base_entity import utcnow
from domain.shared.exceptions import (
    DuplicateBomNumberException,
    EntityNotFoundException,
    SequenceAllocationException,
)

logger = logging.getLogger(__name__)


class BOMDocumentService:
    """Create, revise, read and delete BOM documents."""

    def __init__(
        self,
        repository: BOMDocumentRepository,
        sequences: SequenceAllocator,
        max_depth: int = DEFAULT_MAX_DEPTH,
        max_attempts: int = 3,
        number_prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.repository = repository
        self.sequences = sequences
        self.max_depth = max_depth
        self.max_attempts = max(1, max_attempts)
        self.number_prefix = number_prefix
        self.clock = clock

    # =========================================================================
    # COMMANDS
    # =========================================================================

    def create(self, header: BOMHeader, items: Any) -> BOMDocument:
        rollup = self.preview(items)
        now = self.clock()
        scope = sequence_scope(now.date())

        last_error: Optional[Exception] = None
        for attempt in range(1, self.max_attempts + 1):
            try:
                sequence = self.sequences.allocate(scope)
            except SequenceAllocationException as exc:
                logger.warning(
                    "Sequence allocation for %s failed (attempt %d/%d)",
                    scope, attempt, self.max_attempts,
                )
                last_error = exc
                continue

            number = format_bom_number(now.date(), sequence, self.number_prefix)
            document = BOMDocument.create(header, rollup, number, now)
            try:
                bom_id = self.repository.insert(document)
            except DuplicateBomNumberException as exc:
                logger.warning(
                    "BOM number %s already taken (attempt %d/%d)",
                    number, attempt, self.max_attempts,
                )
                last_error = exc
                continue

            document.assign_id(bom_id)
            self._publish(document)
            return document

        logger.error("Giving up on BOM number for %s after %d attempts", scope, self.max_attempts)
        raise SequenceAllocationException(scope, self.max_attempts) from last_error

    def update(
        self,
        bom_id: UUID,
        header: BOMHeader,
        items: Any,
        reason: Optional[str] = None,
    ) -> BOMDocument:
        document = self.get(bom_id)
        rollup = self.preview(items)
        previous = document.revise(header, rollup, self.clock(), reason)
        self.repository.update(document, previous)
        self._publish(document)
        return document

    def delete(self, bom_id: UUID) -> None:
        document = self.get(bom_id)
        if not self.repository.delete(bom_id):
            raise EntityNotFoundException("BOM", bom_id)
        document.mark_deleted()
        self._publish(document)

    def recalculate(self, bom_id: UUID) -> Tuple[BOMDocument, bool]:
        """Re-validate and re-aggregate a stored document; save only if it changed."""
        document = self.get(bom_id)
        rollup = self.preview(document.items.to_payload())
        changed = document.recalculate(rollup, self.clock())
        if changed:
            self.repository.update(document)
            logger.info(
                "Recalculated BOM %s: total %s",
                document.bom_number, document.total_material_cost,
            )
        return document, changed

    # =========================================================================
    # QUERIES
    # =========================================================================

    def preview(self, items: Any) -> CostRollup:
        """Validate and aggregate a tree without touching the store."""
        result = validate_items(items, self.max_depth)
        tree = result.raise_for_problems()
        return aggregate(tree)

    def check(self, bom_id: UUID) -> ValidationResult:
        """Validate the stored tree of a document and report, never raise."""
        document = self.get(bom_id)
        return validate_items(document.items.to_payload(), self.max_depth)

    def get(self, bom_id: UUID) -> BOMDocument:
        document = self.repository.find_by_id(bom_id)
        if document is None:
            raise EntityNotFoundException("BOM", bom_id)
        return document

    def versions(self, bom_id: UUID) -> List[BOMVersion]:
        self.get(bom_id)
        return self.repository.list_versions(bom_id)

    def _publish(self, document: BOMDocument) -> None:
        for event in document.clear_domain_events():
            logger.info("%s: bom=%s number=%s", event.event_type, event.bom_id, event.bom_number)


def get_bom_service() -> BOMDocumentService:
    """Service wired to the Django store and the BOM_ENGINE settings."""
    from django.conf import settings
    from django.utils import timezone
    from infrastructure.persistence.repositories import (
        DjangoBOMDocumentRepository,
        DjangoSequenceAllocator,
    )

    engine = getattr(settings, 'BOM_ENGINE', {})
    return BOMDocumentService(
        repository=DjangoBOMDocumentRepository(),
        sequences=DjangoSequenceAllocator(),
        max_depth=engine.get('MAX_DEPTH', DEFAULT_MAX_DEPTH),
        max_attempts=engine.get('SEQUENCE_MAX_ATTEMPTS', 3),
        number_prefix=engine.get('NUMBER_PREFIX', DEFAULT_PREFIX),
        clock=timezone.localtime,
    )
