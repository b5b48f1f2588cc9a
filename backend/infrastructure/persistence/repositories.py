"""
Django ORM implementations of the BOM repository interfaces.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID
import logging

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction

from domain.bom import BOMDocument, BOMTree, BOMVersion
from domain.bom.repositories import BOMDocumentRepository, SequenceAllocator
from domain.shared.exceptions import (
    DuplicateBomNumberException,
    EntityNotFoundException,
    SequenceAllocationException,
)
from domain.shared.value_objects import BOMStatus, BOMType

from .models import (
    BOMDocument as BOMDocumentModel,
    BOMSequence,
    BOMVersion as BOMVersionModel,
)

logger = logging.getLogger(__name__)


def document_fields(document: BOMDocument) -> Dict[str, Any]:
    """Model field values for everything the document owns except id and number."""
    return {
        'bom_name': document.bom_name,
        'product_name': document.product_name,
        'product_code': document.product_code,
        'version': document.version,
        'bom_date': document.bom_date,
        'bom_type': document.bom_type.value,
        'status': document.status.value,
        'items': document.items.to_payload(),
        'total_material_cost': document.total_material_cost,
        'description': document.description,
        'notes': document.notes,
        'my_company_name': document.my_company_name,
        'created_by': document.created_by,
        'approved_by': document.approved_by,
        'approval_date': document.approval_date,
        'customer_id': document.customer_id,
        'customer_name': document.customer_name,
        'enquiry_id': document.enquiry_id,
        'enquiry_number': document.enquiry_number,
        'revision': document.revision,
    }


def to_domain(model: BOMDocumentModel) -> BOMDocument:
    return BOMDocument(
        id=model.id,
        created_at=model.created_at,
        updated_at=model.updated_at,
        created_by=model.created_by,
        approved_by=model.approved_by,
        bom_number=model.bom_number,
        bom_name=model.bom_name,
        product_name=model.product_name,
        product_code=model.product_code,
        version=model.version,
        bom_date=model.bom_date,
        bom_type=BOMType(model.bom_type),
        status=BOMStatus(model.status),
        items=BOMTree.from_payload(model.items),
        total_material_cost=model.total_material_cost,
        description=model.description,
        notes=model.notes,
        my_company_name=model.my_company_name,
        approval_date=model.approval_date,
        customer_id=model.customer_id,
        customer_name=model.customer_name,
        enquiry_id=model.enquiry_id,
        enquiry_number=model.enquiry_number,
        revision=model.revision,
    )


class DjangoBOMDocumentRepository(BOMDocumentRepository):
    """BOM documents stored in the ``bom_documents`` table."""

    def insert(self, document: BOMDocument) -> UUID:
        model = BOMDocumentModel(bom_number=document.bom_number, **document_fields(document))
        try:
            with transaction.atomic():
                model.save(force_insert=True)
        except IntegrityError as exc:
            if BOMDocumentModel.objects.filter(bom_number=document.bom_number).exists():
                raise DuplicateBomNumberException(document.bom_number) from exc
            raise
        document.created_at = model.created_at
        document.updated_at = model.updated_at
        return model.id

    def find_by_id(self, bom_id: UUID) -> Optional[BOMDocument]:
        try:
            model = BOMDocumentModel.objects.get(pk=bom_id)
        except (BOMDocumentModel.DoesNotExist, ValidationError, ValueError):
            return None
        return to_domain(model)

    def update(self, document: BOMDocument, previous: Optional[BOMVersion] = None) -> None:
        with transaction.atomic():
            try:
                model = BOMDocumentModel.objects.select_for_update().get(pk=document.id)
            except BOMDocumentModel.DoesNotExist:
                raise EntityNotFoundException("BOM", document.id)

            for name, value in document_fields(document).items():
                setattr(model, name, value)
            model.save()

            if previous is not None:
                BOMVersionModel.objects.create(
                    bom=model,
                    version_number=previous.version_number,
                    reason=previous.reason or "",
                    snapshot=previous.snapshot,
                )
        document.updated_at = model.updated_at

    def delete(self, bom_id: UUID) -> bool:
        try:
            model = BOMDocumentModel.objects.get(pk=bom_id)
        except (BOMDocumentModel.DoesNotExist, ValidationError, ValueError):
            return False
        model.delete()
        return True

    def list_versions(self, bom_id: UUID) -> List[BOMVersion]:
        return [
            BOMVersion(
                bom_id=version.bom_id,
                version_number=version.version_number,
                snapshot=version.snapshot,
                reason=version.reason or None,
                created_at=version.created_at,
            )
            for version in BOMVersionModel.objects.filter(bom_id=bom_id).order_by('-version_number')
        ]


class DjangoSequenceAllocator(SequenceAllocator):
    """
    Counter rows in ``bom_sequences``, incremented under a row lock.

    Each allocation commits on its own, so a failed document insert leaves a
    gap in the numbering rather than a duplicate.
    """

    def allocate(self, scope_key: str) -> int:
        try:
            with transaction.atomic():
                sequence, _ = BOMSequence.objects.select_for_update().get_or_create(key=scope_key)
                sequence.last_value += 1
                sequence.save(update_fields=['last_value'])
        except DatabaseError as exc:
            logger.warning("Could not allocate sequence %s: %s", scope_key, exc)
            raise SequenceAllocationException(scope_key) from exc
        return sequence.last_value
