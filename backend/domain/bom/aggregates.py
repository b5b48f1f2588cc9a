"""
BOM Domain - Aggregates.

BOMDocument is the aggregate root: header fields, the item tree and its
rolled-up material cost, persisted and replaced as one unit.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from domain.shared.base_aggregate import AggregateRoot
from domain.shared.base_entity import utcnow
from domain.shared.events import (
    BOMDocumentCreated,
    BOMDocumentDeleted,
    BOMDocumentRevised,
)
from domain.shared.exceptions import ValidationException
from domain.shared.value_objects import BOMStatus, BOMType

from .costing import CostRollup
from .entities import BOMHeader, BOMTree, BOMVersion


REQUIRED_HEADER_FIELDS = ('bom_name', 'product_name', 'product_code')


@dataclass(eq=False)
class BOMDocument(AggregateRoot):
    """
    Aggregate root for a bill of materials document.

    Key responsibilities:
    - Keep ``total_material_cost`` in step with the item tree
    - Keep ``bom_number`` fixed once assigned
    - Record a snapshot of the previous state on every revision
    """

    bom_number: str = ""
    bom_name: str = ""
    product_name: str = ""
    product_code: str = ""
    version: str = "1.0"
    bom_date: Optional[date] = None
    bom_type: BOMType = BOMType.MANUFACTURING
    status: BOMStatus = BOMStatus.DRAFT

    items: BOMTree = field(default_factory=BOMTree)
    total_material_cost: Decimal = Decimal('0.00')

    description: str = ""
    notes: str = ""
    my_company_name: str = ""
    approval_date: Optional[date] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    enquiry_id: Optional[str] = None
    enquiry_number: Optional[str] = None

    revision: int = 1

    # =========================================================================
    # FACTORY / COMMANDS
    # =========================================================================

    @classmethod
    def create(
        cls,
        header: BOMHeader,
        rollup: CostRollup,
        bom_number: str,
        now: Optional[datetime] = None,
    ) -> BOMDocument:
        """Assemble a new document. The store assigns the id on insert."""
        now = now or utcnow()
        document = cls(id=None, created_at=now, updated_at=now, bom_number=bom_number)
        document._apply_header(header, now)
        document._apply_rollup(rollup)
        document.validate()
        return document

    def assign_id(self, bom_id: UUID) -> None:
        """Take the id the store assigned on insert; only ever done once."""
        if self.id is not None:
            raise ValidationException("BOM document already has an id", "id", self.id)
        self.id = bom_id
        self.add_domain_event(BOMDocumentCreated(
            bom_id=bom_id,
            bom_number=self.bom_number,
            total_material_cost=self.total_material_cost,
        ))

    def revise(
        self,
        header: BOMHeader,
        rollup: CostRollup,
        now: Optional[datetime] = None,
        reason: Optional[str] = None,
    ) -> BOMVersion:
        """
        Replace header, items and total in place.

        Returns the snapshot of the state being replaced. ``id``,
        ``bom_number`` and ``created_at`` never change here.
        """
        now = now or utcnow()
        previous = BOMVersion(
            bom_id=self.id,
            version_number=self.revision,
            snapshot=self.to_payload(),
            reason=reason,
            created_at=now,
        )
        old_total = self.total_material_cost

        self._apply_header(header, now)
        self._apply_rollup(rollup)
        self.validate()
        self.revision += 1
        self.touch(now)

        self.add_domain_event(BOMDocumentRevised(
            bom_id=self.id,
            bom_number=self.bom_number,
            old_revision=previous.version_number,
            new_revision=self.revision,
            old_total=old_total,
            new_total=self.total_material_cost,
            reason=reason,
        ))
        return previous

    def recalculate(self, rollup: CostRollup, now: Optional[datetime] = None) -> bool:
        """Swap in a freshly aggregated tree; True when any number changed."""
        changed = (
            rollup.total_material_cost != self.total_material_cost
            or rollup.tree.to_payload() != self.items.to_payload()
        )
        if changed:
            self._apply_rollup(rollup)
            self.touch(now)
        return changed

    def mark_deleted(self) -> None:
        self.add_domain_event(BOMDocumentDeleted(bom_id=self.id, bom_number=self.bom_number))

    def _apply_header(self, header: BOMHeader, now: datetime) -> None:
        self.bom_name = (header.bom_name or "").strip()
        self.product_name = (header.product_name or "").strip()
        self.product_code = (header.product_code or "").strip()
        self.version = header.version or "1.0"
        self.bom_date = header.bom_date or self.bom_date or now.date()
        self.bom_type = header.bom_type or BOMType.MANUFACTURING
        self.status = header.status or self.status or BOMStatus.DRAFT
        self.description = header.description or ""
        self.notes = header.notes or ""
        self.my_company_name = header.my_company_name or ""
        self.created_by = header.created_by if header.created_by is not None else self.created_by
        self.approved_by = header.approved_by
        self.approval_date = header.approval_date
        self.customer_id = header.customer_id
        self.customer_name = header.customer_name
        self.enquiry_id = header.enquiry_id
        self.enquiry_number = header.enquiry_number

    def _apply_rollup(self, rollup: CostRollup) -> None:
        self.items = rollup.tree
        self.total_material_cost = rollup.total_material_cost

    # =========================================================================
    # VALIDATION
    # =========================================================================

    def validate(self) -> None:
        """Validate aggregate invariants."""
        for name in REQUIRED_HEADER_FIELDS:
            if not getattr(self, name):
                raise ValidationException(f"{name} is required", name)
        if not self.bom_number:
            raise ValidationException("bom_number must be assigned", "bom_number")
        expected = sum((node.amount for node in self.items), Decimal('0.00'))
        if expected != self.total_material_cost:
            raise ValidationException(
                "total_material_cost does not match the item amounts",
                "total_material_cost",
                self.total_material_cost,
            )

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def to_payload(self) -> Dict[str, Any]:
        """Whole document in wire field names, used for version snapshots."""
        return {
            'id': str(self.id) if self.id else None,
            'bomNumber': self.bom_number,
            'bomName': self.bom_name,
            'productName': self.product_name,
            'productCode': self.product_code,
            'version': self.version,
            'bomDate': self.bom_date.isoformat() if self.bom_date else None,
            'bomType': self.bom_type.value,
            'status': self.status.value,
            'items': self.items.to_payload(),
            'totalMaterialCost': str(self.total_material_cost),
            'description': self.description,
            'notes': self.notes,
            'myCompanyName': self.my_company_name,
            'createdBy': self.created_by,
            'approvedBy': self.approved_by,
            'approvalDate': self.approval_date.isoformat() if self.approval_date else None,
            'customerId': self.customer_id,
            'customerName': self.customer_name,
            'enquiryId': self.enquiry_id,
            'enquiryNumber': self.enquiry_number,
            'revision': self.revision,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
        }

    @property
    def node_count(self) -> int:
        return len(self.items)

    def currencies(self) -> List[str]:
        return sorted({node.currency for node in self.items if node.currency})
