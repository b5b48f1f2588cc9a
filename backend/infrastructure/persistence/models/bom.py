"""
BOM (Bill of Materials) ORM Models.

The item tree is stored as one JSON document per BOM, so a save always
writes header, tree and total together.
"""

from django.core.serializers.json import DjangoJSONEncoder
from django.db import models

from domain.shared.value_objects import BOMStatus, BOMType

from .base import BaseModel, BaseModelWithHistory


class BOMDocument(BaseModelWithHistory):
    """
    Bill of Materials document.

    CRITICAL: ``bom_number`` is assigned once on insert and is unique
    across all documents.
    """

    bom_number = models.CharField(
        max_length=50,
        unique=True,
        editable=False,
        verbose_name="BOM number"
    )

    # Header
    bom_name = models.CharField(max_length=300, verbose_name="BOM name")
    product_name = models.CharField(max_length=300, db_index=True, verbose_name="Product name")
    product_code = models.CharField(max_length=100, verbose_name="Product code")
    version = models.CharField(max_length=20, default="1.0", verbose_name="Version")
    bom_date = models.DateField(null=True, blank=True, verbose_name="BOM date")
    bom_type = models.CharField(
        max_length=20,
        choices=BOMType.choices(),
        default=BOMType.MANUFACTURING.value,
        verbose_name="BOM type"
    )
    status = models.CharField(
        max_length=20,
        choices=BOMStatus.choices(),
        default=BOMStatus.DRAFT.value,
        db_index=True,
        verbose_name="Status"
    )

    # Tree and rollup
    items = models.JSONField(
        default=list,
        encoder=DjangoJSONEncoder,
        verbose_name="Items"
    )
    total_material_cost = models.DecimalField(
        max_digits=18,
        decimal_places=2,
        default=0,
        verbose_name="Total material cost"
    )

    # Metadata
    description = models.TextField(blank=True, verbose_name="Description")
    notes = models.TextField(blank=True, verbose_name="Notes")
    my_company_name = models.CharField(max_length=300, blank=True, verbose_name="Company")
    created_by = models.CharField(max_length=150, blank=True, null=True, verbose_name="Created by")
    approved_by = models.CharField(max_length=150, blank=True, null=True, verbose_name="Approved by")
    approval_date = models.DateField(null=True, blank=True, verbose_name="Approval date")
    customer_id = models.CharField(max_length=100, blank=True, null=True, verbose_name="Customer ID")
    customer_name = models.CharField(max_length=300, blank=True, null=True, verbose_name="Customer")
    enquiry_id = models.CharField(max_length=100, blank=True, null=True, verbose_name="Enquiry ID")
    enquiry_number = models.CharField(max_length=100, blank=True, null=True, verbose_name="Enquiry number")

    revision = models.PositiveIntegerField(default=1, verbose_name="Revision")

    class Meta:
        db_table = 'bom_documents'
        verbose_name = 'BOM document'
        verbose_name_plural = 'BOM documents'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['bom_type', 'status']),
        ]

    def __str__(self):
        return f"{self.bom_number} {self.bom_name}"


class BOMVersion(BaseModel):
    """
    Snapshot of a BOM document taken before it was revised.
    """

    bom = models.ForeignKey(
        BOMDocument,
        on_delete=models.CASCADE,
        related_name='versions',
        verbose_name="BOM"
    )
    version_number = models.PositiveIntegerField(verbose_name="Version number")
    reason = models.CharField(max_length=500, blank=True, verbose_name="Reason")
    snapshot = models.JSONField(
        default=dict,
        encoder=DjangoJSONEncoder,
        verbose_name="Snapshot"
    )

    class Meta:
        db_table = 'bom_versions'
        verbose_name = 'BOM version'
        verbose_name_plural = 'BOM versions'
        unique_together = [['bom', 'version_number']]
        ordering = ['bom', '-version_number']

    def __str__(self):
        return f"{self.bom.bom_number} r{self.version_number}"


class BOMSequence(models.Model):
    """Per-day counter for BOM numbers, shared by all companies."""

    key = models.CharField(
        max_length=150,
        primary_key=True,
        verbose_name="Key"
    )
    last_value = models.PositiveBigIntegerField(
        default=0,
        verbose_name="Last value"
    )

    class Meta:
        db_table = 'bom_sequences'
        verbose_name = 'BOM number sequence'
        verbose_name_plural = 'BOM number sequences'

    def __str__(self):
        return f"{self.key}={self.last_value}"
