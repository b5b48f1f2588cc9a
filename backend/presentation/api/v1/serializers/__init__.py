"""
Serializers Package.

All API serializers for the BOM service.
"""

from .base import AuditFieldsMixin, BaseModelSerializer

from .bom import (
    BOMHeaderSerializer,
    BOMDocumentWriteSerializer,
    BOMPreviewSerializer,
    BOMDocumentListSerializer,
    BOMDocumentSerializer,
    BOMVersionSerializer,
    CostRollupSerializer,
)

__all__ = [
    'AuditFieldsMixin',
    'BaseModelSerializer',
    'BOMHeaderSerializer',
    'BOMDocumentWriteSerializer',
    'BOMPreviewSerializer',
    'BOMDocumentListSerializer',
    'BOMDocumentSerializer',
    'BOMVersionSerializer',
    'CostRollupSerializer',
]
