"""
BOM Serializers.

Wire shapes for BOM documents. Field names are camelCase, matching the
item tree stored inside each document.
"""

from rest_framework import serializers

from domain.bom import BOMHeader, BOMTree
from domain.shared.value_objects import BOMStatus, BOMType
from infrastructure.persistence.models import BOMDocument

from .base import AuditFieldsMixin, BaseModelSerializer


# =============================================================================
# INPUT
# =============================================================================

class BOMHeaderSerializer(serializers.Serializer):
    """Header fields of a submitted BOM document."""

    bomName = serializers.CharField(max_length=300)
    productName = serializers.CharField(max_length=300)
    productCode = serializers.CharField(max_length=100)
    version = serializers.CharField(max_length=20, required=False, default='1.0')
    bomDate = serializers.DateField(required=False, allow_null=True, default=None)
    bomType = serializers.ChoiceField(
        choices=BOMType.choices(),
        required=False,
        default=BOMType.MANUFACTURING.value,
    )
    status = serializers.ChoiceField(
        choices=BOMStatus.choices(),
        required=False,
        allow_null=True,
        default=None,
    )
    description = serializers.CharField(required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    myCompanyName = serializers.CharField(max_length=300, required=False, allow_blank=True, default='')
    createdBy = serializers.CharField(max_length=150, required=False, allow_null=True, default=None)
    approvedBy = serializers.CharField(max_length=150, required=False, allow_null=True, default=None)
    approvalDate = serializers.DateField(required=False, allow_null=True, default=None)
    customerId = serializers.CharField(max_length=100, required=False, allow_null=True, default=None)
    customerName = serializers.CharField(max_length=300, required=False, allow_null=True, default=None)
    enquiryId = serializers.CharField(max_length=100, required=False, allow_null=True, default=None)
    enquiryNumber = serializers.CharField(max_length=100, required=False, allow_null=True, default=None)

    def to_header(self, data) -> BOMHeader:
        status = data.get('status')
        return BOMHeader(
            bom_name=data['bomName'],
            product_name=data['productName'],
            product_code=data['productCode'],
            version=data.get('version') or '1.0',
            bom_date=data.get('bomDate'),
            bom_type=BOMType(data.get('bomType') or BOMType.MANUFACTURING.value),
            status=BOMStatus(status) if status else None,
            description=data.get('description') or '',
            notes=data.get('notes') or '',
            my_company_name=data.get('myCompanyName') or '',
            created_by=data.get('createdBy'),
            approved_by=data.get('approvedBy'),
            approval_date=data.get('approvalDate'),
            customer_id=data.get('customerId'),
            customer_name=data.get('customerName'),
            enquiry_id=data.get('enquiryId'),
            enquiry_number=data.get('enquiryNumber'),
        )


class BOMDocumentWriteSerializer(serializers.Serializer):
    """
    Body of POST and PUT on /boms/.

    ``items`` is passed through untouched; the node validator reports every
    problem in the tree at once, so it is not checked field by field here.
    """

    header = BOMHeaderSerializer()
    items = serializers.JSONField()
    changeDescription = serializers.CharField(
        max_length=500,
        required=False,
        allow_blank=True,
        allow_null=True,
        default=None,
    )

    def get_header(self, created_by=None) -> BOMHeader:
        header = self.fields['header'].to_header(self.validated_data['header'])
        if header.created_by is None:
            header.created_by = created_by
        return header


class BOMPreviewSerializer(serializers.Serializer):
    """Body of POST /boms/preview/."""

    items = serializers.JSONField()


# =============================================================================
# OUTPUT
# =============================================================================

class BOMDocumentListSerializer(AuditFieldsMixin, BaseModelSerializer):
    """List serializer for BOM documents, without the item tree."""

    bomNumber = serializers.CharField(source='bom_number', read_only=True)
    bomName = serializers.CharField(source='bom_name', read_only=True)
    productName = serializers.CharField(source='product_name', read_only=True)
    productCode = serializers.CharField(source='product_code', read_only=True)
    bomDate = serializers.DateField(source='bom_date', read_only=True)
    bomType = serializers.CharField(source='bom_type', read_only=True)
    totalMaterialCost = serializers.DecimalField(
        source='total_material_cost',
        max_digits=18,
        decimal_places=2,
        read_only=True,
    )
    myCompanyName = serializers.CharField(source='my_company_name', read_only=True)
    itemCount = serializers.SerializerMethodField()

    class Meta:
        model = BOMDocument
        fields = [
            'id', 'bomNumber', 'bomName',
            'productName', 'productCode',
            'version', 'bomDate', 'bomType', 'status',
            'totalMaterialCost', 'myCompanyName',
            'revision', 'itemCount',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields

    def get_itemCount(self, obj) -> int:
        return len(BOMTree.from_payload(obj.items))


class BOMDocumentSerializer(BOMDocumentListSerializer):
    """Full stored document, returned as persisted."""

    items = serializers.JSONField(read_only=True)
    createdBy = serializers.CharField(source='created_by', read_only=True)
    approvedBy = serializers.CharField(source='approved_by', read_only=True)
    approvalDate = serializers.DateField(source='approval_date', read_only=True)
    customerId = serializers.CharField(source='customer_id', read_only=True)
    customerName = serializers.CharField(source='customer_name', read_only=True)
    enquiryId = serializers.CharField(source='enquiry_id', read_only=True)
    enquiryNumber = serializers.CharField(source='enquiry_number', read_only=True)

    class Meta:
        model = BOMDocument
        fields = [
            'id', 'bomNumber', 'bomName',
            'productName', 'productCode',
            'version', 'bomDate', 'bomType', 'status',
            'items', 'totalMaterialCost',
            'description', 'notes', 'myCompanyName',
            'createdBy', 'approvedBy', 'approvalDate',
            'customerId', 'customerName',
            'enquiryId', 'enquiryNumber',
            'revision',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class BOMVersionSerializer(serializers.Serializer):
    """A snapshot kept from before an update."""

    versionNumber = serializers.IntegerField(source='version_number')
    reason = serializers.CharField(allow_null=True)
    snapshot = serializers.JSONField()
    createdAt = serializers.DateTimeField(source='created_at')


class CostRollupSerializer(serializers.Serializer):
    """Result of validating and aggregating a tree without saving it."""

    items = serializers.SerializerMethodField()
    totalMaterialCost = serializers.DecimalField(
        source='total_material_cost',
        max_digits=18,
        decimal_places=2,
    )
    currencies = serializers.ListField(child=serializers.CharField())
    mixedCurrency = serializers.BooleanField(source='mixed_currency')
    nodeCount = serializers.SerializerMethodField()
    depth = serializers.SerializerMethodField()

    def get_items(self, obj):
        return obj.tree.to_payload()

    def get_nodeCount(self, obj) -> int:
        return len(obj.tree)

    def get_depth(self, obj) -> int:
        return obj.tree.depth
