"""
BOM Views.

API views for BOM documents. Reads come straight from the table; every
write goes through BOMDocumentService so validation, costing and numbering
happen in one place.
"""

import django_filters
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from application.services.bom_service import get_bom_service
from domain.shared.value_objects import BOMStatus, BOMType
from infrastructure.persistence.models import BOMDocument

from ...pagination import StandardResultsSetPagination
from ..serializers.bom import (
    BOMDocumentListSerializer,
    BOMDocumentSerializer,
    BOMDocumentWriteSerializer,
    BOMPreviewSerializer,
    BOMVersionSerializer,
    CostRollupSerializer,
)
from .base import HistoryViewMixin, MultiSerializerViewMixin


class BOMDocumentFilterSet(django_filters.FilterSet):
    """Query filters for the BOM list, in wire field names."""

    productName = django_filters.CharFilter(field_name='product_name', lookup_expr='icontains')
    productCode = django_filters.CharFilter(field_name='product_code', lookup_expr='iexact')
    bomType = django_filters.ChoiceFilter(field_name='bom_type', choices=BOMType.choices())
    status = django_filters.ChoiceFilter(field_name='status', choices=BOMStatus.choices())
    myCompanyName = django_filters.CharFilter(field_name='my_company_name', lookup_expr='iexact')
    costFrom = django_filters.NumberFilter(field_name='total_material_cost', lookup_expr='gte')
    costTo = django_filters.NumberFilter(field_name='total_material_cost', lookup_expr='lte')
    dateFrom = django_filters.DateFilter(field_name='bom_date', lookup_expr='gte')
    dateTo = django_filters.DateFilter(field_name='bom_date', lookup_expr='lte')

    class Meta:
        model = BOMDocument
        fields = []


class BOMDocumentViewSet(
    MultiSerializerViewMixin,
    HistoryViewMixin,
    viewsets.ModelViewSet
):
    """
    ViewSet for BOM documents.

    Endpoints:
    - GET /boms/ - list documents
    - POST /boms/ - create a document from {header, items}
    - GET /boms/{id}/ - stored document, not recomputed
    - PUT /boms/{id}/ - replace header and the whole item tree
    - DELETE /boms/{id}/ - delete a document
    - POST /boms/preview/ - validate and cost a tree without saving
    - POST /boms/{id}/recalculate/ - re-run validation and costing
    - GET /boms/{id}/versions/ - snapshots taken before each update
    - GET /boms/{id}/history/ - row history
    """

    queryset = BOMDocument.objects.all()
    permission_classes = [IsAuthenticated]
    pagination_class = StandardResultsSetPagination
    # Whole-tree replacement only.
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    serializer_classes = {
        'list': BOMDocumentListSerializer,
        'create': BOMDocumentWriteSerializer,
        'update': BOMDocumentWriteSerializer,
        'preview': BOMPreviewSerializer,
        'versions': BOMVersionSerializer,
        'default': BOMDocumentSerializer,
    }

    filterset_class = BOMDocumentFilterSet
    search_fields = ['bom_number', 'bom_name', 'product_name', 'product_code']
    ordering_fields = [
        'created_at', 'updated_at', 'bom_date', 'bom_number',
        'product_name', 'total_material_cost',
    ]
    ordering = ['-created_at']

    filter_backends = [
        DjangoFilterBackend,
        filters.SearchFilter,
        filters.OrderingFilter,
    ]

    def get_service(self):
        return get_bom_service()

    def render_document(self, bom_id):
        instance = BOMDocument.objects.get(pk=bom_id)
        return BOMDocumentSerializer(instance, context=self.get_serializer_context()).data

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        document = self.get_service().create(
            serializer.get_header(created_by=request.user.get_username()),
            serializer.validated_data['items'],
        )
        return Response(self.render_document(document.id), status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        document = self.get_service().update(
            kwargs['pk'],
            serializer.get_header(),
            serializer.validated_data['items'],
            reason=serializer.validated_data.get('changeDescription') or None,
        )
        return Response(self.render_document(document.id))

    def destroy(self, request, *args, **kwargs):
        self.get_service().delete(kwargs['pk'])
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=['post'])
    def preview(self, request):
        """Validate and cost an item tree without saving anything."""
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rollup = self.get_service().preview(serializer.validated_data['items'])
        return Response(CostRollupSerializer(rollup).data)

    @action(detail=True, methods=['post'])
    def recalculate(self, request, pk=None):
        """Re-run validation and costing on the stored tree."""
        document, changed = self.get_service().recalculate(pk)
        return Response({
            'changed': changed,
            'document': self.render_document(document.id),
        })

    @action(detail=True, methods=['get'])
    def versions(self, request, pk=None):
        """Snapshots taken before each update, newest first."""
        versions = self.get_service().versions(pk)
        serializer = self.get_serializer(versions, many=True)
        return Response(serializer.data)
