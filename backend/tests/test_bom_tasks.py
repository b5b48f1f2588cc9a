from decimal import Decimal
from uuid import uuid4

import pytest

from application.services.bom_service import get_bom_service
from application.tasks.bom_tasks import recalculate_bom_totals, validate_bom_document
from domain.bom import BOMHeader
from infrastructure.persistence.models import BOMDocument

pytestmark = pytest.mark.django_db


@pytest.fixture
def stored(laptop_items):
    header = BOMHeader(
        bom_name='Laptop Assembly BOM',
        product_name='High-Performance Laptop',
        product_code='HP-LT-001',
    )
    return get_bom_service().create(header, laptop_items)


def test_recalculate_task_fixes_total(stored):
    BOMDocument.objects.filter(pk=stored.id).update(total_material_cost=Decimal('10.00'))

    result = recalculate_bom_totals.apply(args=[str(stored.id)]).get()

    assert result['success'] is True
    assert result['changed'] is True
    assert result['total_material_cost'] == '56300.00'
    assert BOMDocument.objects.get(pk=stored.id).total_material_cost == Decimal('56300.00')


def test_recalculate_task_reports_broken_tree(stored):
    BOMDocument.objects.filter(pk=stored.id).update(items=[])

    result = recalculate_bom_totals(str(stored.id))

    assert result['success'] is False
    assert result['issues'][0]['code'] == 'EMPTY_TREE'


def test_validate_task_reports_without_saving(stored):
    result = validate_bom_document(str(stored.id))

    assert result['valid'] is True
    assert result['items_count'] == 6
    assert result['issues'] == []


def test_tasks_handle_missing_documents():
    assert recalculate_bom_totals(str(uuid4())) == {'error': 'BOM not found'}
    assert validate_bom_document(str(uuid4())) == {'error': 'BOM not found'}
