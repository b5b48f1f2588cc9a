from io import StringIO

import pytest
from django.core.management import call_command

from infrastructure.persistence.models import BOMDocument, BOMSequence

pytestmark = pytest.mark.django_db

SCOPE = 'bom:20250115'


@pytest.fixture
def documents():
    rows = [
        ('BOM/25/01/15/00003', 'Tech Solutions Pvt Ltd'),
        ('BOM/25/01/15/00009', 'Other Works'),
        ('BOM/25/01/15/00007', 'Tech Solutions Pvt Ltd'),
        ('legacy-42', 'Tech Solutions Pvt Ltd'),
    ]
    for number, company in rows:
        BOMDocument.objects.create(
            bom_number=number,
            bom_name='Laptop Assembly BOM',
            product_name='High-Performance Laptop',
            product_code='HP-LT-001',
            my_company_name=company,
        )


def run(*args):
    out = StringIO()
    call_command('sync_bom_sequences', *args, stdout=out)
    return out.getvalue()


def test_raises_day_counter_to_highest_used_number(documents):
    output = run()

    assert BOMSequence.objects.get(key=SCOPE).last_value == 9
    assert 'Skipped 1 document' in output
    assert 'Raised 1 of 1 counter(s).' in output


def test_never_lowers_a_counter(documents):
    BOMSequence.objects.create(key=SCOPE, last_value=20)

    run()

    assert BOMSequence.objects.get(key=SCOPE).last_value == 20


def test_dry_run_changes_nothing(documents):
    output = run('--dry-run')

    assert 'Would raise 1 of 1 counter(s).' in output
    assert not BOMSequence.objects.filter(key=SCOPE).exists()
