import uuid

import django.core.serializers.json
import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models


BOM_TYPE_CHOICES = [
    ('MANUFACTURING', 'Manufacturing'),
    ('ENGINEERING', 'Engineering'),
    ('SALES', 'Sales'),
    ('SERVICE', 'Service'),
]

BOM_STATUS_CHOICES = [
    ('DRAFT', 'Draft'),
    ('ACTIVE', 'Active'),
    ('INACTIVE', 'Inactive'),
    ('OBSOLETE', 'Obsolete'),
    ('ARCHIVED', 'Archived'),
]


def document_fields(unique_number=True):
    return [
        ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at') if unique_number
            else models.DateTimeField(blank=True, editable=False, verbose_name='Created at')),
        ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at') if unique_number
            else models.DateTimeField(blank=True, editable=False, verbose_name='Updated at')),
        ('bom_number', models.CharField(editable=False, max_length=50, unique=True, verbose_name='BOM number') if unique_number
            else models.CharField(db_index=True, editable=False, max_length=50, verbose_name='BOM number')),
        ('bom_name', models.CharField(max_length=300, verbose_name='BOM name')),
        ('product_name', models.CharField(db_index=True, max_length=300, verbose_name='Product name')),
        ('product_code', models.CharField(max_length=100, verbose_name='Product code')),
        ('version', models.CharField(default='1.0', max_length=20, verbose_name='Version')),
        ('bom_date', models.DateField(blank=True, null=True, verbose_name='BOM date')),
        ('bom_type', models.CharField(choices=BOM_TYPE_CHOICES, default='MANUFACTURING', max_length=20, verbose_name='BOM type')),
        ('status', models.CharField(choices=BOM_STATUS_CHOICES, db_index=True, default='DRAFT', max_length=20, verbose_name='Status')),
        ('items', models.JSONField(default=list, encoder=django.core.serializers.json.DjangoJSONEncoder, verbose_name='Items')),
        ('total_material_cost', models.DecimalField(decimal_places=2, default=0, max_digits=18, verbose_name='Total material cost')),
        ('description', models.TextField(blank=True, verbose_name='Description')),
        ('notes', models.TextField(blank=True, verbose_name='Notes')),
        ('my_company_name', models.CharField(blank=True, max_length=300, verbose_name='Company')),
        ('created_by', models.CharField(blank=True, max_length=150, null=True, verbose_name='Created by')),
        ('approved_by', models.CharField(blank=True, max_length=150, null=True, verbose_name='Approved by')),
        ('approval_date', models.DateField(blank=True, null=True, verbose_name='Approval date')),
        ('customer_id', models.CharField(blank=True, max_length=100, null=True, verbose_name='Customer ID')),
        ('customer_name', models.CharField(blank=True, max_length=300, null=True, verbose_name='Customer')),
        ('enquiry_id', models.CharField(blank=True, max_length=100, null=True, verbose_name='Enquiry ID')),
        ('enquiry_number', models.CharField(blank=True, max_length=100, null=True, verbose_name='Enquiry number')),
        ('revision', models.PositiveIntegerField(default=1, verbose_name='Revision')),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='BOMDocument',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                *document_fields(),
            ],
            options={
                'verbose_name': 'BOM document',
                'verbose_name_plural': 'BOM documents',
                'db_table': 'bom_documents',
                'ordering': ['-created_at'],
                'indexes': [models.Index(fields=['bom_type', 'status'], name='bom_documen_bom_typ_5b1f0e_idx')],
            },
        ),
        migrations.CreateModel(
            name='BOMSequence',
            fields=[
                ('key', models.CharField(max_length=150, primary_key=True, serialize=False, verbose_name='Key')),
                ('last_value', models.PositiveBigIntegerField(default=0, verbose_name='Last value')),
            ],
            options={
                'verbose_name': 'BOM number sequence',
                'verbose_name_plural': 'BOM number sequences',
                'db_table': 'bom_sequences',
            },
        ),
        migrations.CreateModel(
            name='BOMVersion',
            fields=[
                ('created_at', models.DateTimeField(auto_now_add=True, verbose_name='Created at')),
                ('updated_at', models.DateTimeField(auto_now=True, verbose_name='Updated at')),
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False, verbose_name='ID')),
                ('version_number', models.PositiveIntegerField(verbose_name='Version number')),
                ('reason', models.CharField(blank=True, max_length=500, verbose_name='Reason')),
                ('snapshot', models.JSONField(default=dict, encoder=django.core.serializers.json.DjangoJSONEncoder, verbose_name='Snapshot')),
                ('bom', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='versions', to='persistence.bomdocument', verbose_name='BOM')),
            ],
            options={
                'verbose_name': 'BOM version',
                'verbose_name_plural': 'BOM versions',
                'db_table': 'bom_versions',
                'ordering': ['bom', '-version_number'],
                'unique_together': {('bom', 'version_number')},
            },
        ),
        migrations.CreateModel(
            name='HistoricalBOMDocument',
            fields=[
                ('id', models.UUIDField(db_index=True, default=uuid.uuid4, editable=False, verbose_name='ID')),
                *document_fields(unique_number=False),
                ('history_id', models.AutoField(primary_key=True, serialize=False)),
                ('history_date', models.DateTimeField(db_index=True)),
                ('history_change_reason', models.CharField(max_length=100, null=True)),
                ('history_type', models.CharField(choices=[('+', 'Created'), ('~', 'Changed'), ('-', 'Deleted')], max_length=1)),
                ('history_user', models.ForeignKey(null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'verbose_name': 'historical BOM document',
                'verbose_name_plural': 'historical BOM documents',
                'ordering': ('-history_date', '-history_id'),
                'get_latest_by': ('history_date', 'history_id'),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
    ]
