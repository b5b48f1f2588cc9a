from django.contrib import admin
from simple_history.admin import SimpleHistoryAdmin

from .models import BOMDocument, BOMSequence, BOMVersion


@admin.register(BOMDocument)
class BOMDocumentAdmin(SimpleHistoryAdmin):
    list_display = ['bom_number', 'bom_name', 'product_name', 'bom_type', 'status', 'total_material_cost', 'revision']
    list_filter = ['bom_type', 'status']
    search_fields = ['bom_number', 'bom_name', 'product_name', 'product_code']
    # Writes go through the API so totals and numbers stay consistent.
    readonly_fields = ['bom_number', 'items', 'total_material_cost', 'revision', 'created_at', 'updated_at']


@admin.register(BOMVersion)
class BOMVersionAdmin(admin.ModelAdmin):
    list_display = ['bom', 'version_number', 'reason', 'created_at']
    search_fields = ['bom__bom_number']
    raw_id_fields = ['bom']


@admin.register(BOMSequence)
class BOMSequenceAdmin(admin.ModelAdmin):
    list_display = ['key', 'last_value']
    search_fields = ['key']
