"""
Base Serializers.

Common serializer mixins and base classes.
"""

from rest_framework import serializers


class AuditFieldsMixin(serializers.Serializer):
    """Mixin for audit fields (createdAt, updatedAt)."""

    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)


class BaseModelSerializer(serializers.ModelSerializer):
    """
    Base serializer with common configuration.
    """

    class Meta:
        abstract = True
        read_only_fields = ['id', 'created_at', 'updated_at']

