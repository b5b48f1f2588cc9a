"""
Persistence Models Package.

All Django ORM models for the BOM service.
"""

# Base mixins
from .base import (
    TimeStampedMixin,
    BaseModel,
    BaseModelWithHistory,
)

# BOM models
from .bom import (
    BOMDocument,
    BOMVersion,
    BOMSequence,
)


__all__ = [
    # Base
    'TimeStampedMixin',
    'BaseModel',
    'BaseModelWithHistory',

    # BOM
    'BOMDocument',
    'BOMVersion',
    'BOMSequence',
]
