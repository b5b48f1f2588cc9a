"""
BOM Domain - Bill of Materials.

This domain handles a priced, hierarchical list of components:
- Node Validator: structural checks and normalization of a submitted tree
- Cost Aggregator: line amounts and the document-level material cost
- BOMDocument: header + tree + rollup, numbered once at creation
"""

from .aggregates import BOMDocument
from .costing import CostRollup, aggregate
from .entities import BOMHeader, BOMItemNode, BOMTree, BOMVersion
from .numbering import format_bom_number, parse_bom_number, sequence_scope
from .validation import DEFAULT_MAX_DEPTH, ValidationProblem, ValidationResult, validate_items

__all__ = [
    'BOMDocument',
    'BOMHeader',
    'BOMItemNode',
    'BOMTree',
    'BOMVersion',
    'CostRollup',
    'DEFAULT_MAX_DEPTH',
    'ValidationProblem',
    'ValidationResult',
    'aggregate',
    'format_bom_number',
    'parse_bom_number',
    'sequence_scope',
    'validate_items',
]
