"""
BOM Domain - Entities.

BOMItemNode is a single priced line in a BOM tree. Nodes live in a BOMTree
arena: a flat list addressed by index, with parent/child links stored as
indices instead of object references.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional
from uuid import UUID

from domain.shared.base_entity import utcnow
from domain.shared.value_objects import BOMStatus, BOMType, to_decimal


def _plain_number(value: Decimal) -> Any:
    """
    Render a Decimal for a JSON document without losing its value.

    int when integral, float when the float reads back as the same Decimal,
    otherwise the exact decimal string.
    """
    if value == value.to_integral_value():
        return int(value)
    as_float = float(value)
    if Decimal(repr(as_float)) == value:
        return as_float
    return str(value)


@dataclass
class BOMItemNode:
    """A single item in a BOM tree."""

    index: int
    item_code: Any
    quantity: Decimal
    rate: Decimal
    item_description: str = ""
    material_consideration: str = ""
    uom: Optional[str] = None
    currency: Optional[str] = None
    remarks: Optional[str] = None
    amount: Decimal = Decimal('0')
    rollup_cost: Decimal = Decimal('0')
    level: int = 0
    parent_index: Optional[int] = None
    parent_id: Optional[str] = None
    children: List[int] = field(default_factory=list)

    @property
    def code_key(self) -> str:
        """Item code as compared for sibling uniqueness and parent links."""
        return str(self.item_code).strip()

    @property
    def is_root(self) -> bool:
        return self.parent_index is None

    @property
    def is_leaf(self) -> bool:
        return not self.children


class BOMTree:
    """
    Index-based arena holding a whole BOM item tree.

    ``roots`` keeps root order; every node keeps its children order, so
    insertion order is preserved on the way back out.
    """

    def __init__(self, nodes: Optional[List[BOMItemNode]] = None, roots: Optional[List[int]] = None):
        self.nodes: List[BOMItemNode] = nodes or []
        self.roots: List[int] = roots or []

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[BOMItemNode]:
        return iter(self.nodes)

    def add(self, node: BOMItemNode) -> BOMItemNode:
        """Append a node, link it under its parent index and return it."""
        node.index = len(self.nodes)
        self.nodes.append(node)
        if node.parent_index is None:
            self.roots.append(node.index)
        else:
            self.nodes[node.parent_index].children.append(node.index)
        return node

    def node(self, index: int) -> BOMItemNode:
        return self.nodes[index]

    def children_of(self, index: int) -> List[BOMItemNode]:
        return [self.nodes[i] for i in self.nodes[index].children]

    def walk(self) -> Iterator[BOMItemNode]:
        """Pre-order traversal in submission order."""
        stack = list(reversed(self.roots))
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def post_order(self) -> Iterator[BOMItemNode]:
        """Children before parents."""
        # Arena indices are assigned in pre-order, so reverse index order
        # always visits a node after all of its descendants.
        return reversed(self.nodes)

    @property
    def depth(self) -> int:
        """Number of levels in the tree (0 for an empty tree)."""
        if not self.nodes:
            return 0
        return max(node.level for node in self.nodes) + 1

    def copy(self) -> BOMTree:
        nodes = [replace(node, children=list(node.children)) for node in self.nodes]
        return BOMTree(nodes, list(self.roots))

    # =========================================================================
    # SERIALIZATION
    # =========================================================================

    def node_payload(self, node: BOMItemNode) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            'itemCode': node.item_code,
            'itemDescription': node.item_description,
            'materialConsideration': node.material_consideration,
            'quantity': _plain_number(node.quantity),
            'uom': node.uom,
            'rate': _plain_number(node.rate),
            'currency': node.currency,
            'amount': _plain_number(node.amount),
            'rollupCost': _plain_number(node.rollup_cost),
            'remarks': node.remarks,
            'level': node.level,
        }
        if node.parent_id is not None:
            payload['parentId'] = node.parent_id
        payload['children'] = [self.node_payload(child) for child in self.children_of(node.index)]
        return payload

    def to_payload(self) -> List[Dict[str, Any]]:
        """Nested item list in the shape clients submit."""
        return [self.node_payload(self.nodes[i]) for i in self.roots]

    @classmethod
    def from_payload(cls, items: List[Dict[str, Any]]) -> BOMTree:
        """
        Rebuild a tree from a stored document as-is.

        Derived fields are taken from the payload, not recomputed; run the
        validator and aggregator to normalize untrusted input.
        """
        tree = cls()

        def load(raw: Dict[str, Any], level: int, parent: Optional[BOMItemNode]) -> None:
            node = tree.add(BOMItemNode(
                index=-1,
                item_code=raw.get('itemCode'),
                quantity=to_decimal(raw.get('quantity')) or Decimal('0'),
                rate=to_decimal(raw.get('rate')) or Decimal('0'),
                item_description=raw.get('itemDescription') or "",
                material_consideration=raw.get('materialConsideration') or "",
                uom=raw.get('uom'),
                currency=raw.get('currency'),
                remarks=raw.get('remarks'),
                amount=to_decimal(raw.get('amount')) or Decimal('0'),
                rollup_cost=to_decimal(raw.get('rollupCost')) or Decimal('0'),
                level=level,
                parent_index=parent.index if parent is not None else None,
                parent_id=parent.code_key if parent is not None else None,
            ))
            for child in raw.get('children') or []:
                load(child, level + 1, node)

        for raw in items or []:
            load(raw, 0, None)
        return tree


@dataclass
class BOMHeader:
    """Header fields of a BOM document, everything except the item tree."""

    bom_name: str = ""
    product_name: str = ""
    product_code: str = ""
    version: str = "1.0"
    bom_date: Optional[date] = None
    bom_type: BOMType = BOMType.MANUFACTURING
    status: Optional[BOMStatus] = None
    description: str = ""
    notes: str = ""
    my_company_name: str = ""
    created_by: Optional[str] = None
    approved_by: Optional[str] = None
    approval_date: Optional[date] = None
    customer_id: Optional[str] = None
    customer_name: Optional[str] = None
    enquiry_id: Optional[str] = None
    enquiry_number: Optional[str] = None


@dataclass
class BOMVersion:
    """
    Snapshot of a BOM document as it was before an update.

    Stored append-only; the live document keeps its id and bomNumber.
    """

    bom_id: UUID
    version_number: int
    snapshot: Dict[str, Any] = field(default_factory=dict)
    reason: Optional[str] = None
    created_at: datetime = field(default_factory=utcnow)
