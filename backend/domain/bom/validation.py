"""
BOM Domain - Node Validator.

Checks the structure of a client-submitted item tree and normalizes it into
a BOMTree arena. Validation is all-or-nothing: any problem means no tree.

Level policy: the declared ``level`` of every node is coerced to its actual
depth. A mismatch is counted, never reported as a problem.
"""

from __future__ import annotations
from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Set
import logging

from domain.shared.exceptions import BOMValidationException, NumericException
from domain.shared.value_objects import to_decimal

from .entities import BOMItemNode, BOMTree

logger = logging.getLogger(__name__)


DEFAULT_MAX_DEPTH = 10

# Quantities, rates, line amounts and the document total must stay below this;
# the stored total column holds 16 integer digits.
MAX_AMOUNT = Decimal(10) ** 16

# Problem codes
EMPTY_TREE = "EMPTY_TREE"
INVALID_NODE = "INVALID_NODE"
MISSING_ITEM_CODE = "MISSING_ITEM_CODE"
DUPLICATE_ITEM_CODE = "DUPLICATE_ITEM_CODE"
INVALID_QUANTITY = "INVALID_QUANTITY"
INVALID_RATE = "INVALID_RATE"
INVALID_AMOUNT = "INVALID_AMOUNT"
MAX_DEPTH_EXCEEDED = "MAX_DEPTH_EXCEEDED"
DANGLING_PARENT = "DANGLING_PARENT"
CIRCULAR_REFERENCE = "CIRCULAR_REFERENCE"


@dataclass(frozen=True)
class ValidationProblem:
    """A single problem found on one node of the submitted tree."""

    code: str
    message: str
    path: str
    item_code: Any = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            'code': self.code,
            'message': self.message,
            'path': self.path,
            'itemCode': self.item_code,
        }


@dataclass
class ValidationResult:
    """Outcome of validate_items: a normalized tree, or the problems found."""

    tree: Optional[BOMTree] = None
    problems: List[ValidationProblem] = field(default_factory=list)
    level_corrections: int = 0

    @property
    def is_valid(self) -> bool:
        return not self.problems

    def raise_for_problems(self) -> BOMTree:
        """Return the tree, or raise with every problem found."""
        if self.problems:
            if all(p.code == INVALID_AMOUNT for p in self.problems):
                raise NumericException(self.problems)
            raise BOMValidationException(self.problems)
        return self.tree


def _code_key(value: Any) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    key = str(value).strip()
    return key or None


class NodeValidator:
    """Depth-first walker that validates and normalizes one submission."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, max_amount: Decimal = MAX_AMOUNT):
        if max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.max_depth = max_depth
        self.max_amount = max_amount

    def validate(self, items: Any) -> ValidationResult:
        self._tree = BOMTree()
        self._problems: List[ValidationProblem] = []
        self._corrections = 0

        if not isinstance(items, (list, tuple)):
            self._report(INVALID_NODE, "items must be a list", "items")
        elif not items:
            self._report(EMPTY_TREE, "At least one item is required", "items")
        else:
            self._visit_siblings(items, "items", level=0, parent=None, ancestors=set())

        if self._corrections:
            logger.debug("Coerced declared level on %d BOM node(s)", self._corrections)

        if self._problems:
            return ValidationResult(None, self._problems, self._corrections)
        return ValidationResult(self._tree, [], self._corrections)

    # =========================================================================
    # WALK
    # =========================================================================

    def _visit_siblings(
        self,
        siblings: List[Any],
        path: str,
        level: int,
        parent: Optional[BOMItemNode],
        ancestors: Set[int],
    ) -> None:
        seen: Set[str] = set()
        for position, raw in enumerate(siblings):
            node_path = f"{path}[{position}]"
            if isinstance(raw, Mapping):
                key = _code_key(raw.get('itemCode'))
                if key is not None:
                    if key in seen:
                        self._report(
                            DUPLICATE_ITEM_CODE,
                            f"Item code {key} appears more than once under the same parent",
                            node_path,
                            raw.get('itemCode'),
                        )
                    seen.add(key)
            self._visit(raw, node_path, level, parent, ancestors)

    def _visit(
        self,
        raw: Any,
        path: str,
        level: int,
        parent: Optional[BOMItemNode],
        ancestors: Set[int],
    ) -> None:
        if not isinstance(raw, Mapping):
            self._report(INVALID_NODE, "Item must be an object", path)
            return
        if id(raw) in ancestors:
            self._report(
                CIRCULAR_REFERENCE,
                "Item contains itself as a descendant",
                path,
                raw.get('itemCode'),
            )
            return
        if level >= self.max_depth:
            self._report(
                MAX_DEPTH_EXCEEDED,
                f"Tree is deeper than the maximum of {self.max_depth} levels",
                path,
                raw.get('itemCode'),
            )
            return

        item_code = raw.get('itemCode')
        key = _code_key(item_code)
        if key is None:
            self._report(MISSING_ITEM_CODE, "itemCode is required", path)

        quantity = self._number(raw, 'quantity', path, item_code)
        if quantity is not None and quantity <= 0:
            self._report(INVALID_QUANTITY, "quantity must be greater than 0", path, item_code)
        rate = self._number(raw, 'rate', path, item_code)
        if rate is not None and rate < 0:
            self._report(INVALID_RATE, "rate must not be negative", path, item_code)
        if quantity is not None and rate is not None and abs(quantity * rate) >= self.max_amount:
            self._report(
                INVALID_AMOUNT,
                f"quantity * rate must be below {self.max_amount:,.0f}",
                path,
                item_code,
            )

        declared_level = raw.get('level')
        if declared_level is not None and declared_level != level:
            self._corrections += 1

        self._check_parent_reference(raw, path, parent, ancestors)

        node = self._tree.add(BOMItemNode(
            index=-1,
            item_code=item_code,
            quantity=quantity if quantity is not None else Decimal('0'),
            rate=rate if rate is not None else Decimal('0'),
            item_description=raw.get('itemDescription') or "",
            material_consideration=raw.get('materialConsideration') or "",
            uom=raw.get('uom'),
            currency=raw.get('currency'),
            remarks=raw.get('remarks'),
            level=level,
            parent_index=parent.index if parent is not None else None,
            parent_id=parent.code_key if parent is not None else None,
        ))

        children = raw.get('children')
        if children is None:
            return
        if not isinstance(children, (list, tuple)):
            self._report(INVALID_NODE, "children must be a list", path, item_code)
            return
        ancestors.add(id(raw))
        try:
            self._visit_siblings(children, f"{path}.children", level + 1, node, ancestors)
        finally:
            ancestors.discard(id(raw))

    # =========================================================================
    # CHECKS
    # =========================================================================

    def _number(self, raw: Mapping, name: str, path: str, item_code: Any) -> Optional[Decimal]:
        value = to_decimal(raw.get(name))
        if value is None or not value.is_finite():
            self._report(INVALID_AMOUNT, f"{name} must be a finite number", path, item_code)
            return None
        if abs(value) >= self.max_amount:
            self._report(INVALID_AMOUNT, f"{name} must be below {self.max_amount:,.0f}", path, item_code)
            return None
        return value

    def _check_parent_reference(
        self,
        raw: Mapping,
        path: str,
        parent: Optional[BOMItemNode],
        ancestors: Set[int],
    ) -> None:
        declared = _code_key(raw.get('parentId'))
        if declared is None:
            return
        if parent is not None and declared == parent.code_key:
            return
        if declared in self._subtree_codes(raw, set(ancestors)):
            self._report(
                CIRCULAR_REFERENCE,
                f"parentId {declared} points to the item itself or one of its descendants",
                path,
                raw.get('itemCode'),
            )
        else:
            self._report(
                DANGLING_PARENT,
                f"parentId {declared} does not match the item's parent",
                path,
                raw.get('itemCode'),
            )

    def _subtree_codes(self, raw: Mapping, visited: Set[int], depth: int = 0) -> Set[str]:
        """Codes of ``raw`` and everything below it, bounded like the walk itself."""
        codes: Set[str] = set()
        if id(raw) in visited or depth > self.max_depth:
            return codes
        visited.add(id(raw))
        key = _code_key(raw.get('itemCode'))
        if key is not None:
            codes.add(key)
        children = raw.get('children')
        if isinstance(children, (list, tuple)):
            for child in children:
                if isinstance(child, Mapping):
                    codes |= self._subtree_codes(child, visited, depth + 1)
        return codes

    def _report(self, code: str, message: str, path: str, item_code: Any = None) -> None:
        self._problems.append(ValidationProblem(code, message, path, item_code))


def validate_items(
    items: Any,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_amount: Decimal = MAX_AMOUNT,
) -> ValidationResult:
    """Validate a submitted root-level item list and normalize it into a BOMTree."""
    return NodeValidator(max_depth, max_amount).validate(items)
