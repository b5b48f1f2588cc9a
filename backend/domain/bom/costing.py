"""
BOM Domain - Cost Aggregator.

Every node carries its own priced line amount. The document total is the sum
of those amounts over the whole tree; a child's amount is never added on top
of its parent's own amount. ``rollup_cost`` gives the subtree view of the same
numbers (node amount plus its descendants) without feeding the total twice.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List
import logging

from domain.shared.exceptions import NumericException
from domain.shared.value_objects import Money

from .entities import BOMTree
from .validation import INVALID_AMOUNT, MAX_AMOUNT, ValidationProblem

logger = logging.getLogger(__name__)


@dataclass
class CostRollup:
    """Aggregated tree plus its document-level total."""

    tree: BOMTree
    total_material_cost: Decimal = Decimal('0.00')
    currencies: List[str] = field(default_factory=list)

    @property
    def mixed_currency(self) -> bool:
        return len(self.currencies) > 1


def aggregate(tree: BOMTree, max_amount: Decimal = MAX_AMOUNT) -> CostRollup:
    """
    Recompute ``amount`` and ``rollup_cost`` on every node and the grand total.

    Returns a new tree; the input is left untouched. Running it again on its
    own output yields identical numbers.
    """
    result = tree.copy()

    problems = [
        ValidationProblem(
            INVALID_AMOUNT,
            f"quantity and rate must be finite and their product below {max_amount:,.0f}",
            f"items#{node.index}",
            node.item_code,
        )
        for node in result
        if not (node.quantity.is_finite() and node.rate.is_finite())
        or abs(node.quantity * node.rate) >= max_amount
    ]
    if problems:
        raise NumericException(problems)

    total = Decimal('0.00')
    currencies: List[str] = []
    for node in result.post_order():
        node.amount = Money.of(node.quantity, node.rate, node.currency).amount
        node.rollup_cost = node.amount + sum(
            (child.rollup_cost for child in result.children_of(node.index)),
            Decimal('0.00'),
        )
        total += node.amount
        if total >= max_amount:
            raise NumericException([ValidationProblem(
                INVALID_AMOUNT,
                f"Total material cost must be below {max_amount:,.0f}",
                "items",
            )])
        if node.currency and node.currency not in currencies:
            currencies.append(node.currency)

    rollup = CostRollup(result, total, sorted(currencies))
    if rollup.mixed_currency:
        logger.warning(
            "BOM total summed across currencies %s without conversion",
            ", ".join(rollup.currencies),
        )
    return rollup
