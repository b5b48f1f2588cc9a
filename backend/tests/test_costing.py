from decimal import Decimal

import pytest

from domain.bom import BOMItemNode, BOMTree, aggregate, validate_items
from domain.shared.exceptions import NumericException


def rollup_of(items):
    return aggregate(validate_items(items).raise_for_problems())


def test_laptop_assembly_totals_56300(laptop_items):
    rollup = rollup_of(laptop_items)

    assert rollup.total_material_cost == Decimal('56300')
    assert rollup.currencies == ['INR']
    assert not rollup.mixed_currency


def test_every_node_amount_is_quantity_times_rate(laptop_items):
    laptop_items[0]['children'][1]['amount'] = 1
    laptop_items[2]['amount'] = 999999

    rollup = rollup_of(laptop_items)

    amounts = {node.item_code: node.amount for node in rollup.tree}
    assert amounts == {
        1001: Decimal('15000.00'),
        1002: Decimal('500.00'),
        1003: Decimal('800.00'),
        2001: Decimal('25000.00'),
        2002: Decimal('3000.00'),
        3001: Decimal('12000.00'),
    }


def test_rollup_cost_includes_descendants(laptop_items):
    rollup = rollup_of(laptop_items)

    rollups = {node.item_code: node.rollup_cost for node in rollup.tree}
    assert rollups[1001] == Decimal('16300.00')
    assert rollups[2001] == Decimal('28000.00')
    assert rollups[3001] == Decimal('12000.00')
    # Total is the flat sum of amounts, equal to the sum of root rollups.
    roots = sum(rollup.tree.node(i).rollup_cost for i in rollup.tree.roots)
    assert roots == rollup.total_material_cost


def test_amounts_round_half_up_to_two_places():
    rollup = rollup_of([
        {'itemCode': 'A', 'quantity': '0.5', 'rate': '0.05'},
        {'itemCode': 'B', 'quantity': 3, 'rate': '0.335'},
    ])

    amounts = [node.amount for node in rollup.tree]
    assert amounts == [Decimal('0.03'), Decimal('1.01')]
    assert rollup.total_material_cost == Decimal('1.04')


def test_aggregation_is_idempotent(laptop_items):
    first = rollup_of(laptop_items)
    second = rollup_of(first.tree.to_payload())

    assert second.total_material_cost == first.total_material_cost
    assert second.tree.to_payload() == first.tree.to_payload()


def test_aggregate_leaves_its_input_untouched():
    tree = validate_items([{'itemCode': 'A', 'quantity': 2, 'rate': 3}]).raise_for_problems()

    rollup = aggregate(tree)

    assert tree.node(0).amount == Decimal('0')
    assert rollup.tree.node(0).amount == Decimal('6.00')


def test_mixed_currencies_are_summed_and_flagged(caplog):
    rollup = rollup_of([
        {'itemCode': 'A', 'quantity': 1, 'rate': 100, 'currency': 'USD'},
        {'itemCode': 'B', 'quantity': 1, 'rate': 50, 'currency': 'INR'},
    ])

    assert rollup.total_material_cost == Decimal('150.00')
    assert rollup.currencies == ['INR', 'USD']
    assert rollup.mixed_currency
    assert 'without conversion' in caplog.text


def test_non_finite_values_raise_numeric_exception():
    tree = BOMTree()
    tree.add(BOMItemNode(index=-1, item_code='A', quantity=Decimal('Infinity'), rate=Decimal('1')))

    with pytest.raises(NumericException) as exc_info:
        aggregate(tree)

    assert exc_info.value.details['problems'][0]['path'] == 'items#0'


def test_empty_tree_totals_zero():
    rollup = aggregate(BOMTree())

    assert rollup.total_material_cost == Decimal('0.00')
    assert rollup.currencies == []


def test_oversized_line_raises_numeric_exception():
    tree = BOMTree()
    tree.add(BOMItemNode(index=-1, item_code=1, quantity=Decimal('1e30'), rate=Decimal('1')))

    with pytest.raises(NumericException) as exc_info:
        aggregate(tree)

    assert exc_info.value.problems[0].code == 'INVALID_AMOUNT'


def test_total_above_the_bound_raises_numeric_exception():
    items = [
        {'itemCode': 'A', 'quantity': 6, 'rate': '1000000000000000'},
        {'itemCode': 'B', 'quantity': 6, 'rate': '1000000000000000'},
    ]

    with pytest.raises(NumericException) as exc_info:
        rollup_of(items)

    assert exc_info.value.problems[0].path == 'items'


def test_stored_tree_keeps_exact_quantities():
    rollup = rollup_of([{'itemCode': 'A', 'quantity': '0.12499999999999999999', 'rate': '0.04'}])
    assert rollup.total_material_cost == Decimal('0.00')

    payload = rollup.tree.to_payload()
    assert payload[0]['quantity'] == '0.12499999999999999999'
    assert payload[0]['rate'] == 0.04

    again = aggregate(BOMTree.from_payload(payload))
    assert again.tree.node(0).quantity == Decimal('0.12499999999999999999')
    assert again.total_material_cost == Decimal('0.00')
    assert again.tree.to_payload() == payload
