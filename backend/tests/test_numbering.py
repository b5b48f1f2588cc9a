from datetime import date

import pytest

from domain.bom.numbering import (
    format_bom_number,
    parse_bom_number,
    sequence_scope,
)


def test_format_bom_number():
    assert format_bom_number(date(2025, 1, 15), 1) == 'BOM/25/01/15/00001'
    assert format_bom_number(date(2025, 12, 3), 42, prefix='PB') == 'PB/25/12/03/00042'
    assert format_bom_number(date(2025, 1, 15), 123456) == 'BOM/25/01/15/123456'


def test_format_rejects_non_positive_sequence():
    with pytest.raises(ValueError):
        format_bom_number(date(2025, 1, 15), 0)


def test_parse_bom_number():
    parsed = parse_bom_number('BOM/25/01/15/00007')

    assert parsed.prefix == 'BOM'
    assert parsed.on == date(2025, 1, 15)
    assert parsed.sequence == 7


@pytest.mark.parametrize('value', ['', None, 'BOM-25-01-15-1', 'BOM/25/13/40/00001', 'BOM/25/01/15'])
def test_parse_rejects_foreign_numbers(value):
    assert parse_bom_number(value) is None


def test_sequence_scope_is_one_counter_per_day():
    day = date(2025, 1, 15)

    assert sequence_scope(day) == 'bom:20250115'
    assert sequence_scope(date(2025, 1, 16)) != sequence_scope(day)
