"""
BOM Domain - document numbering.

Numbers look like ``BOM/25/01/15/00001``: prefix, two-digit year, month and
day of creation, then a per-day sequence. The number carries no tenant, so
one counter per day is shared by every company; numbers stay unique across
the whole store.
"""

from __future__ import annotations
from datetime import date
from typing import NamedTuple, Optional
import re

DEFAULT_PREFIX = "BOM"
SEQUENCE_WIDTH = 5


class ParsedBomNumber(NamedTuple):
    prefix: str
    on: date
    sequence: int


def sequence_scope(on: date) -> str:
    """Counter key shared by every BOM created on one day."""
    return f"bom:{on:%Y%m%d}"


def format_bom_number(on: date, sequence: int, prefix: str = DEFAULT_PREFIX) -> str:
    if sequence < 1:
        raise ValueError("sequence must be positive")
    return f"{prefix}/{on:%y/%m/%d}/{sequence:0{SEQUENCE_WIDTH}d}"


def parse_bom_number(value: str) -> Optional[ParsedBomNumber]:
    """Split a number produced by format_bom_number; None if it does not match."""
    match = re.fullmatch(r"(?P<prefix>[^/]+)/(\d{2})/(\d{2})/(\d{2})/(\d+)", value or "")
    if not match:
        return None
    year, month, day, seq = (int(g) for g in match.groups()[1:])
    try:
        on = date(2000 + year, month, day)
    except ValueError:
        return None
    return ParsedBomNumber(match.group('prefix'), on, seq)
