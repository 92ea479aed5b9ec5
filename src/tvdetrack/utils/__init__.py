"""Utility functions for tvdetrack."""

from tvdetrack.utils.date_parser import parse_date, get_date_range
from tvdetrack.utils.amount_parser import parse_amount
from tvdetrack.utils.entity_resolver import resolve_entity
from tvdetrack.utils.ids import new_id

__all__ = ["parse_date", "get_date_range", "parse_amount", "resolve_entity", "new_id"]
