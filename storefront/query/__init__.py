"""
Product listing queries.

Modules:
    planner - ProductQuery -> store query, with the unindexed fallback
    sorting - Sort comparators and client-side refinements
"""

from .planner import QueryPlanner, decode_cursor, encode_cursor
from .sorting import (
    SERVER_SORTS,
    SORT_KEYS,
    apply_server_filters,
    refine_products,
    sort_products,
)

__all__ = [
    'QueryPlanner',
    'encode_cursor',
    'decode_cursor',
    'SORT_KEYS',
    'SERVER_SORTS',
    'sort_products',
    'refine_products',
    'apply_server_filters',
]
