# utils/query.py
"""
Filter / sort / pagination helpers shared by the /query endpoints.

Unknown fields and options are skipped rather than rejected.
"""
from typing import Dict, Optional, Tuple

from pydantic.alias_generators import to_camel
from sqlalchemy import Column
from sqlalchemy.orm import Query

from schemas.query import FilterOption, QueryParams, SortOrder

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 5


def _condition(column: Column, option: FilterOption, value):
     if option == FilterOption.EQ:
          return column == value
     if option == FilterOption.GT:
          return column > value
     if option == FilterOption.LT:
          return column < value
     if option == FilterOption.CONTAINS:
          return column.contains(str(value), autoescape=True)
     if option == FilterOption.STARTS_WITH:
          return column.startswith(str(value), autoescape=True)
     return None


def apply_filters(query: Query, params: Optional[QueryParams], fields: Dict[str, Column]) -> Query:
     """Narrow the query with every valid filter entry."""
     if params is None or not params.filter:
          return query
     for f in params.filter:
          column = fields.get(f.field)
          if column is None:
               continue
          condition = _condition(column, f.option, f.value)
          if condition is not None:
               query = query.filter(condition)
     return query


def apply_sort(query: Query, params: Optional[QueryParams], fields: Dict[str, Column]) -> Query:
     if params is None or params.sort is None:
          return query
     column = fields.get(params.sort.field)
     if column is None:
          return query
     return query.order_by(column.desc() if params.sort.order == SortOrder.DESC else column.asc())


def page_window(params: Optional[QueryParams]) -> Tuple[int, int]:
     """Return (offset, limit) for the requested page."""
     page, page_size = DEFAULT_PAGE, DEFAULT_PAGE_SIZE
     if params is not None and params.pagination is not None:
          page = params.pagination.page
          page_size = params.pagination.page_size
     return (page - 1) * page_size, page_size


def run_query(query: Query, params: Optional[QueryParams], fields: Dict[str, Column]) -> Tuple[list, int]:
     """
     Apply filters, sort and pagination.

     Returns:
          (items on the requested page, total count before pagination)
     """
     query = apply_filters(query, params, fields)
     total = query.count()
     query = apply_sort(query, params, fields)
     offset, limit = page_window(params)
     return query.offset(offset).limit(limit).all(), total


def field_map(*columns) -> Dict[str, Column]:
     """Map camelCase field names to model columns."""
     return {to_camel(column.key): column for column in columns}
