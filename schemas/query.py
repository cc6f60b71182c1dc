# schemas/query.py
"""
Pydantic schemas for the filter / sort / pagination query body.
"""
from enum import Enum
from typing import List, Optional, Union

from pydantic import Field

from .base import CamelModel


class FilterOption(str, Enum):
     """Supported filter comparisons."""
     EQ = "eq"
     GT = "gt"
     LT = "lt"
     CONTAINS = "contains"
     STARTS_WITH = "startsWith"


class SortOrder(str, Enum):
     ASC = "asc"
     DESC = "desc"


class FilterEntry(CamelModel):
     field: str
     value: Union[int, float, str]
     option: str  # unknown options are skipped, not rejected


class SortSpec(CamelModel):
     field: str
     order: SortOrder = SortOrder.ASC


class Pagination(CamelModel):
     page: int = Field(1, ge=1)
     page_size: int = Field(5, ge=1, le=100)


class QueryParams(CamelModel):
     filter: Optional[List[FilterEntry]] = None
     sort: Optional[SortSpec] = None
     pagination: Optional[Pagination] = None


class QueryRequest(CamelModel):
     """Body for POST /<resource>/query."""

     query: QueryParams
