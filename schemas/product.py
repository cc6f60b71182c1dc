# schemas/product.py
"""
Pydantic schemas for Product API request/response validation.
"""
from decimal import Decimal
from typing import List, Optional

from pydantic import Field

from .base import CamelModel


class ProductCreate(CamelModel):
     name: str = Field(..., min_length=1, max_length=255)
     price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
     image: Optional[str] = Field(None, max_length=500)


class ProductUpdate(CamelModel):
     """Each field is optional; only provided fields are updated."""

     name: Optional[str] = Field(None, min_length=1, max_length=255)
     price: Optional[Decimal] = Field(None, ge=0, max_digits=12, decimal_places=2)
     image: Optional[str] = Field(None, max_length=500)


class ProductResponse(CamelModel):
     id: int
     name: str
     price: Decimal
     image: Optional[str] = None


class ProductListResponse(CamelModel):
     items: List[ProductResponse]
     count: int
