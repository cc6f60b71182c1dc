# schemas/slot.py
"""
Pydantic schemas for Slot API request/response validation.
"""
from typing import Optional

from pydantic import Field

from .base import CamelModel
from .product import ProductResponse


class SlotCreate(CamelModel):
     index: int = Field(..., ge=0)
     stock: int = Field(0, ge=0)
     product_id: Optional[int] = Field(None, gt=0)
     vending_machine_id: int = Field(..., gt=0)


class SlotUpdate(CamelModel):
     index: Optional[int] = Field(None, ge=0)
     stock: Optional[int] = Field(None, ge=0)
     product_id: Optional[int] = Field(None, gt=0)
     vending_machine_id: Optional[int] = Field(None, gt=0)


class SlotProductAssign(CamelModel):
     product_id: int = Field(..., gt=0)
     stock: int = Field(..., ge=0)


class SlotSearchRequest(CamelModel):
     """Slots of one machine, optionally narrowed by product name."""

     vending_machine_id: int = Field(..., gt=0)
     product_name: Optional[str] = None


class SlotResponse(CamelModel):
     id: int
     index: int
     stock: int
     product_id: Optional[int] = None
     vending_machine_id: int


class SlotDetail(SlotResponse):
     product: Optional[ProductResponse] = None
