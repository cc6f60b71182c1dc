# schemas/vending_machine.py
"""
Pydantic schemas for Vending Machine API request/response validation.
"""
from typing import List, Optional

from pydantic import Field

from .base import CamelModel
from .slot import SlotDetail


class VendingMachineCreate(CamelModel):
     name: str = Field(..., min_length=1, max_length=255)
     slot_count: Optional[int] = Field(None, ge=0, le=200)


class VendingMachineUpdate(CamelModel):
     name: Optional[str] = Field(None, min_length=1, max_length=255)


class VendingMachineSummary(CamelModel):
     id: int
     name: str
     slot_count: int


class VendingMachineDetail(CamelModel):
     id: int
     name: str
     slots: List[SlotDetail] = []


class VendingMachineListResponse(CamelModel):
     items: List[VendingMachineSummary]
     count: int
