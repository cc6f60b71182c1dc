# schemas/__init__.py
from .auth import SignUpRequest, LoginRequest, AuthResponse
from .product import ProductCreate, ProductUpdate, ProductResponse, ProductListResponse
from .query import QueryRequest, QueryParams
from .slot import SlotCreate, SlotUpdate, SlotResponse, SlotDetail
from .transaction import (
     TransactionCreate,
     ApproveRequest,
     TransactionResponse,
     ApproveResponse,
)
from .user import UserResponse, UserListResponse
from .vending_machine import VendingMachineCreate, VendingMachineDetail, VendingMachineSummary

__all__ = [
     "SignUpRequest",
     "LoginRequest",
     "AuthResponse",
     "ProductCreate",
     "ProductUpdate",
     "ProductResponse",
     "ProductListResponse",
     "QueryRequest",
     "QueryParams",
     "SlotCreate",
     "SlotUpdate",
     "SlotResponse",
     "SlotDetail",
     "TransactionCreate",
     "ApproveRequest",
     "TransactionResponse",
     "ApproveResponse",
     "UserResponse",
     "UserListResponse",
     "VendingMachineCreate",
     "VendingMachineDetail",
     "VendingMachineSummary",
]
