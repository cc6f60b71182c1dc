# routers/transactions.py
"""
Transaction / redemption API.

- POST /transactions: a user gets a one-time code for a slot
- PUT /transactions/approve: the machine redeems the code and dispenses
- DELETE /transactions/cancel/{id}: drop an unconfirmed transaction
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from config import Settings
from database import get_session
from dependencies import get_app_settings, get_current_user, require_roles
from models import Role, User
from schemas.transaction import (
     ApproveRequest,
     ApproveResponse,
     CodeRequest,
     DispenseProduct,
     DispenseSlot,
     PurgeResponse,
     TransactionCreate,
     TransactionResponse,
     TransactionStatus,
)
from services import ledger_service

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=List[TransactionResponse])
def list_transactions(
     db: Session = Depends(get_session),
     actor: User = Depends(require_roles(Role.ADMIN, Role.USER)),
):
     """Admins get every transaction; users get their own."""
     return ledger_service.list_transactions(db, actor)


@router.post("/by-code", response_model=Optional[TransactionResponse], summary="Look up a transaction by code")
def get_transaction_by_code(
     body: CodeRequest,
     db: Session = Depends(get_session),
     actor: User = Depends(get_current_user),
):
     return ledger_service.find_by_code(db, body.code)


@router.post(
     "",
     response_model=TransactionResponse,
     status_code=status.HTTP_201_CREATED,
     summary="Create a transaction and issue its redemption code",
)
def create_transaction(
     body: TransactionCreate,
     db: Session = Depends(get_session),
     settings: Settings = Depends(get_app_settings),
     actor: User = Depends(require_roles(Role.ADMIN, Role.USER)),
):
     """
     Issue an 8-digit redemption code for a slot.

     - **userId**: purchaser (users may only buy for themselves)
     - **slotId**: slot holding the product

     Stock and balance are checked but not reserved; they change on approval.
     """
     return ledger_service.create_transaction(
          db,
          actor,
          user_id=body.user_id,
          slot_id=body.slot_id,
          max_code_attempts=settings.code_max_attempts,
     )


@router.put("/confirm", response_model=TransactionStatus, summary="Poll a transaction's confirmation state")
def confirm_transaction(
     body: CodeRequest,
     db: Session = Depends(get_session),
     actor: User = Depends(get_current_user),
):
     return ledger_service.get_by_code(db, body.code)


@router.put("/approve", response_model=ApproveResponse, summary="Redeem a code at a vending machine")
def approve_transaction(
     body: ApproveRequest,
     db: Session = Depends(get_session),
     settings: Settings = Depends(get_app_settings),
     actor: User = Depends(require_roles(Role.ADMIN, Role.MACHINE)),
):
     """
     Confirm the transaction, take one unit from its slot and charge the user,
     all in one database transaction.

     Returns the confirmed transaction plus the slot and product to dispense.
     """
     approval = ledger_service.approve_transaction(
          db,
          actor,
          code=body.code,
          vending_machine_id=body.vending_machine_id,
          ttl_minutes=settings.transaction_ttl_minutes,
     )
     transaction = TransactionResponse.model_validate(approval.transaction)
     return ApproveResponse(
          **transaction.model_dump(),
          slot=DispenseSlot.model_validate(approval.slot),
          product=DispenseProduct.model_validate(approval.product),
     )


@router.delete("/expired", response_model=PurgeResponse, summary="Delete expired unconfirmed transactions")
def purge_expired_transactions(
     db: Session = Depends(get_session),
     settings: Settings = Depends(get_app_settings),
     actor: User = Depends(require_roles(Role.ADMIN)),
):
     deleted = ledger_service.purge_expired(db, settings.transaction_ttl_minutes)
     return PurgeResponse(deleted=deleted)


@router.delete("/cancel/{transaction_id}", response_model=TransactionResponse)
def cancel_transaction(
     transaction_id: int,
     db: Session = Depends(get_session),
     actor: User = Depends(require_roles(Role.ADMIN, Role.USER)),
):
     """
     Cancel an unconfirmed transaction (admin, or the user who owns it).
     Confirmed transactions cannot be cancelled.
     """
     return ledger_service.cancel_transaction(db, actor, transaction_id)
