# routers/users.py
"""
Account management routes (admin only).
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session

from database import get_session
from dependencies import require_roles
from models import Role, User, VendingMachine
from schemas.query import QueryRequest
from schemas.user import (
     BalanceResponse,
     BalanceUpdateRequest,
     MachineBindingRequest,
     UserListResponse,
     UserResponse,
)
from utils.query import field_map, run_query

logger = logging.getLogger(__name__)

router = APIRouter(
     prefix="/api/users",
     tags=["users"],
     dependencies=[Depends(require_roles(Role.ADMIN))],
)

USER_FIELDS = field_map(User.id, User.name, User.username, User.role, User.balance)


def _get_user_or_404(db: Session, user_id: int) -> User:
     user = db.get(User, user_id)
     if not user:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail="User not found"
          )
     return user


@router.get("", response_model=List[UserResponse])
def list_users(db: Session = Depends(get_session)):
     return db.query(User).order_by(User.id).all()


@router.post("/query", response_model=UserListResponse, summary="Filter, sort and paginate users")
def query_users(body: QueryRequest, db: Session = Depends(get_session)):
     users, count = run_query(db.query(User), body.query, USER_FIELDS)
     return UserListResponse(items=users, count=count)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_session)):
     return _get_user_or_404(db, user_id)


@router.delete("/{user_id}", response_model=UserResponse)
def delete_user(user_id: int, db: Session = Depends(get_session)):
     """
     Delete an account. Admin accounts are protected.

     Note: This permanently removes the user and their transactions.
     """
     user = _get_user_or_404(db, user_id)
     if user.role == Role.ADMIN:
          raise HTTPException(
               status_code=status.HTTP_403_FORBIDDEN,
               detail="Admin cannot be deleted"
          )
     response = UserResponse.model_validate(user)
     db.delete(user)
     db.commit()
     logger.info(f"Deleted user id={user_id}")
     return response


@router.post("/{user_id}/addBalance", response_model=BalanceResponse)
def add_balance(user_id: int, body: BalanceUpdateRequest, db: Session = Depends(get_session)):
     """Top up a balance with a single atomic increment."""
     user = _get_user_or_404(db, user_id)
     db.execute(
          update(User)
          .where(User.id == user_id)
          .values(balance=User.balance + body.amount)
          .execution_options(synchronize_session=False)
     )
     db.commit()
     db.refresh(user)
     logger.info(f"Added {body.amount} to balance of user id={user_id}")
     return BalanceResponse(id=user.id, balance=user.balance)


@router.post("/{user_id}/resetBalance", response_model=BalanceResponse)
def reset_balance(user_id: int, db: Session = Depends(get_session)):
     user = _get_user_or_404(db, user_id)
     user.balance = 0
     db.commit()
     db.refresh(user)
     logger.info(f"Reset balance of user id={user_id}")
     return BalanceResponse(id=user.id, balance=user.balance)


@router.put("/{user_id}/machine", response_model=UserResponse, summary="Bind a machine account")
def bind_machine(user_id: int, body: MachineBindingRequest, db: Session = Depends(get_session)):
     """
     Bind a machine-role account to the vending machine it approves for.
     """
     user = _get_user_or_404(db, user_id)
     if user.role != Role.MACHINE:
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail="Only machine accounts can be bound to a vending machine"
          )
     if not db.get(VendingMachine, body.vending_machine_id):
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail="Vending machine not found"
          )
     user.vending_machine_id = body.vending_machine_id
     db.commit()
     db.refresh(user)
     return user
