# routers/slots.py
"""
Slot routes: stock positions inside vending machines.

Admins and users can read; only admins can write.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from database import get_session
from dependencies import require_roles
from models import Product, Role, Slot, VendingMachine
from schemas.slot import (
     SlotCreate,
     SlotDetail,
     SlotProductAssign,
     SlotResponse,
     SlotSearchRequest,
     SlotUpdate,
)

logger = logging.getLogger(__name__)

router = APIRouter(
     prefix="/api/slots",
     tags=["slots"],
     dependencies=[Depends(require_roles(Role.ADMIN, Role.USER))],
)

admin_only = [Depends(require_roles(Role.ADMIN))]


def _get_slot_or_404(db: Session, slot_id: int) -> Slot:
     slot = db.get(Slot, slot_id)
     if not slot:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Slot with ID {slot_id} not found"
          )
     return slot


def _check_references(db: Session, product_id, vending_machine_id) -> None:
     if product_id is not None and not db.get(Product, product_id):
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Product with ID {product_id} not found"
          )
     if vending_machine_id is not None and not db.get(VendingMachine, vending_machine_id):
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Vending machine with ID {vending_machine_id} not found"
          )


def _commit_slot(db: Session, slot: Slot) -> Slot:
     try:
          db.commit()
     except IntegrityError:
          db.rollback()
          raise HTTPException(
               status_code=status.HTTP_400_BAD_REQUEST,
               detail="Slot index already used in this vending machine"
          )
     db.refresh(slot)
     return slot


@router.get("", response_model=List[SlotResponse])
def list_slots(db: Session = Depends(get_session)):
     return db.query(Slot).order_by(Slot.vending_machine_id, Slot.index).all()


@router.post(
     "/by-vending-machine-and-product-name",
     response_model=List[SlotDetail],
     summary="Slots of a machine, optionally narrowed by product name",
)
def search_slots(body: SlotSearchRequest, db: Session = Depends(get_session)):
     """
     Return the slots of a vending machine with their products.
     When **productName** is given, only slots whose product name contains it.
     """
     query = (
          db.query(Slot)
          .options(joinedload(Slot.product))
          .filter(Slot.vending_machine_id == body.vending_machine_id)
     )
     if body.product_name:
          query = query.join(Slot.product).filter(Product.name.contains(body.product_name, autoescape=True))
     return query.order_by(Slot.index).all()


@router.get("/{slot_id}", response_model=SlotResponse)
def get_slot(slot_id: int, db: Session = Depends(get_session)):
     return _get_slot_or_404(db, slot_id)


@router.post(
     "",
     response_model=SlotResponse,
     status_code=status.HTTP_201_CREATED,
     dependencies=admin_only,
)
def create_slot(body: SlotCreate, db: Session = Depends(get_session)):
     _check_references(db, body.product_id, body.vending_machine_id)
     slot = Slot(
          index=body.index,
          stock=body.stock,
          product_id=body.product_id,
          vending_machine_id=body.vending_machine_id,
     )
     db.add(slot)
     return _commit_slot(db, slot)


@router.put("/{slot_id}", response_model=SlotResponse, dependencies=admin_only)
def update_slot(slot_id: int, body: SlotUpdate, db: Session = Depends(get_session)):
     """
     Administrative stock/position edit. Only provided fields are updated.
     """
     slot = _get_slot_or_404(db, slot_id)
     changes = body.model_dump(exclude_unset=True)
     _check_references(db, changes.get("product_id"), changes.get("vending_machine_id"))
     for field, value in changes.items():
          setattr(slot, field, value)
     return _commit_slot(db, slot)


@router.delete("/{slot_id}", response_model=SlotResponse, dependencies=admin_only)
def delete_slot(slot_id: int, db: Session = Depends(get_session)):
     slot = _get_slot_or_404(db, slot_id)
     response = SlotResponse.model_validate(slot)
     db.delete(slot)
     db.commit()
     logger.info(f"Deleted slot id={slot_id}")
     return response


@router.post("/{slot_id}/product", response_model=SlotResponse, dependencies=admin_only)
def assign_product(slot_id: int, body: SlotProductAssign, db: Session = Depends(get_session)):
     """Put a product in a slot with the given stock."""
     slot = _get_slot_or_404(db, slot_id)
     _check_references(db, body.product_id, None)
     slot.product_id = body.product_id
     slot.stock = body.stock
     return _commit_slot(db, slot)


@router.delete("/{slot_id}/product", response_model=SlotResponse, dependencies=admin_only)
def remove_product(slot_id: int, db: Session = Depends(get_session)):
     """Empty a slot: no product, no stock."""
     slot = _get_slot_or_404(db, slot_id)
     slot.product_id = None
     slot.stock = 0
     return _commit_slot(db, slot)
