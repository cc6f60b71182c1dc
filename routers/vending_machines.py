# routers/vending_machines.py
"""
Vending machine routes.

Admins and users can read; only admins can write.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import update
from sqlalchemy.orm import Session, selectinload

from database import get_session
from dependencies import require_roles
from models import Role, Slot, Transaction, User, VendingMachine
from schemas.query import QueryRequest
from schemas.vending_machine import (
     VendingMachineCreate,
     VendingMachineDetail,
     VendingMachineListResponse,
     VendingMachineSummary,
     VendingMachineUpdate,
)
from utils.query import field_map, run_query

logger = logging.getLogger(__name__)

router = APIRouter(
     prefix="/api/vendingMachines",
     tags=["vending machines"],
     dependencies=[Depends(require_roles(Role.ADMIN, Role.USER))],
)

admin_only = [Depends(require_roles(Role.ADMIN))]

MACHINE_FIELDS = field_map(VendingMachine.id, VendingMachine.name)


def _summary(machine: VendingMachine) -> VendingMachineSummary:
     return VendingMachineSummary(id=machine.id, name=machine.name, slot_count=len(machine.slots))


def _get_machine_or_404(db: Session, machine_id: int) -> VendingMachine:
     machine = (
          db.query(VendingMachine)
          .options(selectinload(VendingMachine.slots).selectinload(Slot.product))
          .filter(VendingMachine.id == machine_id)
          .first()
     )
     if not machine:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Vending machine with ID {machine_id} not found"
          )
     return machine


@router.get("", response_model=List[VendingMachineSummary])
def list_vending_machines(db: Session = Depends(get_session)):
     machines = (
          db.query(VendingMachine)
          .options(selectinload(VendingMachine.slots))
          .order_by(VendingMachine.id)
          .all()
     )
     return [_summary(machine) for machine in machines]


@router.post(
     "/query",
     response_model=VendingMachineListResponse,
     summary="Filter, sort and paginate vending machines",
)
def query_vending_machines(body: QueryRequest, db: Session = Depends(get_session)):
     query = db.query(VendingMachine).options(selectinload(VendingMachine.slots))
     machines, count = run_query(query, body.query, MACHINE_FIELDS)
     return VendingMachineListResponse(items=[_summary(m) for m in machines], count=count)


@router.get("/{machine_id}", response_model=VendingMachineDetail)
def get_vending_machine(machine_id: int, db: Session = Depends(get_session)):
     """Machine with its slots ordered by index, each with its product."""
     return _get_machine_or_404(db, machine_id)


@router.post(
     "",
     response_model=VendingMachineDetail,
     status_code=status.HTTP_201_CREATED,
     dependencies=admin_only,
)
def create_vending_machine(body: VendingMachineCreate, db: Session = Depends(get_session)):
     """
     Create a vending machine.

     - **slotCount**: if given, that many empty slots are created, indexed from 0
     """
     machine = VendingMachine(name=body.name)
     for index in range(body.slot_count or 0):
          machine.slots.append(Slot(index=index, stock=0))
     db.add(machine)
     db.commit()
     logger.info(f"Created vending machine id={machine.id} with {body.slot_count or 0} slots")
     return _get_machine_or_404(db, machine.id)


@router.put("/{machine_id}", response_model=VendingMachineDetail, dependencies=admin_only)
def update_vending_machine(machine_id: int, body: VendingMachineUpdate, db: Session = Depends(get_session)):
     machine = _get_machine_or_404(db, machine_id)
     if body.name is not None:
          machine.name = body.name
     db.commit()
     return _get_machine_or_404(db, machine_id)


@router.delete("/{machine_id}", response_model=VendingMachineSummary, dependencies=admin_only)
def delete_vending_machine(machine_id: int, db: Session = Depends(get_session)):
     """
     Delete a vending machine together with its slots.

     Machine accounts bound to it are unbound; its transactions keep their
     history but lose the machine reference.
     """
     machine = _get_machine_or_404(db, machine_id)
     response = _summary(machine)
     for model in (Transaction, User):
          db.execute(
               update(model)
               .where(model.vending_machine_id == machine_id)
               .values(vending_machine_id=None)
               .execution_options(synchronize_session=False)
          )
     db.delete(machine)
     db.commit()
     logger.info(f"Deleted vending machine id={machine_id}")
     return response
