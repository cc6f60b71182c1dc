"""
Racing ledger calls against a file-backed database, one session per thread.
"""
import threading
from decimal import Decimal

from models import Slot, User
from services import ledger_service


def _together(database, calls):
     """
     Run each call(session) on its own thread, released at the same moment.
     Returns the sorted outcomes: the call's result, or the exception class name.
     """
     barrier = threading.Barrier(len(calls))
     outcomes = []
     lock = threading.Lock()

     def run(call):
          session = database.session_factory()
          try:
               barrier.wait()
               outcome = call(session)
          except Exception as exc:
               outcome = type(exc).__name__
          finally:
               session.close()
          with lock:
               outcomes.append(outcome)

     threads = [threading.Thread(target=run, args=(call,)) for call in calls]
     for thread in threads:
          thread.start()
     for thread in threads:
          thread.join(timeout=60)
     return sorted(outcomes, key=str)


def _approve(seeded, code, vending_machine_id):
     def call(session):
          ledger_service.approve_transaction(
               session, session.get(User, seeded.admin), code=code, vending_machine_id=vending_machine_id
          )
          return "ok"

     return call


def _create(seeded, slot_id):
     def call(session):
          tx = ledger_service.create_transaction(
               session, session.get(User, seeded.alice), user_id=seeded.alice, slot_id=slot_id
          )
          return tx.code

     return call


def _state(database, seeded, slot_id):
     with database.session() as session:
          return session.get(Slot, slot_id).stock, session.get(User, seeded.alice).balance


def test_same_code_is_redeemed_once(database, seeded):
     [code] = _together(database, [_create(seeded, seeded.gym_slot)])

     outcomes = _together(database, [_approve(seeded, code, seeded.gym)] * 2)

     assert outcomes == ["AlreadyConfirmedError", "ok"]
     stock, balance = _state(database, seeded, seeded.gym_slot)
     assert stock == 4
     assert balance == Decimal("70")


def test_concurrent_purchases_of_the_last_unit(database, seeded):
     codes = _together(database, [_create(seeded, seeded.stocked)] * 2)

     assert len(codes) == 2
     assert all(len(code) == 8 and code.isdigit() for code in codes)
     assert codes[0] != codes[1]

     outcomes = _together(database, [_approve(seeded, code, seeded.lobby) for code in codes])

     assert outcomes == ["OutOfStockError", "ok"]
     stock, balance = _state(database, seeded, seeded.stocked)
     assert stock == 0
     assert balance == Decimal("70")
