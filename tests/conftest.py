"""
Shared fixtures: a throwaway SQLite database per test, seeded accounts and
inventory, and a TestClient bound to the same database file.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-secret")

from decimal import Decimal
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from config import Settings
from database import Database
from main import create_app
from models import Product, Role, Slot, User, VendingMachine
from utils.security import create_access_token, hash_password

PASSWORD = "secret123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest.fixture
def settings(tmp_path):
     return Settings(
          database_url=f"sqlite:///{tmp_path / 'vending.db'}",
          jwt_secret="test-secret",
          transaction_ttl_minutes=None,
          code_max_attempts=10,
     )


@pytest.fixture
def database(settings):
     db = Database(settings.sqlalchemy_url)
     db.create_all()
     yield db
     db.dispose()


@pytest.fixture
def session(database):
     session = database.session_factory()
     yield session
     session.close()


@pytest.fixture
def seeded(database):
     """
     Two machines ("Lobby" and "Gym"), a 30.00 product, and accounts:
     admin, alice (balance 100), bob (balance 10), and one machine account
     bound to each machine.

     The Lobby machine has slot 0 holding one unit and slot 1 holding none.
     """
     with database.session() as s:
          lobby = VendingMachine(name="Lobby")
          gym = VendingMachine(name="Gym")
          cola = Product(name="Cola", price=Decimal("30.00"))
          s.add_all([lobby, gym, cola])
          s.flush()

          stocked = Slot(index=0, stock=1, product_id=cola.id, vending_machine_id=lobby.id)
          empty = Slot(index=1, stock=0, product_id=cola.id, vending_machine_id=lobby.id)
          gym_slot = Slot(index=0, stock=5, product_id=cola.id, vending_machine_id=gym.id)
          s.add_all([stocked, empty, gym_slot])

          users = {
               "admin": User(name="Admin", username="admin", password=PASSWORD_HASH, role=Role.ADMIN),
               "alice": User(
                    name="Alice", username="alice", password=PASSWORD_HASH,
                    role=Role.USER, balance=Decimal("100.00"),
               ),
               "bob": User(
                    name="Bob", username="bob", password=PASSWORD_HASH,
                    role=Role.USER, balance=Decimal("10.00"),
               ),
               "lobby_kiosk": User(
                    name="Lobby kiosk", username="lobby-kiosk", password=PASSWORD_HASH,
                    role=Role.MACHINE, vending_machine_id=lobby.id,
               ),
               "gym_kiosk": User(
                    name="Gym kiosk", username="gym-kiosk", password=PASSWORD_HASH,
                    role=Role.MACHINE, vending_machine_id=gym.id,
               ),
          }
          s.add_all(users.values())
          s.flush()

          return SimpleNamespace(
               lobby=lobby.id,
               gym=gym.id,
               cola=cola.id,
               stocked=stocked.id,
               empty=empty.id,
               gym_slot=gym_slot.id,
               accounts={key: (u.id, u.username, u.role) for key, u in users.items()},
               **{key: u.id for key, u in users.items()},
          )


@pytest.fixture
def app(settings):
     return create_app(settings)


@pytest.fixture
def client(app, seeded):
     with TestClient(app) as test_client:
          yield test_client


@pytest.fixture
def headers(settings, seeded):
     """headers("alice") -> Authorization header carrying alice's token."""

     def make(account: str) -> dict:
          user_id, username, role = seeded.accounts[account]
          token = create_access_token(settings, user_id, username, role.value)
          return {"Authorization": f"Bearer {token}"}

     return make
