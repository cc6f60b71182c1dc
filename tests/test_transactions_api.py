from decimal import Decimal


def _create(client, headers, seeded, slot_id=None, as_user="alice", user_id=None):
     return client.post(
          "/api/transactions",
          json={"userId": user_id or seeded.alice, "slotId": slot_id or seeded.stocked},
          headers=headers(as_user),
     )


def test_purchase_flow(client, headers, seeded):
     response = _create(client, headers, seeded)
     assert response.status_code == 201
     created = response.json()
     assert len(created["code"]) == 8
     assert created["hasConfirmed"] is False
     assert created["vendingMachineId"] == seeded.lobby
     assert created["productId"] == seeded.cola

     status = client.put("/api/transactions/confirm", json={"code": created["code"]}, headers=headers("alice"))
     assert status.json() == {"id": created["id"], "hasConfirmed": False, "vendingMachineId": seeded.lobby}

     response = client.put(
          "/api/transactions/approve",
          json={"code": created["code"], "vendingMachineId": seeded.lobby},
          headers=headers("lobby_kiosk"),
     )
     assert response.status_code == 200
     approved = response.json()
     assert approved["hasConfirmed"] is True
     assert approved["confirmedAt"] is not None
     assert approved["slot"] == {"id": seeded.stocked, "index": 0, "stock": 0}
     assert approved["product"]["id"] == seeded.cola
     assert Decimal(str(approved["product"]["price"])) == Decimal("30")

     status = client.put("/api/transactions/confirm", json={"code": created["code"]}, headers=headers("alice"))
     assert status.json()["hasConfirmed"] is True

     me = client.get("/api/auth", headers=headers("alice")).json()
     assert Decimal(str(me["balance"])) == Decimal("70")


def test_approving_twice(client, headers, seeded):
     code = _create(client, headers, seeded, slot_id=seeded.gym_slot).json()["code"]
     body = {"code": code, "vendingMachineId": seeded.gym}

     assert client.put("/api/transactions/approve", json=body, headers=headers("gym_kiosk")).status_code == 200
     response = client.put("/api/transactions/approve", json=body, headers=headers("gym_kiosk"))

     assert response.status_code == 400
     assert response.json() == {"message": "Transaction already approved"}


def test_approving_at_the_wrong_machine(client, headers, seeded):
     code = _create(client, headers, seeded).json()["code"]

     response = client.put(
          "/api/transactions/approve",
          json={"code": code, "vendingMachineId": seeded.gym},
          headers=headers("admin"),
     )

     assert response.status_code == 400
     assert response.json()["message"] == "Invalid vending machine"


def test_machine_account_bound_to_other_machine(client, headers, seeded):
     code = _create(client, headers, seeded).json()["code"]

     response = client.put(
          "/api/transactions/approve",
          json={"code": code, "vendingMachineId": seeded.lobby},
          headers=headers("gym_kiosk"),
     )

     assert response.status_code == 403


def test_users_cannot_approve_and_machines_cannot_create(client, headers, seeded):
     code = _create(client, headers, seeded).json()["code"]

     response = client.put(
          "/api/transactions/approve",
          json={"code": code, "vendingMachineId": seeded.lobby},
          headers=headers("alice"),
     )
     assert response.status_code == 403

     response = _create(client, headers, seeded, as_user="lobby_kiosk", user_id=seeded.lobby_kiosk)
     assert response.status_code == 403


def test_create_errors(client, headers, seeded):
     response = _create(client, headers, seeded, slot_id=seeded.empty)
     assert response.status_code == 400
     assert response.json()["message"] == "Slot is out of stock"

     response = _create(client, headers, seeded, as_user="bob", user_id=seeded.bob)
     assert response.status_code == 400
     assert response.json()["message"] == "Insufficient balance"

     response = _create(client, headers, seeded, slot_id=9999)
     assert response.status_code == 404

     response = _create(client, headers, seeded, user_id=seeded.bob)
     assert response.status_code == 403


def test_missing_fields(client, headers, seeded):
     response = client.post("/api/transactions", json={"userId": seeded.alice}, headers=headers("alice"))

     assert response.status_code == 400
     assert response.json()["message"] == "Missing required fields: slotId"


def test_requires_token(client, seeded):
     response = client.get("/api/transactions")

     assert response.status_code == 401
     assert response.json() == {"message": "Missing token"}


def test_lookup_by_code(client, headers, seeded):
     created = _create(client, headers, seeded).json()

     found = client.post("/api/transactions/by-code", json={"code": created["code"]}, headers=headers("lobby_kiosk"))
     assert found.status_code == 200
     assert found.json()["id"] == created["id"]

     missing = client.post("/api/transactions/by-code", json={"code": "00000000"}, headers=headers("lobby_kiosk"))
     assert missing.status_code == 200
     assert missing.json() is None

     response = client.put("/api/transactions/confirm", json={"code": "00000000"}, headers=headers("alice"))
     assert response.status_code == 404


def test_list_is_scoped_to_caller(client, headers, seeded):
     mine = _create(client, headers, seeded).json()
     client.post(
          f"/api/users/{seeded.bob}/addBalance", json={"amount": "100"}, headers=headers("admin")
     )
     _create(client, headers, seeded, as_user="bob", user_id=seeded.bob)

     alice_view = client.get("/api/transactions", headers=headers("alice")).json()
     admin_view = client.get("/api/transactions", headers=headers("admin")).json()

     assert [t["id"] for t in alice_view] == [mine["id"]]
     assert len(admin_view) == 2


def test_cancel(client, headers, seeded):
     created = _create(client, headers, seeded).json()

     response = client.delete(f"/api/transactions/cancel/{created['id']}", headers=headers("bob"))
     assert response.status_code == 403

     response = client.delete(f"/api/transactions/cancel/{created['id']}", headers=headers("alice"))
     assert response.status_code == 200
     assert response.json()["code"] == created["code"]

     response = client.delete(f"/api/transactions/cancel/{created['id']}", headers=headers("alice"))
     assert response.status_code == 404


def test_cancel_after_approval(client, headers, seeded):
     created = _create(client, headers, seeded).json()
     client.put(
          "/api/transactions/approve",
          json={"code": created["code"], "vendingMachineId": seeded.lobby},
          headers=headers("lobby_kiosk"),
     )

     response = client.delete(f"/api/transactions/cancel/{created['id']}", headers=headers("alice"))

     assert response.status_code == 400
     assert response.json()["message"] == "Transaction already approved"


def test_purge_expired_is_admin_only(client, headers, seeded):
     assert client.delete("/api/transactions/expired", headers=headers("alice")).status_code == 403

     response = client.delete("/api/transactions/expired", headers=headers("admin"))
     assert response.status_code == 200
     assert response.json() == {"deleted": 0}
