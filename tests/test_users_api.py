from decimal import Decimal


def test_admin_only(client, headers):
     assert client.get("/api/users", headers=headers("alice")).status_code == 403
     assert client.get("/api/users", headers=headers("lobby_kiosk")).status_code == 403

     response = client.get("/api/users", headers=headers("admin"))
     assert response.status_code == 200
     assert {u["username"] for u in response.json()} == {"admin", "alice", "bob", "lobby-kiosk", "gym-kiosk"}
     assert "password" not in response.json()[0]


def test_get_user(client, headers, seeded):
     response = client.get(f"/api/users/{seeded.lobby_kiosk}", headers=headers("admin"))

     assert response.json()["role"] == "machine"
     assert response.json()["vendingMachineId"] == seeded.lobby
     assert client.get("/api/users/9999", headers=headers("admin")).status_code == 404


def test_add_and_reset_balance(client, headers, seeded):
     url = f"/api/users/{seeded.bob}"

     response = client.post(f"{url}/addBalance", json={"amount": "15.50"}, headers=headers("admin"))
     assert response.status_code == 200
     assert Decimal(str(response.json()["balance"])) == Decimal("25.50")

     assert client.post(f"{url}/addBalance", json={"amount": "-5"}, headers=headers("admin")).status_code == 400

     response = client.post(f"{url}/resetBalance", headers=headers("admin"))
     assert Decimal(str(response.json()["balance"])) == Decimal("0")


def test_admin_cannot_be_deleted(client, headers, seeded):
     response = client.delete(f"/api/users/{seeded.admin}", headers=headers("admin"))

     assert response.status_code == 403
     assert response.json() == {"message": "Admin cannot be deleted"}


def test_deleting_a_user_removes_their_transactions(client, headers, seeded):
     client.post(
          "/api/transactions",
          json={"userId": seeded.alice, "slotId": seeded.stocked},
          headers=headers("alice"),
     )

     response = client.delete(f"/api/users/{seeded.alice}", headers=headers("admin"))

     assert response.status_code == 200
     assert response.json()["username"] == "alice"
     assert client.get("/api/transactions", headers=headers("admin")).json() == []


def test_bind_machine_account(client, headers, seeded):
     url = f"/api/users/{seeded.lobby_kiosk}/machine"

     response = client.put(url, json={"vendingMachineId": seeded.gym}, headers=headers("admin"))
     assert response.status_code == 200
     assert response.json()["vendingMachineId"] == seeded.gym

     response = client.put(url, json={"vendingMachineId": 9999}, headers=headers("admin"))
     assert response.status_code == 404

     response = client.put(
          f"/api/users/{seeded.alice}/machine", json={"vendingMachineId": seeded.gym}, headers=headers("admin")
     )
     assert response.status_code == 400


def test_query_users(client, headers):
     body = {
          "query": {
               "filter": [{"field": "username", "value": "kiosk", "option": "contains"}],
               "sort": {"field": "username", "order": "asc"},
          }
     }

     response = client.post("/api/users/query", json=body, headers=headers("admin"))

     assert response.status_code == 200
     assert response.json()["count"] == 2
     assert [u["username"] for u in response.json()["items"]] == ["gym-kiosk", "lobby-kiosk"]


def test_query_users_default_page(client, headers, seeded):
     for i in range(3):
          client.post("/api/signUp", json={"name": f"U{i}", "username": f"extra{i}", "password": "pw"})

     response = client.post("/api/users/query", json={"query": {}}, headers=headers("admin"))

     assert response.json()["count"] == 8
     assert len(response.json()["items"]) == 5
