import routers.auth
from conftest import PASSWORD, PASSWORD_HASH
from models import User


def _sign_up(client, username="carol", role=None, headers=None):
     body = {"name": "Carol", "username": username, "password": "hunter22"}
     if role is not None:
          body["role"] = role
     return client.post("/api/signUp", json=body, headers=headers or {})


def test_sign_up_returns_usable_token(client):
     response = _sign_up(client)

     assert response.status_code == 201
     user = response.json()["user"]
     assert user["username"] == "carol"
     assert user["role"] == "user"

     me = client.get("/api/auth", headers={"Authorization": f"Bearer {user['token']}"})
     assert me.status_code == 200
     assert me.json()["id"] == user["id"]
     assert float(me.json()["balance"]) == 0


def test_duplicate_username(client):
     _sign_up(client)
     response = _sign_up(client)

     assert response.status_code == 400
     assert response.json() == {"message": "Username already exists"}


def test_username_taken_after_the_check(client, monkeypatch):
     database = client.app.state.db

     def hash_after_rival_signup(password):
          with database.session() as session:
               session.add(User(name="Rival", username="carol", password=PASSWORD_HASH))
          return PASSWORD_HASH

     monkeypatch.setattr(routers.auth, "hash_password", hash_after_rival_signup)

     response = _sign_up(client)

     assert response.status_code == 400
     assert response.json() == {"message": "Username already exists"}


def test_privileged_roles_need_an_admin(client, headers):
     assert _sign_up(client, role="admin").status_code == 403
     assert _sign_up(client, role="machine", headers=headers("alice")).status_code == 403

     response = _sign_up(client, role="machine", headers=headers("admin"))
     assert response.status_code == 201
     assert response.json()["user"]["role"] == "machine"


def test_unknown_role(client):
     response = _sign_up(client, role="superuser")

     assert response.status_code == 400
     assert response.json()["message"] == "Invalid role: superuser"


def test_missing_fields(client):
     response = client.post("/api/signUp", json={"username": "dave"})

     assert response.status_code == 400
     assert response.json()["message"].startswith("Missing required fields:")


def test_login(client, seeded):
     response = client.post("/api/login", json={"username": "alice", "password": PASSWORD})

     assert response.status_code == 200
     user = response.json()["user"]
     assert user["id"] == seeded.alice
     assert user["role"] == "user"
     assert user["token"]


def test_login_rejects_bad_credentials(client):
     wrong_password = client.post("/api/login", json={"username": "alice", "password": "nope"})
     unknown_user = client.post("/api/login", json={"username": "nobody", "password": PASSWORD})

     assert wrong_password.status_code == 401
     assert unknown_user.status_code == 401
     assert wrong_password.json() == {"message": "Invalid username or password"}


def test_token_checks(client, settings):
     assert client.get("/api/auth").json() == {"message": "Missing token"}

     response = client.get("/api/auth", headers={"Authorization": "Bearer not-a-jwt"})
     assert response.status_code == 401
     assert response.json() == {"message": "Invalid token"}


def test_token_for_deleted_account(client, headers, seeded):
     stale = headers("bob")
     client.delete(f"/api/users/{seeded.bob}", headers=headers("admin"))

     assert client.get("/api/auth", headers=stale).status_code == 401
