"""
API tests for accounts, login and the service catalogue.
"""

from conftest import ADMIN_EMAIL, PASSWORD, login, signup


class TestAccounts:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}

    def test_signup_and_me(self, client):
        user = signup(client, "Ana", "Ana@Example.com")
        assert user["email"] == "ana@example.com"
        assert user["role"] == "user"

        me = client.get("/me", headers=login(client, "ana@example.com"))
        assert me.status_code == 200
        assert me.json()["id"] == user["id"]

    def test_duplicate_email(self, client):
        signup(client, "Ana", "ana@example.com")
        res = client.post(
            "/users",
            json={"name": "Other", "email": "ANA@example.com", "password": PASSWORD},
        )
        assert res.status_code == 409

    def test_cannot_sign_up_as_admin(self, client):
        res = client.post(
            "/users",
            json={"name": "X", "email": "x@example.com", "password": PASSWORD, "role": "admin"},
        )
        assert res.status_code == 422

    def test_bootstrap_admin(self, client):
        user = signup(client, "Owner", ADMIN_EMAIL)
        assert user["role"] == "admin"

    def test_bad_password(self, client):
        signup(client, "Ana", "ana@example.com")
        res = client.post("/auth/login", data={"username": "ana@example.com", "password": "wrong-pass"})
        assert res.status_code == 401

    def test_me_requires_token(self, client):
        assert client.get("/me").status_code == 401
        bad = client.get("/me", headers={"Authorization": "Bearer not-a-token"})
        assert bad.status_code == 401


class TestServices:
    def test_default_catalogue(self, client):
        services = client.get("/services").json()
        names = {s["name"] for s in services}
        assert {"haircut", "beard_trim", "cut_and_beard"} <= names

    def test_admin_creates_service(self, client, admin):
        res = client.post(
            "/services",
            json={"name": "kids_cut", "duration": 20, "price": 30},
            headers=admin["headers"],
        )
        assert res.status_code == 201
        created = res.json()
        assert created["duration"] == 20

        fetched = client.get(f"/services/{created['id']}")
        assert fetched.json()["name"] == "kids_cut"

    def test_duplicate_name(self, client, admin):
        res = client.post(
            "/services",
            json={"name": "haircut", "duration": 30},
            headers=admin["headers"],
        )
        assert res.status_code == 409

    def test_customer_cannot_manage_services(self, client, customer):
        res = client.post(
            "/services",
            json={"name": "kids_cut", "duration": 20},
            headers=customer["headers"],
        )
        assert res.status_code == 403

    def test_invalid_duration(self, client, admin):
        res = client.post(
            "/services",
            json={"name": "instant", "duration": 0},
            headers=admin["headers"],
        )
        assert res.status_code == 422

    def test_update_and_delete(self, client, admin):
        created = client.post(
            "/services",
            json={"name": "shave", "duration": 30, "price": 20},
            headers=admin["headers"],
        ).json()

        updated = client.patch(
            f"/services/{created['id']}",
            json={"price": 35},
            headers=admin["headers"],
        )
        assert updated.status_code == 200
        assert updated.json()["price"] == 35
        assert updated.json()["name"] == "shave"

        deleted = client.delete(f"/services/{created['id']}", headers=admin["headers"])
        assert deleted.status_code == 204
        assert client.get(f"/services/{created['id']}").status_code == 404

    def test_unknown_service(self, client):
        assert client.get("/services/9999").status_code == 404
