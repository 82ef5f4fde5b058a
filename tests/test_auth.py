import pytest

from tests.conftest import make_admin, auth_headers, PASSWORD

test_user_data = {
    "email": "test@example.com",
    "password": PASSWORD,
    "first_name": "Test",
    "last_name": "User",
    "phone_number": "555-0100"
}

test_login_data = {
    "email": "test@example.com",
    "password": PASSWORD
}

class TestAuthentication:

    def test_register_patient(self, client):
        """Registration creates a patient profile."""
        response = client.post("/api/v1/auth/register", json=test_user_data)
        assert response.status_code == 201

        data = response.json()
        assert data["email"] == test_user_data["email"]
        assert data["full_name"] == "Test User"
        assert "password" not in data

    def test_register_duplicate_email(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/register", json=test_user_data)
        assert response.status_code == 400
        assert "already registered" in response.json()["detail"]

    @pytest.mark.parametrize("password", ["weak", "onlyletters", "1234567890"])
    def test_register_invalid_password(self, client, password):
        invalid_data = {**test_user_data, "password": password}

        response = client.post("/api/v1/auth/register", json=invalid_data)
        assert response.status_code == 422

    def test_login_success(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post("/api/v1/auth/login", json=test_login_data)
        assert response.status_code == 200

        data = response.json()
        assert "access_token" in data
        assert "refresh_token" in data
        assert data["token_type"] == "bearer"
        assert data["user"]["role"] == "patient"

    def test_login_unknown_email(self, client):
        response = client.post(
            "/api/v1/auth/login",
            json={"email": "nobody@example.com", "password": "wrongpassword1"}
        )
        assert response.status_code == 401

    def test_login_wrong_password(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)

        response = client.post(
            "/api/v1/auth/login",
            json={**test_login_data, "password": "WrongPassword1"}
        )
        assert response.status_code == 401

    def test_get_current_user(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)
        headers = auth_headers(client, test_user_data["email"])

        response = client.get("/api/v1/auth/me", headers=headers)
        assert response.status_code == 200
        assert response.json()["email"] == test_user_data["email"]

    def test_get_current_user_invalid_token(self, client):
        response = client.get("/api/v1/auth/me", headers={"Authorization": "Bearer invalid_token"})
        assert response.status_code == 401

    def test_refresh_token_cannot_authenticate_requests(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)
        login_response = client.post("/api/v1/auth/login", json=test_login_data)
        refresh_token = login_response.json()["refresh_token"]

        response = client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {refresh_token}"})
        assert response.status_code == 401

    def test_refresh_token(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)
        login_response = client.post("/api/v1/auth/login", json=test_login_data)

        response = client.post(
            "/api/v1/auth/refresh",
            json={"refresh_token": login_response.json()["refresh_token"]}
        )
        assert response.status_code == 200
        assert "access_token" in response.json()

    def test_refresh_invalid_token(self, client):
        response = client.post("/api/v1/auth/refresh", json={"refresh_token": "invalid_token"})
        assert response.status_code == 401

    def test_logout_revokes_refresh_token(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)
        login_response = client.post("/api/v1/auth/login", json=test_login_data)
        refresh_token = login_response.json()["refresh_token"]

        response = client.post("/api/v1/auth/logout", json={"refresh_token": refresh_token})
        assert response.status_code == 200

        response = client.post("/api/v1/auth/refresh", json={"refresh_token": refresh_token})
        assert response.status_code == 401

    def test_patient_cannot_reach_admin_routes(self, client):
        client.post("/api/v1/auth/register", json=test_user_data)
        headers = auth_headers(client, test_user_data["email"])

        response = client.get("/api/v1/admin/doctors", headers=headers)
        assert response.status_code == 403

    def test_admin_cannot_book_as_patient(self, client, db_session):
        make_admin(db_session)
        headers = auth_headers(client, "admin@example.com")

        response = client.get("/api/v1/patient/appointments", headers=headers)
        assert response.status_code == 403

    def test_login_is_rate_limited(self, client):
        for _ in range(10):
            client.post("/api/v1/auth/login", json=test_login_data)

        response = client.post("/api/v1/auth/login", json=test_login_data)
        assert response.status_code == 429
