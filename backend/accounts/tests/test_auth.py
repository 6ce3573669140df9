import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

User = get_user_model()


@pytest.fixture
def client():
    return APIClient()


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="rina@example.com",
        email="rina@example.com",
        password="examplepass",
        full_name="Rina Putri",
    )


def test_register_creates_customer_and_returns_tokens(db, client):
    payload = {
        "email": "New@Example.com",
        "password": "password123",
        "full_name": "New Player",
        "phone": "0812345678",
    }
    response = client.post("/api/auth/register/", payload, format="json")

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["email"] == "new@example.com"
    assert body["user"]["role"] == User.CUSTOMER
    assert "access" in body and "refresh" in body
    assert User.objects.filter(email="new@example.com", role=User.CUSTOMER).exists()


def test_register_ignores_requested_role(db, client):
    payload = {
        "email": "sneaky@example.com",
        "password": "password123",
        "full_name": "Sneaky",
        "role": "super_admin",
    }
    response = client.post("/api/auth/register/", payload, format="json")

    assert response.status_code == 201
    assert User.objects.get(email="sneaky@example.com").role == User.CUSTOMER


def test_register_with_existing_email_is_rejected(db, client, user):
    payload = {
        "email": "RINA@example.com",
        "password": "password123",
        "full_name": "Copy Cat",
    }
    response = client.post("/api/auth/register/", payload, format="json")

    assert response.status_code == 400
    assert "email" in response.json()


def test_login_returns_tokens_with_role_claim(db, client, user):
    response = client.post(
        "/api/auth/login/",
        {"email": "rina@example.com", "password": "examplepass"},
        format="json",
    )

    assert response.status_code == 200
    data = response.json()
    assert set(data.keys()) == {"access", "refresh", "user"}
    assert data["user"]["email"] == "rina@example.com"
    assert AccessToken(data["access"])["role"] == User.CUSTOMER


def test_login_with_wrong_password_fails(db, client, user):
    response = client.post(
        "/api/auth/login/",
        {"email": "rina@example.com", "password": "nope-nope"},
        format="json",
    )

    assert response.status_code == 401


def test_refresh_issues_new_access_token(db, client, user):
    login_response = client.post(
        "/api/auth/login/",
        {"email": "rina@example.com", "password": "examplepass"},
        format="json",
    )

    refresh_token = login_response.json()["refresh"]
    refresh_response = client.post(
        "/api/auth/refresh/", {"refresh": refresh_token}, format="json"
    )

    assert refresh_response.status_code == 200
    assert "access" in refresh_response.json()


def test_me_endpoint_returns_authenticated_user(db, client, user):
    login_response = client.post(
        "/api/auth/login/",
        {"email": "rina@example.com", "password": "examplepass"},
        format="json",
    )
    access = login_response.json()["access"]

    client.credentials(HTTP_AUTHORIZATION=f"Bearer {access}")
    response = client.get("/api/auth/me/")

    assert response.status_code == 200
    assert response.json()["email"] == "rina@example.com"


def test_me_endpoint_requires_authentication(db, client):
    response = client.get("/api/auth/me/")
    assert response.status_code == 401


def test_me_patch_only_touches_supplied_fields(db, client, user):
    user.phone = "0811111111"
    user.address = "Jl. Merdeka 5"
    user.save()
    client.force_authenticate(user=user)

    response = client.patch("/api/auth/me/", {"full_name": "Rina P."}, format="json")

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.full_name == "Rina P."
    assert user.phone == "0811111111"
    assert user.address == "Jl. Merdeka 5"


def test_me_patch_empty_value_clears_field(db, client, user):
    user.phone = "0811111111"
    user.save()
    client.force_authenticate(user=user)

    response = client.patch("/api/auth/me/", {"phone": ""}, format="json")

    assert response.status_code == 200
    user.refresh_from_db()
    assert user.phone == ""


def test_me_patch_cannot_change_role(db, client, user):
    client.force_authenticate(user=user)

    client.patch("/api/auth/me/", {"role": "admin"}, format="json")

    user.refresh_from_db()
    assert user.role == User.CUSTOMER


def test_change_password_requires_correct_current_password(db, client, user):
    client.force_authenticate(user=user)
    response = client.post(
        "/api/auth/change-password/",
        {
            "current_password": "wrongpass",
            "new_password": "newsecurepass",
        },
        format="json",
    )

    assert response.status_code == 400
    assert "current_password" in response.json()


def test_change_password_updates_password(db, client, user):
    client.force_authenticate(user=user)
    response = client.post(
        "/api/auth/change-password/",
        {
            "current_password": "examplepass",
            "new_password": "newsecurepass",
        },
        format="json",
    )

    assert response.status_code == 204
    user.refresh_from_db()
    assert user.check_password("newsecurepass")
