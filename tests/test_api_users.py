# tests/test_api_users.py
# HTTP-слой: коды ответов, границы доступа (self / admin / internal).
import uuid

import pytest

from conftest import BR_MOBILE, BR_MOBILE_E164, INTERNAL_KEY, US_NUMBER, auth_headers, make_token
from identity_service.models.user import RoleEnum

pytestmark = pytest.mark.unit


def _register(client, national_number=BR_MOBILE, country_code="BR", password="Secr3t!", role="USER"):
    return client.post(
        "/api/v1/users/register",
        json={
            "national_number": national_number,
            "country_code": country_code,
            "first_name": "Ana",
            "last_name": "Silva",
            "password": password,
            "role": role,
        },
    )


def test_register_created(client):
    response = _register(client)

    assert response.status_code == 201
    body = response.json()
    assert body["phone"] == BR_MOBILE_E164
    assert "hashed_password" not in body
    assert "role" not in body
    assert response.headers["location"].endswith(f"/api/v1/users/{body['id']}")


def test_register_conflict(client):
    assert _register(client).status_code == 201

    response = _register(client)

    assert response.status_code == 409
    assert response.json()["code"] == "DUPLICATE_USER"


def test_register_invalid_phone(client):
    response = _register(client, national_number="123", country_code="US")

    assert response.status_code == 400
    assert response.json()["code"] == "INVALID_PHONE_NUMBER"


def test_register_validation_error(client):
    response = client.post("/api/v1/users/register", json={"national_number": BR_MOBILE})

    assert response.status_code == 422


def test_get_user_public(client):
    user_id = _register(client).json()["id"]

    response = client.get(f"/api/v1/users/{user_id}")

    assert response.status_code == 200
    assert response.json()["first_name"] == "Ana"


def test_get_user_public_not_found(client):
    response = client.get(f"/api/v1/users/{uuid.uuid4()}")

    assert response.status_code == 404
    assert response.json()["code"] == "USER_NOT_FOUND"


def test_me_requires_token(client):
    assert client.get("/api/v1/users/me").status_code == 401


def test_me_rejects_forged_token(client):
    token = make_token(uuid.uuid4(), secret="another-secret")

    response = client.get("/api/v1/users/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401


def test_me_returns_own_profile(client):
    user_id = _register(client).json()["id"]

    response = client.get("/api/v1/users/me", headers=auth_headers(user_id))

    assert response.status_code == 200
    assert response.json()["id"] == user_id


def test_update_me_partial(client):
    user_id = _register(client).json()["id"]

    response = client.put(
        "/api/v1/users/me",
        headers=auth_headers(user_id),
        json={"first_name": "", "last_name": "Souza"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["first_name"] == "Ana"
    assert body["last_name"] == "Souza"


def test_change_my_password(client):
    user_id = _register(client, password="old-pass").json()["id"]
    headers = auth_headers(user_id)

    wrong = client.post(
        "/api/v1/users/me/change-password",
        headers=headers,
        json={"old_password": "nope", "new_password": "new-pass"},
    )
    ok = client.post(
        "/api/v1/users/me/change-password",
        headers=headers,
        json={"old_password": "old-pass", "new_password": "new-pass"},
    )

    assert wrong.status_code == 400
    assert wrong.json()["code"] == "INVALID_CREDENTIALS"
    assert ok.status_code == 204


def test_admin_list_requires_admin_role(client):
    user_id = _register(client).json()["id"]

    assert client.get("/api/v1/users/admin/all").status_code == 401
    assert client.get("/api/v1/users/admin/all", headers=auth_headers(user_id)).status_code == 403


def test_admin_list_and_get(client):
    user_id = _register(client).json()["id"]
    _register(client, national_number=US_NUMBER, country_code="US")
    headers = auth_headers(uuid.uuid4(), RoleEnum.admin)

    listing = client.get("/api/v1/users/admin/all", headers=headers)
    single = client.get(f"/api/v1/users/admin/{user_id}", headers=headers)

    assert listing.status_code == 200
    assert len(listing.json()) == 2
    assert single.status_code == 200
    assert single.json()["role"] == "USER"
    assert "hashed_password" not in single.json()


def test_admin_delete(client):
    user_id = _register(client).json()["id"]
    headers = auth_headers(uuid.uuid4(), RoleEnum.admin)

    assert client.delete(f"/api/v1/users/admin/{user_id}", headers=auth_headers(user_id)).status_code == 403
    assert client.delete(f"/api/v1/users/admin/{user_id}", headers=headers).status_code == 204
    assert client.get(f"/api/v1/users/{user_id}").status_code == 404
    assert client.delete(f"/api/v1/users/admin/{user_id}", headers=headers).status_code == 404


def test_internal_lookup_with_key(client):
    user_id = _register(client).json()["id"]

    response = client.get(
        f"/api/v1/internal/users/{BR_MOBILE_E164}",
        headers={"X-Internal-Key": INTERNAL_KEY},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["id"] == user_id
    assert body["role"] == "USER"
    assert body["hashed_password"].startswith("$2")


def test_internal_lookup_tolerates_separators(client):
    user_id = _register(client).json()["id"]

    response = client.get(
        "/api/v1/internal/users/+55 11 96123-4567",
        headers={"X-Internal-Key": INTERNAL_KEY},
    )

    assert response.status_code == 200
    assert response.json()["id"] == user_id


def test_internal_lookup_rejects_bearer_tokens(client):
    _register(client)
    admin_headers = auth_headers(uuid.uuid4(), RoleEnum.admin)

    response = client.get(f"/api/v1/internal/users/{BR_MOBILE_E164}", headers=admin_headers)

    assert response.status_code == 401


def test_internal_lookup_rejects_wrong_key(client):
    _register(client)

    response = client.get(
        f"/api/v1/internal/users/{BR_MOBILE_E164}",
        headers={"X-Internal-Key": "guess"},
    )

    assert response.status_code == 403


def test_internal_lookup_not_found(client):
    response = client.get(
        "/api/v1/internal/users/+5511900000000",
        headers={"X-Internal-Key": INTERNAL_KEY},
    )

    assert response.status_code == 404


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"


def test_startup_creates_tables(client):
    with client:
        response = client.get("/")

    assert response.json()["status"] == "ok"


def test_public_register_ignores_requested_role(client):
    assert _register(client, role="ADMIN").status_code == 201

    response = client.get(
        f"/api/v1/internal/users/{BR_MOBILE_E164}",
        headers={"X-Internal-Key": INTERNAL_KEY},
    )

    assert response.json()["role"] == "USER"


def test_admin_register_requires_admin(client):
    payload = {
        "national_number": BR_MOBILE,
        "country_code": "BR",
        "first_name": "Ana",
        "last_name": "Silva",
        "password": "Secr3t!",
        "role": "ADMIN",
    }

    anonymous = client.post("/api/v1/users/admin/register", json=payload)
    as_user = client.post("/api/v1/users/admin/register", json=payload, headers=auth_headers(uuid.uuid4()))
    as_admin = client.post(
        "/api/v1/users/admin/register",
        json=payload,
        headers=auth_headers(uuid.uuid4(), RoleEnum.admin),
    )

    assert anonymous.status_code == 401
    assert as_user.status_code == 403
    assert as_admin.status_code == 201
    assert as_admin.headers["location"].endswith(f"/api/v1/users/{as_admin.json()['id']}")
    lookup = client.get(
        f"/api/v1/internal/users/{BR_MOBILE_E164}",
        headers={"X-Internal-Key": INTERNAL_KEY},
    )
    assert lookup.json()["role"] == "ADMIN"


@pytest.mark.parametrize(
    "field, value",
    [("first_name", "   "), ("last_name", ""), ("password", "   "), ("national_number", "  ")],
)
def test_register_rejects_blank_fields(client, field, value):
    payload = {
        "national_number": BR_MOBILE,
        "country_code": "BR",
        "first_name": "Ana",
        "last_name": "Silva",
        "password": "Secr3t!",
    }
    payload[field] = value

    response = client.post("/api/v1/users/register", json=payload)

    assert response.status_code == 422


def test_register_strips_names(client):
    response = client.post(
        "/api/v1/users/register",
        json={
            "national_number": BR_MOBILE,
            "country_code": "BR",
            "first_name": "  Ana  ",
            "last_name": " Silva ",
            "password": "Secr3t!",
        },
    )

    assert response.status_code == 201
    assert response.json()["first_name"] == "Ana"
    assert response.json()["last_name"] == "Silva"


def test_update_me_strips_names(client):
    user_id = _register(client).json()["id"]

    response = client.put("/api/v1/users/me", headers=auth_headers(user_id), json={"first_name": "  Bia  "})

    assert response.json()["first_name"] == "Bia"


def test_register_rejects_password_over_72_bytes(client):
    response = _register(client, password="x" * 72 + "AAAA")

    assert response.status_code == 422
    assert client.get(
        f"/api/v1/internal/users/{BR_MOBILE_E164}",
        headers={"X-Internal-Key": INTERNAL_KEY},
    ).status_code == 404


def test_change_password_rejects_old_password_over_72_bytes(client):
    user_id = _register(client, password="x" * 72).json()["id"]

    response = client.post(
        "/api/v1/users/me/change-password",
        headers=auth_headers(user_id),
        json={"old_password": "x" * 72 + "ZZZZ", "new_password": "new-pass"},
    )

    assert response.status_code == 422
