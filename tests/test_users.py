"""User administration API tests."""


def test_list_users(client, admin_headers, auth_headers):
    response = client.get("/api/v1/users", headers=admin_headers)
    assert response.status_code == 200
    emails = {u["email"] for u in response.json()}
    assert emails == {"admin@example.com", auth_headers.email}
    assert all("password_hash" not in u for u in response.json())


def test_non_admin_forbidden(client, publisher_headers):
    response = client.get("/api/v1/users", headers=publisher_headers)
    assert response.status_code == 403
    assert response.json()["error"] == "User role publisher is not authorized to access this route"


def test_get_user(client, admin_headers, auth_headers):
    response = client.get(f"/api/v1/users/{auth_headers.user_id}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["email"] == auth_headers.email


def test_get_user_not_found(client, admin_headers):
    response = client.get("/api/v1/users/9999", headers=admin_headers)
    assert response.status_code == 404


def test_create_user(client, admin_headers):
    response = client.post(
        "/api/v1/users",
        headers=admin_headers,
        json={
            "name": "Second Admin",
            "email": "admin2@example.com",
            "password": "password123",
            "role": "admin",
        },
    )
    assert response.status_code == 201
    assert response.json()["role"] == "admin"

    login = client.post(
        "/api/v1/auth/login", json={"email": "admin2@example.com", "password": "password123"}
    )
    assert login.status_code == 200


def test_create_user_duplicate_email(client, admin_headers, auth_headers):
    response = client.post(
        "/api/v1/users",
        headers=admin_headers,
        json={"name": "Dup", "email": auth_headers.email, "password": "password123"},
    )
    assert response.status_code == 400


def test_update_user_role(client, admin_headers, auth_headers):
    response = client.put(
        f"/api/v1/users/{auth_headers.user_id}",
        headers=admin_headers,
        json={"role": "publisher"},
    )
    assert response.status_code == 200
    assert response.json()["role"] == "publisher"

    me = client.get("/api/v1/auth/me", headers=auth_headers)
    assert me.json()["role"] == "publisher"


def test_update_user_password_is_hashed(client, admin_headers, auth_headers):
    response = client.put(
        f"/api/v1/users/{auth_headers.user_id}",
        headers=admin_headers,
        json={"password": "resetbyadmin"},
    )
    assert response.status_code == 200

    login = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "resetbyadmin"}
    )
    assert login.status_code == 200


def test_delete_user(client, admin_headers, auth_headers):
    response = client.delete(f"/api/v1/users/{auth_headers.user_id}", headers=admin_headers)
    assert response.status_code == 204
    lookup = client.get(f"/api/v1/users/{auth_headers.user_id}", headers=admin_headers)
    assert lookup.status_code == 404
    # The deleted user's token no longer authenticates
    assert client.get("/api/v1/auth/me", headers=auth_headers).status_code == 401


def test_admin_password_over_72_bytes_rejected(client, admin_headers, auth_headers):
    response = client.put(
        f"/api/v1/users/{auth_headers.user_id}",
        headers=admin_headers,
        json={"password": "b" * 73},
    )
    assert response.status_code == 400
