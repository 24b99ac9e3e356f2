from datetime import timedelta

from jose import jwt

from shoplist.core import security
from shoplist.core.config import settings

from conftest import auth


def test_register_returns_user_and_token(client):
	response = client.post(
		"/auth/register",
		json={"email": "Alice@X.com", "username": "alice", "password": "secret1"},
	)
	assert response.status_code == 201
	data = response.json()
	assert data["user"]["email"] == "alice@x.com"
	assert data["user"]["username"] == "alice"
	assert data["user"]["name"] == "alice"
	assert data["user"]["role"] == "user"
	assert "passwordHash" not in data["user"]
	assert security.verify_token(data["token"]) == data["user"]["id"]


def test_register_requires_all_fields(client):
	response = client.post("/auth/register", json={"email": "a@x.com", "password": "secret1"})
	assert response.status_code == 400
	assert response.json() == {"error": "Email, username and password are required"}


def test_register_rejects_short_password(client):
	response = client.post("/auth/register", json={"email": "a@x.com", "username": "a", "password": "123"})
	assert response.status_code == 400
	assert "at least 6" in response.json()["error"]


def test_register_rejects_malformed_email(client):
	response = client.post("/auth/register", json={"email": "not-an-email", "username": "a", "password": "secret1"})
	assert response.status_code == 400
	assert "email" in response.json()["error"]


def test_duplicate_email_conflict_cites_email(client, register):
	register("alice")
	response = client.post(
		"/auth/register",
		json={"email": "alice@x.com", "username": "someone-else", "password": "secret1"},
	)
	assert response.status_code == 409
	assert "email" in response.json()["error"]
	assert "username" not in response.json()["error"]


def test_duplicate_username_conflict(client, register):
	register("alice")
	response = client.post(
		"/auth/register",
		json={"email": "other@x.com", "username": "alice", "password": "secret1"},
	)
	assert response.status_code == 409
	assert "username" in response.json()["error"]


def test_login_success(client, register):
	user, _ = register("alice")
	response = client.post("/auth/login", json={"email": "ALICE@x.com", "password": "secret1"})
	assert response.status_code == 200
	assert response.json()["user"]["id"] == user["id"]
	assert response.json()["token"]


def test_wrong_password_and_unknown_email_look_identical(client, register):
	register("alice")
	wrong_password = client.post("/auth/login", json={"email": "alice@x.com", "password": "nope123"})
	unknown_email = client.post("/auth/login", json={"email": "ghost@x.com", "password": "secret1"})
	assert wrong_password.status_code == unknown_email.status_code == 401
	assert wrong_password.json() == unknown_email.json() == {"error": "Invalid email or password"}


def test_login_requires_fields(client):
	response = client.post("/auth/login", json={"email": "alice@x.com"})
	assert response.status_code == 400


def test_me_requires_token(client):
	response = client.get("/auth/me")
	assert response.status_code == 401
	assert response.json() == {"error": "Not authenticated"}


def test_me_rejects_garbage_token(client):
	response = client.get("/auth/me", headers=auth("not-a-jwt"))
	assert response.status_code == 401
	assert response.json() == {"error": "Not authenticated"}


def test_token_for_deleted_user_is_rejected(client):
	token = security.create_access_token(999)
	response = client.get("/auth/me", headers=auth(token))
	assert response.status_code == 401


def test_me_returns_current_user(client, register):
	user, token = register("alice")
	response = client.get("/auth/me", headers=auth(token))
	assert response.status_code == 200
	assert response.json()["user"]["id"] == user["id"]


def test_logout(client):
	response = client.post("/auth/logout")
	assert response.status_code == 200
	assert "message" in response.json()


def test_change_password(client, register):
	user, token = register("alice")
	response = client.patch(
		f"/users/{user['id']}/password",
		json={"currentPassword": "wrong1", "newPassword": "newsecret"},
		headers=auth(token),
	)
	assert response.status_code == 401
	assert response.json()["error"] == "Current password is incorrect"

	response = client.patch(
		f"/users/{user['id']}/password",
		json={"currentPassword": "secret1", "newPassword": "newsecret"},
		headers=auth(token),
	)
	assert response.status_code == 200
	assert client.post("/auth/login", json={"email": "alice@x.com", "password": "newsecret"}).status_code == 200
	assert client.post("/auth/login", json={"email": "alice@x.com", "password": "secret1"}).status_code == 401


def test_password_longer_than_72_bytes_verifies():
	long_password = "p" * 100
	hashed = security.hash_password(long_password)
	assert security.verify_password(long_password, hashed)
	assert not security.verify_password("other", hashed)


def test_request_id_is_echoed(client):
	response = client.get("/health", headers={"X-Request-Id": "abc-123"})
	assert response.status_code == 200
	assert response.headers["X-Request-Id"] == "abc-123"


def test_expired_token_is_rejected(client, register):
	user, _ = register("alice")
	token = security.create_access_token(user["id"], expires_delta=timedelta(seconds=-1))
	assert security.verify_token(token) is None
	response = client.get("/auth/me", headers=auth(token))
	assert response.status_code == 401
	assert response.json() == {"error": "Not authenticated"}


def test_token_of_another_type_is_rejected(client, register):
	user, _ = register("alice")
	token = jwt.encode(
		{"sub": str(user["id"]), "type": "refresh"},
		settings.JWT_SECRET,
		algorithm=settings.JWT_ALG,
	)
	assert security.verify_token(token) is None
	assert client.get("/auth/me", headers=auth(token)).status_code == 401


def test_token_signed_with_another_secret_is_rejected(register):
	user, _ = register("alice")
	token = jwt.encode({"sub": str(user["id"]), "type": "access"}, "not-the-secret", algorithm=settings.JWT_ALG)
	assert security.verify_token(token) is None
