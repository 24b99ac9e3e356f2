"""
Shared fixtures: an in-memory database per test and a TestClient bound to it.
"""
import os

# must be set before shoplist.core.config is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SEED_CATALOG"] = "false"
os.environ["ADMIN_EMAIL"] = ""

from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shoplist.db.base import Base
from shoplist.db.models import Role, User
from shoplist.db.session import enable_sqlite_foreign_keys, get_db
from shoplist.main import app


@pytest.fixture
def session_factory():
	"""Create in-memory SQLite database for testing"""
	engine = create_engine(
		"sqlite://",
		connect_args={"check_same_thread": False},
		poolclass=StaticPool,
	)
	enable_sqlite_foreign_keys(engine)
	Base.metadata.create_all(engine)
	factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
	try:
		yield factory
	finally:
		Base.metadata.drop_all(engine)
		engine.dispose()


@pytest.fixture
def db_session(session_factory) -> Generator[Session, None, None]:
	session = session_factory()
	try:
		yield session
	finally:
		session.close()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
	def override_get_db():
		db = session_factory()
		try:
			yield db
		finally:
			db.close()

	app.dependency_overrides[get_db] = override_get_db
	try:
		yield TestClient(app)
	finally:
		app.dependency_overrides.clear()


def auth(token: str) -> dict:
	return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
	"""Register a user and return ``(user, token)``."""

	def _register(username: str, email: str | None = None, password: str = "secret1", name: str | None = None):
		body = {"email": email or f"{username}@x.com", "username": username, "password": password}
		if name:
			body["name"] = name
		response = client.post("/auth/register", json=body)
		assert response.status_code == 201, response.text
		data = response.json()
		return data["user"], data["token"]

	return _register


@pytest.fixture
def make_admin(session_factory):
	def _make_admin(user_id: int) -> None:
		db = session_factory()
		try:
			user = db.query(User).filter(User.id == user_id).first()
			user.role = Role.ADMIN
			db.commit()
		finally:
			db.close()

	return _make_admin


@pytest.fixture
def admin_token(register, make_admin):
	user, token = register("root")
	make_admin(user["id"])
	return token


@pytest.fixture
def create_list(client):
	def _create_list(token: str, name: str = "Groceries") -> dict:
		response = client.post("/shopping-lists", json={"name": name}, headers=auth(token))
		assert response.status_code == 201, response.text
		return response.json()["shoppingList"]

	return _create_list
