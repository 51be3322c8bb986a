"""Base TestCase for HTTP tests: app wired to a fresh in-memory SQLite database."""

import unittest
from typing import Any

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import get_auth_config
from app.core.database import get_db
from app.main import app
from app.models import Base
from fakes import TEST_AUTH_CONFIG


class ApiTestCase(unittest.TestCase):
    """Each test gets an empty schema and a TestClient with DB and auth config overridden."""

    def setUp(self) -> None:
        self.engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

        def override_get_db():
            db = self.SessionLocal()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_auth_config] = lambda: TEST_AUTH_CONFIG
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def register(
        self,
        username: str,
        password: str = "pw123",
        role: str = "User",
        email: str | None = None,
    ) -> Any:
        return self.client.post(
            "/auth/register",
            json={
                "username": username,
                "password": password,
                "role": role,
                "email": email or f"{username}@example.com",
            },
        )

    def login(self, username: str, password: str = "pw123") -> Any:
        return self.client.post(
            "/auth/login", json={"username": username, "password": password}
        )

    def register_and_login(self, username: str, role: str = "User") -> tuple[str, dict[str, str]]:
        """Register and log in; return (user id, Authorization headers)."""
        user_id = self.register(username, role=role).json()["id"]
        tokens = self.login(username).json()
        return user_id, {"Authorization": f"Bearer {tokens['accessToken']}"}
