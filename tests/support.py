"""Shared fixtures: in-memory SQLite database and a TestClient wired to it."""

import shutil
import tempfile
import unittest

from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smanzy.core.database import build_engine, get_db
from smanzy.main import app
from smanzy.models import Base, User
from smanzy.services import identity
from smanzy.services.storage import LocalStorage, get_storage

API = "/api/v1"
PASSWORD = "Secure123"


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory database per test, with the baseline roles seeded."""

    def setUp(self) -> None:
        self.engine = build_engine("sqlite://", poolclass=StaticPool)
        Base.metadata.create_all(self.engine)
        self.SessionTesting = sessionmaker(bind=self.engine, autocommit=False, autoflush=False)
        self.db = self.SessionTesting()
        identity.ensure_roles(self.db, ["user", "admin"])

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(self.engine)
        self.engine.dispose()

    def make_user(
        self,
        email: str = "alice@example.com",
        name: str = "Alice",
        password: str = PASSWORD,
        admin: bool = False,
    ) -> User:
        user = identity.create_identity(self.db, email=email, password=password, name=name)
        if admin:
            user = identity.assign_role(self.db, user, identity.ADMIN_ROLE)
        return user

    def reload(self, model: type, pk: int):
        """Re-read a row from the database, bypassing the session cache."""
        self.db.expire_all()
        return self.db.get(model, pk)


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient using the same database and a temp upload dir."""

    def setUp(self) -> None:
        super().setUp()
        self.upload_dir = tempfile.mkdtemp(prefix="smanzy-test-")
        self.storage = LocalStorage(self.upload_dir, max_bytes=1024 * 1024)

        def override_get_db():
            db = self.SessionTesting()
            try:
                yield db
            finally:
                db.close()

        app.dependency_overrides[get_db] = override_get_db
        app.dependency_overrides[get_storage] = lambda: self.storage
        self.client = TestClient(app)

    def tearDown(self) -> None:
        app.dependency_overrides.clear()
        shutil.rmtree(self.upload_dir, ignore_errors=True)
        super().tearDown()

    def register(self, email: str = "alice@example.com", name: str = "Alice", password: str = PASSWORD) -> dict:
        response = self.client.post(
            f"{API}/auth/register",
            json={"email": email, "password": password, "name": name},
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()

    def login(self, email: str = "alice@example.com", password: str = PASSWORD) -> dict:
        response = self.client.post(f"{API}/auth/login", json={"email": email, "password": password})
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def login_as(self, user: User, password: str = PASSWORD) -> dict[str, str]:
        """Authorization header for an existing user."""
        tokens = self.login(user.email, password)
        return bearer(tokens["access_token"])


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
