"""Tests for environment-driven settings validation."""

import os
import unittest
from unittest import mock

from pydantic import ValidationError

from smanzy.core.config import Settings

REQUIRED = {
    "DATABASE_URL": "sqlite:///./test.db",
    "JWT_SECRET": "a-sufficiently-long-secret-for-hmac-signing-in-tests-0123456789",
}


def load(**overrides) -> Settings:
    """Build settings from a clean environment holding only the given variables."""
    env = {**REQUIRED, **overrides}
    env = {k: v for k, v in env.items() if v is not None}
    with mock.patch.dict(os.environ, env, clear=True):
        return Settings(_env_file=None)


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        s = load()
        self.assertEqual(s.API_V1_PREFIX, "/api/v1")
        self.assertEqual(s.SERVER_PORT, 8080)
        self.assertEqual(s.JWT_ALGORITHM, "HS256")
        self.assertEqual(s.ACCESS_TOKEN_EXPIRE_MINUTES, 15)
        self.assertEqual(s.REFRESH_TOKEN_EXPIRE_DAYS, 7)
        self.assertEqual(s.DEFAULT_ROLES, ["user", "admin"])
        self.assertEqual(s.PASSWORD_MAX_LENGTH, 72)

    def test_database_url_and_secret_are_required(self) -> None:
        for missing in ("DATABASE_URL", "JWT_SECRET"):
            with self.subTest(missing=missing):
                with self.assertRaises(ValidationError):
                    load(**{missing: None})

    def test_secret_is_not_shown_in_repr(self) -> None:
        self.assertNotIn(REQUIRED["JWT_SECRET"], repr(load()))

    def test_rejects_unsupported_database(self) -> None:
        with self.assertRaises(ValidationError):
            load(DATABASE_URL="mysql://root@localhost/smanzy")

    def test_algorithm_is_normalized_and_restricted(self) -> None:
        self.assertEqual(load(JWT_ALGORITHM="hs512").JWT_ALGORITHM, "HS512")
        for bad in ("none", "RS256", ""):
            with self.subTest(algorithm=bad):
                with self.assertRaises(ValidationError):
                    load(JWT_ALGORITHM=bad)

    def test_range_checks(self) -> None:
        for name, value in (
            ("SERVER_PORT", "0"),
            ("ACCESS_TOKEN_EXPIRE_MINUTES", "0"),
            ("REFRESH_TOKEN_EXPIRE_DAYS", "91"),
            ("BCRYPT_ROUNDS", "3"),
            ("BCRYPT_ROUNDS", "17"),
            ("MAX_UPLOAD_BYTES", "0"),
            ("PASSWORD_MAX_LENGTH", "73"),
            ("PASSWORD_MIN_LENGTH", "73"),
        ):
            with self.subTest(name=name, value=value):
                with self.assertRaises(ValidationError):
                    load(**{name: value})

    def test_default_roles_must_include_baseline(self) -> None:
        self.assertEqual(load(DEFAULT_ROLES='["user", "admin", "editor"]').DEFAULT_ROLES, ["user", "admin", "editor"])
        with self.assertRaises(ValidationError):
            load(DEFAULT_ROLES='["user"]')


if __name__ == "__main__":
    unittest.main()
