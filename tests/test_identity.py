"""Tests for smanzy.services.identity against an in-memory database."""

import unittest
from unittest.mock import patch

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from smanzy.core.errors import DuplicateEmailError, InvalidInputError
from smanzy.core.security import verify_password
from smanzy.models import Album, Media, Role, User, user_roles
from smanzy.services import identity

from support import DatabaseTestCase


def _association_count(db, user_id: int) -> int:
    return db.execute(
        select(func.count()).select_from(user_roles).where(user_roles.c.user_id == user_id)
    ).scalar_one()


class TestEnsureRoles(DatabaseTestCase):
    """ensure_roles is first-or-create and safe to repeat."""

    def test_idempotent(self) -> None:
        identity.ensure_roles(self.db, ["user", "admin"])
        identity.ensure_roles(self.db, ["user", "admin", "editor"])
        names = sorted(r.name for r in self.db.query(Role).all())
        self.assertEqual(names, ["admin", "editor", "user"])


class TestCreateIdentity(DatabaseTestCase):
    """create_identity normalizes, hashes, assigns the default role and enforces uniqueness."""

    def test_creates_user_with_default_role(self) -> None:
        user = identity.create_identity(self.db, "  Alice@Example.COM ", "Secure123", "Alice", phone="555")
        self.assertEqual(user.email, "alice@example.com")
        self.assertEqual(user.role_names, ["user"])
        self.assertEqual(user.phone, "555")
        self.assertNotEqual(user.password_hash, "Secure123")
        self.assertTrue(verify_password("Secure123", user.password_hash))

    def test_duplicate_email_any_case(self) -> None:
        self.make_user("alice@example.com")
        with self.assertRaises(DuplicateEmailError):
            identity.create_identity(self.db, "ALICE@example.com", "Secure123", "Other")

    def test_email_reusable_after_soft_delete(self) -> None:
        first = self.make_user("alice@example.com")
        identity.soft_delete_identity(self.db, first)
        second = self.make_user("alice@example.com", name="Alice 2")
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(identity.find_by_email(self.db, "alice@example.com").id, second.id)

    def test_failed_commit_leaves_no_user_or_association(self) -> None:
        error = IntegrityError("INSERT", {}, Exception("unique violation"))
        with patch.object(self.db, "commit", side_effect=error):
            with self.assertRaises(DuplicateEmailError):
                identity.create_identity(self.db, "bob@example.com", "Secure123", "Bob")
        self.assertEqual(self.db.query(User).count(), 0)
        self.assertEqual(self.db.execute(select(func.count()).select_from(user_roles)).scalar_one(), 0)


class TestLookups(DatabaseTestCase):
    """Read paths hide tombstoned users unless include_deleted is set."""

    def test_find_by_email_is_case_insensitive(self) -> None:
        user = self.make_user("alice@example.com")
        self.assertEqual(identity.find_by_email(self.db, "ALICE@EXAMPLE.COM").id, user.id)

    def test_soft_deleted_hidden_by_default(self) -> None:
        user = self.make_user()
        identity.soft_delete_identity(self.db, user)
        self.assertIsNone(identity.find_by_id(self.db, user.id))
        self.assertIsNone(identity.find_by_email(self.db, "alice@example.com"))
        self.assertEqual(identity.list_users(self.db), [])
        self.assertEqual(identity.find_by_id(self.db, user.id, include_deleted=True).id, user.id)
        self.assertIsNotNone(identity.find_by_email(self.db, "alice@example.com", include_deleted=True))


class TestRoles(DatabaseTestCase):
    """assign_role/remove_role are idempotent; has_role is an exact match."""

    def test_assign_twice_leaves_one_association(self) -> None:
        user = self.make_user()
        identity.assign_role(self.db, user, "admin")
        identity.assign_role(self.db, user, "admin")
        self.assertEqual(_association_count(self.db, user.id), 2)
        self.assertEqual(user.role_names, ["admin", "user"])

    def test_remove_unassigned_role_is_noop(self) -> None:
        user = self.make_user()
        identity.remove_role(self.db, user, "admin")
        identity.remove_role(self.db, user, "does-not-exist")
        self.assertEqual(user.role_names, ["user"])
        self.assertEqual(_association_count(self.db, user.id), 1)

    def test_remove_assigned_role(self) -> None:
        user = self.make_user(admin=True)
        identity.remove_role(self.db, user, "admin")
        self.assertEqual(self.reload(User, user.id).role_names, ["user"])

    def test_unknown_role_is_created(self) -> None:
        user = self.make_user()
        identity.assign_role(self.db, user, "editor")
        self.assertIsNotNone(self.db.query(Role).filter(Role.name == "editor").first())
        self.assertTrue(identity.has_role(user, "editor"))

    def test_blank_role_name_rejected(self) -> None:
        user = self.make_user()
        for name in ("", "   "):
            with self.subTest(name=name):
                with self.assertRaises(InvalidInputError):
                    identity.assign_role(self.db, user, name)
                with self.assertRaises(InvalidInputError):
                    identity.remove_role(self.db, user, name)
        self.assertEqual(self.db.query(Role).filter(Role.name == "").count(), 0)
        self.assertEqual(user.role_names, ["user"])

    def test_role_name_is_stripped(self) -> None:
        user = self.make_user()
        identity.assign_role(self.db, user, "  editor ")
        self.assertEqual(user.role_names, ["editor", "user"])

    def test_has_role_is_case_sensitive(self) -> None:
        user = self.make_user(admin=True)
        self.assertTrue(identity.has_role(user, "admin"))
        self.assertFalse(identity.has_role(user, "Admin"))
        self.assertFalse(identity.has_role(user, "adm"))


class TestUpdateIdentity(DatabaseTestCase):
    """update_identity re-validates email, re-hashes passwords and clears profile fields."""

    def test_email_change_checks_uniqueness(self) -> None:
        self.make_user("bob@example.com", name="Bob")
        alice = self.make_user("alice@example.com")
        with self.assertRaises(DuplicateEmailError):
            identity.update_identity(self.db, alice, {"email": "BOB@example.com"})
        self.assertEqual(self.reload(User, alice.id).email, "alice@example.com")

    def test_email_change_to_own_email_in_other_case(self) -> None:
        alice = self.make_user("alice@example.com")
        identity.update_identity(self.db, alice, {"email": "Alice@Example.com"})
        self.assertEqual(alice.email, "alice@example.com")

    def test_malformed_email_rejected(self) -> None:
        alice = self.make_user()
        with self.assertRaises(InvalidInputError):
            identity.update_identity(self.db, alice, {"email": "not-an-email"})

    def test_password_is_rehashed(self) -> None:
        alice = self.make_user()
        old_hash = alice.password_hash
        identity.update_identity(self.db, alice, {"password": "NewSecret456"})
        self.assertNotEqual(alice.password_hash, old_hash)
        self.assertNotEqual(alice.password_hash, "NewSecret456")
        self.assertTrue(verify_password("NewSecret456", alice.password_hash))

    def test_short_password_rejected(self) -> None:
        alice = self.make_user()
        with self.assertRaises(InvalidInputError):
            identity.update_identity(self.db, alice, {"password": "short"})

    def test_password_longer_than_bcrypt_reads_is_rejected(self) -> None:
        for password in ("a" * 73, "\u00e9" * 40):
            with self.subTest(length=len(password)):
                with self.assertRaises(InvalidInputError):
                    identity.validate_password(password)
        identity.validate_password("a" * 72)

    def test_passwords_sharing_a_prefix_stay_distinct(self) -> None:
        alice = self.make_user()
        identity.update_identity(self.db, alice, {"password": "p" * 72})
        self.assertTrue(verify_password("p" * 72, alice.password_hash))
        self.assertFalse(verify_password("p" * 71 + "q", alice.password_hash))
        with self.assertRaises(InvalidInputError):
            identity.update_identity(self.db, alice, {"password": "p" * 72 + "x"})

    def test_profile_fields(self) -> None:
        alice = self.make_user()
        identity.update_identity(self.db, alice, {"city": "Skopje", "age": 30})
        identity.update_identity(self.db, alice, {"city": None})
        reloaded = self.reload(User, alice.id)
        self.assertIsNone(reloaded.city)
        self.assertEqual(reloaded.age, 30)


class TestHardDelete(DatabaseTestCase):
    """hard_delete_identity purges the user, their roles links and owned rows."""

    def test_purges_owned_rows(self) -> None:
        alice = self.make_user(admin=True)
        media = Media(owner_id=alice.id, filename="a.jpg", stored_name="1_a.jpg", url="/x", type="image", size=1)
        album = Album(owner_id=alice.id, title="Trip", description="")
        album.media.append(media)
        self.db.add_all([media, album])
        self.db.commit()
        alice_id = alice.id

        stored = identity.hard_delete_identity(self.db, alice)

        self.assertEqual(stored, ["1_a.jpg"])
        self.assertIsNone(self.reload(User, alice_id))
        self.assertEqual(self.db.query(Media).count(), 0)
        self.assertEqual(self.db.query(Album).count(), 0)
        self.assertEqual(_association_count(self.db, alice_id), 0)


if __name__ == "__main__":
    unittest.main()
