"""
Create a user (e.g. the first admin). Run from project root:
  python -m smanzy.scripts.create_user EMAIL PASSWORD NAME [--admin]
Example:
  python -m smanzy.scripts.create_user admin@example.com your-secure-password "Admin" --admin
"""
import argparse
import logging
import sys

from smanzy.core.config import settings
from smanzy.core.database import SessionLocal
from smanzy.core.errors import AppError
from smanzy.services import identity


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Smanzy user.")
    parser.add_argument("email", help="Email address")
    parser.add_argument(
        "password",
        help=f"Password ({settings.PASSWORD_MIN_LENGTH}-{settings.PASSWORD_MAX_LENGTH} chars)",
    )
    parser.add_argument("name", help="Display name")
    parser.add_argument("--admin", action="store_true", help="Also grant the admin role")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%SZ",
    )

    db = SessionLocal()
    try:
        identity.ensure_roles(db, settings.DEFAULT_ROLES)
        email = identity.validate_email(args.email)
        identity.validate_password(args.password)
        name = identity.validate_name(args.name)
        user = identity.create_identity(db, email=email, password=args.password, name=name)
        if args.admin:
            user = identity.assign_role(db, user, identity.ADMIN_ROLE)
        print(f"Created user '{user.email}' (id={user.id}) with roles {', '.join(user.role_names)}.")
        return 0
    except AppError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
