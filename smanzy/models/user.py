"""ORM models for application users and roles (auth and RBAC)."""

from sqlalchemy import Column, ForeignKey, Index, Integer, String, Table, text
from sqlalchemy.orm import relationship

from smanzy.models.base import Base, SoftDeleteMixin, TimestampMixin

user_roles = Table(
    "user_roles",
    Base.metadata,
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("role_id", Integer, ForeignKey("roles.id", ondelete="CASCADE"), primary_key=True),
)


class Role(Base):
    """Named role. The set is open; 'user' and 'admin' are seeded at startup."""

    __tablename__ = "roles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(64), nullable=False, unique=True, index=True)

    def __repr__(self) -> str:
        return f"<Role {self.name}>"


class User(TimestampMixin, SoftDeleteMixin, Base):
    """
    User account for JWT authentication and role-based access control.

    email is stored lowercased and is unique among users that are not
    soft-deleted (partial unique index).
    """

    __tablename__ = "users"
    __table_args__ = (
        Index(
            "uq_users_email_active",
            "email",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        # Ids of purged users must never be handed out again: tokens carry the id.
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    phone = Column(String(32), nullable=True)
    age = Column(Integer, nullable=True)
    address = Column(String(512), nullable=True)
    city = Column(String(255), nullable=True)
    country = Column(String(255), nullable=True)

    roles = relationship("Role", secondary=user_roles, lazy="selectin", order_by="Role.name")

    @property
    def role_names(self) -> list[str]:
        return [role.name for role in self.roles]

    def __repr__(self) -> str:
        return f"<User {self.id} {self.email}>"
