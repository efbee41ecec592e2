"""ORM model for board users (auth and role-based capabilities)."""

from sqlalchemy import Column, Integer, String

from app.models.base import Base

ROLE_DEVELOPER = "developer"
ROLE_MANAGER = "manager"
ROLE_ADMIN = "admin"
USER_ROLES: tuple[str, ...] = (ROLE_DEVELOPER, ROLE_MANAGER, ROLE_ADMIN)


class User(Base):
    """
    User account for JWT authentication and capability checks.

    role: 'developer', 'manager' or 'admin'. Registration always yields 'developer'.
    """

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(32), nullable=False, default=ROLE_DEVELOPER)
