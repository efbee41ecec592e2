"""
Create a board user, e.g. the first manager or admin. Run from project root:
  python -m app.scripts.create_user USERNAME PASSWORD [role]
Example:
  python -m app.scripts.create_user alice your-secure-password manager

Self-registration through the API always yields a developer; this is the way to
provision privileged roles.
"""
import argparse
import logging
import sys

from sqlalchemy.orm import Session

from app.core.database import SessionLocal
from app.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    hash_password,
)
from app.models.user import ROLE_DEVELOPER, USER_ROLES, User

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)
logger = logging.getLogger(__name__)


def create_user(db: Session, username: str, password: str, role: str) -> User:
    """Validate and insert a user. Raises ValueError on bad input or duplicate username."""
    username = username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        raise ValueError("Invalid username length.")
    if not (PASSWORD_MIN_LEN <= len(password) <= PASSWORD_MAX_LEN):
        raise ValueError(
            f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters."
        )
    if role not in USER_ROLES:
        raise ValueError(f"Role must be one of {', '.join(USER_ROLES)}.")
    if db.query(User).filter(User.username == username).first() is not None:
        raise ValueError(f"User '{username}' already exists.")
    user = User(username=username, password_hash=hash_password(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a sprint board user.")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument(
        "password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)"
    )
    parser.add_argument("role", nargs="?", default=ROLE_DEVELOPER, choices=list(USER_ROLES))
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = create_user(db, args.username, args.password, args.role)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        db.close()
    logger.info("Created user '%s' with role '%s' (id=%s).", user.username, user.role, user.id)
    return 0


if __name__ == "__main__":
    sys.exit(main())
