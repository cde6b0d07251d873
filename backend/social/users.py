from loguru import logger
from sqlalchemy import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from .auth import hash_credential, verify_credential
from .database import store_errors
from .errors import AuthError, ConflictError
from .models import User
from .presence import PresenceTracker


def exists(db: Session, username: str) -> bool:
    with store_errors(db):
        return db.query(User.username).filter(User.username == username).first() is not None


def register(db: Session, username: str, credential: str) -> None:
    """Insert a new user; the primary key alone decides who wins a race."""
    with store_errors(db):
        try:
            db.execute(insert(User).values(username=username, credential=hash_credential(credential)))
            db.commit()
        except IntegrityError as exc:
            db.rollback()
            logger.warning(f"Register fail: {username} exists")
            raise ConflictError("User already exists") from exc
    logger.info(f"Register success: {username}")


def authenticate(db: Session, presence: PresenceTracker, username: str, credential: str) -> None:
    with store_errors(db):
        user = db.query(User).filter(User.username == username).first()
    if not user or not verify_credential(credential, user.credential):
        logger.warning(f"Login fail: {username}")
        raise AuthError("Invalid credentials")
    presence.touch(username)
    logger.info(f"Login success: {username}")
