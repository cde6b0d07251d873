from typing import List

from loguru import logger
from sqlalchemy import insert
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from . import users
from .database import store_errors
from .errors import NotFoundError, ValidationError
from .models import Friend
from .presence import PresenceTracker
from .schemas import FriendStatus

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _insert_edges_ignoring_duplicates(db: Session, rows: List[dict]) -> None:
    dialect_insert = _UPSERT_INSERTS.get(db.get_bind().dialect.name)
    if dialect_insert is not None:
        stmt = dialect_insert(Friend).values(rows).on_conflict_do_nothing(
            index_elements=[Friend.user_a, Friend.user_b]
        )
        db.execute(stmt)
        return
    # no ON CONFLICT support: a savepoint per row keeps the outer transaction alive
    for row in rows:
        try:
            with db.begin_nested():
                db.execute(insert(Friend).values(**row))
        except IntegrityError:
            pass


def add_friend(db: Session, presence: PresenceTracker, user: str, friend: str) -> None:
    presence.touch(user)
    if user == friend:
        logger.warning(f"Friend add rejected: {user} tried to add self")
        raise ValidationError("Cannot add self")
    if not users.exists(db, friend):
        logger.warning(f"Friend add rejected: {friend} not found")
        raise NotFoundError("User not found")

    with store_errors(db):
        _insert_edges_ignoring_duplicates(
            db,
            [
                {"user_a": user, "user_b": friend},
                {"user_a": friend, "user_b": user},
            ],
        )
        db.commit()
    logger.info(f"Friend added: {user} <-> {friend}")


def list_friends(db: Session, presence: PresenceTracker, user: str) -> List[FriendStatus]:
    presence.touch(user)
    with store_errors(db):
        rows = (
            db.query(Friend.user_b)
            .filter(Friend.user_a == user)
            .order_by(Friend.user_b)
            .all()
        )
    now = presence.clock()
    return [FriendStatus(username=name, online=presence.is_online(name, now)) for (name,) in rows]
