from typing import List

from sqlalchemy import and_, insert, or_
from sqlalchemy.orm import Session

from .database import store_errors
from .models import Chat
from .presence import PresenceTracker
from .schemas import ChatLine


def send(db: Session, presence: PresenceTracker, sender: str, receiver: str, body: str) -> int:
    """Append a message and return its id.

    Neither the receiver's existence nor a friendship between the two is
    checked; any pair of names can exchange messages.
    """
    with store_errors(db):
        result = db.execute(
            insert(Chat).values(sender=sender, receiver=receiver, message=body, timestamp=presence.clock())
        )
        message_id = result.inserted_primary_key[0]
        db.commit()
    presence.touch(sender)
    return message_id


def get_conversation(db: Session, presence: PresenceTracker, user_a: str, user_b: str) -> List[ChatLine]:
    presence.touch(user_a)
    with store_errors(db):
        rows = (
            db.query(Chat.sender, Chat.message)
            .filter(
                or_(
                    and_(Chat.sender == user_a, Chat.receiver == user_b),
                    and_(Chat.sender == user_b, Chat.receiver == user_a),
                )
            )
            .order_by(Chat.timestamp.asc(), Chat.id.asc())
            .all()
        )
    return [ChatLine(sender=sender, message=message) for sender, message in rows]
