from typing import Literal

from pydantic import BaseModel, field_validator

from .auth import normalize_username

# separators of the request payload and of the friend-list / thread encodings
RESERVED_USERNAME_CHARS = ":,|"


class _Request(BaseModel):
    """Base for decoded request payloads; every username field is normalized."""

    @field_validator("username", "friend", "sender", "receiver", mode="before", check_fields=False)
    @classmethod
    def _normalize(cls, value: str) -> str:
        value = normalize_username(value)
        if not value:
            raise ValueError("username must not be empty")
        if any(ch in value for ch in RESERVED_USERNAME_CHARS):
            raise ValueError(f"username must not contain any of {RESERVED_USERNAME_CHARS!r}")
        return value


# register / login payload
class Credentials(_Request):
    op: Literal["register", "login"]
    username: str
    credential: str

class FriendAdd(_Request):
    op: Literal["addfriend"] = "addfriend"
    username: str
    friend: str

class FriendList(_Request):
    op: Literal["getfriends"] = "getfriends"
    username: str

class ChatSend(_Request):
    op: Literal["send"] = "send"
    sender: str
    receiver: str
    # stored verbatim, may be empty or contain colons
    message: str

class ChatFetch(_Request):
    op: Literal["getchat"] = "getchat"
    username: str
    friend: str


# What the core hands back to the wire encoders
class FriendStatus(BaseModel):
    username: str
    online: bool

class ChatLine(BaseModel):
    sender: str
    message: str
