"""
Colon-delimited text payloads in, plain-text bodies out.

Request payloads are decoded into the tagged models from ``schemas`` so the
core operations only ever see validated, normalized arguments:

    register / login   username:credential      (credential = rest of payload)
    addfriend          username:friend[:...]
    getfriends         username[:...]
    send               sender:receiver:message  (message = rest of payload)
    getchat            username:friend[:...]

Responses:

    friend list        bob:1,carol:0,
    chat thread        alice:hi|bob:hey|

Message bodies are escaped on the way out (``\\`` -> ``\\\\``, ``|`` -> ``\\|``)
so a body never terminates a thread entry early.
"""

from typing import Callable, Dict, Iterable

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .schemas import ChatFetch, ChatLine, ChatSend, Credentials, FriendAdd, FriendList, FriendStatus

CREDENTIALS_FORMAT = "Error: Format is user:pass"


def _fields(payload: str, count: int, error: str) -> list[str]:
    """Split into ``count`` fields; the last one keeps any further colons."""
    parts = payload.split(":", count - 1)
    if len(parts) < count:
        raise ValidationError(error)
    return parts


def _leading_fields(payload: str, count: int, error: str) -> list[str]:
    """First ``count`` fields; anything after them is ignored."""
    parts = payload.split(":")
    if len(parts) < count:
        raise ValidationError(error)
    return parts[:count]


def _build(model: type[BaseModel], error: str, **fields) -> BaseModel:
    try:
        return model(**fields)
    except PydanticValidationError as exc:
        raise ValidationError(error) from exc


def parse_credentials(op: str, payload: str) -> Credentials:
    username, credential = _fields(payload, 2, CREDENTIALS_FORMAT)
    credential = credential.strip()
    if not credential:
        raise ValidationError(CREDENTIALS_FORMAT)
    return _build(Credentials, CREDENTIALS_FORMAT, op=op, username=username, credential=credential)


def parse_friend_add(payload: str) -> FriendAdd:
    error = "Error: Format is user:friend"
    username, friend = _leading_fields(payload, 2, error)
    return _build(FriendAdd, error, username=username, friend=friend)


def parse_friend_list(payload: str) -> FriendList:
    return _build(FriendList, "Error: Format is user", username=payload.split(":", 1)[0])


def parse_chat_send(payload: str) -> ChatSend:
    error = "Error: Format is sender:receiver:message"
    sender, receiver, message = _fields(payload, 3, error)
    return _build(ChatSend, error, sender=sender, receiver=receiver, message=message)


def parse_chat_fetch(payload: str) -> ChatFetch:
    error = "Error: Format is me:friend"
    username, friend = _leading_fields(payload, 2, error)
    return _build(ChatFetch, error, username=username, friend=friend)


PARSERS: Dict[str, Callable[[str], BaseModel]] = {
    "register": lambda payload: parse_credentials("register", payload),
    "login": lambda payload: parse_credentials("login", payload),
    "addfriend": parse_friend_add,
    "getfriends": parse_friend_list,
    "send": parse_chat_send,
    "getchat": parse_chat_fetch,
}


def parse_request(op: str, payload: str) -> BaseModel:
    try:
        parser = PARSERS[op]
    except KeyError:
        raise ValidationError(f"Unknown operation: {op}") from None
    return parser(payload)


def escape_body(body: str) -> str:
    return body.replace("\\", "\\\\").replace("|", "\\|")


def encode_friend_list(friends: Iterable[FriendStatus]) -> str:
    return "".join(f"{f.username}:{1 if f.online else 0}," for f in friends)


def encode_thread(lines: Iterable[ChatLine]) -> str:
    return "".join(f"{line.sender}:{escape_body(line.message)}|" for line in lines)
