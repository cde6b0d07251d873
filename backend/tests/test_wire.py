import pytest

from social         import wire
from social.errors  import ValidationError
from social.schemas import ChatFetch, ChatLine, ChatSend, Credentials, FriendAdd, FriendList, FriendStatus


def test_credentials_keep_colons_and_normalize():
    req = wire.parse_request("login", " Alice :pa:ss ")
    assert isinstance(req, Credentials)
    assert (req.op, req.username, req.credential) == ("login", "alice", "pa:ss")


def test_friend_add_ignores_extra_fields():
    req = wire.parse_request("addfriend", "alice:Bob:whatever")
    assert isinstance(req, FriendAdd)
    assert (req.username, req.friend) == ("alice", "bob")


def test_friend_list_takes_first_field():
    req = wire.parse_request("getfriends", "ALICE:bob")
    assert isinstance(req, FriendList)
    assert req.username == "alice"


def test_send_reassembles_message():
    req = wire.parse_request("send", "alice:bob:a:b: c")
    assert isinstance(req, ChatSend)
    assert (req.sender, req.receiver, req.message) == ("alice", "bob", "a:b: c")


def test_getchat():
    req = wire.parse_request("getchat", "me:Friend")
    assert isinstance(req, ChatFetch)
    assert (req.username, req.friend) == ("me", "friend")


@pytest.mark.parametrize(
    "op,payload",
    [
        ("register", "alice"),
        ("register", " :pw"),
        ("addfriend", "alice"),
        ("addfriend", "alice: "),
        ("getfriends", ""),
        ("send", "alice:bob"),
        ("send", ":bob:hi"),
        ("getchat", "alice"),
        ("unknown", "x:y"),
    ],
)
def test_rejects_malformed(op, payload):
    with pytest.raises(ValidationError):
        wire.parse_request(op, payload)


def test_encode_friend_list():
    statuses = [FriendStatus(username="bob", online=True), FriendStatus(username="carol", online=False)]
    assert wire.encode_friend_list(statuses) == "bob:1,carol:0,"
    assert wire.encode_friend_list([]) == ""


def test_encode_thread_escapes_delimiter():
    lines = [ChatLine(sender="alice", message="hi"), ChatLine(sender="bob", message="x|y\\z")]
    assert wire.encode_thread(lines) == "alice:hi|bob:x\\|y\\\\z|"


@pytest.mark.parametrize("payload", ["a|b:pw", "x,y:pw"])
def test_register_rejects_separator_in_username(client, payload):
    response = client.post("/api/register", content=payload)
    assert response.status_code == 400
    assert response.text == "Error: Format is user:pass"


@pytest.mark.parametrize(
    "op,payload",
    [
        ("addfriend", "alice:x,evil"),
        ("send", "a|b:bob:hi"),
        ("send", "alice:b,ob:hi"),
        ("getchat", "bob:a|b"),
        ("getfriends", "al|ice"),
    ],
)
def test_separator_in_any_username_field(op, payload):
    with pytest.raises(ValidationError):
        wire.parse_request(op, payload)


def test_separator_rejected_after_normalization():
    with pytest.raises(ValidationError):
        wire.parse_request("login", " X,Y :pw")
