import os

import uvicorn
from fastapi import FastAPI, Depends, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse
from loguru import logger
from sqlalchemy.orm import Session

from . import chats, friends, users, wire
from .config import Settings, configure_logging, get_settings
from .database import get_db, init_db
from .errors import SocialError, ValidationError
from .presence import PresenceTracker


# --- FastAPI setup ---
app = FastAPI(title="Social Server")

# One tracker per process; it holds no external resources so needs no teardown.
app.state.presence = PresenceTracker(window_ms=get_settings().ONLINE_WINDOW_MS)


@app.on_event("startup")
def on_startup():
    settings = get_settings()
    configure_logging(settings)
    if settings.USING_FALLBACK_DB:
        logger.warning("No DB_URL found. Using local fallback.")
    init_db()


@app.exception_handler(SocialError)
async def social_error_handler(request: Request, exc: SocialError):
    return PlainTextResponse(exc.message, status_code=exc.status_code)


# --- Request helpers ---
async def read_payload(request: Request) -> str:
    try:
        return (await request.body()).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValidationError("Error: Payload must be UTF-8 text") from exc


def get_presence(request: Request) -> PresenceTracker:
    return request.app.state.presence


@app.get("/", include_in_schema=False)
def index(settings: Settings = Depends(get_settings)):
    path = os.path.join(settings.STATIC_DIR, "index.html")
    if not os.path.isfile(path):
        return HTMLResponse("<h1>index.html not found</h1>", status_code=404)
    return FileResponse(path, media_type="text/html")


@app.get("/health")
def health():
    return {"status": "ok"}


# --- AUTH ---
@app.post("/api/register", response_class=PlainTextResponse)
def register(payload: str = Depends(read_payload), db: Session = Depends(get_db)):
    req = wire.parse_request("register", payload)
    logger.debug(f"Auth [register] user={req.username}")
    users.register(db, req.username, req.credential)
    return "OK"


@app.post("/api/login", response_class=PlainTextResponse)
def login(
    payload: str = Depends(read_payload),
    db: Session = Depends(get_db),
    presence: PresenceTracker = Depends(get_presence),
):
    req = wire.parse_request("login", payload)
    logger.debug(f"Auth [login] user={req.username}")
    users.authenticate(db, presence, req.username, req.credential)
    return "OK"


# --- FRIENDS ---
@app.post("/api/addfriend", response_class=PlainTextResponse)
def add_friend(
    payload: str = Depends(read_payload),
    db: Session = Depends(get_db),
    presence: PresenceTracker = Depends(get_presence),
):
    req = wire.parse_request("addfriend", payload)
    friends.add_friend(db, presence, req.username, req.friend)
    return "Friend Added!"


@app.post("/api/getfriends", response_class=PlainTextResponse)
def get_friends(
    payload: str = Depends(read_payload),
    db: Session = Depends(get_db),
    presence: PresenceTracker = Depends(get_presence),
):
    req = wire.parse_request("getfriends", payload)
    return wire.encode_friend_list(friends.list_friends(db, presence, req.username))


# --- CHAT ---
@app.post("/api/send", response_class=PlainTextResponse)
def send_message(
    payload: str = Depends(read_payload),
    db: Session = Depends(get_db),
    presence: PresenceTracker = Depends(get_presence),
):
    req = wire.parse_request("send", payload)
    chats.send(db, presence, req.sender, req.receiver, req.message)
    return "Sent"


@app.post("/api/getchat", response_class=PlainTextResponse)
def get_chat(
    payload: str = Depends(read_payload),
    db: Session = Depends(get_db),
    presence: PresenceTracker = Depends(get_presence),
):
    req = wire.parse_request("getchat", payload)
    return wire.encode_thread(chats.get_conversation(db, presence, req.username, req.friend))


def run():
    settings = get_settings()
    logger.info(f"Starting server on {settings.HOST}:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
