from contextlib import contextmanager

from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from .config import get_settings
from .errors import StoreError


def make_engine(url: str):
    connect_args = {}
    if url.startswith("sqlite"):
        # one connection may be handed between FastAPI's worker threads
        connect_args = {"check_same_thread": False}
    return create_engine(url, connect_args=connect_args)


engine = make_engine(get_settings().DATABASE_URL)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
Base = declarative_base()


def init_db(bind=None) -> None:
    """Create the three tables if they are missing. Safe to call repeatedly."""
    from . import models  # noqa: F401  (registers tables on Base.metadata)

    bind = bind if bind is not None else engine
    try:
        Base.metadata.create_all(bind=bind)
    except SQLAlchemyError:
        logger.exception("DB init error")
        raise
    logger.info(f"Database connected & tables verified ({bind.url.render_as_string(hide_password=True)})")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def store_errors(db: Session):
    """Roll back and re-raise any SQLAlchemy failure as a StoreError."""
    try:
        yield db
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store failure")
        raise StoreError(f"DB Error: {exc}") from exc
