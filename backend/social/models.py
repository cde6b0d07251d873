from sqlalchemy import BigInteger, Column, Index, Integer, String, Text, UniqueConstraint
from .database import Base

class User(Base):
    __tablename__ = "users"
    username   = Column(String, primary_key=True)
    credential = Column(String, nullable=False)

class Friend(Base):
    """One directed row; a friendship is always stored as both directions."""
    __tablename__ = "friends"
    id     = Column(Integer, primary_key=True, autoincrement=True)
    user_a = Column(String, nullable=False, index=True)
    user_b = Column(String, nullable=False)

    __table_args__ = (UniqueConstraint("user_a", "user_b", name="uniq_friendship"),)

class Chat(Base):
    __tablename__ = "chats"
    id        = Column(Integer, primary_key=True, autoincrement=True)
    sender    = Column(String, nullable=False)
    receiver  = Column(String, nullable=False)
    message   = Column(Text, nullable=False)
    timestamp = Column(BigInteger, nullable=False)      # ms since epoch

    __table_args__ = (Index("ix_chats_pair", "sender", "receiver"),)
