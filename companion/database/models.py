from sqlalchemy import (
    Column, Integer, String, DateTime, Boolean,
    ForeignKey, Enum as SQLEnum, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func
from enum import Enum

Base = declarative_base()

class FriendshipStatus(Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    BLOCKED = "blocked"

class Player(Base):
    __tablename__ = 'players'

    id = Column(Integer, primary_key=True)
    username = Column(String(100), nullable=False, unique=True)
    nickname = Column(String(100), nullable=False)
    profile_image_url = Column(String(500), nullable=True)

    # Economy
    coins = Column(Integer, default=0)

    # Metadata
    registered_at = Column(DateTime, default=func.now())
    is_active = Column(Boolean, default=True)

    participations = relationship("GameParticipant", back_populates="player", cascade="all, delete-orphan")
    session_tokens = relationship("SessionToken", back_populates="player", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Player(id={self.id}, nickname='{self.nickname}', coins={self.coins})>"

class Friendship(Base):
    __tablename__ = 'friendships'

    id = Column(Integer, primary_key=True)
    requester_id = Column(Integer, ForeignKey('players.id'), nullable=False, index=True)
    addressee_id = Column(Integer, ForeignKey('players.id'), nullable=False, index=True)
    status = Column(SQLEnum(FriendshipStatus), default=FriendshipStatus.PENDING, nullable=False)
    created_at = Column(DateTime, default=func.now())

    requester = relationship("Player", foreign_keys=[requester_id])
    addressee = relationship("Player", foreign_keys=[addressee_id])

    __table_args__ = (
        UniqueConstraint('requester_id', 'addressee_id'),
        CheckConstraint('requester_id != addressee_id', name='ck_friendship_not_self'),
    )

    def __repr__(self):
        return f"<Friendship({self.requester_id} -> {self.addressee_id}, status={self.status.value})>"

class Game(Base):
    __tablename__ = 'games'

    id = Column(Integer, primary_key=True)
    played_at = Column(DateTime, nullable=False, default=func.now(), index=True)
    duration_seconds = Column(Integer, default=0)

    # Player who held the murderer role; NULL while the game is unresolved
    murderer_id = Column(Integer, ForeignKey('players.id'), nullable=True)

    participants = relationship("GameParticipant", back_populates="game", cascade="all, delete-orphan")
    murderer = relationship("Player", foreign_keys=[murderer_id])

    def __repr__(self):
        return f"<Game(id={self.id}, played_at={self.played_at}, murderer_id={self.murderer_id})>"

class GameParticipant(Base):
    __tablename__ = 'game_participants'

    id = Column(Integer, primary_key=True)
    game_id = Column(Integer, ForeignKey('games.id'), nullable=False, index=True)
    player_id = Column(Integer, ForeignKey('players.id'), nullable=False, index=True)
    role = Column(String(50), nullable=False, default="unknown")  # Raw role as reported by the game server

    game = relationship("Game", back_populates="participants")
    player = relationship("Player", back_populates="participations")

    __table_args__ = (UniqueConstraint('game_id', 'player_id'),)

    def __repr__(self):
        return f"<GameParticipant(game_id={self.game_id}, player_id={self.player_id}, role='{self.role}')>"

class SessionToken(Base):
    __tablename__ = 'session_tokens'

    id = Column(Integer, primary_key=True)
    player_id = Column(Integer, ForeignKey('players.id'), nullable=False, index=True)
    token = Column(String(255), nullable=False, unique=True)
    created_at = Column(DateTime, default=func.now())
    revoked_at = Column(DateTime, nullable=True)

    player = relationship("Player", back_populates="session_tokens")

    @property
    def is_active(self) -> bool:
        return self.revoked_at is None

    def __repr__(self):
        return f"<SessionToken(player_id={self.player_id}, active={self.is_active})>"
