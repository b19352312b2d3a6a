# lockstep/models.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from lockstep.extensions import db, login_manager


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(db.Model, UserMixin):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(32), unique=True, index=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    player_name = db.Column(db.String(32), nullable=False)
    is_admin = db.Column(db.Boolean, default=False, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_public(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "playerName": self.player_name,
            "isAdmin": bool(self.is_admin),
        }

    def __repr__(self) -> str:
        return f"<User {self.username}>"


class Level(db.Model):
    __tablename__ = "user_levels"

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    text = db.Column(db.Text, nullable=False)
    author_name = db.Column(db.String(32), nullable=False)
    owner_user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    owner = db.relationship("User", lazy="joined")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "text": self.text,
            "authorName": self.author_name,
            "ownerUserId": self.owner_user_id,
            "ownerUsername": self.owner.username if self.owner else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "isBuiltIn": False,
        }

    @staticmethod
    def newest_first() -> List["Level"]:
        return Level.query.order_by(Level.updated_at.desc()).all()

    def __repr__(self) -> str:
        return f"<Level {self.id}>"


class LevelScore(db.Model):
    __tablename__ = "level_scores"
    __table_args__ = (
        db.Index("idx_level_scores_rank", "level_id", "moves", "duration_ms", "created_at"),
    )

    id = db.Column(db.Integer, primary_key=True)
    level_id = db.Column(db.String(64), nullable=False)
    player_name = db.Column(db.String(32), nullable=False)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), index=True, nullable=True)
    moves = db.Column(db.Integer, nullable=False)
    duration_ms = db.Column(db.Integer, nullable=False)
    replay = db.Column(db.Text, nullable=False)  # compact run-length form
    created_at = db.Column(db.DateTime(timezone=True), default=_utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "playerName": self.player_name,
            "moves": self.moves,
            "durationMs": self.duration_ms,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @staticmethod
    def top_for_level(level_id: str, limit: int = 10) -> List["LevelScore"]:
        return (LevelScore.query
                .filter(LevelScore.level_id == level_id)
                .order_by(LevelScore.moves.asc(), LevelScore.duration_ms.asc(), LevelScore.created_at.asc())
                .limit(limit)
                .all())

    def __repr__(self) -> str:
        return f"<LevelScore {self.level_id} {self.moves} moves>"


class UserProgress(db.Model):
    __tablename__ = "user_progress"

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), primary_key=True)
    selected_level_id = db.Column(db.String(64), nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "selectedLevelId": self.selected_level_id,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }


@login_manager.user_loader
def load_user(user_id) -> Optional[User]:
    return db.session.get(User, int(user_id))
