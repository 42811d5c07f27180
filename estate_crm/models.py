"""CRMで扱うユーザー・案件モデルと共通カラム定義をまとめたモジュール。"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import check_password_hash, generate_password_hash

from .extensions import db
from .permissions import Role
from .scoring import Rank, stage_label


def utcnow() -> datetime:
    # SQLite はタイムゾーンを保持しないため naive な UTC で統一する。
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_deal_id() -> str:
    return uuid.uuid4().hex


def _isoformat(value) -> str | None:
    return value.isoformat() if value is not None else None


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=utcnow, server_default=db.func.now())
    updated_at = db.Column(
        db.DateTime,
        default=utcnow,
        server_default=db.func.now(),
        onupdate=utcnow,
    )


class User(UserMixin, TimestampMixin, db.Model):
    __tablename__ = "users"

    id = db.Column(db.String(64), primary_key=True)
    email = db.Column(db.String(255), unique=True, nullable=True, index=True)
    first_name = db.Column(db.String(120), nullable=True)
    last_name = db.Column(db.String(120), nullable=True)
    profile_image_url = db.Column(db.String(512), nullable=True)
    role = db.Column(db.String(20), default=Role.AGENT, nullable=False)
    password_hash = db.Column(db.String(255), nullable=True)

    deals = db.relationship("Deal", back_populates="assigned_to")

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password, method="pbkdf2:sha256")

    def check_password(self, password: str) -> bool:
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "profileImageUrl": self.profile_image_url,
            "role": self.role,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<User {self.id} {self.role}>"


class Deal(TimestampMixin, db.Model):
    """賃貸・売買の案件。score と rank は (type, stage) から都度再計算される派生値。"""

    __tablename__ = "deals"

    id = db.Column(db.String(32), primary_key=True, default=new_deal_id)
    type = db.Column(db.String(20), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False)
    client_name = db.Column(db.String(255), nullable=False)
    stage = db.Column(db.String(20), nullable=False, index=True)
    score = db.Column(db.Integer, nullable=False, default=0)
    rank = db.Column(db.String(1), nullable=False, default=Rank.C)
    amount_yen = db.Column(db.BigInteger, nullable=False)
    next_action = db.Column(db.Text, nullable=True)
    next_action_due = db.Column(db.Date, nullable=True)
    assigned_to_id = db.Column(db.String(64), db.ForeignKey("users.id"), nullable=True, index=True)

    assigned_to = db.relationship("User", back_populates="deals")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "type": self.type,
            "title": self.title,
            "clientName": self.client_name,
            "stage": self.stage,
            "stageLabel": stage_label(self.stage),
            "score": self.score,
            "rank": self.rank,
            "amountYen": self.amount_yen,
            "nextAction": self.next_action,
            "nextActionDue": _isoformat(self.next_action_due),
            "assignedToId": self.assigned_to_id,
            "createdAt": _isoformat(self.created_at),
            "updatedAt": _isoformat(self.updated_at),
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"<Deal {self.id}: {self.type}/{self.stage} {self.rank}>"
