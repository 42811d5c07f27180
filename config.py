from __future__ import annotations

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        f"sqlite:///{BASE_DIR / 'estate_crm.db'}",
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    # 全件書き込み権限を持つユーザーが担当者を省略した場合の既定担当者 ID。
    DEAL_DEFAULT_ASSIGNEE_ID = os.getenv("DEAL_DEFAULT_ASSIGNEE_ID") or None
    RECENT_DEALS_LIMIT = int(os.getenv("RECENT_DEALS_LIMIT", "5"))


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "DEBUG"
    DEAL_DEFAULT_ASSIGNEE_ID = None
