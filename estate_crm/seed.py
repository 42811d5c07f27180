"""開発やデモ向けにユーザーと案件のサンプルデータを投入するユーティリティ。"""

from __future__ import annotations

import random
from datetime import date, timedelta
from typing import Optional

from . import deal_store
from .extensions import db
from .models import Deal, User
from .permissions import Role
from .scoring import DealType, stages_for

DEMO_PASSWORD = "password123"


def _available_user_id(email: str) -> str:
    """メールのローカル部を ID にする。既に使われていれば連番を付ける。"""
    base = email.split("@")[0]
    candidate = base
    suffix = 2
    while db.session.get(User, candidate) is not None:
        candidate = f"{base}-{suffix}"
        suffix += 1
    return candidate


def upsert_user(
    email: str,
    role: str = Role.AGENT,
    password: Optional[str] = None,
    user_id: Optional[str] = None,
    first_name: Optional[str] = None,
    last_name: Optional[str] = None,
) -> User:
    """メールアドレス（または ID）で既存ユーザーを探し、無ければ作成する。"""
    normalized_email = email.strip().lower()
    user = None
    if user_id:
        user = db.session.get(User, user_id)
    if user is None:
        user = User.query.filter_by(email=normalized_email).first()
    if user is None:
        user = User(id=user_id or _available_user_id(normalized_email), email=normalized_email)
        db.session.add(user)

    user.email = normalized_email
    user.role = role
    if first_name is not None:
        user.first_name = first_name
    if last_name is not None:
        user.last_name = last_name
    if password:
        user.set_password(password)
    db.session.commit()
    return user


def seed_data(with_reset: bool = False) -> None:
    if with_reset:
        Deal.query.delete()
        User.query.delete()
        db.session.commit()

    if Deal.query.count() > 0 and not with_reset:
        return

    user_blueprints = [
        ("admin@example.com", Role.ADMIN, "管理", "太郎"),
        ("manager@example.com", Role.MANAGER, "営業", "花子"),
        ("okubo@example.com", Role.AGENT, "大久保", "健"),
        ("agent@example.com", Role.AGENT, "佐藤", "次郎"),
        ("viewer@example.com", Role.VIEWER, "閲覧", "三郎"),
    ]
    users = [
        upsert_user(email, role=role, password=DEMO_PASSWORD, last_name=last, first_name=first)
        for email, role, last, first in user_blueprints
    ]
    assignees = [user for user in users if user.role in (Role.MANAGER, Role.AGENT)]

    rental_titles = ["サンライトタワー 1201", "ベルビューガーデン 203", "メトロシティ新宿 805", "リバーサイド桜川 402"]
    sales_titles = ["グリーンパークヒルズ 戸建", "コスモレジデンス 1棟", "シーサイドラグーン 区分", "ブリーズハイツ 土地"]
    clients = ["山田商事", "鈴木一郎", "高橋不動産", "田中花子", "伊藤ホールディングス", "渡辺美咲"]

    today = date.today()
    for index in range(24):
        deal_type = DealType.RENTAL if index % 2 == 0 else DealType.SALES
        titles = rental_titles if deal_type == DealType.RENTAL else sales_titles
        if deal_type == DealType.RENTAL:
            amount = random.randint(8, 45) * 10000
        else:
            amount = random.randint(30, 300) * 1000000
        due = today + timedelta(days=random.randint(-10, 20)) if random.random() < 0.7 else None
        deal_store.create_deal(
            {
                "type": deal_type,
                "title": random.choice(titles),
                "client_name": random.choice(clients),
                "stage": random.choice(stages_for(deal_type)),
                "amount_yen": amount,
                "next_action": "顧客へ連絡" if due else None,
                "next_action_due": due,
                "assigned_to_id": random.choice(assignees).id,
            },
        )
