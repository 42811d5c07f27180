"""ダッシュボード向けの集計クエリ。キャッシュせずリクエストごとに計算する。"""

from __future__ import annotations

from datetime import date
from typing import Optional

from sqlalchemy import case, func

from .extensions import db
from .models import Deal
from .scoring import Rank, stages_for


def _scoped(query, assigned_to_id: Optional[str]):
    if assigned_to_id is not None:
        query = query.filter(Deal.assigned_to_id == assigned_to_id)
    return query


def deal_stats(assigned_to_id: Optional[str] = None, today: Optional[date] = None) -> dict[str, int]:
    """総件数・A ランク件数・期限切れアクション件数・金額合計を返す。"""
    today = today or date.today()
    # 集計は SQL 側でまとめ、Python では 0 埋めのみを行う。
    query = db.session.query(
        func.count(Deal.id),
        func.sum(case((Deal.rank == Rank.A, 1), else_=0)),
        func.sum(case((Deal.next_action_due < today, 1), else_=0)),
        func.sum(Deal.amount_yen),
    )
    total, a_rank, overdue, revenue = _scoped(query, assigned_to_id).one()
    return {
        "totalDeals": int(total or 0),
        "aRankDeals": int(a_rank or 0),
        "overdueActions": int(overdue or 0),
        "totalRevenue": int(revenue or 0),
    }


def stage_distribution(deal_type: str, assigned_to_id: Optional[str] = None) -> dict[str, int]:
    """種別内の全ステージを 0 で埋めたうえで、現在の件数を数える。"""
    distribution = {stage: 0 for stage in stages_for(deal_type)}
    query = (
        db.session.query(Deal.stage, func.count(Deal.id))
        .filter(Deal.type == deal_type)
        .group_by(Deal.stage)
    )
    for stage, count in _scoped(query, assigned_to_id).all():
        distribution[stage] = int(count)
    return distribution


def recent_deals(limit: int, assigned_to_id: Optional[str] = None) -> list[Deal]:
    query = _scoped(Deal.query, assigned_to_id)
    return query.order_by(Deal.created_at.desc(), Deal.id.desc()).limit(limit).all()
