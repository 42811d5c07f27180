"""案件レコードの永続化と絞り込み検索。

score / rank は保存のたびに確定後の (type, stage) から計算し直す。呼び出し側から
受け取るのは WRITABLE_FIELDS に含まれる項目だけで、派生値を渡す経路は存在しない。
存在しない ID に対する操作は例外ではなく None / False を返す。
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import or_

from .extensions import db
from .models import Deal
from .scoring import score_and_rank

WRITABLE_FIELDS = (
    "type",
    "title",
    "client_name",
    "stage",
    "amount_yen",
    "next_action",
    "next_action_due",
    "assigned_to_id",
)


def _escape_like(text: str) -> str:
    # % と _ をワイルドカードではなく文字として扱う。
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _apply_derived_fields(deal: Deal) -> None:
    deal.score, deal.rank = score_and_rank(deal.type, deal.stage)


def list_deals(
    deal_type: Optional[str] = None,
    stage: Optional[str] = None,
    rank: Optional[str] = None,
    assigned_to_id: Optional[str] = None,
    search: Optional[str] = None,
) -> list[Deal]:
    query = Deal.query
    if deal_type:
        query = query.filter(Deal.type == deal_type)
    if stage:
        query = query.filter(Deal.stage == stage)
    if rank:
        query = query.filter(Deal.rank == rank)
    if assigned_to_id:
        query = query.filter(Deal.assigned_to_id == assigned_to_id)
    if search:
        pattern = f"%{_escape_like(search)}%"
        query = query.filter(
            or_(
                Deal.title.ilike(pattern, escape="\\"),
                Deal.client_name.ilike(pattern, escape="\\"),
            ),
        )
    return query.order_by(Deal.created_at.desc(), Deal.id.desc()).all()


def get_deal(deal_id: str) -> Optional[Deal]:
    return db.session.get(Deal, deal_id)


def create_deal(values: dict) -> Deal:
    deal = Deal(**{field: values.get(field) for field in WRITABLE_FIELDS})
    _apply_derived_fields(deal)
    db.session.add(deal)
    db.session.commit()
    return deal


def update_deal(deal_id: str, values: dict) -> Optional[Deal]:
    """既存レコードに部分更新をマージしてから派生値を再計算する。種別は変更しない。"""
    deal = get_deal(deal_id)
    if deal is None:
        return None
    for field in WRITABLE_FIELDS:
        if field == "type" or field not in values:
            continue
        setattr(deal, field, values[field])
    _apply_derived_fields(deal)
    db.session.commit()
    return deal


def delete_deal(deal_id: str) -> bool:
    deal = get_deal(deal_id)
    if deal is None:
        return False
    db.session.delete(deal)
    db.session.commit()
    return True
