"""案件の一覧・取得・作成・部分更新・削除 API を束ねる Blueprint。"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user, login_required

from ... import deal_store
from ...errors import NotFound, ValidationFailed, field_errors
from ...permissions import (
    Action,
    Scope,
    assignee_for_new_deal,
    can_modify_deal,
    can_read_deal,
    has_permission,
)
from ...scoring import ALL_STAGES, DealType, Rank, pipeline_summary
from ..helpers import choice_arg, deny, json_payload, require_permission, scoped_assignee
from .forms import DealForm

deals_bp = Blueprint("deals", __name__, url_prefix="/api")


def _get_deal_or_404(deal_id: str):
    deal = deal_store.get_deal(deal_id)
    if deal is None:
        raise NotFound("案件が見つかりません。")
    return deal


@deals_bp.route("/deals", methods=["GET"])
@login_required
def list_deals():
    """権限に応じて担当分のみに絞り込んだ案件一覧を新しい順で返す。"""
    assignee = scoped_assignee(Action.READ)
    if assignee is None:
        assignee = (request.args.get("assignedToId") or "").strip() or None

    deals = deal_store.list_deals(
        deal_type=choice_arg("type", DealType.ALL),
        stage=choice_arg("stage", ALL_STAGES),
        rank=choice_arg("rank", Rank.ALL),
        assigned_to_id=assignee,
        search=(request.args.get("search") or "").strip() or None,
    )
    return jsonify([deal.to_dict() for deal in deals])


@deals_bp.route("/deals/stages", methods=["GET"])
@login_required
def deal_stages():
    return jsonify(pipeline_summary())


@deals_bp.route("/deals/<deal_id>", methods=["GET"])
@login_required
def get_deal(deal_id: str):
    deal = _get_deal_or_404(deal_id)
    if not can_read_deal(current_user.role, current_user.id, deal.assigned_to_id):
        raise deny(Action.READ, f"deal={deal.id}")
    return jsonify(deal.to_dict())


@deals_bp.route("/deals", methods=["POST"])
@login_required
def create_deal():
    require_permission(Action.WRITE, Scope.OWN)
    payload = dict(json_payload())

    # own のみの権限ではリクエストの担当者指定を無視して本人に固定する。
    payload["assignedToId"] = assignee_for_new_deal(
        current_user.role,
        current_user.id,
        payload.get("assignedToId"),
        current_app.config.get("DEAL_DEFAULT_ASSIGNEE_ID"),
    )
    form = DealForm.from_json(payload)
    if not form.validate():
        raise ValidationFailed(errors=form.error_list())

    deal = deal_store.create_deal(form.deal_values())
    current_app.logger.info(
        "deal created: id=%s type=%s stage=%s score=%s rank=%s by=%s",
        deal.id,
        deal.type,
        deal.stage,
        deal.score,
        deal.rank,
        current_user.id,
    )
    return jsonify(deal.to_dict()), 201


@deals_bp.route("/deals/<deal_id>", methods=["PUT"])
@login_required
def update_deal(deal_id: str):
    """既存値に送信項目を重ねてから検証し、確定後のステージで再採点する。"""
    deal = _get_deal_or_404(deal_id)
    if not can_modify_deal(current_user.role, current_user.id, deal.assigned_to_id):
        raise deny(Action.WRITE, f"deal={deal.id}")

    payload = json_payload()
    if payload.get("type") is not None and payload["type"] != deal.type:
        raise ValidationFailed(errors=field_errors({"type": ["案件の種別は変更できません。"]}))

    merged = {**DealForm.payload_from_deal(deal), **payload}
    merged["type"] = deal.type
    if not has_permission(current_user.role, Action.WRITE, Scope.ALL):
        merged["assignedToId"] = deal.assigned_to_id
    form = DealForm.from_json(merged)
    if not form.validate():
        raise ValidationFailed(errors=form.error_list())

    previous_stage, previous_rank = deal.stage, deal.rank
    deal = deal_store.update_deal(deal.id, form.deal_values())
    if deal is None:
        raise NotFound("案件が見つかりません。")
    current_app.logger.info(
        "deal updated: id=%s stage=%s->%s rank=%s->%s score=%s by=%s",
        deal.id,
        previous_stage,
        deal.stage,
        previous_rank,
        deal.rank,
        deal.score,
        current_user.id,
    )
    return jsonify(deal.to_dict())


@deals_bp.route("/deals/<deal_id>", methods=["DELETE"])
@login_required
def delete_deal(deal_id: str):
    deal = _get_deal_or_404(deal_id)
    if not can_modify_deal(current_user.role, current_user.id, deal.assigned_to_id):
        raise deny(Action.WRITE, f"deal={deal.id}")
    if not deal_store.delete_deal(deal.id):
        raise NotFound("案件が見つかりません。")
    current_app.logger.info("deal deleted: id=%s by=%s", deal_id, current_user.id)
    return "", 204
