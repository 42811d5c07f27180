"""ダッシュボード用の集計 API。担当分のみ閲覧できるロールは自分の案件だけを集計する。"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from flask_login import login_required

from ... import analytics
from ...errors import ValidationFailed, field_errors
from ...permissions import Action
from ...scoring import DealType
from ..helpers import scoped_assignee

analytics_bp = Blueprint("analytics", __name__, url_prefix="/api/analytics")

MAX_RECENT_DEALS = 50


@analytics_bp.route("/stats", methods=["GET"])
@login_required
def stats():
    return jsonify(analytics.deal_stats(assigned_to_id=scoped_assignee(Action.READ)))


@analytics_bp.route("/stage-distribution/<deal_type>", methods=["GET"])
@login_required
def stage_distribution(deal_type: str):
    if deal_type not in DealType.ALL:
        raise ValidationFailed(errors=field_errors({"type": ["RENTAL または SALES を指定してください。"]}))
    assignee = scoped_assignee(Action.READ)
    return jsonify(analytics.stage_distribution(deal_type, assigned_to_id=assignee))


@analytics_bp.route("/recent-deals", methods=["GET"])
@login_required
def recent_deals():
    assignee = scoped_assignee(Action.READ)
    limit = request.args.get("limit", type=int) or current_app.config["RECENT_DEALS_LIMIT"]
    limit = max(1, min(limit, MAX_RECENT_DEALS))
    deals = analytics.recent_deals(limit, assigned_to_id=assignee)
    return jsonify([deal.to_dict() for deal in deals])
