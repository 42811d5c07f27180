"""担当者選択などに使うユーザー一覧 API。チーム閲覧権限が必要。"""

from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import login_required

from ...models import User
from ...permissions import Action, Role, Scope
from ..helpers import choice_arg, require_permission

users_bp = Blueprint("users", __name__, url_prefix="/api")


@users_bp.route("/users", methods=["GET"])
@login_required
def list_users():
    require_permission(Action.READ, Scope.TEAM)
    query = User.query
    role = choice_arg("role", Role.ALL)
    if role:
        query = query.filter(User.role == role)
    users = query.order_by(User.email.asc(), User.id.asc()).all()
    return jsonify([user.to_dict() for user in users])
