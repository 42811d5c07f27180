"""セッションのログイン・ログアウトと現在のユーザー取得 API。"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify
from flask_login import current_user, login_required, login_user, logout_user

from ...errors import Unauthenticated, ValidationFailed
from ...models import User
from ..helpers import json_payload
from .forms import LoginForm

auth_bp = Blueprint("auth", __name__, url_prefix="/api")


@auth_bp.route("/login", methods=["POST"])
def login():
    form = LoginForm.from_json(json_payload())
    if not form.validate():
        raise ValidationFailed(errors=form.error_list())

    user = User.query.filter_by(email=form.email.data.strip().lower()).first()
    if user is None or not user.check_password(form.password.data):
        current_app.logger.info("login failed: email=%s", form.email.data)
        raise Unauthenticated("メールアドレスまたはパスワードが正しくありません。")
    login_user(user)
    current_app.logger.info("login: user=%s role=%s", user.id, user.role)
    return jsonify(user.to_dict())


@auth_bp.route("/logout", methods=["POST"])
def logout():
    if current_user.is_authenticated:
        current_app.logger.info("logout: user=%s", current_user.id)
    logout_user()
    return "", 204


@auth_bp.route("/auth/user", methods=["GET"])
@login_required
def current_session_user():
    return jsonify(current_user.to_dict())
