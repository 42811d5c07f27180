"""API ルート間で共有するリクエスト処理と権限チェックの補助関数。"""

from __future__ import annotations

from typing import Optional

from flask import current_app, request
from flask_login import current_user

from ..errors import PermissionDenied, ValidationFailed, field_errors
from ..permissions import Scope, effective_scope, has_permission


def json_payload() -> dict:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationFailed("JSON オブジェクトを送信してください。")
    return payload


def deny(action: str, detail: str = "") -> PermissionDenied:
    current_app.logger.warning(
        "permission denied: user=%s role=%s action=%s %s",
        current_user.id,
        current_user.role,
        action,
        detail,
    )
    return PermissionDenied()


def require_permission(action: str, scope: str) -> None:
    if not has_permission(current_user.role, action, scope):
        raise deny(action, f"scope={scope}")


def scoped_assignee(action: str) -> Optional[str]:
    """一覧・集計の絞り込み対象。all スコープなら None、own なら本人 ID、どちらも無ければ拒否。"""
    scope = effective_scope(current_user.role, action)
    if scope is None:
        raise deny(action, "scope=own")
    return None if scope == Scope.ALL else current_user.id


def choice_arg(name: str, choices) -> Optional[str]:
    """クエリ文字列の列挙値を検証する。空文字は未指定として扱う。"""
    value = (request.args.get(name) or "").strip()
    if not value:
        return None
    if value not in choices:
        raise ValidationFailed(errors=field_errors({name: ["選択できない値です。"]}))
    return value
