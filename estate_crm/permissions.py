"""ロール別の権限表と、案件へのアクセス可否を判定する純粋関数群。

権限表は (ロール, 操作) -> 許可スコープ の静的な対応表。判定関数は常に
呼び出し側からロールを受け取り、True/False を返すだけで例外は投げない。
"""

from __future__ import annotations

from typing import Optional


class Role:
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    AGENT = "AGENT"
    VIEWER = "VIEWER"

    ALL = (ADMIN, MANAGER, AGENT, VIEWER)


class Action:
    READ = "read"
    WRITE = "write"


class Scope:
    OWN = "own"
    TEAM = "team"
    ALL = "all"


PERMISSIONS: dict[tuple[str, str], frozenset[str]] = {
    (Role.ADMIN, Action.READ): frozenset({Scope.OWN, Scope.TEAM, Scope.ALL}),
    (Role.ADMIN, Action.WRITE): frozenset({Scope.OWN, Scope.ALL}),
    (Role.MANAGER, Action.READ): frozenset({Scope.OWN, Scope.TEAM}),
    (Role.MANAGER, Action.WRITE): frozenset({Scope.OWN, Scope.ALL}),
    (Role.AGENT, Action.READ): frozenset({Scope.OWN}),
    (Role.AGENT, Action.WRITE): frozenset({Scope.OWN}),
    (Role.VIEWER, Action.READ): frozenset({Scope.OWN}),
    (Role.VIEWER, Action.WRITE): frozenset(),
}


def has_permission(role: str, action: str, scope: str) -> bool:
    return scope in PERMISSIONS.get((role, action), frozenset())


def effective_scope(role: str, action: str) -> Optional[str]:
    """一覧・集計系で使う実効スコープ。all なら絞り込み不要、own なら担当分のみ、None は拒否。"""
    if has_permission(role, action, Scope.ALL):
        return Scope.ALL
    if has_permission(role, action, Scope.OWN):
        return Scope.OWN
    return None


def _can_touch(role: str, action: str, user_id: str, assigned_to_id: Optional[str]) -> bool:
    if has_permission(role, action, Scope.ALL):
        return True
    return has_permission(role, action, Scope.OWN) and assigned_to_id == user_id


def can_read_deal(role: str, user_id: str, assigned_to_id: Optional[str]) -> bool:
    return _can_touch(role, Action.READ, user_id, assigned_to_id)


def can_modify_deal(role: str, user_id: str, assigned_to_id: Optional[str]) -> bool:
    """更新・削除は全件書き込み権限を持つか、既存案件の担当者本人である必要がある。"""
    return _can_touch(role, Action.WRITE, user_id, assigned_to_id)


def assignee_for_new_deal(
    role: str,
    user_id: str,
    requested_id: Optional[str],
    default_id: Optional[str] = None,
) -> Optional[str]:
    """新規案件の担当者を決める。

    own のみの書き込み権限ではリクエスト内容に関わらず本人を担当者にする。
    all 権限では指定値を尊重し、未指定なら設定上の既定担当者、それも無ければ本人。
    書き込み権限が無い場合は None。
    """
    if has_permission(role, Action.WRITE, Scope.ALL):
        return requested_id or default_id or user_id
    if has_permission(role, Action.WRITE, Scope.OWN):
        return user_id
    return None
