"""API 境界で JSON エラーに変換される例外の定義。"""

from __future__ import annotations

from typing import Optional


class ApiError(Exception):
    status_code = 500
    message = "サーバーエラーが発生しました。"

    def __init__(self, message: Optional[str] = None, errors: Optional[list] = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message
        self.errors = errors or []

    def to_dict(self) -> dict:
        body = {"message": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


class ValidationFailed(ApiError):
    status_code = 400
    message = "入力内容に誤りがあります。"


class Unauthenticated(ApiError):
    status_code = 401
    message = "ログインが必要です。"


class PermissionDenied(ApiError):
    status_code = 403
    message = "この操作を行う権限がありません。"


class NotFound(ApiError):
    status_code = 404
    message = "対象が見つかりません。"


def field_errors(errors: dict[str, list[str]]) -> list[dict]:
    """{"field": [...]} 形式を API 向けの配列に整形する。"""
    return [{"field": field, "messages": list(messages)} for field, messages in errors.items()]
