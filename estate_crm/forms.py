"""JSON リクエストボディを WTForms で検証するための共通フォーム基底。"""

from __future__ import annotations

from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict

from .errors import field_errors

SCALAR_TYPES = (str, int, float, bool)


class JsonForm(FlaskForm):
    """camelCase の JSON キーを snake_case のフィールド名に対応づけて検証する。"""

    class Meta:
        # セッション Cookie + JSON API のため CSRF トークンは使わない。
        csrf = False

    json_aliases: dict[str, str] = {}

    @classmethod
    def from_json(cls, payload: dict) -> "JsonForm":
        formdata = MultiDict()
        rejected = []
        for key, value in payload.items():
            name = cls.json_aliases.get(key, key)
            if value is None:
                continue
            if not isinstance(value, SCALAR_TYPES):
                rejected.append(name)
                continue
            formdata.add(name, str(value))
        form = cls(formdata=formdata)
        form.rejected_fields = rejected
        return form

    def validate(self, extra_validators=None) -> bool:
        valid = super().validate(extra_validators)
        for name in getattr(self, "rejected_fields", []):
            field = getattr(self, name, None)
            if field is None:
                continue
            field.errors = [*field.errors, "値の形式が正しくありません。"]
            valid = False
        return valid

    def error_list(self) -> list[dict]:
        reverse = {name: key for key, name in self.json_aliases.items()}
        return field_errors({reverse.get(name, name): errors for name, errors in self.errors.items()})
