"""案件の作成・更新リクエストを検証するフォーム。

score / rank はフィールドとして定義しない。送られてきても検証対象外として捨てられる。
"""

from __future__ import annotations

from wtforms import DateField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, InputRequired, Length, NumberRange, Optional, ValidationError

from ...extensions import db
from ...forms import JsonForm
from ...models import Deal, User
from ...scoring import ALL_STAGES, DealType, stages_for


# BIGINT カラムに収まる上限。
MAX_AMOUNT_YEN = 2**63 - 1


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class DealForm(JsonForm):
    json_aliases = {
        "clientName": "client_name",
        "amountYen": "amount_yen",
        "nextAction": "next_action",
        "nextActionDue": "next_action_due",
        "assignedToId": "assigned_to_id",
    }

    type = SelectField("種別", choices=[(value, value) for value in DealType.ALL], validators=[DataRequired()])
    title = StringField("物件名", filters=[_strip], validators=[DataRequired(), Length(max=255)])
    client_name = StringField("顧客名", filters=[_strip], validators=[DataRequired(), Length(max=255)])
    stage = SelectField("ステージ", choices=[(value, value) for value in ALL_STAGES], validators=[DataRequired()])
    amount_yen = IntegerField("金額（円）", validators=[InputRequired(), NumberRange(min=1, max=MAX_AMOUNT_YEN)])
    next_action = TextAreaField("次回アクション", filters=[_strip], validators=[Optional()])
    next_action_due = DateField("次回アクション期限", format="%Y-%m-%d", validators=[Optional()])
    assigned_to_id = StringField("担当者", filters=[_strip], validators=[Optional()])

    def validate_stage(self, field) -> None:
        # 種別自体が不正な場合は type 側のエラーだけを返す。
        if self.type.data not in DealType.ALL:
            return
        if field.data not in stages_for(self.type.data):
            raise ValidationError(f"{self.type.data} のパイプラインに存在しないステージです。")

    def validate_assigned_to_id(self, field) -> None:
        if field.data and db.session.get(User, field.data) is None:
            raise ValidationError("存在しないユーザーです。")

    @classmethod
    def payload_from_deal(cls, deal: Deal) -> dict:
        """部分更新のマージ元となる、既存案件の書き込み可能項目。"""
        return {
            "type": deal.type,
            "title": deal.title,
            "clientName": deal.client_name,
            "stage": deal.stage,
            "amountYen": deal.amount_yen,
            "nextAction": deal.next_action,
            "nextActionDue": deal.next_action_due.isoformat() if deal.next_action_due else None,
            "assignedToId": deal.assigned_to_id,
        }

    def deal_values(self) -> dict:
        return {
            "type": self.type.data,
            "title": self.title.data,
            "client_name": self.client_name.data,
            "stage": self.stage.data,
            "amount_yen": self.amount_yen.data,
            "next_action": self.next_action.data or None,
            "next_action_due": self.next_action_due.data,
            "assigned_to_id": self.assigned_to_id.data or None,
        }
