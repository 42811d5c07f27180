"""ログイン API のリクエストを検証するフォーム。"""

from wtforms import EmailField, PasswordField
from wtforms.validators import DataRequired, Email

from ...forms import JsonForm


class LoginForm(JsonForm):
    email = EmailField("メールアドレス", validators=[DataRequired(), Email()])
    password = PasswordField("パスワード", validators=[DataRequired()])
