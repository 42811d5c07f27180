"""Flaskアプリ全体の初期化処理とCLIコマンドを提供するモジュール。"""

from typing import Optional, Union

import click
from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.exceptions import HTTPException

from .errors import ApiError, Unauthenticated
from .extensions import db, login_manager, migrate


def create_app(config_object: Optional[Union[str, type]] = None) -> Flask:
    """不動産案件パイプライン CRM のアプリケーションファクトリ。"""
    load_dotenv()

    app = Flask(__name__)
    config_path = config_object or "config.Config"
    app.config.from_object(config_path)
    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    from .models import User  # noqa: WPS433

    @login_manager.user_loader
    def load_user(user_id: str) -> Optional[User]:
        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        raise Unauthenticated()

    register_error_handlers(app)

    from .blueprints.analytics.routes import analytics_bp
    from .blueprints.auth.routes import auth_bp
    from .blueprints.deals.routes import deals_bp
    from .blueprints.users.routes import users_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(deals_bp)
    app.register_blueprint(analytics_bp)
    app.register_blueprint(users_bp)

    register_commands(app)
    return app


def register_error_handlers(app: Flask) -> None:
    """API の失敗はすべて JSON で返し、プロセスを落とさない。"""

    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        if not request.path.startswith("/api"):
            return error
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        db.session.rollback()
        app.logger.exception("unhandled error on %s %s", request.method, request.path)
        return jsonify({"message": ApiError.message}), 500


def register_commands(app: Flask) -> None:
    from .seed import seed_data, upsert_user
    from .permissions import Role

    @app.cli.command("seed-data")
    @click.option("--with-reset", is_flag=True, help="既存データを全て削除してから投入します")
    def seed_data_command(with_reset: bool) -> None:
        """デモ用のユーザーと案件を生成します。"""
        seed_data(with_reset=with_reset)
        click.echo("Seed data generation completed.")

    @app.cli.command("create-user")
    @click.argument("email")
    @click.option("--role", type=click.Choice(Role.ALL), default=Role.AGENT, show_default=True)
    @click.option("--password", default=None, help="ローカルログイン用のパスワード")
    @click.option("--user-id", default=None, help="外部 ID 基盤のユーザー ID（省略時はメールから生成）")
    @click.option("--first-name", default=None)
    @click.option("--last-name", default=None)
    def create_user_command(
        email: str,
        role: str,
        password: Optional[str],
        user_id: Optional[str],
        first_name: Optional[str],
        last_name: Optional[str],
    ) -> None:
        """ユーザーを作成し、既存ならロールと氏名を更新します。"""
        user = upsert_user(
            email=email,
            role=role,
            password=password,
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
        )
        click.echo(f"User {user.id} ({user.email}) saved with role {user.role}.")
