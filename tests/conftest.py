import pytest

from config import TestConfig
from estate_crm import create_app
from estate_crm.extensions import db
from estate_crm.models import User

PASSWORD = "password123"

USERS = [
    ("admin", "admin@example.com", "ADMIN"),
    ("manager", "manager@example.com", "MANAGER"),
    ("agent", "agent@example.com", "AGENT"),
    ("agent2", "agent2@example.com", "AGENT"),
    ("viewer", "viewer@example.com", "VIEWER"),
]


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        for user_id, email, role in USERS:
            user = User(id=user_id, email=email, role=role)
            user.set_password(PASSWORD)
            db.session.add(user)
        db.session.commit()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(app):
    """ロールごとにログイン済みのテストクライアントを返すファクトリ。"""

    def _login(user_id: str):
        email = next(email for uid, email, _ in USERS if uid == user_id)
        client = app.test_client()
        response = client.post("/api/login", json={"email": email, "password": PASSWORD})
        assert response.status_code == 200
        return client

    return _login


@pytest.fixture
def admin_client(login):
    return login("admin")


@pytest.fixture
def agent_client(login):
    return login("agent")


def deal_payload(**overrides):
    payload = {
        "type": "RENTAL",
        "title": "サンライトタワー 1201",
        "clientName": "山田太郎",
        "stage": "R_ENQUIRY",
        "amountYen": 150000,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def create_deal(admin_client):
    """管理者として案件を作成し、レスポンスの JSON を返す。"""

    def _create(**overrides):
        response = admin_client.post("/api/deals", json=deal_payload(**overrides))
        assert response.status_code == 201, response.get_json()
        return response.get_json()

    return _create
