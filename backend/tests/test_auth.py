"""Login, verification codes and password reset"""
from datetime import datetime, timedelta

from conftest import DEFAULT_PASSWORD, auth_headers
from legal_vault.db.models import UserLog, UserStatus


def _login(client, email, password=DEFAULT_PASSWORD):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def test_verified_user_gets_token_and_login_is_logged(client, db, make_user):
    user = make_user(email="ana@example.com")

    response = _login(client, "ANA@example.com")

    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["id"] == user.id

    response = client.get("/api/v1/auth/verify", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert response.status_code == 200

    logs = db.query(UserLog).filter(UserLog.user_id == user.id).all()
    assert [log.action for log in logs] == ["Login"]


def test_wrong_password_is_unauthorized(client, make_user):
    make_user(email="ana@example.com")

    response = _login(client, "ana@example.com", "wrong-password")

    assert response.status_code == 401
    assert response.json()["code"] == "unauthorized"


def test_suspended_user_is_forbidden(client, make_user):
    user = make_user(email="ana@example.com", status=UserStatus.suspended)

    assert _login(client, "ana@example.com").status_code == 403
    assert client.get("/api/v1/auth/verify", headers=auth_headers(user)).status_code == 403


def test_unverified_user_completes_otp_flow(client, db, make_user):
    user = make_user(email="ben@example.com", is_verified=False)

    response = _login(client, "ben@example.com")
    assert response.status_code == 200
    assert response.json() == {"message": "Verification code sent to your email", "user_id": user.id}

    db.refresh(user)
    code = user.otp_code
    assert code and len(code) == 6

    wrong = "000000" if code != "000000" else "111111"
    response = client.post("/api/v1/auth/verify-2fa", json={"user_id": user.id, "code": wrong})
    assert response.status_code == 401

    response = client.post("/api/v1/auth/verify-2fa", json={"user_id": user.id, "code": code})
    assert response.status_code == 200
    assert "access_token" in response.json()

    db.refresh(user)
    assert user.is_verified is True
    assert user.otp_code is None


def test_expired_otp_is_rejected(client, db, make_user):
    user = make_user(
        is_verified=False,
        otp_code="123456",
        otp_expires_at=datetime.utcnow() - timedelta(minutes=1),
    )

    response = client.post("/api/v1/auth/verify-2fa", json={"user_id": user.id, "code": "123456"})

    assert response.status_code == 400


def test_verify_without_requested_code(client, make_user):
    user = make_user(is_verified=False)

    response = client.post("/api/v1/auth/verify-2fa", json={"user_id": user.id, "code": "123456"})

    assert response.status_code == 400


def test_forgot_password_does_not_reveal_accounts(client, make_user):
    make_user(email="ana@example.com")

    known = client.post("/api/v1/auth/forgot-password", json={"email": "ana@example.com"})
    unknown = client.post("/api/v1/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json() == unknown.json()


def test_reset_password_flow(client, db, make_user):
    user = make_user(email="ana@example.com")
    client.post("/api/v1/auth/forgot-password", json={"email": "ana@example.com"})
    db.refresh(user)
    token = user.password_reset_token

    response = client.post(
        "/api/v1/auth/reset-password", json={"token": token, "new_password": "a-new-password"}
    )
    assert response.status_code == 200

    assert _login(client, "ana@example.com", "a-new-password").status_code == 200

    response = client.post(
        "/api/v1/auth/reset-password", json={"token": token, "new_password": "another-password"}
    )
    assert response.status_code == 400


def test_bad_token_is_unauthorized(client):
    response = client.get("/api/v1/auth/verify", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"
