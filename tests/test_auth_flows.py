# tests/test_auth_flows.py
from datetime import datetime, timedelta, timezone

import pytest

from ielts_portal.core.config import settings
from ielts_portal.main import app
from ielts_portal.models.user import User
from ielts_portal.models.user_otp import UserOtp
from ielts_portal.services import mail_service
from ielts_portal.services.mail_service import MailError, MailSender, get_mail_sender

EMAIL = "new.student@ielts.com"


def _register(client, email=EMAIL, password="secret123"):
    resp = client.post("/api/Auth/register", json={"email": email, "password": password, "fullName": "New Student"})
    assert resp.status_code == 201
    return resp.json()["userId"]


def _login(client, email=EMAIL, password="secret123"):
    return client.post("/api/Auth/login", json={"email": email, "password": password})


class _BrokenMailSender:
    def send(self, to, subject, body):
        raise MailError("smtp down")


class TestRegistrationCode:
    def test_code_is_mailed_and_confirms(self, client, outbox):
        user_id = _register(client)
        assert outbox.messages[0]["to"] == EMAIL
        assert outbox.messages[0]["subject"] == "Confirm your registration"
        code = outbox.last_code(EMAIL)
        assert len(code) == 6 and code.isdigit()

        resp = client.post("/api/Auth/confirm-register", json={"userId": user_id, "otpCode": code})
        assert resp.status_code == 200
        assert resp.json() == {"message": "Registration confirmed"}

        token = _login(client).json()["access_token"]
        me = client.get("/api/Auth/me", headers={"Authorization": f"Bearer {token}"}).json()
        assert me["emailConfirmed"] is True

        # codes are single use
        resp = client.post("/api/Auth/confirm-register", json={"userId": user_id, "otpCode": code})
        assert resp.status_code == 400

    def test_wrong_code(self, client):
        user_id = _register(client)
        # generated codes are 100000-999999
        resp = client.post("/api/Auth/confirm-register", json={"userId": user_id, "otpCode": "000000"})
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid or expired OTP"

    def test_expired_code(self, client, db_session, outbox):
        user_id = _register(client)
        otp = db_session.query(UserOtp).filter(UserOtp.user_id == user_id).one()
        otp.expires_at = datetime.now(timezone.utc) - timedelta(minutes=1)
        db_session.commit()

        resp = client.post(
            "/api/Auth/confirm-register", json={"userId": user_id, "otpCode": outbox.last_code(EMAIL)}
        )
        assert resp.status_code == 400
        db_session.expire_all()
        assert db_session.get(User, user_id).email_confirmed is False

    def test_mail_outage_does_not_block_sign_up(self, client, db_session):
        app.dependency_overrides[get_mail_sender] = lambda: _BrokenMailSender()
        user_id = _register(client)
        assert db_session.get(User, user_id) is not None
        assert _login(client).status_code == 200


class TestRefreshToken:
    def test_login_returns_both_tokens(self, client):
        _register(client)
        body = _login(client).json()
        assert body["access_token"]
        assert body["refresh_token"]
        assert body["token_type"] == "bearer"

    def test_refresh_rotates(self, client):
        user_id = _register(client)
        first = _login(client).json()

        resp = client.post(
            "/api/Auth/refresh-token", json={"userId": user_id, "refreshToken": first["refresh_token"]}
        )
        assert resp.status_code == 200
        second = resp.json()
        assert second["refresh_token"] != first["refresh_token"]
        me = client.get("/api/Auth/me", headers={"Authorization": f"Bearer {second['access_token']}"})
        assert me.status_code == 200

        # the replaced token no longer works
        resp = client.post(
            "/api/Auth/refresh-token", json={"userId": user_id, "refreshToken": first["refresh_token"]}
        )
        assert resp.status_code == 401

    @pytest.mark.parametrize("token", ["garbage", ""])
    def test_bad_token(self, client, token):
        user_id = _register(client)
        resp = client.post("/api/Auth/refresh-token", json={"userId": user_id, "refreshToken": token})
        assert resp.status_code == 401

    def test_token_of_other_user(self, client, make_user):
        _register(client)
        refresh = _login(client).json()["refresh_token"]
        other = make_user("other@ielts.com", "Other Student")
        resp = client.post("/api/Auth/refresh-token", json={"userId": other.id, "refreshToken": refresh})
        assert resp.status_code == 401

    def test_expired_token(self, client, db_session):
        user_id = _register(client)
        refresh = _login(client).json()["refresh_token"]
        user = db_session.get(User, user_id)
        user.refresh_token_expires_at = datetime.now(timezone.utc) - timedelta(seconds=1)
        db_session.commit()

        resp = client.post("/api/Auth/refresh-token", json={"userId": user_id, "refreshToken": refresh})
        assert resp.status_code == 401

    def test_refresh_token_is_not_an_access_token(self, client):
        _register(client)
        refresh = _login(client).json()["refresh_token"]
        assert client.get("/api/Auth/me", headers={"Authorization": f"Bearer {refresh}"}).status_code == 401

    def test_banned_user(self, client, db_session):
        user_id = _register(client)
        refresh = _login(client).json()["refresh_token"]
        db_session.get(User, user_id).status = "Banned"
        db_session.commit()

        resp = client.post("/api/Auth/refresh-token", json={"userId": user_id, "refreshToken": refresh})
        assert resp.status_code == 403


class TestPasswordReset:
    def _reset(self, client, otp, new_password="brand-new", confirm=None):
        return client.post(
            "/api/Auth/reset-password",
            json={
                "email": EMAIL,
                "otp": otp,
                "newPassword": new_password,
                "confirmNewPassword": confirm or new_password,
            },
        )

    def test_unknown_email(self, client, outbox):
        resp = client.post("/api/Auth/forgot-password", json={"email": "nobody@ielts.com"})
        assert resp.status_code == 404
        assert resp.json()["detail"] == "Email not found"
        assert outbox.messages == []

    def test_full_reset(self, client, outbox):
        user_id = _register(client)
        old_refresh = _login(client).json()["refresh_token"]

        resp = client.post("/api/Auth/forgot-password", json={"email": EMAIL})
        assert resp.status_code == 200
        assert outbox.messages[-1]["subject"] == "Password Reset OTP"
        code = outbox.last_code(EMAIL)

        assert self._reset(client, code).status_code == 200
        assert _login(client).status_code == 401
        assert _login(client, password="brand-new").status_code == 200

        # earlier sessions cannot be refreshed after a reset
        resp = client.post("/api/Auth/refresh-token", json={"userId": user_id, "refreshToken": old_refresh})
        assert resp.status_code == 401

    def test_registration_code_cannot_reset(self, client, outbox):
        _register(client)
        resp = self._reset(client, outbox.last_code(EMAIL))
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid request. Check email, OTP or password match."

    def test_passwords_must_match(self, client, outbox):
        _register(client)
        client.post("/api/Auth/forgot-password", json={"email": EMAIL})
        code = outbox.last_code(EMAIL)

        assert self._reset(client, code, confirm="something-else").status_code == 400
        # a mismatch does not use up the code
        assert self._reset(client, code).status_code == 200

    def test_new_code_replaces_old(self, client, db_session, outbox):
        user_id = _register(client)
        client.post("/api/Auth/forgot-password", json={"email": EMAIL})
        client.post("/api/Auth/forgot-password", json={"email": EMAIL})

        assert db_session.query(UserOtp).filter(UserOtp.user_id == user_id, UserOtp.purpose == "reset").count() == 1
        assert self._reset(client, outbox.last_code(EMAIL)).status_code == 200

    def test_mail_outage(self, client):
        _register(client)
        app.dependency_overrides[get_mail_sender] = lambda: _BrokenMailSender()
        resp = client.post("/api/Auth/forgot-password", json={"email": EMAIL})
        assert resp.status_code == 503


class TestMailSender:
    def test_requires_smtp_server(self, monkeypatch):
        monkeypatch.setattr(settings, "MAIL_SMTP_SERVER", None)
        with pytest.raises(MailError):
            MailSender().send(EMAIL, "Hi", "Body")

    def test_sends_over_starttls(self, monkeypatch):
        sent = []

        class _FakeSMTP:
            def __init__(self, host, port, timeout=None):
                sent.append(("connect", host, port))

            def __enter__(self):
                return self

            def __exit__(self, *exc):
                return False

            def starttls(self):
                sent.append(("starttls",))

            def login(self, username, password):
                sent.append(("login", username, password))

            def send_message(self, message):
                sent.append(("send", message["To"], message["Subject"], message.get_content().strip()))

        monkeypatch.setattr(mail_service.smtplib, "SMTP", _FakeSMTP)
        monkeypatch.setattr(settings, "MAIL_SMTP_SERVER", "smtp.example.com")
        monkeypatch.setattr(settings, "MAIL_USERNAME", "portal@example.com")
        monkeypatch.setattr(settings, "MAIL_PASSWORD", "app-password")

        MailSender().send(EMAIL, "Password Reset OTP", "Your OTP: 123456")

        assert sent == [
            ("connect", "smtp.example.com", 587),
            ("starttls",),
            ("login", "portal@example.com", "app-password"),
            ("send", EMAIL, "Password Reset OTP", "Your OTP: 123456"),
        ]

    def test_smtp_errors_become_mail_errors(self, monkeypatch):
        def _refuse(*args, **kwargs):
            raise ConnectionRefusedError("no route")

        monkeypatch.setattr(mail_service.smtplib, "SMTP", _refuse)
        monkeypatch.setattr(settings, "MAIL_SMTP_SERVER", "smtp.example.com")
        with pytest.raises(MailError):
            MailSender().send(EMAIL, "Hi", "Body")
