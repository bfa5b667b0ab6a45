from datetime import timedelta
from types import SimpleNamespace

from fastapi import Response

from app.config import settings
from app.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    create_session_token,
    verify_token,
    set_session_cookie,
    clear_session_cookie,
    SESSION_MAX_AGE
)

def test_password_hash_roundtrip():
    hashed = get_password_hash("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed) == True
    assert verify_password("wrong horse", hashed) == False

def test_malformed_hash_never_matches():
    assert verify_password("anything", "not-a-bcrypt-hash") == False

def test_session_token_carries_string_subject():
    user = SimpleNamespace(id=42, email="a@example.com", name=None)
    payload = verify_token(create_session_token(user))

    assert payload['sub'] == "42"
    assert payload['email'] == "a@example.com"
    assert 'name' not in payload
    assert payload['exp'] > payload['iat']

def test_expired_token_rejected():
    token = create_access_token({"sub": "1"}, expires_delta=timedelta(seconds=-10))
    assert verify_token(token) is None

def test_tampered_token_rejected():
    token = create_access_token({"sub": "1"})
    header, payload, signature = token.split(".")
    other = create_access_token({"sub": "2"}).split(".")[1]

    assert verify_token(f"{header}.{other}.{signature}") is None

def test_token_without_subject_rejected():
    assert verify_token(create_access_token({"email": "a@example.com"})) is None

def test_session_cookie_attributes():
    response = Response()
    set_session_cookie(response, "abc")
    cookie = response.headers["set-cookie"]

    assert cookie.startswith(f"{settings.AUTH_COOKIE_NAME}=abc")
    assert f"Max-Age={SESSION_MAX_AGE}" in cookie
    assert "HttpOnly" in cookie
    assert "SameSite=lax" in cookie
    # development settings
    assert "Secure" not in cookie

def test_clear_session_cookie_expires_it():
    response = Response()
    clear_session_cookie(response)
    cookie = response.headers["set-cookie"]

    assert cookie.startswith(f'{settings.AUTH_COOKIE_NAME}=""')
    assert "Max-Age=0" in cookie
