import base64
import hashlib
import hmac
import json
import time
from datetime import timedelta

from app.config import settings
from app.core.edge_auth import parse_subject_id
from app.core.security import create_access_token

SECRET = "edge-secret"

def _segment(data) -> str:
    raw = json.dumps(data).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()

def _sign(payload, secret=SECRET, alg="HS256") -> str:
    signing_input = f"{_segment({'alg': alg, 'typ': 'JWT'})}.{_segment(payload)}"
    signature = hmac.new(secret.encode(), signing_input.encode(), hashlib.sha256).digest()
    return f"{signing_input}.{base64.urlsafe_b64encode(signature).rstrip(b'=').decode()}"

def _token(payload, secret=SECRET, alg="HS256") -> str:
    """Signed token that expires in a minute unless the payload says otherwise"""
    return _sign(dict({"exp": time.time() + 60}, **payload), secret, alg)

def test_valid_token_returns_subject():
    token = _token({"sub": "7", "exp": time.time() + 60})
    assert parse_subject_id(token, SECRET) == "7"

def test_numeric_subject_is_stringified():
    assert parse_subject_id(_token({"sub": 7}), SECRET) == "7"

def test_reads_tokens_issued_by_the_app():
    token = create_access_token({"sub": "12"})
    assert parse_subject_id(token, settings.SECRET_KEY) == "12"

def test_expired_token():
    token = _token({"sub": "7", "exp": 1000})
    assert parse_subject_id(token, SECRET) is None
    assert parse_subject_id(token, SECRET, now=999) == "7"

def test_expired_app_token():
    token = create_access_token({"sub": "12"}, expires_delta=timedelta(seconds=-5))
    assert parse_subject_id(token, settings.SECRET_KEY) is None

def test_non_numeric_exp_rejected():
    assert parse_subject_id(_token({"sub": "7", "exp": "tomorrow"}), SECRET) is None

def test_missing_exp_rejected():
    token = _sign({"sub": "7"})
    assert parse_subject_id(token, SECRET) is None
    assert parse_subject_id(token) is None

def test_boolean_exp_rejected():
    assert parse_subject_id(_token({"sub": "7", "exp": True}), SECRET) is None

def test_missing_subject():
    assert parse_subject_id(_token({"exp": time.time() + 60}), SECRET) is None

def test_wrong_secret_rejected():
    assert parse_subject_id(_token({"sub": "7"}, secret="other"), SECRET) is None

def test_forged_payload_rejected():
    header, _, signature = _token({"sub": "7"}).split(".")
    forged = f"{header}.{_segment({'sub': '1'})}.{signature}"
    assert parse_subject_id(forged, SECRET) is None

def test_alg_none_rejected():
    unsigned = f"{_segment({'alg': 'none'})}.{_segment({'sub': '7'})}."
    assert parse_subject_id(unsigned, SECRET) is None

def test_structure_only_without_secret():
    assert parse_subject_id(_token({"sub": "7"}, secret="anything")) == "7"

def test_malformed_tokens():
    assert parse_subject_id(None) is None
    assert parse_subject_id("") is None
    assert parse_subject_id("only.two") is None
    assert parse_subject_id("a.b.c.d") is None
    assert parse_subject_id("!!!.@@@.###") is None
    assert parse_subject_id(f"{_segment({'alg': 'HS256'})}.{_segment([1, 2])}.sig") is None
    assert parse_subject_id(f"x.{base64.urlsafe_b64encode(b'not json').decode()}.y") is None
