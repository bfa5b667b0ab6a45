"""
Standard-library-only token parsing for the request gate.

The gate runs before any database session or JOSE backend is touched, so this
module decodes the JWT by hand. When a secret is given the HS256 signature is
checked with hmac; without one only structure and the required expiry are
checked, and the returned subject must not be trusted for authorization.
"""

import base64
import hashlib
import hmac
import json
import time
from typing import Optional

def _b64url_decode(segment: str) -> bytes:
    padded = segment + "=" * (-len(segment) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))

def _signature_matches(header_segment: str, payload_segment: str,
                       signature_segment: str, secret: str) -> bool:
    signing_input = f"{header_segment}.{payload_segment}".encode("ascii")
    expected = hmac.new(secret.encode("utf-8"), signing_input, hashlib.sha256).digest()
    return hmac.compare_digest(expected, _b64url_decode(signature_segment))

def parse_subject_id(token: Optional[str], secret: Optional[str] = None,
                     now: Optional[float] = None) -> Optional[str]:
    """
    Return the token's 'sub' claim, or None if the token is malformed,
    has no numeric 'exp', is expired, or (when secret is given) is not signed
    with HS256 under secret.
    """
    if not token:
        return None

    parts = token.split(".")
    if len(parts) != 3:
        return None
    header_segment, payload_segment, signature_segment = parts

    try:
        if secret is not None:
            header = json.loads(_b64url_decode(header_segment))
            if not isinstance(header, dict) or header.get("alg") != "HS256":
                return None
            if not _signature_matches(header_segment, payload_segment, signature_segment, secret):
                return None

        payload = json.loads(_b64url_decode(payload_segment))
    except (ValueError, UnicodeError):
        # binascii.Error and json.JSONDecodeError are both ValueErrors
        return None

    if not isinstance(payload, dict):
        return None

    # a token without exp would never expire
    exp = payload.get("exp")
    if not isinstance(exp, (int, float)) or isinstance(exp, bool):
        return None
    if exp < (time.time() if now is None else now):
        return None

    subject = payload.get("sub")
    if subject is None:
        return None
    return str(subject)
