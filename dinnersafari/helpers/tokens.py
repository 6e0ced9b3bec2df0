"""
Signed participant links.

A token is base64url("<couple_id>:<person>:<issued_at>:<signature>") where the
signature is the first 16 hex chars of HMAC-SHA256 over the first three parts.
"""
import base64
import binascii
import hashlib
import hmac
import logging
import re
import time
from typing import Optional

log = logging.getLogger(__name__)

PERSON_TYPES = ("invited", "partner")


def _sign(data: str, secret: str) -> str:
    return hmac.new(secret.encode("utf-8"), data.encode("utf-8"), hashlib.sha256).hexdigest()[:16]


def create_token(couple_id: int, person_type: str = "invited", *, secret: str, issued_at: Optional[int] = None) -> str:
    if person_type not in PERSON_TYPES:
        raise ValueError("person_type must be 'invited' or 'partner'")

    issued_at = int(time.time()) if issued_at is None else int(issued_at)
    data = f"{couple_id}:{person_type}:{issued_at}"
    raw = f"{data}:{_sign(data, secret)}"
    return base64.urlsafe_b64encode(raw.encode("utf-8")).decode("ascii").rstrip("=")


def verify_token(token: str, *, secret: str, expiry_days: int = 30, now: Optional[float] = None) -> Optional[dict]:
    """Decoded payload, or None if the token is malformed, forged or expired."""
    try:
        padded = token + "=" * (-len(token) % 4)
        decoded = base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8")
    except (ValueError, binascii.Error, UnicodeError):
        log.info("token rejected: not base64url")
        return None

    parts = decoded.split(":")
    if len(parts) != 4:
        log.info("token rejected: wrong number of parts")
        return None

    couple_raw, person_type, issued_raw, signature = parts

    if not hmac.compare_digest(signature, _sign(f"{couple_raw}:{person_type}:{issued_raw}", secret)):
        log.info("token rejected: signature mismatch")
        return None

    try:
        couple_id = int(couple_raw)
        issued_at = int(issued_raw)
    except ValueError:
        return None

    now = time.time() if now is None else now
    if now - issued_at > expiry_days * 24 * 60 * 60:
        log.info("token rejected: expired couple_id=%s", couple_id)
        return None

    if person_type not in PERSON_TYPES:
        return None

    return {"couple_id": couple_id, "person_type": person_type, "issued_at": issued_at}


def access_from_params(params, *, secret: str, expiry_days: int = 30) -> Optional[dict]:
    """
    Resolve who is asking, from query params.

    1) ?token=... signed link (preferred)
    2) ?coupleId=123&person=partner legacy links, still accepted during migration
    """
    token = (params.get("token") or "").strip()
    if token:
        payload = verify_token(token, secret=secret, expiry_days=expiry_days)
        if payload:
            return {"couple_id": payload["couple_id"], "person_type": payload["person_type"]}

    # TODO: drop the raw coupleId fallback once all legacy invite links have expired
    raw_id = (params.get("coupleId") or "").strip()
    if raw_id:
        if not re.fullmatch(r"[0-9]+", raw_id) or int(raw_id) <= 0:
            return None
        person = params.get("person")
        return {"couple_id": int(raw_id), "person_type": "partner" if person == "partner" else "invited"}

    return None
