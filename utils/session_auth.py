import os, logging, jwt
from fastapi import Header, HTTPException

from models.schemas_auth import SessionOut
from utils.auth_utils import decode_session_token, allowed_domains_for, get_email_domain, is_allowed_domain

logger = logging.getLogger("session_auth")

def auth_session(authorization: str | None = Header(default=None)) -> SessionOut:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=401, detail="Missing token")
    token = authorization.split(" ", 1)[1]
    try:
        data = decode_session_token(token)
    except jwt.PyJWTError as e:
        logger.info(f"Session token rejected: {e}")
        raise HTTPException(status_code=401, detail=f"Invalid token: {e}")
    email, slug = data.get("sub"), data.get("slug")
    if not email or not slug:
        raise HTTPException(status_code=401, detail="Incomplete session")
    # the allowlist may have changed since the token was issued
    allowed = allowed_domains_for(slug)
    if not allowed or not is_allowed_domain(get_email_domain(email), allowed):
        raise HTTPException(status_code=403, detail="Domain not allowed")
    return SessionOut(email=email, slug=slug)

def calculator_gate(authorization: str | None = Header(default=None)) -> SessionOut | None:
    """Sessions are only enforced when SCHOLARSHIP_REQUIRE_AUTH=1."""
    if os.getenv("SCHOLARSHIP_REQUIRE_AUTH", "0") != "1":
        return None
    return auth_session(authorization)
