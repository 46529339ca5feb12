import os, jwt
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, Optional

JWT_SECRET = os.getenv("JWT_SECRET", "dev_secret_change_me_before_deploying")
JWT_ALG = "HS256"
JWT_EXP_MIN = int(os.getenv("JWT_EXP_MIN", str(60 * 24)))

# university slug -> email domains allowed to use its calculator
UNIVERSITY_DOMAINS: Dict[str, tuple] = {
    "unidep": ("unidep.mx", "unidep.edu.mx", "*.unidep.edu.mx"),
}

# known universities whose calculator is not open yet (slug -> label)
BLOCKED_UNIVERSITIES: Dict[str, str] = {
    "utc": "Demo 1",
    "ula": "Demo 2",
}

def get_email_domain(email: str) -> str:
    parts = (email or "").strip().lower().split("@")
    return parts[1] if len(parts) == 2 else ""

def is_allowed_domain(domain: str, allowed_domains: Iterable[str]) -> bool:
    """
    Exact match, or any strict subdomain for "*.base" entries.
    The bare base never matches a wildcard entry.
    """
    normalized = (domain or "").strip().lower()
    if not normalized:
        return False
    for entry in allowed_domains:
        allowed = entry.lower()
        if allowed.startswith("*."):
            base = allowed[2:]
            if normalized != base and normalized.endswith(f".{base}"):
                return True
        elif normalized == allowed:
            return True
    return False

def allowed_domains_for(slug: str) -> Optional[tuple]:
    return UNIVERSITY_DOMAINS.get((slug or "").strip().lower())

def create_session_token(email: str, slug: str, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": email.strip().lower(),
        "slug": slug,
        "iat": now,
        "exp": now + (expires_delta or timedelta(minutes=JWT_EXP_MIN)),
    }
    return jwt.encode(to_encode, JWT_SECRET, algorithm=JWT_ALG)

def decode_session_token(token: str) -> dict:
    return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALG])
