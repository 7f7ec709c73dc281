from typing import Dict, Optional
from datetime import datetime, timedelta, timezone
from threading import Lock
import time
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt

from core.config import settings
from models.auth import Session


bearer_scheme = HTTPBearer()


# ============================================================
# Revoked tokens (logout / credential change)
# ============================================================
# In-process only: a restart forgets revocations, tokens still expire.
# token id -> expiry (epoch seconds), pruned after expiry
_revoked_tokens: Dict[str, float] = {}
# person id -> revocation time; tokens issued earlier for that person are refused
_revoked_people: Dict[int, float] = {}
_revoked_lock = Lock()


def _token_lifetime() -> float:
    return settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60


def _prune_revocations(now: float) -> None:
    for token_id in [t for t, exp in _revoked_tokens.items() if exp <= now]:
        del _revoked_tokens[token_id]

    horizon = now - _token_lifetime()
    for person_id in [p for p, at in _revoked_people.items() if at <= horizon]:
        del _revoked_people[person_id]


def revoke_token(token_id: Optional[str], expires_at: Optional[float] = None) -> None:
    """
    Refuse a single token until it expires.
    Without `expires_at` the full token lifetime from now is assumed.
    """
    if not token_id:
        return
    now = time.time()
    with _revoked_lock:
        _prune_revocations(now)
        _revoked_tokens[token_id] = expires_at if expires_at is not None else now + _token_lifetime()


def revoke_person_tokens(person_id: Optional[int]) -> None:
    """Refuse every token issued so far to sessions bound to this person."""
    if person_id is None:
        return
    now = time.time()
    with _revoked_lock:
        _prune_revocations(now)
        _revoked_people[person_id] = now


def is_token_revoked(token_id: Optional[str], person_id: Optional[int] = None, issued_at: float = 0.0) -> bool:
    with _revoked_lock:
        _prune_revocations(time.time())
        if token_id in _revoked_tokens:
            return True
        revoked_at = _revoked_people.get(person_id) if person_id is not None else None
        return revoked_at is not None and issued_at < revoked_at


def clear_revoked_tokens() -> None:
    with _revoked_lock:
        _revoked_tokens.clear()
        _revoked_people.clear()


# ============================================================
# TOKEN ENCODING (session → JWT)
# ============================================================
def create_access_token(session: Session) -> tuple[str, Session]:
    """
    Sign a session into a bearer token.
    Returns the token and the session stamped with its token id.
    """
    token_id = uuid.uuid4().hex
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    payload = {
        "sub": str(session.id),
        "name": session.name,
        "email": session.email,
        "role": session.role.value,
        "person_id": session.person_id,
        "jti": token_id,
        "iat": time.time(),
        "exp": expire,
    }

    token = jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return token, session.model_copy(update={"token_id": token_id})


# ============================================================
# AUTH DECODING (JWT → session)
# ============================================================
def decode_access_token(token: str) -> Session:
    unauthorized = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid or expired authentication token",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        raise unauthorized

    token_id = payload.get("jti")
    if not token_id:
        raise unauthorized

    try:
        issued_at = float(payload.get("iat") or 0)
    except (TypeError, ValueError):
        raise unauthorized

    if is_token_revoked(token_id, payload.get("person_id"), issued_at):
        raise unauthorized

    # Unknown roles are kept as-is here and resolved to the least
    # privileged role by the capability checks.
    from core.permission_helpers import resolve_role

    try:
        return Session(
            id=int(payload.get("sub")),
            name=payload.get("name") or "",
            email=payload.get("email") or "",
            role=resolve_role(payload.get("role")),
            person_id=payload.get("person_id"),
            token_id=token_id,
        )
    except (TypeError, ValueError):
        raise unauthorized


def get_current_session(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
) -> Session:
    return decode_access_token(credentials.credentials)


# ============================================================
# OPTIONAL AUTHENTICATION (for hybrid endpoints)
# ============================================================
def get_optional_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False)),
) -> Optional[Session]:
    """
    Returns the Session if a valid token is provided, None otherwise.
    """
    if not credentials:
        return None

    try:
        return decode_access_token(credentials.credentials)
    except HTTPException:
        return None
