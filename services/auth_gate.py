# services/auth_gate.py

"""
Credential check: (login identifier, secret) → Session.

1. the built-in administrator credential from settings → role admin
2. a person whose email matches (case-insensitive) and whose tax code
   equals the secret → role user
3. anything else → AuthenticationFailure, with the same message whether
   the identifier is unknown or the secret is wrong
"""

import hmac

from core.config import settings
from core.errors import AuthenticationFailure, StoreError
from core.logging_config import get_logger
from core.store import RecordStore
from models.auth import Session
from models.enums import Role
from services.records import People


logger = get_logger("auth")

ADMIN_ID = 0
INVALID_CREDENTIALS = "Invalid email or password"


def _same_secret(given: str, expected: str) -> bool:
    return hmac.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


def admin_session() -> Session:
    return Session(
        id=ADMIN_ID,
        name=settings.ADMIN_NAME,
        email=settings.ADMIN_EMAIL,
        role=Role.admin,
    )


def authenticate(identifier: str, secret: str, store: RecordStore) -> Session:
    identifier = identifier or ""
    secret = secret or ""

    # -------------------------------------------------
    # 1. Built-in administrator
    # -------------------------------------------------
    if identifier == settings.ADMIN_EMAIL and _same_secret(secret, settings.ADMIN_PASSWORD):
        logger.info(f"Admin login: {identifier}")
        return admin_session()

    # -------------------------------------------------
    # 2. People collection (tax code is the secret)
    # -------------------------------------------------
    try:
        person = People(store).find_by_email(identifier)
    except StoreError as e:
        logger.error(f"Login verification failed for {identifier}: {e.message}")
        raise AuthenticationFailure(INVALID_CREDENTIALS)

    if person is not None:
        tax_code = (person.codice_fiscale or "").strip()
        if tax_code and _same_secret(secret, tax_code):
            logger.info(f"User login: {identifier} (person {person.id})")
            return Session(
                id=person.id,
                name=person.nome,
                email=person.email,
                role=Role.user,
                person_id=person.id,
            )

    # -------------------------------------------------
    # 3. Rejected
    # -------------------------------------------------
    logger.warning(f"Login attempt failed for {identifier}")
    raise AuthenticationFailure(INVALID_CREDENTIALS)
