from fastapi import APIRouter, HTTPException, Depends
from pydantic import ValidationError

from core.config import settings
from core.errors import AuthenticationFailure, KondoError, handle_store_error
from core.logging_config import logger
from core.permission_helpers import capabilities_for, is_admin, requires_view
from core.store import RecordStore, get_record_store
from dependencies.auth import create_access_token, get_current_session, revoke_person_tokens, revoke_token
from models.auth import (
    Capabilities,
    LoginRequest,
    ProfileUpdate,
    ProfileUpdateResponse,
    Session,
    TokenResponse,
)
from models.enums import View
from models.person import PersonUpdate
from services.auth_gate import authenticate
from services.records import People, validation_failure_from


router = APIRouter(
    prefix="/auth",
    tags=["Auth"],
)


# ============================================================
# LOGIN
# ============================================================
@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Authenticate",
    description="""
    Administrator: the configured email and password.
    Residents: their email and their tax code (codice fiscale).

    Unknown email and wrong secret answer with the same 401.
    """,
)
def login(payload: LoginRequest, store: RecordStore = Depends(get_record_store)):
    try:
        session = authenticate(payload.email.strip(), payload.password, store)
    except AuthenticationFailure as e:
        raise HTTPException(status_code=401, detail=e.message)

    token, session = create_access_token(session)
    return TokenResponse(
        access_token=token,
        expires_in=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        session=session,
    )


# ============================================================
# LOGOUT
# ============================================================
@router.post("/logout", summary="End the current session")
def logout(session: Session = Depends(get_current_session)):
    revoke_token(session.token_id)
    logger.info(f"Logout: {session.email}")
    return {"success": True}


# ============================================================
# CURRENT SESSION
# ============================================================
@router.get("/me", response_model=Session, summary="Current session")
def read_me(session: Session = Depends(get_current_session)):
    return session


@router.get(
    "/capabilities",
    response_model=Capabilities,
    summary="Views and permissions of the current role",
)
def read_capabilities(session: Session = Depends(get_current_session)):
    return capabilities_for(session.role)


# ============================================================
# PROFILE (self-service)
# ============================================================
@router.patch(
    "/me",
    response_model=ProfileUpdateResponse,
    summary="Update own profile",
    description="""
    Residents can change their name, email and login secret (stored as the
    tax code of their person record). Changing the email or the secret ends
    the current session: `reauthenticate` is true and the token is revoked.

    The administrator profile comes from configuration and is not changed.
    """,
)
def update_profile(
    payload: ProfileUpdate,
    session: Session = Depends(requires_view(View.profile)),
    store: RecordStore = Depends(get_record_store),
):
    if is_admin(session) or session.person_id is None:
        return ProfileUpdateResponse(session=session)

    fields = {}
    if payload.nome is not None:
        fields["nome"] = payload.nome
    if payload.email is not None:
        fields["email"] = payload.email
    if payload.password is not None:
        fields["codice_fiscale"] = payload.password

    if not fields:
        return ProfileUpdateResponse(session=session)

    try:
        changes = PersonUpdate(**fields)
    except ValidationError as e:
        raise handle_store_error(validation_failure_from(e), "Invalid profile")

    try:
        person = People(store).update(session.person_id, changes)
    except KondoError as e:
        raise handle_store_error(e, "Failed to update profile")

    credentials_changed = (
        "codice_fiscale" in fields
        or person.email.strip().lower() != session.email.strip().lower()
    )

    if credentials_changed:
        revoke_token(session.token_id)
        revoke_person_tokens(person.id)
        logger.info(f"Credentials changed for person {person.id}, sessions revoked")

    updated = session.model_copy(update={"name": person.nome, "email": person.email})
    return ProfileUpdateResponse(session=updated, reauthenticate=credentials_changed)
