"""Passkey endpoints.

Options generation and credential management work; verifying a WebAuthn
response is not implemented and answers 501.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from novelcraft.api.deps import get_current_user, get_db, get_passkey_service
from novelcraft.api.endpoints.auth import login_payload
from novelcraft.core.exceptions import NotFoundError, ValidationError
from novelcraft.models.user import User
from novelcraft.repositories.users import UserRepository
from novelcraft.schemas.auth import PasskeyVerifyRequest, UserResponse
from novelcraft.schemas.common import MAX_ROW_ID, ok
from novelcraft.services.passkey import PasskeyService

router = APIRouter()


def _require_passkey_user(db: Session, username: str | None) -> User:
    user = UserRepository.get_by_username(db, username) if username else None
    if not user:
        raise NotFoundError("User not found")
    if not UserRepository.uses_passkey_auth(db, user.id):
        raise ValidationError("Passkey authentication is not enabled for this user")
    return user


@router.get("/status")
def passkey_status(
    username: str | None = Query(None),
    user_id: int | None = Query(None, ge=1, le=MAX_ROW_ID),
    db: Session = Depends(get_db),
    passkeys: PasskeyService = Depends(get_passkey_service),
):
    """General passkey support, or one user's passkey state."""
    support = {
        "available": passkeys.is_available(),
        "message": "Passkey login is not available yet",
    }

    if not username and user_id is None:
        return ok(
            "Passkey support information",
            {
                **support,
                "devices": [asdict(d) for d in passkeys.get_supported_devices()],
            },
        )

    if username:
        user = UserRepository.get_by_username(db, username)
    else:
        user = UserRepository.get_by_id(db, user_id)
    if not user:
        raise NotFoundError("User not found")

    credential = passkeys.get_credential(db, user.id)
    return ok(
        "Passkey status",
        {
            "user": UserResponse.model_validate(user),
            "passkey": {
                "enabled": passkeys.has_passkey(db, user.id),
                "has_credential": credential is not None,
                "credential_id": credential.id if credential else None,
            },
            "support": support,
        },
    )


@router.get("/register")
def registration_options(
    current_user: User = Depends(get_current_user),
    passkeys: PasskeyService = Depends(get_passkey_service),
):
    options = passkeys.generate_registration_options(current_user)
    return ok("Passkey registration options generated", asdict(options))


@router.post("/register")
def register_passkey(
    payload: PasskeyVerifyRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    passkeys: PasskeyService = Depends(get_passkey_service),
):
    if not payload.credential or not payload.challenge:
        raise ValidationError("Missing required fields: credential, challenge")

    credential = passkeys.verify_registration(
        current_user, payload.credential, payload.challenge
    )
    user = passkeys.save_credential(db, current_user.id, credential)
    return ok("Passkey registered", UserResponse.model_validate(user))


@router.delete("")
def delete_passkey(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    passkeys: PasskeyService = Depends(get_passkey_service),
):
    user = passkeys.delete_credential(db, current_user.id)
    return ok("Passkey removed", UserResponse.model_validate(user))


@router.get("/authenticate")
def authentication_options(
    username: str | None = Query(None),
    db: Session = Depends(get_db),
    passkeys: PasskeyService = Depends(get_passkey_service),
):
    if not username:
        raise ValidationError("The username parameter is required")
    user = _require_passkey_user(db, username)
    options = passkeys.generate_authentication_options(user)
    return ok("Passkey authentication options generated", asdict(options))


@router.post("/authenticate")
def authenticate_passkey(
    payload: PasskeyVerifyRequest,
    response: Response,
    db: Session = Depends(get_db),
    passkeys: PasskeyService = Depends(get_passkey_service),
):
    if not payload.username or not payload.credential or not payload.challenge:
        raise ValidationError("Missing required fields: username, credential, challenge")

    user = _require_passkey_user(db, payload.username)
    user = passkeys.verify_authentication(user, payload.credential, payload.challenge)
    user = UserRepository.update_last_login(db, user.id)
    return ok("Passkey login successful", login_payload(response, user, "passkey"))
