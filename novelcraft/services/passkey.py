"""
Authentication methods and the Passkey (WebAuthn) capability.

Password authentication is fully implemented in ``novelcraft.services.auth``.
Passkey support is limited to generating ceremony options and managing the
stored credential: verifying a WebAuthn attestation or assertion is not
implemented, and both verification calls raise ``PasskeyNotImplementedError``
instead of pretending to succeed.
"""

import base64
import json
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any

from sqlalchemy.orm import Session

from novelcraft.core.config import settings
from novelcraft.core.exceptions import PasskeyNotImplementedError
from novelcraft.models.user import User
from novelcraft.repositories.users import UserRepository

logger = logging.getLogger(__name__)

CHALLENGE_BYTES = 32
CEREMONY_TIMEOUT_MS = 60_000


class AuthMethod(str, Enum):
    PASSWORD = "password"
    PASSKEY = "passkey"


@dataclass
class PasskeyCredential:
    """Public part of a registered credential, stored as JSON on the user."""

    id: str
    public_key: str
    algorithm: str
    transports: list[str] = field(default_factory=list)

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, raw: str) -> "PasskeyCredential":
        data = json.loads(raw)
        # Older rows used camelCase keys
        if "publicKey" in data:
            data["public_key"] = data.pop("publicKey")
        return cls(
            id=data["id"],
            public_key=data["public_key"],
            algorithm=data["algorithm"],
            transports=list(data.get("transports") or []),
        )


@dataclass
class CeremonyOptions:
    challenge: str
    options: dict[str, Any]


@dataclass(frozen=True)
class SupportedDevice:
    type: str
    name: str
    supported: bool


SUPPORTED_DEVICES = (
    SupportedDevice("platform", "Windows Hello", True),
    SupportedDevice("platform", "macOS Touch ID", True),
    SupportedDevice("platform", "Android Biometric", True),
    SupportedDevice("cross-platform", "Security Key (YubiKey)", True),
    SupportedDevice("cloud", "Google Passkey", True),
)


def _new_challenge() -> str:
    raw = secrets.token_bytes(CHALLENGE_BYTES)
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _load_credential(raw: str | None, user_id: int) -> PasskeyCredential | None:
    if not raw:
        return None
    try:
        return PasskeyCredential.from_json(raw)
    except (ValueError, KeyError, TypeError):
        logger.warning("Unreadable passkey credential stored for user %s", user_id)
        return None


class Authenticator(ABC):
    """One way of proving who a user is."""

    method: AuthMethod

    @abstractmethod
    def is_available(self) -> bool:
        """Whether this method can currently log users in."""


class PasswordAuthenticator(Authenticator):
    method = AuthMethod.PASSWORD

    def is_available(self) -> bool:
        return True


class PasskeyService(Authenticator):
    """Passkey registration/authentication contract."""

    method = AuthMethod.PASSKEY

    def __init__(self, rp_id: str | None = None, rp_name: str | None = None):
        self.rp_id = rp_id or settings.PASSKEY_RP_ID
        self.rp_name = rp_name or settings.PASSKEY_RP_NAME

    def is_available(self) -> bool:
        return False

    def generate_registration_options(self, user: User) -> CeremonyOptions:
        logger.info("Generating passkey registration options for user %s", user.id)
        challenge = _new_challenge()
        return CeremonyOptions(
            challenge=challenge,
            options={
                "challenge": challenge,
                "rp": {"id": self.rp_id, "name": self.rp_name},
                "user": {
                    "id": str(user.id),
                    "name": user.username,
                    "displayName": user.username,
                },
                "pubKeyCredParams": [
                    {"type": "public-key", "alg": -7},  # ES256
                    {"type": "public-key", "alg": -257},  # RS256
                ],
                "timeout": CEREMONY_TIMEOUT_MS,
                "attestation": "none",
            },
        )

    def verify_registration(
        self, user: User, credential: dict[str, Any], challenge: str
    ) -> PasskeyCredential:
        raise PasskeyNotImplementedError(
            "Passkey registration is not available yet",
            error="WebAuthn attestation verification is not implemented",
        )

    def generate_authentication_options(self, user: User) -> CeremonyOptions:
        logger.info("Generating passkey authentication options for user %s", user.id)
        challenge = _new_challenge()
        allow = []
        stored = _load_credential(user.passkey_credential, user.id)
        if stored:
            allow.append(
                {"type": "public-key", "id": stored.id, "transports": stored.transports}
            )
        return CeremonyOptions(
            challenge=challenge,
            options={
                "challenge": challenge,
                "rpId": self.rp_id,
                "allowCredentials": allow,
                "timeout": CEREMONY_TIMEOUT_MS,
                "userVerification": "preferred",
            },
        )

    def verify_authentication(
        self, user: User, credential: dict[str, Any], challenge: str
    ) -> User:
        raise PasskeyNotImplementedError(
            "Passkey login is not available yet",
            error="WebAuthn assertion verification is not implemented",
        )

    @staticmethod
    def save_credential(db: Session, user_id: int, credential: PasskeyCredential) -> User:
        logger.info("Saving passkey credential for user %s", user_id)
        return UserRepository.update_to_passkey_auth(db, user_id, credential.to_json())

    @staticmethod
    def get_credential(db: Session, user_id: int) -> PasskeyCredential | None:
        return _load_credential(UserRepository.get_passkey_credential(db, user_id), user_id)

    @staticmethod
    def delete_credential(db: Session, user_id: int) -> User:
        logger.info("Removing passkey credential for user %s", user_id)
        return UserRepository.update_to_password_auth(db, user_id)

    @staticmethod
    def has_passkey(db: Session, user_id: int) -> bool:
        return UserRepository.uses_passkey_auth(db, user_id)

    @staticmethod
    def get_supported_devices() -> list[SupportedDevice]:
        return list(SUPPORTED_DEVICES)


AUTHENTICATORS: dict[AuthMethod, Authenticator] = {
    AuthMethod.PASSWORD: PasswordAuthenticator(),
    AuthMethod.PASSKEY: PasskeyService(),
}


def get_authenticator(method: str | AuthMethod) -> Authenticator:
    return AUTHENTICATORS[AuthMethod(method)]
