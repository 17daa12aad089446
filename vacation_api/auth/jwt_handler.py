import logging
from datetime import datetime, timedelta, timezone

import jwt
from jwt.utils import base64url_decode, base64url_encode
from pydantic import BaseModel, ValidationError

from vacation_api.core import config
from vacation_api.models.enums import UserRole

logger = logging.getLogger(__name__)

class TokenClaims(BaseModel):
    """Identity facts carried by a signed access token."""

    user_id: int
    username: str
    role_id: int
    iat: int
    exp: int

    @property
    def role(self) -> UserRole | None:
        return UserRole.from_value(self.role_id)

    def has_role(self, required: UserRole) -> bool:
        role = self.role
        return role is not None and role.satisfies(required)

    def public_claims(self) -> dict:
        return {"user_id": self.user_id, "username": self.username, "role_id": self.role_id}


def create_access_token(
    claims: dict,
    expires_seconds: int | None = None,
    secret_key: str | None = None,
) -> str:
    lifetime = config.JWT_EXPIRES_SECONDS if expires_seconds is None else expires_seconds
    if lifetime <= 0:
        raise ValueError("Token lifetime must be a positive number of seconds.")

    issued_at = datetime.now(timezone.utc)
    payload = {
        **claims,
        "iat": issued_at,
        "exp": issued_at + timedelta(seconds=lifetime),
    }
    return jwt.encode(payload, secret_key or config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str, secret_key: str | None = None) -> TokenClaims | None:
    segments = token.split(".")
    if len(segments) != 3:
        return None

    try:
        payload = jwt.decode(
            token,
            secret_key or config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected access token: %s", exc)
        return None

    # base64 decoding ignores trailing pad bits; only the canonical form is accepted.
    signature = segments[2]
    if base64url_encode(base64url_decode(signature)).decode("ascii") != signature:
        logger.info("Rejected access token: non-canonical signature encoding")
        return None

    try:
        return TokenClaims.model_validate(payload)
    except ValidationError:
        logger.info("Rejected access token: incomplete claims")
        return None

