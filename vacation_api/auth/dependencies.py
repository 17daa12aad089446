import logging

from fastapi.security import HTTPBearer

from vacation_api.auth import jwt_handler
from vacation_api.auth.jwt_handler import TokenClaims
from vacation_api.core.errors import (
    ApiError,
    AuthenticationInvalid,
    AuthenticationMissing,
    AuthorizationDenied,
)
from vacation_api.models.enums import UserRole

logger = logging.getLogger(__name__)

# Missing or non-Bearer headers yield None; handlers answer with 401 themselves.
security = HTTPBearer(auto_error=False)


def get_current_claims(token: str | None) -> TokenClaims | ApiError:
    if not token:
        return AuthenticationMissing()

    claims = jwt_handler.decode_access_token(token)
    if claims is None:
        return AuthenticationInvalid()
    return claims


def require_role(token: str | None, required: UserRole) -> TokenClaims | ApiError:
    claims = get_current_claims(token)
    if isinstance(claims, ApiError):
        return claims

    if not claims.has_role(required):
        logger.warning(
            "User %s (role %s) denied; %s role required",
            claims.user_id,
            claims.role_id,
            required.name,
        )
        return AuthorizationDenied()
    return claims


def is_self_or_admin(claims: TokenClaims, user_id: int) -> bool:
    return claims.user_id == user_id or claims.has_role(UserRole.ADMIN)
