import logging
from types import MappingProxyType
from typing import Any, Mapping

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import EmailStr, TypeAdapter, ValidationError
from sqlalchemy.orm import Session

from vacation_api.auth import jwt_handler
from vacation_api.auth.dependencies import get_current_claims, is_self_or_admin, require_role, security
from vacation_api.auth.passwords import verify_password
from vacation_api.core.errors import (
    ApiError,
    AuthenticationInvalid,
    AuthorizationDenied,
    BadRequest,
    NotFound,
    Ok,
    Result,
    ValidationFailed,
)
from vacation_api.database import get_db
from vacation_api.gateways.users_gateway import UsersGateway, serialize_user
from vacation_api.models.enums import UserRole
from vacation_api.routes.dispatcher import Action, Controller, RequestContext, dispatch, read_context

router = APIRouter(tags=['users'])
logger = logging.getLogger(__name__)

ROUTE_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']

_email_adapter = TypeAdapter(EmailStr)


def is_valid_email(value: Any) -> bool:
    if not isinstance(value, str) or not value:
        return False
    try:
        _email_adapter.validate_python(value)
    except ValidationError:
        return False
    return True


def get_validation_errors(data: Mapping[str, Any], is_new: bool = True) -> list[str]:
    errors: list[str] = []

    if is_new and not data.get('password'):
        errors.append('Password is required')

    if not data.get('name'):
        errors.append('Name is required')

    if not is_valid_email(data.get('email')):
        errors.append('Valid email is required')

    if not data.get('username'):
        errors.append('Username is required')

    if data.get('roles_id') is not None and UserRole.from_value(data['roles_id']) is None:
        errors.append('Role must be 1 (ADMIN) or 2 (USER)')

    return errors


class UserController(Controller):
    def __init__(self, users_gateway: UsersGateway):
        self.users_gateway = users_gateway

    # GET /users
    def index(self, ctx: RequestContext, _param=None) -> Result:
        claims = require_role(ctx.token, UserRole.ADMIN)
        if isinstance(claims, ApiError):
            return claims
        return Ok(self.users_gateway.get_all_users())

    # GET /users/{id}
    def show(self, ctx: RequestContext, user_id: int) -> Result:
        claims = get_current_claims(ctx.token)
        if isinstance(claims, ApiError):
            return claims
        if not is_self_or_admin(claims, user_id):
            logger.warning('User %s denied access to user %s', claims.user_id, user_id)
            return AuthorizationDenied()

        user = self.users_gateway.get_user_by_id(user_id)
        if user is None:
            return NotFound('User not found')
        return Ok(user)

    # POST /users
    def store(self, ctx: RequestContext, _param=None) -> Result:
        claims = require_role(ctx.token, UserRole.ADMIN)
        if isinstance(claims, ApiError):
            return claims

        errors = get_validation_errors(ctx.body)
        if errors:
            return ValidationFailed(errors=tuple(errors))

        new_user_id = self.users_gateway.create_user(dict(ctx.body))
        logger.info('User %s created by admin %s', new_user_id, claims.user_id)
        return Ok({'message': 'User created', 'id': new_user_id}, status_code=status.HTTP_201_CREATED)

    # PUT/PATCH /users/{id}
    # No ownership gate here: any caller may update any existing user.
    def update(self, ctx: RequestContext, user_id: int) -> Result:
        if not self.users_gateway.user_exists(user_id):
            return NotFound('User not found')

        errors = get_validation_errors(ctx.body, is_new=False)
        if errors:
            return ValidationFailed(errors=tuple(errors))

        self.users_gateway.update_user(user_id, dict(ctx.body))
        return Ok({'message': 'User updated', 'id': user_id})

    # DELETE /users/{id}
    def destroy(self, ctx: RequestContext, user_id: int) -> Result:
        claims = require_role(ctx.token, UserRole.ADMIN)
        if isinstance(claims, ApiError):
            return claims
        if not self.users_gateway.user_exists(user_id):
            return NotFound('User not found')

        self.users_gateway.delete_user(user_id)
        return Ok({'message': 'User deleted'})

    # POST /users/authenticate
    def authenticate(self, ctx: RequestContext, _param=None) -> Result:
        username = ctx.body.get('username')
        password = ctx.body.get('password')
        if not username or not password:
            return BadRequest('Username and password are required')

        user = self.users_gateway.find_by_username(str(username))
        if user is None or not verify_password(str(password), user.password):
            logger.info('Failed login attempt for username %r', username)
            return AuthenticationInvalid('Invalid credentials')

        token = jwt_handler.create_access_token(
            {'user_id': user.id, 'username': user.username, 'role_id': user.roles_id}
        )
        return Ok({
            'message': 'Authentication successful',
            'token': token,
            'user': serialize_user(user),
        })

    # GET /users/profile
    def profile(self, ctx: RequestContext, _param=None) -> Result:
        claims = get_current_claims(ctx.token)
        if isinstance(claims, ApiError):
            return claims

        user = self.users_gateway.get_user_by_id(claims.user_id)
        if user is None:
            return NotFound('User not found')
        return Ok({'user': user})

    # POST /users/validate
    def validate(self, ctx: RequestContext, _param=None) -> Result:
        claims = get_current_claims(ctx.token)
        if isinstance(claims, ApiError):
            return claims
        return Ok({'valid': True, **claims.public_claims()})

    # GET /users/admin
    def admin(self, ctx: RequestContext, _param=None) -> Result:
        claims = require_role(ctx.token, UserRole.ADMIN)
        if isinstance(claims, ApiError):
            return claims
        return Ok({'message': 'Welcome admin!', 'users': self.users_gateway.get_all_users()})

    handlers = MappingProxyType({
        Action.INDEX: index,
        Action.SHOW: show,
        Action.STORE: store,
        Action.UPDATE: update,
        Action.DESTROY: destroy,
        Action.AUTHENTICATE: authenticate,
        Action.PROFILE: profile,
        Action.VALIDATE: validate,
        Action.ADMIN: admin,
    })


@router.api_route('', methods=ROUTE_METHODS)
@router.api_route('/{segments:path}', methods=ROUTE_METHODS)
async def users_endpoint(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
):
    ctx = await read_context(request, credentials)
    controller = UserController(UsersGateway(db))
    return await run_in_threadpool(dispatch, controller, ctx)
