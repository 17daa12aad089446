import logging
from datetime import date, datetime
from types import MappingProxyType
from typing import Any, Mapping

from fastapi import APIRouter, Depends, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from vacation_api.auth.dependencies import get_current_claims, require_role, security
from vacation_api.core.errors import (
    ApiError,
    AuthorizationDenied,
    BadRequest,
    NotFound,
    Ok,
    Result,
    ValidationFailed,
)
from vacation_api.database import get_db
from vacation_api.gateways.vacation_gateway import VacationGateway
from vacation_api.models.enums import UserRole, VacationStatus
from vacation_api.routes.dispatcher import Action, Controller, RequestContext, dispatch, read_context

router = APIRouter(tags=['vacations'])
logger = logging.getLogger(__name__)

ROUTE_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE']
DATE_FORMAT = '%Y-%m-%d'
MIN_REASON_LENGTH = 10
INVALID_STATUS_MESSAGE = 'Invalid status_id. Must be 1 (APPROVED), 2 (REJECTED), or 3 (PENDING)'


def parse_date(value: Any) -> date | None:
    """Parse a strict ``YYYY-MM-DD`` string; zero padding is mandatory."""
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None
    return parsed if parsed.strftime(DATE_FORMAT) == value else None


def get_validation_errors(data: Mapping[str, Any]) -> list[str]:
    errors: list[str] = []

    date_from = parse_date(data.get('date_from'))
    if not data.get('date_from'):
        errors.append('Start date (date_from) is required')
    elif date_from is None:
        errors.append('Start date (date_from) must be a valid date in format YYYY-MM-DD')

    date_to = parse_date(data.get('date_to'))
    if not data.get('date_to'):
        errors.append('End date (date_to) is required')
    elif date_to is None:
        errors.append('End date (date_to) must be a valid date in format YYYY-MM-DD')

    if date_from is not None and date_to is not None and date_to < date_from:
        errors.append('End date must be after or equal to start date')

    reason = data.get('reason')
    if not reason:
        errors.append('Reason is required')
    elif len(str(reason)) < MIN_REASON_LENGTH:
        errors.append(f'Reason must be at least {MIN_REASON_LENGTH} characters long')

    return errors


class VacationController(Controller):
    def __init__(self, vacation_gateway: VacationGateway):
        self.vacation_gateway = vacation_gateway

    # GET /vacations
    def index(self, ctx: RequestContext, _param=None) -> Result:
        claims = get_current_claims(ctx.token)
        if isinstance(claims, ApiError):
            return claims

        if claims.has_role(UserRole.ADMIN):
            return Ok(self.vacation_gateway.get_all_vacations())
        return Ok(self.vacation_gateway.get_vacations_by_user_id(claims.user_id))

    # GET /vacations/{id}
    def show(self, ctx: RequestContext, vacation_id: int) -> Result:
        claims = get_current_claims(ctx.token)
        if isinstance(claims, ApiError):
            return claims

        vacation = self.vacation_gateway.get_vacation_by_id(vacation_id)
        if vacation is None:
            return NotFound('Vacation not found')

        is_owner = self.vacation_gateway.is_vacation_owner(vacation_id, claims.user_id)
        if not claims.has_role(UserRole.ADMIN) and not is_owner:
            logger.warning('User %s denied access to vacation %s', claims.user_id, vacation_id)
            return AuthorizationDenied('Access denied')
        return Ok(vacation)

    # POST /vacations
    def store(self, ctx: RequestContext, _param=None) -> Result:
        claims = get_current_claims(ctx.token)
        if isinstance(claims, ApiError):
            return claims

        # Ownership and status always come from the token, never the body.
        data = {**ctx.body, 'user_id': claims.user_id, 'status_id': VacationStatus.PENDING.value}

        errors = get_validation_errors(data)
        if errors:
            return ValidationFailed(errors=tuple(errors))

        new_vacation_id = self.vacation_gateway.create_vacation(data)
        return Ok(
            {
                'message': 'Vacation request created successfully',
                'id': new_vacation_id,
                'status': VacationStatus.PENDING.name,
            },
            status_code=status.HTTP_201_CREATED,
        )

    # PUT/PATCH /vacations/{id}
    def update(self, ctx: RequestContext, vacation_id: int) -> Result:
        claims = require_role(ctx.token, UserRole.ADMIN)
        if isinstance(claims, ApiError):
            return claims

        if not self.vacation_gateway.vacation_exists(vacation_id):
            return NotFound('Vacation not found')

        if ctx.body.get('status_id') is None:
            return BadRequest('status_id is required')

        new_status = VacationStatus.from_value(ctx.body['status_id'])
        if new_status is None:
            return ValidationFailed(errors=(INVALID_STATUS_MESSAGE,))

        previous = self.vacation_gateway.get_vacation_status(vacation_id)
        self.vacation_gateway.update_vacation_status(vacation_id, new_status.value)
        logger.info(
            'Vacation %s moved from %s to %s by admin %s',
            vacation_id,
            previous.name if previous is not None else None,
            new_status.name,
            claims.user_id,
        )
        return Ok({
            'message': 'Vacation status updated successfully',
            'id': vacation_id,
            'status': new_status.name,
        })

    # DELETE /vacations/{id}
    def destroy(self, ctx: RequestContext, vacation_id: int) -> Result:
        claims = require_role(ctx.token, UserRole.ADMIN)
        if isinstance(claims, ApiError):
            return claims

        if not self.vacation_gateway.vacation_exists(vacation_id):
            return NotFound('Vacation not found')

        self.vacation_gateway.delete_vacation(vacation_id)
        return Ok({'message': 'Vacation deleted successfully'})

    # GET /vacations/statuses
    def statuses(self, ctx: RequestContext, _param=None) -> Result:
        claims = get_current_claims(ctx.token)
        if isinstance(claims, ApiError):
            return claims
        return Ok(self.vacation_gateway.get_all_statuses())

    # GET /vacations/my
    def my(self, ctx: RequestContext, _param=None) -> Result:
        claims = get_current_claims(ctx.token)
        if isinstance(claims, ApiError):
            return claims
        return Ok(self.vacation_gateway.get_vacations_by_user_id(claims.user_id))

    handlers = MappingProxyType({
        Action.INDEX: index,
        Action.SHOW: show,
        Action.STORE: store,
        Action.UPDATE: update,
        Action.DESTROY: destroy,
        Action.STATUSES: statuses,
        Action.MY: my,
    })


@router.api_route('', methods=ROUTE_METHODS)
@router.api_route('/{segments:path}', methods=ROUTE_METHODS)
async def vacations_endpoint(
    request: Request,
    db: Session = Depends(get_db),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
):
    ctx = await read_context(request, credentials)
    controller = VacationController(VacationGateway(db))
    return await run_in_threadpool(dispatch, controller, ctx)
