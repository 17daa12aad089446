"""Method-and-action routing shared by every resource controller.

A request path ``/<resource>[/<segment>[/<param>]]`` is resolved to an
``Action`` as follows:

* a purely numeric ``segment`` is a resource id, and the HTTP method alone
  picks the handler (``show``, ``update``, ``destroy``...);
* any other ``segment`` names an action such as ``authenticate``, with
  ``param`` handed to it untouched;
* without a ``segment`` the method is applied to the collection.

Controllers list the actions they implement in ``handlers``; anything not in
that table is a 404 before any authorization runs.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, ClassVar, Mapping

from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials

from vacation_api.core.errors import ApiError, InternalError, NotFound, Result, to_response

logger = logging.getLogger(__name__)


class Action(str, Enum):
    INDEX = "index"
    SHOW = "show"
    STORE = "store"
    UPDATE = "update"
    DESTROY = "destroy"
    AUTHENTICATE = "authenticate"
    PROFILE = "profile"
    VALIDATE = "validate"
    ADMIN = "admin"
    STATUSES = "statuses"
    MY = "my"


CRUD_ACTIONS = frozenset({Action.INDEX, Action.SHOW, Action.STORE, Action.UPDATE, Action.DESTROY})
ID_REQUIRED_ACTIONS = frozenset({Action.UPDATE, Action.DESTROY})

METHOD_ACTIONS = {
    "POST": Action.STORE,
    "PUT": Action.UPDATE,
    "PATCH": Action.UPDATE,
    "DELETE": Action.DESTROY,
}


@dataclass(frozen=True)
class RequestContext:
    """Everything a handler may know about the incoming request."""

    method: str
    action: str | None = None
    param: str | None = None
    token: str | None = None
    body: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        method: str,
        segments: list[str] | tuple[str, ...] = (),
        token: str | None = None,
        body: Any = None,
    ) -> "RequestContext":
        segments = [segment for segment in segments if segment]
        return cls(
            method=method.upper(),
            action=segments[0] if len(segments) > 0 else None,
            param=segments[1] if len(segments) > 1 else None,
            token=token,
            body=MappingProxyType(body if isinstance(body, dict) else {}),
        )


@dataclass(frozen=True)
class Route:
    action: Action
    param: Any = None


def is_resource_id(segment: str | None) -> bool:
    return bool(segment) and segment.isascii() and segment.isdigit()


def resolve(method: str, action: str | None, param: str | None) -> Route | ApiError:
    method = method.upper()

    if is_resource_id(action):
        return _resolve_method(method, int(action))

    if action:
        try:
            named = Action(action)
        except ValueError:
            return NotFound(f"Action '{action}' not found")
        if named in CRUD_ACTIONS:
            return NotFound(f"Action '{action}' not found")
        return Route(named, param)

    return _resolve_method(method, None)


def _resolve_method(method: str, resource_id: int | None) -> Route | ApiError:
    if method == "GET":
        return Route(Action.SHOW if resource_id is not None else Action.INDEX, resource_id)
    if method not in METHOD_ACTIONS:
        return NotFound(f"Action '{method}' not found")
    return Route(METHOD_ACTIONS[method], resource_id)


Handler = Callable[[Any, RequestContext, Any], Result]


class Controller:
    """Base class for resource controllers.

    Subclasses fill ``handlers`` with the actions they implement.
    """

    handlers: ClassVar[Mapping[Action, Handler]] = MappingProxyType({})

    def route(self, ctx: RequestContext) -> Route | ApiError:
        route = resolve(ctx.method, ctx.action, ctx.param)
        if isinstance(route, ApiError):
            return route
        if route.action not in self.handlers:
            return NotFound(f"Action '{route.action.value}' not found")
        if route.action in ID_REQUIRED_ACTIONS and route.param is None:
            return NotFound("Resource id is required")
        return route

    def handle(self, ctx: RequestContext) -> Result:
        route = self.route(ctx)
        if isinstance(route, ApiError):
            return route
        handler = self.handlers[route.action]
        return handler(self, ctx, route.param)


def dispatch(controller: Controller, ctx: RequestContext) -> JSONResponse:
    try:
        result = controller.handle(ctx)
    except Exception as exc:
        logger.exception("Unhandled error while processing %s %s", ctx.method, ctx.action or "/")
        result = InternalError(str(exc))
    return to_response(result)


async def read_context(request: Request, credentials: HTTPAuthorizationCredentials | None = None) -> RequestContext:
    segments = request.path_params.get("segments", "")
    try:
        body = await request.json()
    except ValueError:
        # Empty or malformed bodies read as an empty object.
        body = {}
    return RequestContext.build(
        method=request.method,
        segments=segments.split("/"),
        token=credentials.credentials if credentials is not None else None,
        body=body,
    )
