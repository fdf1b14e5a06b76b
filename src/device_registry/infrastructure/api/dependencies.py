"""FastAPI dependencies for authentication and authorization.

Authentication turns the request into an AuthorizedScope. Authorization
dependencies then walk the ownership chain of the path's ``group_id`` or
``device_id`` through the AuthorizationGuard on every request.
"""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.core.config import get_settings
from device_registry.core.logging import get_logger
from device_registry.domain.entities.scope import (
    ALL_DEVICE_SCOPES,
    AuthorizedScope,
    Permission,
    ResourceKind,
    device_write_scope,
)
from device_registry.domain.errors import ForbiddenError
from device_registry.domain.services.authorization_guard import AuthorizationGuard
from device_registry.infrastructure.auth import (
    InvalidTokenError,
    TokenExpiredError,
    jwt_service,
)
from device_registry.infrastructure.messaging import MessageBus, build_message_bus
from device_registry.infrastructure.persistence.database import get_db_session

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_scope(
    request: Request,
    authorization: Annotated[str | None, Header()] = None,
) -> AuthorizedScope:
    """Build the caller's scope from the request.

    With ``auth_protocol = "none"`` the namespace comes from the namespace
    header and every device scope is granted. Otherwise a bearer token is
    required.

    Raises:
        HTTPException: 401 if the token is missing, invalid, or expired.
    """
    settings = get_settings()

    if settings.auth_protocol == "none":
        namespace = request.headers.get(settings.namespace_header) or settings.default_namespace
        return AuthorizedScope(namespace=namespace, scopes=ALL_DEVICE_SCOPES)

    if authorization is None:
        logger.info("Authentication failed: missing Authorization header")
        raise _unauthorized("Missing Authorization header")

    parts = authorization.split()
    if len(parts) != 2 or parts[0].lower() != "bearer":
        logger.info("Authentication failed: invalid Authorization header format")
        raise _unauthorized("Could not validate credentials")

    try:
        payload = jwt_service.validate_access_token(parts[1])
        namespace = payload["namespace"]
    except TokenExpiredError:
        logger.info("Authentication failed: token expired")
        raise _unauthorized("Token has expired")
    except InvalidTokenError as e:
        logger.info("Authentication failed: invalid token", error=str(e))
        raise _unauthorized(f"Invalid token: {str(e)}")
    except KeyError as e:
        logger.warning("Authentication failed: missing claim in token", missing_claim=str(e))
        raise _unauthorized(f"Missing claim: {str(e)}")

    return AuthorizedScope(
        namespace=namespace,
        scopes=jwt_service.scopes_from_claim(payload.get("scope")),
        subject=payload.get("sub"),
    )


CurrentScope = Annotated[AuthorizedScope, Depends(get_current_scope)]


def require_permission(permission: Permission):
    """Dependency factory checking a tenant-wide permission."""

    async def checker(scope: CurrentScope) -> AuthorizedScope:
        if not scope.allows(permission):
            logger.info(
                "Missing permission",
                permission=permission.value,
                subject=scope.subject,
                namespace=scope.namespace,
            )
            raise ForbiddenError(f"Scope does not grant {permission.value} access")
        return scope

    return checker


ReadScope = Annotated[AuthorizedScope, Depends(require_permission(Permission.READ))]
WriteScope = Annotated[AuthorizedScope, Depends(require_permission(Permission.WRITE))]


def get_authorization_guard(session: DbSession) -> AuthorizationGuard:
    return AuthorizationGuard(session)


Guard = Annotated[AuthorizationGuard, Depends(get_authorization_guard)]


async def authorize_group_read(group_id: str, scope: CurrentScope, guard: Guard) -> AuthorizedScope:
    await guard.authorize(scope, ResourceKind.GROUP, group_id, Permission.READ)
    return scope


async def authorize_group_write(group_id: str, scope: CurrentScope, guard: Guard) -> AuthorizedScope:
    await guard.authorize(scope, ResourceKind.GROUP, group_id, Permission.WRITE)
    return scope


async def authorize_device_read(device_id: str, scope: CurrentScope, guard: Guard) -> AuthorizedScope:
    await guard.authorize(scope, ResourceKind.DEVICE, device_id, Permission.READ)
    return scope


async def authorize_device_write(device_id: str, scope: CurrentScope, guard: Guard) -> AuthorizedScope:
    await guard.authorize(scope, ResourceKind.DEVICE, device_id, Permission.WRITE)
    return scope


async def authorize_device_owned(device_id: str, scope: CurrentScope, guard: Guard) -> AuthorizedScope:
    """The device must live in the caller's namespace; no permission implied."""
    await guard.ensure_owned(scope, ResourceKind.DEVICE, device_id)
    return scope


async def authorize_device_self(device_id: str, scope: CurrentScope, guard: Guard) -> str:
    """Authorize a device updating its own records.

    A token holding ``devices.<uuid>.write`` may update that device
    whatever namespace it was issued for. Any other caller needs tenant
    write access to the device's namespace.

    Returns:
        The namespace owning the device.

    Raises:
        ForbiddenError: If neither grant applies.
        DeviceNotFoundError: If the device does not exist.
    """
    if scope.has_scope(device_write_scope(device_id)):
        return await guard.resolve_namespace(ResourceKind.DEVICE, device_id)
    return await guard.authorize(scope, ResourceKind.DEVICE, device_id, Permission.WRITE)


GroupReader = Annotated[AuthorizedScope, Depends(authorize_group_read)]
GroupWriter = Annotated[AuthorizedScope, Depends(authorize_group_write)]
DeviceReader = Annotated[AuthorizedScope, Depends(authorize_device_read)]
DeviceWriter = Annotated[AuthorizedScope, Depends(authorize_device_write)]
DeviceOwner = Annotated[AuthorizedScope, Depends(authorize_device_owned)]
DeviceSelf = Annotated[str, Depends(authorize_device_self)]


def get_message_bus(request: Request) -> MessageBus:
    """Get the message bus from app state."""
    if not hasattr(request.app.state, "message_bus"):
        request.app.state.message_bus = build_message_bus(get_settings())
    return request.app.state.message_bus


Bus = Annotated[MessageBus, Depends(get_message_bus)]
