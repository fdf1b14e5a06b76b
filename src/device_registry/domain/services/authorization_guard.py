"""Authorization guard resolving path identifiers to their owning namespace.

Every request naming a group or device is checked by walking the
ownership chain ``id -> owning record -> namespace`` and comparing the
result with the caller's authenticated namespace. Nothing is cached:
ids can disappear between requests, so each check reads current state.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.core.logging import get_logger
from device_registry.domain.entities.scope import AuthorizedScope, Permission, ResourceKind
from device_registry.domain.errors import (
    DeviceNotFoundError,
    ForbiddenError,
    GroupNotFoundError,
)
from device_registry.infrastructure.persistence.repositories import (
    DeviceRepository,
    GroupRepository,
)

logger = get_logger(__name__)


class AuthorizationGuard:
    """Checks that a caller's scope covers a group or device."""

    def __init__(self, session: AsyncSession) -> None:
        self.group_repository = GroupRepository(session)
        self.device_repository = DeviceRepository(session)

    async def resolve_namespace(self, kind: ResourceKind, resource_id: str) -> str:
        """Resolve the namespace owning a group or device.

        Raises:
            GroupNotFoundError: If ``kind`` is GROUP and no such group exists.
            DeviceNotFoundError: If ``kind`` is DEVICE and no such device exists.
        """
        if kind is ResourceKind.GROUP:
            namespace = await self.group_repository.get_namespace(resource_id)
            if namespace is None:
                raise GroupNotFoundError(resource_id)
            return namespace

        namespace = await self.device_repository.get_namespace(resource_id)
        if namespace is None:
            raise DeviceNotFoundError(resource_id)
        return namespace

    async def ensure_owned(self, scope: AuthorizedScope, kind: ResourceKind, resource_id: str) -> str:
        """Check that the resource lives in the caller's namespace.

        Returns:
            The resolved namespace.

        Raises:
            NotFoundError: If the resource does not exist.
            ForbiddenError: If it belongs to another namespace.
        """
        namespace = await self.resolve_namespace(kind, resource_id)
        if namespace != scope.namespace:
            logger.info(
                "Namespace mismatch",
                kind=kind.value,
                resource_id=resource_id,
                caller_namespace=scope.namespace,
            )
            raise ForbiddenError(f"{kind.value.capitalize()} '{resource_id}' is not in your namespace")
        return namespace

    async def authorize(
        self,
        scope: AuthorizedScope,
        kind: ResourceKind,
        resource_id: str,
        permission: Permission,
    ) -> str:
        """Resolve ownership and check the caller holds ``permission``.

        Returns:
            The resolved namespace.

        Raises:
            NotFoundError: If the resource does not exist.
            ForbiddenError: On namespace mismatch or missing permission.
        """
        namespace = await self.ensure_owned(scope, kind, resource_id)
        if not scope.allows(permission):
            logger.info(
                "Missing permission",
                kind=kind.value,
                resource_id=resource_id,
                permission=permission.value,
                subject=scope.subject,
            )
            raise ForbiddenError(f"Scope does not grant {permission.value} access")
        return namespace
