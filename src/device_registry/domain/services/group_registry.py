"""Group registry: create, look up, list and rename groups of a namespace."""

import uuid

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from device_registry.core.config import get_settings
from device_registry.core.expressions import ExpressionSyntaxError, parse_expression
from device_registry.core.logging import get_logger
from device_registry.domain.entities.group import Group, GroupType
from device_registry.domain.entities.page import Page, PageRequest
from device_registry.domain.errors import (
    DuplicateNameError,
    GroupNotFoundError,
    InvalidExpressionError,
)
from device_registry.infrastructure.persistence.models import GroupModel
from device_registry.infrastructure.persistence.repositories import GroupRepository

logger = get_logger(__name__)


def validate_expression(group_type: GroupType, expression: str | None) -> None:
    """Check the type/expression pairing and that a dynamic expression parses.

    Raises:
        InvalidExpressionError: If a dynamic group lacks a parsable expression
            or a static group carries one.
    """
    if group_type is GroupType.STATIC:
        if expression is not None:
            raise InvalidExpressionError("Static groups cannot have an expression")
        return

    if not expression or not expression.strip():
        raise InvalidExpressionError("Dynamic groups require an expression")

    try:
        parse_expression(expression)
    except ExpressionSyntaxError as e:
        raise InvalidExpressionError(f"Invalid group expression: {e}") from e
    except (RecursionError, ValueError) as e:
        raise InvalidExpressionError("Invalid group expression") from e


class GroupRegistry:
    """Service for group records scoped to a namespace."""

    def __init__(self, session: AsyncSession) -> None:
        settings = get_settings()
        self.session = session
        self.repository = GroupRepository(session)
        self.default_page_limit = settings.default_page_limit
        self.max_page_limit = settings.max_page_limit

    def page_request(self, offset: int | None, limit: int | None) -> PageRequest:
        return PageRequest.build(offset, limit, self.default_page_limit, self.max_page_limit)

    async def create(
        self,
        name: str,
        namespace: str,
        group_type: GroupType,
        expression: str | None = None,
    ) -> str:
        """Register a new group.

        Args:
            name: Group name, unique within the namespace (exact match).
            namespace: Owning namespace.
            group_type: Static or dynamic.
            expression: Membership expression, required iff dynamic.

        Returns:
            The new group id.

        Raises:
            InvalidExpressionError: If the expression does not fit the group type.
            DuplicateNameError: If the namespace already has a group named ``name``.
        """
        group_type = GroupType(group_type)
        validate_expression(group_type, expression)

        if await self.repository.get_by_name_and_namespace(name, namespace) is not None:
            raise DuplicateNameError(name, namespace)

        group = Group(
            id=str(uuid.uuid4()),
            namespace=namespace,
            name=name,
            group_type=group_type,
            expression=expression,
        )
        model = GroupModel(
            id=group.id,
            namespace=group.namespace,
            name=group.name,
            group_type=group.group_type.value,
            expression=group.expression,
        )
        await self._flush_unique(self.repository.create, model, name, namespace)

        logger.info(
            "Group created",
            group_id=group.id,
            namespace=namespace,
            group_type=group_type.value,
        )
        return group.id

    async def get(self, group_id: str) -> Group:
        """Get a group.

        Raises:
            GroupNotFoundError: If the group does not exist.
        """
        group = await self.repository.get_by_id(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)
        return group.to_entity()

    async def list(self, namespace: str, offset: int | None = None, limit: int | None = None) -> Page[Group]:
        """List groups of a namespace ordered by name, then id."""
        page = self.page_request(offset, limit)
        total = await self.repository.count(namespace)
        groups = await self.repository.list(namespace, page.offset, page.limit)
        return Page(
            total=total,
            offset=page.offset,
            limit=page.limit,
            values=[group.to_entity() for group in groups],
        )

    async def rename(self, group_id: str, new_name: str) -> Group:
        """Rename a group in place.

        Renaming a group to its current name is a no-op.

        Raises:
            GroupNotFoundError: If the group does not exist.
            DuplicateNameError: If another group of the namespace holds ``new_name``.
        """
        group = await self.repository.get_by_id(group_id)
        if group is None:
            raise GroupNotFoundError(group_id)

        if group.name == new_name:
            return group.to_entity()

        existing = await self.repository.get_by_name_and_namespace(new_name, group.namespace)
        if existing is not None and existing.id != group.id:
            raise DuplicateNameError(new_name, group.namespace)

        group.name = new_name
        await self._flush_unique(self.repository.update, group, new_name, group.namespace)
        logger.info("Group renamed", group_id=group_id, namespace=group.namespace)
        return group.to_entity()

    async def _flush_unique(self, write, group: GroupModel, name: str, namespace: str) -> None:
        # A concurrent request can claim the name between the lookup and the
        # flush; the unique constraint on (namespace, name) decides the winner.
        try:
            await write(group)
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Group name taken concurrently", name=name, namespace=namespace)
            raise DuplicateNameError(name, namespace) from e
