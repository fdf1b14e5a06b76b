"""Pytest configuration for all tests."""

import os

os.environ.setdefault("DEVICE_REGISTRY_ENVIRONMENT", "testing")
os.environ.setdefault("DEVICE_REGISTRY_DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("DEVICE_REGISTRY_AUTH_PROTOCOL", "jwt")

import uuid
from typing import Any, AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from device_registry.domain.entities.scope import DEVICES_READ, DEVICES_WRITE
from device_registry.infrastructure.auth.jwt_service import jwt_service
from device_registry.infrastructure.messaging import Message
from device_registry.infrastructure.persistence.database import Base
from device_registry.infrastructure.persistence.models import DeviceModel, SystemInfoModel


class RecordingMessageBus:
    """Message bus double that records published messages.

    Set ``fail_with`` to make every publish raise that exception.
    """

    def __init__(self) -> None:
        self.messages: list[Message] = []
        self.fail_with: Exception | None = None

    async def publish(self, message: Message) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.messages.append(message)

    def of_type(self, message_type: str) -> list[Message]:
        return [m for m in self.messages if m.message_type == message_type]


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create a test database session.

    Uses an in-memory SQLite database for testing.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def message_bus() -> RecordingMessageBus:
    return RecordingMessageBus()


@pytest_asyncio.fixture
async def client(
    db_session: AsyncSession, message_bus: RecordingMessageBus
) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with overridden database dependency."""
    from device_registry.infrastructure.api.app import app
    from device_registry.infrastructure.persistence.database import get_db_session

    app.dependency_overrides[get_db_session] = lambda: db_session
    original_bus = app.state.message_bus
    app.state.message_bus = message_bus

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides = {}
    app.state.message_bus = original_bus


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Mint access tokens for a namespace."""

    def _make(namespace: str, scopes: tuple[str, ...] = (DEVICES_READ, DEVICES_WRITE), subject: str = "tester") -> str:
        return jwt_service.create_access_token(subject=subject, namespace=namespace, scopes=scopes)

    return _make


@pytest.fixture
def auth_headers(make_token: Callable[..., str]) -> Callable[..., dict[str, str]]:
    """Authorization headers for a namespace."""

    def _headers(namespace: str = "acme", scopes: tuple[str, ...] = (DEVICES_READ, DEVICES_WRITE)) -> dict[str, str]:
        return {"Authorization": f"Bearer {make_token(namespace, scopes)}"}

    return _headers


@pytest.fixture
def make_device(db_session: AsyncSession) -> Callable[..., Awaitable[DeviceModel]]:
    """Register a device, optionally with system info and network identity."""

    async def _make(
        device_id: str,
        namespace: str = "acme",
        attributes: dict[str, Any] | None = None,
        system_info: Any | None = None,
        network: dict[str, str] | None = None,
        device_name: str | None = None,
        device_type: str | None = None,
    ) -> DeviceModel:
        device = DeviceModel(
            uuid=str(uuid.uuid4()),
            namespace=namespace,
            device_id=device_id,
            device_name=device_name,
            device_type=device_type,
            attributes=attributes or {},
        )
        db_session.add(device)
        await db_session.flush()

        if system_info is not None or network is not None:
            network = network or {}
            db_session.add(
                SystemInfoModel(
                    device_uuid=device.uuid,
                    system_info=system_info,
                    local_ipv4=network.get("local_ipv4"),
                    mac_address=network.get("mac"),
                    hostname=network.get("hostname"),
                )
            )
            await db_session.flush()
        return device

    return _make
