"""Shared fixtures for HTTP-level tests."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from cherestapis.app import app
from cherestapis.managers.workspaces import WorkspaceAccessor


@pytest.fixture
async def client(accessor: WorkspaceAccessor) -> AsyncIterator[AsyncClient]:
    """Async HTTP client wired to the app with a fake-cluster accessor.

    The app lifespan does NOT run under ``ASGITransport``, so the accessor is
    pre-set on the application state.
    """
    await accessor.initialize()
    app.state.accessor = accessor

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.state.accessor = None
