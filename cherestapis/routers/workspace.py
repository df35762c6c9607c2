"""Workspace endpoints, in the shape of the Che workspace API.

Only the one workspace this process is configured for can be read.  ``PUT``
exists because in-workspace tooling issues it; it is answered like ``GET``
and the request body is ignored.
"""

from __future__ import annotations

from collections.abc import Awaitable
from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query, status
from loguru import logger

from cherestapis.deps import Accessor
from cherestapis.errors import (
    ClusterReadError,
    DataIntegrityError,
    DevfileParseError,
    MalformedRuntimeError,
    WorkspaceNotFoundError,
    WorkspaceNotReadyError,
)
from cherestapis.models.workspace import Workspace

router = APIRouter(prefix="/workspace", tags=["workspace"])

_ASSEMBLY_ERRORS = (DevfileParseError, DataIntegrityError, MalformedRuntimeError, ClusterReadError)


@router.get("/{key:path}", response_model=Workspace, response_model_exclude_none=True)
async def get_workspace(
    key: str,
    accessor: Accessor,
    include_internal_servers: str | None = Query(default=None, alias="includeInternalServers"),
) -> Workspace:
    """Get the workspace by id.  ``includeInternalServers`` is accepted and ignored."""
    return await _serve(accessor.get_workspace(key))


@router.put("/{workspace_id}", response_model=Workspace, response_model_exclude_none=True)
async def update_workspace(
    workspace_id: str,
    accessor: Accessor,
    body: dict[str, Any] | None = Body(default=None),
) -> Workspace:
    """Accepted for compatibility; returns the current workspace unchanged."""
    return await _serve(accessor.update_workspace(workspace_id, body))


async def _serve(call: Awaitable[Workspace]) -> Workspace:
    """Await an accessor call, translating domain errors into HTTP errors."""
    try:
        return await call
    except WorkspaceNotFoundError as exc:
        logger.error("{}", exc)
        raise HTTPException(status.HTTP_404_NOT_FOUND, detail=str(exc)) from None
    except WorkspaceNotReadyError as exc:
        raise HTTPException(status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc)) from None
    except _ASSEMBLY_ERRORS as exc:
        logger.error("Workspace assembly failed: {}", exc)
        raise HTTPException(status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
