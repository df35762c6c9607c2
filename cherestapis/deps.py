"""FastAPI dependency injection for the workspace accessor.

Usage in route handlers::

    @router.get("/workspace/{key}")
    async def get_workspace(key: str, accessor: Accessor) -> Workspace:
        ...

The dependency raises HTTP 503 if the accessor was not set up (the lifespan
did not run, or startup aborted).
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from cherestapis.managers.workspaces import WorkspaceAccessor


def get_accessor(request: Request) -> WorkspaceAccessor:
    accessor: WorkspaceAccessor | None = getattr(request.app.state, "accessor", None)
    if accessor is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Workspace accessor not configured.",
        )
    return accessor


Accessor = Annotated[WorkspaceAccessor, Depends(get_accessor)]
"""Annotated dependency: the process-wide workspace accessor."""
