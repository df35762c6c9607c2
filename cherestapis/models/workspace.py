"""Workspace data model.

A workspace is the read-only join of a devfile (from the workspace custom
resource) and a runtime (from cluster objects or the resource status),
shaped like the Che workspace DTO that in-workspace tooling expects.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from cherestapis.constants import ANONYMOUS
from cherestapis.models.base import CheModel
from cherestapis.models.devfile import Devfile
from cherestapis.models.enums import WorkspaceStatus
from cherestapis.models.runtime import Runtime


class WorkspaceIdentity(BaseModel):
    """The one workspace this process serves."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    namespace: str = Field(min_length=1)


class Account(CheModel):
    id: str = ANONYMOUS
    name: str = ANONYMOUS
    type: str = ANONYMOUS


# -- Workspace config (devfile conversion output) ----------------------------


class Recipe(CheModel):
    type: str
    content_type: str | None = None
    content: str | None = None
    location: str | None = None


class ServerConfig(CheModel):
    port: str
    protocol: str | None = None
    path: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)


class MachineConfig(CheModel):
    attributes: dict[str, str] = Field(default_factory=dict)
    servers: dict[str, ServerConfig] = Field(default_factory=dict)
    env: dict[str, str] = Field(default_factory=dict)
    volumes: dict[str, dict[str, str]] = Field(default_factory=dict)


class Environment(CheModel):
    recipe: Recipe
    machines: dict[str, MachineConfig] = Field(default_factory=dict)


class ProjectConfig(CheModel):
    name: str
    path: str
    source: dict[str, str] = Field(default_factory=dict)


class CommandConfig(CheModel):
    name: str
    type: str
    command_line: str | None = None
    attributes: dict[str, str] = Field(default_factory=dict)


class WorkspaceConfig(CheModel):
    name: str | None = None
    description: str | None = None
    default_env: str | None = None
    environments: dict[str, Environment] = Field(default_factory=dict)
    projects: list[ProjectConfig] = Field(default_factory=list)
    commands: list[CommandConfig] = Field(default_factory=list)
    attributes: dict[str, str] = Field(default_factory=dict)


# -- Workspace ---------------------------------------------------------------


class Workspace(CheModel):
    """Workspace response body."""

    id: str
    namespace: str = ANONYMOUS
    account: Account = Field(default_factory=Account)
    config: WorkspaceConfig
    devfile: Devfile
    attributes: dict[str, str] = Field(default_factory=dict)
    temporary: bool = False
    runtime: Runtime | None = None
    status: WorkspaceStatus = WorkspaceStatus.RUNNING
