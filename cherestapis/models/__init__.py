"""Data models for the workspace API."""

from cherestapis.models.devfile import (
    CommandAction,
    Devfile,
    DevfileCommand,
    DevfileComponent,
    DevfileEndpoint,
    DevfileMetadata,
    DevfileProject,
)
from cherestapis.models.enums import (
    AccessorState,
    ComponentType,
    DevfileLayout,
    InitMode,
    MachineStatus,
    ServerNameStrip,
    ServerStatus,
    WorkspaceStatus,
)
from cherestapis.models.resource import WorkspaceResource
from cherestapis.models.runtime import Machine, Runtime, Server
from cherestapis.models.workspace import (
    Account,
    Environment,
    MachineConfig,
    Recipe,
    Workspace,
    WorkspaceConfig,
    WorkspaceIdentity,
)

__all__ = [
    "AccessorState",
    "Account",
    "CommandAction",
    "ComponentType",
    # Devfile
    "Devfile",
    "DevfileCommand",
    "DevfileComponent",
    "DevfileEndpoint",
    "DevfileLayout",
    "DevfileMetadata",
    "DevfileProject",
    "Environment",
    # Enums
    "InitMode",
    # Runtime
    "Machine",
    "MachineConfig",
    "MachineStatus",
    "Recipe",
    "Runtime",
    "Server",
    "ServerNameStrip",
    "ServerStatus",
    # Workspace
    "Workspace",
    "WorkspaceConfig",
    "WorkspaceIdentity",
    "WorkspaceResource",
    "WorkspaceStatus",
]
