"""Shared enumerations used across the service."""

from __future__ import annotations

from enum import StrEnum

# -- Workspace ---------------------------------------------------------------


class WorkspaceStatus(StrEnum):
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    STOPPING = "STOPPING"
    STOPPED = "STOPPED"


class MachineStatus(StrEnum):
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    FAILED = "FAILED"


class ServerStatus(StrEnum):
    RUNNING = "RUNNING"
    STOPPED = "STOPPED"
    UNKNOWN = "UNKNOWN"


# -- Devfile -----------------------------------------------------------------


class ComponentType(StrEnum):
    CHE_EDITOR = "cheEditor"
    CHE_PLUGIN = "chePlugin"
    DOCKERIMAGE = "dockerimage"
    KUBERNETES = "kubernetes"
    OPENSHIFT = "openshift"


class DevfileLayout(StrEnum):
    """Shape of the devfile stored in the custom resource.

    ``2.0`` trees carry the name under ``metadata.name`` and the schema
    version under ``apiVersion``; they are rewritten to the ``1.0`` reading
    layout (top-level ``name``, ``specVersion``) before parsing.
    """

    V1 = "1.0"
    V2 = "2.0"


# -- Assembly ----------------------------------------------------------------


class InitMode(StrEnum):
    """When the workspace view is assembled."""

    EAGER = "eager"
    LAZY = "lazy"


class ServerNameStrip(StrEnum):
    """How the ``ingress-<id>-`` prefix is removed from Ingress names."""

    PREFIX = "prefix"
    SUBSTRING = "substring"


class AccessorState(StrEnum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    FAILED = "failed"
