"""Domain exceptions raised while assembling the workspace view.

Managers raise these and never HTTP exceptions; translating them into
status codes is the router's responsibility.
"""

from __future__ import annotations


class ConfigurationError(ValueError):
    """Process configuration is incomplete.  Always fatal at startup."""


class WorkspaceNotFoundError(LookupError):
    """Requested workspace is not the one served, or its devfile is missing."""

    def __init__(self, workspace_id: str, reason: str | None = None) -> None:
        self.workspace_id = workspace_id
        message = f"The workspace {workspace_id} is not found"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)


class DevfileParseError(ValueError):
    """The devfile text is not valid YAML/JSON or does not match the devfile schema."""


class IngressDecodeError(ValueError):
    """An Ingress lacks the protocol annotation or a host rule needed for a server URL."""


class DataIntegrityError(ValueError):
    """Cluster objects disagree: duplicate machine or server names."""


class MalformedRuntimeError(ValueError):
    """The pre-computed runtime blob in the resource status cannot be parsed."""


class ClusterReadError(RuntimeError):
    """Reading the workspace custom resource failed for a reason other than absence."""


class WorkspaceNotReadyError(RuntimeError):
    """The eager accessor was used before a successful ``initialize()``."""
