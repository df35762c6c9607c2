"""Runtime data model: machines and the servers they expose.

The same shape is produced by the runtime assembler (from Services and
Ingresses) and stored by the workspace operator as a JSON blob under
``status.additionalFields["org.eclipse.che.workspace/runtime"]``.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from cherestapis.constants import ANONYMOUS, DEFAULT_ENVIRONMENT
from cherestapis.models.base import CheModel
from cherestapis.models.enums import MachineStatus, ServerStatus


class Server(CheModel):
    url: str | None = None
    status: ServerStatus = ServerStatus.UNKNOWN
    attributes: dict[str, str] = Field(default_factory=dict)


class Machine(CheModel):
    attributes: dict[str, str] = Field(default_factory=dict)
    servers: dict[str, Server] = Field(default_factory=dict)
    status: MachineStatus = MachineStatus.RUNNING


class RuntimeCommand(CheModel):
    name: str
    type: str
    command_line: str
    attributes: dict[str, str] = Field(default_factory=dict)


class RuntimeWarning(CheModel):
    code: float | None = None
    message: str | None = None


class Runtime(CheModel):
    active_env: str = DEFAULT_ENVIRONMENT
    machines: dict[str, Machine] = Field(default_factory=dict)
    owner: str = ANONYMOUS
    commands: list[RuntimeCommand] = Field(default_factory=list)
    machine_token: str | None = None
    warnings: list[RuntimeWarning] = Field(default_factory=list)
    links: list[dict[str, Any]] = Field(default_factory=list)
