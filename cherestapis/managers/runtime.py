"""Runtime assembly.

Builds the ``Runtime`` model either from the workspace's Services and
Ingresses, correlated by their ``org.eclipse.che.machine.name`` annotation,
or from the JSON blob the workspace operator stores in the resource status.
"""

from __future__ import annotations

from collections.abc import Sequence

from kubernetes import client
from loguru import logger
from pydantic import ValidationError

from cherestapis.errors import DataIntegrityError, IngressDecodeError, MalformedRuntimeError
from cherestapis.managers.annotations import (
    machine_attributes,
    machine_name,
    name_of,
    server_attributes,
    server_name,
    server_url,
)
from cherestapis.models.enums import MachineStatus, ServerNameStrip, ServerStatus
from cherestapis.models.runtime import Machine, Runtime, Server


def assemble_runtime(
    services: Sequence[client.V1Service],
    ingresses: Sequence[client.V1Ingress],
    workspace_id: str,
    *,
    strip: ServerNameStrip = ServerNameStrip.PREFIX,
) -> Runtime:
    """Correlate Services (machines) with Ingresses (servers).

    Services without a machine name are ignored.  Raises
    ``DataIntegrityError`` when two Services share a machine name or two
    Ingresses of one machine decode to the same server name.
    """
    machines: dict[str, Machine] = {}
    for service in services:
        name = machine_name(service)
        if name is None:
            continue
        if name in machines:
            msg = f"Duplicate machine '{name}' (service {name_of(service)})"
            raise DataIntegrityError(msg)
        machines[name] = Machine(
            attributes=machine_attributes(service),
            servers=_servers_of(name, ingresses, workspace_id, strip),
            status=MachineStatus.RUNNING,
        )
    return Runtime(machines=machines)


def _servers_of(
    machine: str,
    ingresses: Sequence[client.V1Ingress],
    workspace_id: str,
    strip: ServerNameStrip,
) -> dict[str, Server]:
    servers: dict[str, Server] = {}
    for ingress in ingresses:
        if machine_name(ingress) != machine:
            continue
        try:
            url = server_url(ingress)
        except IngressDecodeError as exc:
            logger.error("Skipping server of machine {}: {}", machine, exc)
            continue

        name = server_name(ingress, workspace_id, strip)
        if name in servers:
            msg = f"Duplicate server '{name}' in machine '{machine}' (ingress {name_of(ingress)})"
            raise DataIntegrityError(msg)
        servers[name] = Server(url=url, status=ServerStatus.UNKNOWN, attributes=server_attributes(ingress))
    return servers


def parse_runtime(text: str) -> Runtime:
    """Parse the operator-computed runtime blob, trusting it as-is.

    Raises ``MalformedRuntimeError`` when the blob is not valid runtime JSON.
    """
    try:
        return Runtime.model_validate_json(text)
    except ValidationError as exc:
        msg = f"The workspace runtime stored in the custom resource status is malformed: {exc}"
        raise MalformedRuntimeError(msg) from exc
