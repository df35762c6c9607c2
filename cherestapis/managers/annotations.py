"""Decoding of the ``org.eclipse.che.*`` annotations on workspace objects."""

from __future__ import annotations

import json
from typing import Any

from kubernetes import client
from loguru import logger

from cherestapis.constants import (
    MACHINE_ANNOTATION_PREFIX,
    MACHINE_NAME_ANNOTATION,
    SERVER_ATTRIBUTES_ANNOTATION,
    SERVER_PORT_ANNOTATION,
    SERVER_PROTOCOL_ANNOTATION,
    ingress_name_prefix,
)
from cherestapis.errors import IngressDecodeError
from cherestapis.models.enums import ServerNameStrip


def annotations_of(obj: client.V1Service | client.V1Ingress) -> dict[str, str]:
    metadata = obj.metadata
    if metadata is None or metadata.annotations is None:
        return {}
    return metadata.annotations


def name_of(obj: client.V1Service | client.V1Ingress) -> str:
    return (obj.metadata.name if obj.metadata else None) or ""


def machine_name(obj: client.V1Service | client.V1Ingress) -> str | None:
    return annotations_of(obj).get(MACHINE_NAME_ANNOTATION)


def machine_attributes(service: client.V1Service) -> dict[str, str]:
    """All ``org.eclipse.che.machine.*`` annotations but ``name``, prefix stripped."""
    return {
        key.removeprefix(MACHINE_ANNOTATION_PREFIX): value
        for key, value in annotations_of(service).items()
        if key.startswith(MACHINE_ANNOTATION_PREFIX) and key != MACHINE_NAME_ANNOTATION
    }


def server_name(
    ingress: client.V1Ingress,
    workspace_id: str,
    strip: ServerNameStrip = ServerNameStrip.PREFIX,
) -> str:
    """Server name from an Ingress name such as ``ingress-<workspace_id>-<server>``.

    ``SUBSTRING`` removes every occurrence of the prefix anywhere in the name,
    as older deployments did.
    """
    prefix = ingress_name_prefix(workspace_id)
    name = name_of(ingress)
    if strip is ServerNameStrip.SUBSTRING:
        return name.replace(prefix, "")
    return name.removeprefix(prefix)


def server_url(ingress: client.V1Ingress) -> str:
    """``<protocol>://<host of the first rule>``.

    Raises ``IngressDecodeError`` if the protocol annotation, the rules, or
    the first rule's host is missing.
    """
    name = name_of(ingress)
    protocol = annotations_of(ingress).get(SERVER_PROTOCOL_ANNOTATION)
    if not protocol:
        msg = f"Ingress {name} has no {SERVER_PROTOCOL_ANNOTATION} annotation"
        raise IngressDecodeError(msg)

    rules = ingress.spec.rules if ingress.spec else None
    if not rules:
        msg = f"Ingress {name} has no rules"
        raise IngressDecodeError(msg)

    host = rules[0].host
    if not host:
        msg = f"The first rule of ingress {name} has no host"
        raise IngressDecodeError(msg)

    return f"{protocol}://{host}"


def server_attributes(ingress: client.V1Ingress) -> dict[str, str]:
    """Attributes from the JSON attributes annotation plus an optional ``port``.

    A malformed JSON annotation is logged and contributes nothing; the port
    annotation (``8080/TCP`` style) is still honoured.
    """
    annotations = annotations_of(ingress)
    attributes: dict[str, str] = {}

    raw = annotations.get(SERVER_ATTRIBUTES_ANNOTATION)
    if raw is not None:
        attributes.update(_parse_attributes(raw, name_of(ingress)))

    port = annotations.get(SERVER_PORT_ANNOTATION)
    if port is not None:
        attributes["port"] = port.split("/")[0]
    return attributes


def _parse_attributes(raw: str, ingress_name: str) -> dict[str, str]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Problem while parsing ingress attributes annotation for ingress {}: {}", ingress_name, exc)
        return {}
    if not isinstance(parsed, dict):
        logger.error(
            "Ingress attributes annotation for ingress {} is not a JSON object (got {})",
            ingress_name,
            type(parsed).__name__,
        )
        return {}
    return {key: _as_text(value) for key, value in parsed.items()}


def _as_text(value: Any) -> str:
    """Render a JSON value as text: strings verbatim, everything else as JSON."""
    if isinstance(value, str):
        return value
    return json.dumps(value)
