"""Cluster-facing names shared with the workspace operator."""

from __future__ import annotations

from typing import Final

# -- Custom resource -----------------------------------------------------------

WORKSPACE_CRD_GROUP: Final = "workspace.che.eclipse.org"
WORKSPACE_CRD_PLURAL: Final = "workspaces"

RUNTIME_ADDITIONAL_FIELD: Final = "org.eclipse.che.workspace/runtime"
"""Key under ``status.additionalFields`` holding the runtime JSON blob."""

# -- Labels ----------------------------------------------------------------------

WORKSPACE_ID_LABEL: Final = "che.workspace_id"

# -- Annotations -----------------------------------------------------------------

MACHINE_ANNOTATION_PREFIX: Final = "org.eclipse.che.machine."
MACHINE_NAME_ANNOTATION: Final = "org.eclipse.che.machine.name"
SERVER_PROTOCOL_ANNOTATION: Final = "org.eclipse.che.server.protocol"
SERVER_ATTRIBUTES_ANNOTATION: Final = "org.eclipse.che.server.attributes"
SERVER_PORT_ANNOTATION: Final = "org.eclipse.che.server.port"

INGRESS_NAME_PREFIX: Final = "ingress-"

# -- Fixed runtime values --------------------------------------------------------

DEFAULT_ENVIRONMENT: Final = "default"
ANONYMOUS: Final = "anonymous"

KUBERNETES_RECIPE_TYPE: Final = "kubernetes"
YAML_CONTENT_TYPE: Final = "application/x-yaml"


def workspace_id_selector(workspace_id: str) -> str:
    """Label selector matching every cluster object of a workspace."""
    return f"{WORKSPACE_ID_LABEL} = {workspace_id}"


def ingress_name_prefix(workspace_id: str) -> str:
    return f"{INGRESS_NAME_PREFIX}{workspace_id}-"
