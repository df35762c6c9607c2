"""Devfile to workspace config conversion.

Only components that describe containers produce an environment:
``dockerimage`` components become machines of the ``default`` environment,
and ``kubernetes``/``openshift`` components contribute their inlined recipe.
Editors and plugins are recorded as workspace attributes, so a devfile made
only of plugins, or of recipes given only by ``reference``, converts with no
environment at all (see ``managers.workspaces.ensure_default_environment``).
"""

from __future__ import annotations

from typing import Any

import yaml

from cherestapis.constants import DEFAULT_ENVIRONMENT, KUBERNETES_RECIPE_TYPE, YAML_CONTENT_TYPE
from cherestapis.models.devfile import Devfile, DevfileCommand, DevfileComponent, DevfileProject
from cherestapis.models.enums import ComponentType
from cherestapis.models.workspace import (
    CommandConfig,
    Environment,
    MachineConfig,
    ProjectConfig,
    Recipe,
    ServerConfig,
    WorkspaceConfig,
)

PLUGINS_ATTRIBUTE = "plugins"
EDITOR_ATTRIBUTE = "editor"


def convert_devfile(devfile: Devfile) -> WorkspaceConfig:
    environments: dict[str, Environment] = {}
    environment = _build_environment(devfile)
    if environment is not None:
        environments[DEFAULT_ENVIRONMENT] = environment

    return WorkspaceConfig(
        name=devfile.display_name,
        default_env=DEFAULT_ENVIRONMENT if environments else None,
        environments=environments,
        projects=[_convert_project(p) for p in devfile.projects],
        commands=[c for c in (_convert_command(cmd) for cmd in devfile.commands) if c is not None],
        attributes=_workspace_attributes(devfile),
    )


# ---------------------------------------------------------------------------
# Attributes
# ---------------------------------------------------------------------------


def _workspace_attributes(devfile: Devfile) -> dict[str, str]:
    attributes = {key: _as_text(value) for key, value in devfile.attributes.items()}

    plugins = [c.id or c.reference for c in devfile.components_of(ComponentType.CHE_PLUGIN)]
    if plugins:
        attributes[PLUGINS_ATTRIBUTE] = ",".join(p for p in plugins if p)

    editors = devfile.components_of(ComponentType.CHE_EDITOR)
    if editors:
        attributes[EDITOR_ATTRIBUTE] = editors[0].id or editors[0].reference or ""
    return attributes


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


# ---------------------------------------------------------------------------
# Projects / commands
# ---------------------------------------------------------------------------


def _convert_project(project: DevfileProject) -> ProjectConfig:
    source = project.source.model_dump(by_alias=True, exclude_none=True)
    return ProjectConfig(
        name=project.name,
        path=project.clone_path or project.name,
        source={key: str(value) for key, value in source.items()},
    )


def _convert_command(command: DevfileCommand) -> CommandConfig | None:
    if not command.actions:
        return None
    action = command.actions[0]
    attributes = dict(command.attributes)
    if action.component:
        attributes["componentAlias"] = action.component
    if action.workdir:
        attributes["workingDir"] = action.workdir
    if action.reference:
        attributes["actionReference"] = action.reference
    if action.reference_content:
        attributes["actionReferenceContent"] = action.reference_content
    return CommandConfig(
        name=command.name,
        type=action.type,
        command_line=action.command,
        attributes=attributes,
    )


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


def _build_environment(devfile: Devfile) -> Environment | None:
    dockerimages = devfile.components_of(ComponentType.DOCKERIMAGE)
    recipes = devfile.components_of(ComponentType.KUBERNETES, ComponentType.OPENSHIFT)
    documents = [c.reference_content for c in recipes if c.reference_content]
    if not documents and not dockerimages:
        return None

    machines: dict[str, MachineConfig] = {}
    if dockerimages:
        documents.append(_dockerimage_recipe(dockerimages))
        for component in dockerimages:
            machines[_machine_name(component)] = _machine_config(component)

    return Environment(
        recipe=Recipe(
            type=KUBERNETES_RECIPE_TYPE,
            content_type=YAML_CONTENT_TYPE,
            content="\n---\n".join(d.rstrip("\n") for d in documents) + "\n",
        ),
        machines=machines,
    )


def _machine_name(component: DevfileComponent) -> str:
    return component.alias or component.image or component.type


def _machine_config(component: DevfileComponent) -> MachineConfig:
    attributes: dict[str, str] = {}
    if component.memory_limit:
        attributes["memoryLimit"] = component.memory_limit
    if component.mount_sources is not None:
        attributes["mountSources"] = _as_text(component.mount_sources)

    servers: dict[str, ServerConfig] = {}
    for endpoint in component.endpoints:
        extra = dict(endpoint.attributes)
        servers[endpoint.name] = ServerConfig(
            port=str(endpoint.port),
            protocol=extra.pop("protocol", "http"),
            path=extra.pop("path", None),
            attributes=extra,
        )

    return MachineConfig(
        attributes=attributes,
        servers=servers,
        env={e.name: e.value for e in component.env},
        volumes={v.name: {"path": v.container_path} for v in component.volumes},
    )


def _dockerimage_recipe(components: list[DevfileComponent]) -> str:
    """Render dockerimage components as a kubernetes ``List`` of pods."""
    items = []
    for component in components:
        container: dict[str, Any] = {"name": _machine_name(component), "image": component.image}
        if component.command:
            container["command"] = list(component.command)
        if component.args:
            container["args"] = list(component.args)
        if component.env:
            container["env"] = [{"name": e.name, "value": e.value} for e in component.env]
        if component.endpoints:
            container["ports"] = [{"containerPort": e.port} for e in component.endpoints]
        if component.memory_limit:
            container["resources"] = {"limits": {"memory": component.memory_limit}}
        items.append(
            {
                "apiVersion": "v1",
                "kind": "Pod",
                "metadata": {"name": _machine_name(component)},
                "spec": {"containers": [container]},
            }
        )
    return yaml.safe_dump({"apiVersion": "v1", "kind": "List", "items": items}, sort_keys=False)
