"""Devfile data model (devfile 1.0 reading layout).

Unknown keys are preserved (``extra="allow"``) so a devfile round-trips into
the workspace response unchanged.  Parsed devfiles are frozen.

Optional lists and maps accept an explicit ``null`` (devfiles marshalled by the
workspace operator carry ``"components": null`` when empty) and read it as
empty.
"""

from __future__ import annotations

from typing import Any

from pydantic import ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from cherestapis.models.base import CheModel


class _DevfileModel(CheModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
    )


def _null_as_empty_list(value: Any) -> Any:
    return [] if value is None else value


def _null_as_empty_map(value: Any) -> Any:
    return {} if value is None else value


class DevfileMetadata(_DevfileModel):
    name: str | None = None
    generate_name: str | None = None


class ProjectSource(_DevfileModel):
    type: str
    location: str
    branch: str | None = None
    start_point: str | None = None
    tag: str | None = None
    commit_id: str | None = None
    sparse_checkout_dir: str | None = None


class DevfileProject(_DevfileModel):
    name: str
    source: ProjectSource
    clone_path: str | None = None


class DevfileEndpoint(_DevfileModel):
    name: str
    port: int
    attributes: dict[str, str] = Field(default_factory=dict)

    _null_attributes = field_validator("attributes", mode="before")(_null_as_empty_map)


class DevfileEnv(_DevfileModel):
    name: str
    value: str


class DevfileVolume(_DevfileModel):
    name: str
    container_path: str


class DevfileComponent(_DevfileModel):
    type: str
    alias: str | None = None
    id: str | None = None
    reference: str | None = None
    reference_content: str | None = None
    image: str | None = None
    memory_limit: str | None = None
    mount_sources: bool | None = None
    endpoints: list[DevfileEndpoint] = Field(default_factory=list)
    env: list[DevfileEnv] = Field(default_factory=list)
    volumes: list[DevfileVolume] = Field(default_factory=list)
    command: list[str] | None = None
    args: list[str] | None = None
    selector: dict[str, str] | None = None

    _null_lists = field_validator("endpoints", "env", "volumes", mode="before")(_null_as_empty_list)


class CommandAction(_DevfileModel):
    type: str
    command: str | None = None
    component: str | None = None
    workdir: str | None = None
    reference: str | None = None
    reference_content: str | None = None


class DevfileCommand(_DevfileModel):
    name: str
    actions: list[CommandAction] = Field(default_factory=list)
    attributes: dict[str, str] = Field(default_factory=dict)

    _null_actions = field_validator("actions", mode="before")(_null_as_empty_list)
    _null_attributes = field_validator("attributes", mode="before")(_null_as_empty_map)


class Devfile(_DevfileModel):
    """A parsed devfile.

    ``name`` and ``spec_version`` are only set for trees that went through the
    2.0 layout normalization; ``display_name`` hides the difference.
    """

    api_version: str | None = None
    spec_version: str | None = None
    name: str | None = None
    metadata: DevfileMetadata = Field(default_factory=DevfileMetadata)
    attributes: dict[str, Any] = Field(default_factory=dict)
    projects: list[DevfileProject] = Field(default_factory=list)
    components: list[DevfileComponent] = Field(default_factory=list)
    commands: list[DevfileCommand] = Field(default_factory=list)

    _null_lists = field_validator("projects", "components", "commands", mode="before")(_null_as_empty_list)
    _null_maps = field_validator("metadata", "attributes", mode="before")(_null_as_empty_map)

    @property
    def display_name(self) -> str | None:
        return self.name or self.metadata.name

    def components_of(self, *types: str) -> list[DevfileComponent]:
        return [c for c in self.components if c.type in types]
