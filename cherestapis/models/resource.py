"""Schema-aware view of the workspace custom resource.

Only the two subtrees this service reads are modelled; everything else on
the resource is ignored.  Presence is explicit: ``spec.devfile`` and the
runtime field are ``None`` when absent rather than raising on access.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from cherestapis.constants import RUNTIME_ADDITIONAL_FIELD


class _ResourceModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class WorkspaceResourceSpec(_ResourceModel):
    devfile: dict[str, Any] | None = None


class WorkspaceResourceStatus(_ResourceModel):
    additional_fields: dict[str, Any] = Field(default_factory=dict, alias="additionalFields")

    @field_validator("additional_fields", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value


class WorkspaceResource(_ResourceModel):
    """The ``workspaces.workspace.che.eclipse.org`` object as read from the cluster."""

    api_version: str | None = Field(default=None, alias="apiVersion")
    kind: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    spec: WorkspaceResourceSpec = Field(default_factory=WorkspaceResourceSpec)
    status: WorkspaceResourceStatus = Field(default_factory=WorkspaceResourceStatus)

    @field_validator("metadata", "spec", "status", mode="before")
    @classmethod
    def _null_as_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    @property
    def devfile(self) -> dict[str, Any] | None:
        return self.spec.devfile

    @property
    def runtime_blob(self) -> str | None:
        value = self.status.additional_fields.get(RUNTIME_ADDITIONAL_FIELD)
        return value if isinstance(value, str) and value else None
