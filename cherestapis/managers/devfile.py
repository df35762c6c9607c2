"""Devfile retrieval from the workspace custom resource.

The devfile subtree is re-serialized to canonical YAML so the parser never
depends on the custom-resource transport shape.  The same resource may carry
a runtime pre-computed by the workspace operator in its status.
"""

from __future__ import annotations

from functools import partial

import yaml
from anyio import to_thread
from kubernetes import client
from kubernetes.client.rest import ApiException
from loguru import logger
from pydantic import ValidationError
from urllib3.exceptions import HTTPError

from cherestapis.constants import WORKSPACE_CRD_GROUP, WORKSPACE_CRD_PLURAL
from cherestapis.devfile.layout import normalize_devfile_tree
from cherestapis.errors import ClusterReadError
from cherestapis.models.enums import DevfileLayout
from cherestapis.models.resource import WorkspaceResource
from cherestapis.models.workspace import WorkspaceIdentity


class DevfileRetriever:
    """Reads the workspace custom resource and extracts its devfile and runtime."""

    def __init__(
        self,
        custom_objects_api: client.CustomObjectsApi,
        *,
        crd_version: str = "v1alpha1",
        layout: DevfileLayout = DevfileLayout.V1,
        request_timeout: float | None = None,
    ) -> None:
        self._api = custom_objects_api
        self._crd_version = crd_version
        self._layout = layout
        self._request_timeout = request_timeout

    async def fetch_resource(self, identity: WorkspaceIdentity) -> WorkspaceResource | None:
        """Read the custom resource.  Returns ``None`` if it does not exist.

        Raises ``ClusterReadError`` on any other API or transport failure, or
        when the resource is not an object.
        """
        call = partial(
            self._api.get_namespaced_custom_object,
            WORKSPACE_CRD_GROUP,
            self._crd_version,
            identity.namespace,
            WORKSPACE_CRD_PLURAL,
            identity.name,
        )
        if self._request_timeout is not None:
            call = partial(call, _request_timeout=self._request_timeout)

        try:
            raw = await to_thread.run_sync(call)
        except ApiException as exc:
            if exc.status == 404:
                logger.warning("Workspace custom resource {}/{} not found", identity.namespace, identity.name)
                return None
            msg = f"Problem while retrieving the Workspace custom resource: {exc.status} {exc.reason}"
            raise ClusterReadError(msg) from exc
        except HTTPError as exc:
            msg = f"Problem while retrieving the Workspace custom resource: {exc}"
            raise ClusterReadError(msg) from exc

        if raw is None:
            return None
        try:
            return WorkspaceResource.model_validate(raw)
        except ValidationError as exc:
            msg = f"The Workspace custom resource has an unexpected shape: {exc}"
            raise ClusterReadError(msg) from exc

    def devfile_text(self, resource: WorkspaceResource | None) -> str | None:
        """Canonical YAML of ``spec.devfile``, or ``None`` when absent."""
        if resource is None or resource.devfile is None:
            return None
        tree = normalize_devfile_tree(resource.devfile, self._layout)
        return yaml.safe_dump(tree, sort_keys=False, default_flow_style=False, allow_unicode=True)

    @staticmethod
    def runtime_text(resource: WorkspaceResource | None) -> str | None:
        if resource is None:
            return None
        return resource.runtime_blob

    async def fetch_devfile_text(self, identity: WorkspaceIdentity) -> str | None:
        return self.devfile_text(await self.fetch_resource(identity))

    async def fetch_runtime_text(self, identity: WorkspaceIdentity) -> str | None:
        return self.runtime_text(await self.fetch_resource(identity))
