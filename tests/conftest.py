"""Shared test fixtures: fake kubernetes APIs and workspace object builders.

No cluster is needed.  The fakes only implement the client methods the
service calls and return real ``kubernetes.client`` model objects, so the
code under test sees the same shapes as in production.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from pathlib import Path
from typing import Any

import pytest
from kubernetes import client
from kubernetes.client.rest import ApiException

from cherestapis.constants import RUNTIME_ADDITIONAL_FIELD
from cherestapis.kube.lister import ClusterObjectLister
from cherestapis.managers.devfile import DevfileRetriever
from cherestapis.managers.workspaces import WorkspaceAccessor
from cherestapis.models.workspace import WorkspaceIdentity
from cherestapis.settings import _get_settings_cached

DEVFILES = Path(__file__).parent / "devfiles"

WORKSPACE_ID = "workspace1234"
WORKSPACE_NAME = "petclinic"
WORKSPACE_NAMESPACE = "che"


# ---------------------------------------------------------------------------
# Fake kubernetes APIs
# ---------------------------------------------------------------------------


class FakeListApi:
    """Serves ``items`` in pages of ``page_size`` following ``_continue`` tokens."""

    def __init__(self, item_type: str) -> None:
        self.item_type = item_type
        self.items: list[Any] = []
        self.page_size: int | None = None
        self.error: Exception | None = None
        self.calls: list[dict[str, Any]] = []

    def _list(self, namespace: str, **kwargs: Any) -> Any:
        self.calls.append({"namespace": namespace, **kwargs})
        if self.error is not None:
            raise self.error
        size = self.page_size or len(self.items) or 1
        start = int(kwargs.get("_continue") or 0)
        page = self.items[start : start + size]
        token = str(start + size) if start + size < len(self.items) else None
        list_type = client.V1ServiceList if self.item_type == "service" else client.V1IngressList
        return list_type(items=page, metadata=client.V1ListMeta(_continue=token))


class FakeCoreApi(FakeListApi):
    def __init__(self) -> None:
        super().__init__("service")

    def list_namespaced_service(self, namespace: str, **kwargs: Any) -> client.V1ServiceList:
        return self._list(namespace, **kwargs)


class FakeNetworkingApi(FakeListApi):
    def __init__(self) -> None:
        super().__init__("ingress")

    def list_namespaced_ingress(self, namespace: str, **kwargs: Any) -> client.V1IngressList:
        return self._list(namespace, **kwargs)


class FakeCustomObjectsApi:
    def __init__(self) -> None:
        self.resource: dict[str, Any] | None = None
        self.error: Exception | None = None
        self.calls: list[tuple[Any, ...]] = []

    def get_namespaced_custom_object(
        self, group: str, version: str, namespace: str, plural: str, name: str, **kwargs: Any
    ) -> dict[str, Any]:
        self.calls.append((group, version, namespace, plural, name))
        if self.error is not None:
            raise self.error
        if self.resource is None:
            raise ApiException(status=404, reason="Not Found")
        return self.resource


class FakeCluster:
    def __init__(self) -> None:
        self.core = FakeCoreApi()
        self.networking = FakeNetworkingApi()
        self.custom_objects = FakeCustomObjectsApi()

    def set_workspace(self, devfile: dict[str, Any] | None, runtime: str | None = None) -> None:
        """Store a workspace custom resource with the given devfile subtree."""
        spec: dict[str, Any] = {"started": True}
        if devfile is not None:
            spec["devfile"] = devfile
        resource: dict[str, Any] = {
            "apiVersion": "workspace.che.eclipse.org/v1alpha1",
            "kind": "Workspace",
            "metadata": {"name": WORKSPACE_NAME, "namespace": WORKSPACE_NAMESPACE},
            "spec": spec,
            "status": {"workspaceId": WORKSPACE_ID, "phase": "Running"},
        }
        if runtime is not None:
            resource["status"]["additionalFields"] = {RUNTIME_ADDITIONAL_FIELD: runtime}
        self.custom_objects.resource = resource


# ---------------------------------------------------------------------------
# Object builders
# ---------------------------------------------------------------------------


def build_service(name: str, annotations: dict[str, str] | None = None) -> client.V1Service:
    return client.V1Service(
        metadata=client.V1ObjectMeta(
            name=name,
            namespace=WORKSPACE_NAMESPACE,
            labels={"che.workspace_id": WORKSPACE_ID},
            annotations=annotations,
        ),
    )


def build_ingress(
    name: str,
    annotations: dict[str, str] | None = None,
    host: str | None = "h.example.com",
) -> client.V1Ingress:
    rules = [client.V1IngressRule(host=host)] if host is not None else None
    return client.V1Ingress(
        metadata=client.V1ObjectMeta(
            name=name,
            namespace=WORKSPACE_NAMESPACE,
            labels={"che.workspace_id": WORKSPACE_ID},
            annotations=annotations,
        ),
        spec=client.V1IngressSpec(rules=rules),
    )


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def identity() -> WorkspaceIdentity:
    return WorkspaceIdentity(id=WORKSPACE_ID, name=WORKSPACE_NAME, namespace=WORKSPACE_NAMESPACE)


@pytest.fixture
def cluster() -> FakeCluster:
    return FakeCluster()


@pytest.fixture
def make_service() -> Callable[..., client.V1Service]:
    return build_service


@pytest.fixture
def make_ingress() -> Callable[..., client.V1Ingress]:
    return build_ingress


@pytest.fixture
def petclinic_yaml() -> str:
    return (DEVFILES / "petclinic-sample.yaml").read_text(encoding="utf-8")


@pytest.fixture
def plugins_only_yaml() -> str:
    return (DEVFILES / "plugins-only.yaml").read_text(encoding="utf-8")


@pytest.fixture
def petclinic_devfile(petclinic_yaml: str) -> dict[str, Any]:
    import yaml

    return yaml.safe_load(petclinic_yaml)


@pytest.fixture
def lister(cluster: FakeCluster) -> ClusterObjectLister:
    return ClusterObjectLister(cluster.core, cluster.networking, request_timeout=2.0)


@pytest.fixture
def retriever(cluster: FakeCluster) -> DevfileRetriever:
    return DevfileRetriever(cluster.custom_objects)


@pytest.fixture
def accessor(identity: WorkspaceIdentity, retriever: DevfileRetriever, lister: ClusterObjectLister) -> WorkspaceAccessor:
    return WorkspaceAccessor(identity, retriever, lister)


@pytest.fixture
def che_env() -> Iterator[Callable[..., None]]:
    """Set CHE_* env vars for one test and invalidate the settings cache."""
    saved = {k: v for k, v in os.environ.items() if k.startswith("CHE_")}
    for key in saved:
        del os.environ[key]
    _get_settings_cached.cache_clear()

    def _set(**values: str) -> None:
        for key, value in values.items():
            os.environ[f"CHE_{key.upper()}"] = value
        _get_settings_cached.cache_clear()

    yield _set

    for key in [k for k in os.environ if k.startswith("CHE_")]:
        del os.environ[key]
    os.environ.update(saved)
    _get_settings_cached.cache_clear()
