"""Tests for workspace composition and the WorkspaceAccessor."""

from __future__ import annotations

import json

import pytest
from kubernetes.client.rest import ApiException

from cherestapis.errors import (
    ClusterReadError,
    DataIntegrityError,
    DevfileParseError,
    MalformedRuntimeError,
    WorkspaceNotFoundError,
    WorkspaceNotReadyError,
)
from cherestapis.managers.workspaces import WorkspaceAccessor
from cherestapis.models.enums import AccessorState, InitMode, ServerStatus, WorkspaceStatus

WS = "workspace1234"
MACHINE = "org.eclipse.che.machine.name"
PROTOCOL = "org.eclipse.che.server.protocol"


def _eager(identity, retriever, lister, **kwargs) -> WorkspaceAccessor:
    return WorkspaceAccessor(identity, retriever, lister, mode=InitMode.EAGER, **kwargs)


# ---------------------------------------------------------------------------
# Lazy mode
# ---------------------------------------------------------------------------


async def test_get_workspace_composes_devfile_config_and_runtime(
    accessor, cluster, petclinic_devfile, make_service, make_ingress
) -> None:
    cluster.set_workspace(petclinic_devfile)
    cluster.core.items = [make_service("svc-maven", {MACHINE: "maven"})]
    cluster.networking.items = [
        make_ingress(f"ingress-{WS}-spring-boot", {MACHINE: "maven", PROTOCOL: "http"}, host="app.example.com")
    ]

    workspace = await accessor.get_workspace(WS)

    assert workspace.id == WS
    assert workspace.status is WorkspaceStatus.RUNNING
    assert workspace.temporary is False
    assert workspace.namespace == "anonymous"
    assert workspace.account.id == workspace.account.name == "anonymous"
    assert workspace.devfile.display_name == "petclinic"
    assert workspace.config.name == "petclinic"
    assert workspace.runtime is not None
    server = workspace.runtime.machines["maven"].servers["spring-boot"]
    assert server.url == "http://app.example.com"
    assert cluster.core.calls[0]["label_selector"] == f"che.workspace_id = {WS}"


async def test_lazy_initialize_is_ready_without_cluster_calls(accessor, cluster) -> None:
    result = await accessor.initialize()

    assert result.ok is True
    assert accessor.state is AccessorState.READY
    assert cluster.custom_objects.calls == []


async def test_wrong_id_is_not_found(accessor, cluster, petclinic_devfile) -> None:
    cluster.set_workspace(petclinic_devfile)

    with pytest.raises(WorkspaceNotFoundError, match="other-id is not found"):
        await accessor.get_workspace("other-id")
    assert cluster.custom_objects.calls == []


async def test_missing_resource_is_not_found(accessor) -> None:
    with pytest.raises(WorkspaceNotFoundError, match="custom resource was not found"):
        await accessor.get_workspace(WS)


async def test_missing_devfile_is_not_found(accessor, cluster) -> None:
    cluster.set_workspace(None)

    with pytest.raises(WorkspaceNotFoundError, match="no devfile"):
        await accessor.get_workspace(WS)


async def test_empty_cluster_gives_empty_machines(accessor, cluster, petclinic_devfile) -> None:
    cluster.set_workspace(petclinic_devfile)

    workspace = await accessor.get_workspace(WS)

    assert workspace.runtime is not None
    assert workspace.runtime.machines == {}


async def test_listing_failure_gives_empty_machines(accessor, cluster, petclinic_devfile, make_service) -> None:
    cluster.set_workspace(petclinic_devfile)
    cluster.core.items = [make_service("svc-maven", {MACHINE: "maven"})]
    cluster.core.error = ApiException(status=500, reason="boom")

    workspace = await accessor.get_workspace(WS)

    assert workspace.runtime.machines == {}


async def test_repeated_reads_are_identical(accessor, cluster, petclinic_devfile, make_service, make_ingress) -> None:
    cluster.set_workspace(petclinic_devfile)
    cluster.core.items = [make_service("svc-maven", {MACHINE: "maven"})]
    cluster.networking.items = [make_ingress(f"ingress-{WS}-web", {MACHINE: "maven", PROTOCOL: "https"})]

    first = await accessor.get_workspace(WS)
    second = await accessor.get_workspace(WS)

    assert first == second


async def test_plugins_only_devfile_gets_default_environment(accessor, cluster, plugins_only_yaml) -> None:
    import yaml

    cluster.set_workspace(yaml.safe_load(plugins_only_yaml))

    workspace = await accessor.get_workspace(WS)

    assert workspace.config.default_env == "default"
    assert list(workspace.config.environments) == ["default"]


async def test_default_environment_injection_can_be_disabled(identity, retriever, lister, cluster, plugins_only_yaml):
    import yaml

    cluster.set_workspace(yaml.safe_load(plugins_only_yaml))
    accessor = WorkspaceAccessor(identity, retriever, lister, inject_default_environment=False)

    workspace = await accessor.get_workspace(WS)

    assert workspace.config.environments == {}


async def test_update_workspace_returns_current_view(accessor, cluster, petclinic_devfile) -> None:
    cluster.set_workspace(petclinic_devfile)

    assert await accessor.update_workspace(WS) == await accessor.get_workspace(WS)
    with pytest.raises(WorkspaceNotFoundError):
        await accessor.update_workspace("other-id")


# ---------------------------------------------------------------------------
# Runtime source
# ---------------------------------------------------------------------------


STATUS_RUNTIME = json.dumps(
    {
        "activeEnv": "default",
        "machines": {
            "theia-ide": {
                "servers": {"theia": {"url": "https://theia.example.com", "status": "RUNNING"}},
                "status": "RUNNING",
            }
        },
    }
)


async def test_status_runtime_is_preferred(accessor, cluster, petclinic_devfile, make_service) -> None:
    cluster.set_workspace(petclinic_devfile, runtime=STATUS_RUNTIME)
    cluster.core.items = [make_service("svc-maven", {MACHINE: "maven"})]

    workspace = await accessor.get_workspace(WS)

    assert list(workspace.runtime.machines) == ["theia-ide"]
    assert workspace.runtime.machines["theia-ide"].servers["theia"].status is ServerStatus.RUNNING
    assert cluster.core.calls == []


async def test_status_runtime_can_be_ignored(identity, retriever, lister, cluster, petclinic_devfile, make_service):
    cluster.set_workspace(petclinic_devfile, runtime=STATUS_RUNTIME)
    cluster.core.items = [make_service("svc-maven", {MACHINE: "maven"})]
    accessor = WorkspaceAccessor(identity, retriever, lister, use_status_runtime=False)

    workspace = await accessor.get_workspace(WS)

    assert list(workspace.runtime.machines) == ["maven"]


async def test_malformed_status_runtime_raises(accessor, cluster, petclinic_devfile) -> None:
    cluster.set_workspace(petclinic_devfile, runtime="{oops")

    with pytest.raises(MalformedRuntimeError):
        await accessor.get_workspace(WS)


# ---------------------------------------------------------------------------
# Assembly errors
# ---------------------------------------------------------------------------


async def test_unparseable_devfile_raises(accessor, cluster) -> None:
    cluster.set_workspace({"components": [{"alias": "no-type"}]})

    with pytest.raises(DevfileParseError):
        await accessor.get_workspace(WS)


async def test_duplicate_machines_raise(accessor, cluster, petclinic_devfile, make_service) -> None:
    cluster.set_workspace(petclinic_devfile)
    cluster.core.items = [make_service("svc-a", {MACHINE: "maven"}), make_service("svc-b", {MACHINE: "maven"})]

    with pytest.raises(DataIntegrityError):
        await accessor.get_workspace(WS)


async def test_resource_read_error_raises(accessor, cluster) -> None:
    cluster.custom_objects.error = ApiException(status=401, reason="Unauthorized")

    with pytest.raises(ClusterReadError):
        await accessor.get_workspace(WS)


# ---------------------------------------------------------------------------
# Eager mode
# ---------------------------------------------------------------------------


async def test_eager_initialize_memoizes(identity, retriever, lister, cluster, petclinic_devfile) -> None:
    cluster.set_workspace(petclinic_devfile)
    accessor = _eager(identity, retriever, lister)

    result = await accessor.initialize()
    assert result.ok is True
    assert accessor.state is AccessorState.READY

    first = await accessor.get_workspace(WS)
    cluster.set_workspace(None)
    assert await accessor.get_workspace(WS) == first
    assert len(cluster.custom_objects.calls) == 1


async def test_eager_initialize_failure(identity, retriever, lister) -> None:
    accessor = _eager(identity, retriever, lister)

    result = await accessor.initialize()

    assert result.ok is False
    assert "not found" in (result.error or "")
    assert accessor.state is AccessorState.FAILED
    with pytest.raises(WorkspaceNotReadyError):
        await accessor.get_workspace(WS)


async def test_eager_before_initialize_is_not_ready(identity, retriever, lister) -> None:
    accessor = _eager(identity, retriever, lister)

    assert accessor.state is AccessorState.UNINITIALIZED
    with pytest.raises(WorkspaceNotReadyError):
        await accessor.get_workspace(WS)


async def test_eager_wrong_id_is_not_found(identity, retriever, lister, cluster, petclinic_devfile) -> None:
    cluster.set_workspace(petclinic_devfile)
    accessor = _eager(identity, retriever, lister)
    await accessor.initialize()

    with pytest.raises(WorkspaceNotFoundError):
        await accessor.get_workspace("other-id")
