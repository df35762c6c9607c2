"""Workspace composition and the request-facing accessor.

The accessor runs the assembly pipeline::

    custom resource -> devfile text -> Devfile (+ warnings) -> WorkspaceConfig
                    -> Runtime (status blob, or Services + Ingresses)
                    -> Workspace

In lazy mode the pipeline runs on every call.  In eager mode it runs once
in ``initialize()`` and the result is served until the process exits.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from loguru import logger

from cherestapis.constants import (
    DEFAULT_ENVIRONMENT,
    KUBERNETES_RECIPE_TYPE,
    YAML_CONTENT_TYPE,
    workspace_id_selector,
)
from cherestapis.devfile.converter import convert_devfile
from cherestapis.devfile.parser import parse_devfile
from cherestapis.devfile.validator import validate_devfile
from cherestapis.errors import WorkspaceNotFoundError, WorkspaceNotReadyError
from cherestapis.kube.lister import ClusterObjectLister
from cherestapis.managers.devfile import DevfileRetriever
from cherestapis.managers.runtime import assemble_runtime, parse_runtime
from cherestapis.models.devfile import Devfile
from cherestapis.models.enums import AccessorState, InitMode, ServerNameStrip, WorkspaceStatus
from cherestapis.models.runtime import Runtime
from cherestapis.models.workspace import (
    Account,
    Environment,
    Recipe,
    Workspace,
    WorkspaceConfig,
    WorkspaceIdentity,
)

# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


def ensure_default_environment(config: WorkspaceConfig) -> WorkspaceConfig:
    """Give a config without environments one empty ``default`` kubernetes environment.

    Devfiles made only of editor/plugin components convert to a config with
    no environment, which workspace clients reject.
    """
    if config.environments:
        return config
    placeholder = Environment(recipe=Recipe(type=KUBERNETES_RECIPE_TYPE, content_type=YAML_CONTENT_TYPE, content=""))
    return config.model_copy(
        update={"environments": {DEFAULT_ENVIRONMENT: placeholder}, "default_env": DEFAULT_ENVIRONMENT}
    )


def compose_workspace(
    identity: WorkspaceIdentity,
    devfile: Devfile,
    config: WorkspaceConfig,
    runtime: Runtime | None,
) -> Workspace:
    """Merge devfile, converted config and runtime into the response model.

    Status is always RUNNING: the service is only reachable while the
    workspace runs, so cluster health is never consulted.
    """
    account = Account()
    return Workspace(
        id=identity.id,
        namespace=account.name,
        account=account,
        config=config,
        devfile=devfile,
        attributes={},
        temporary=False,
        runtime=runtime,
        status=WorkspaceStatus.RUNNING,
    )


# ---------------------------------------------------------------------------
# Accessor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class InitializationResult:
    """Outcome of ``WorkspaceAccessor.initialize()``, checked by the app lifespan."""

    ok: bool
    error: str | None = None


class WorkspaceAccessor:
    """Serves the single workspace this process is configured for."""

    def __init__(
        self,
        identity: WorkspaceIdentity,
        retriever: DevfileRetriever,
        lister: ClusterObjectLister,
        *,
        mode: InitMode = InitMode.LAZY,
        use_status_runtime: bool = True,
        strip: ServerNameStrip = ServerNameStrip.PREFIX,
        inject_default_environment: bool = True,
    ) -> None:
        self._identity = identity
        self._retriever = retriever
        self._lister = lister
        self._mode = mode
        self._use_status_runtime = use_status_runtime
        self._strip = strip
        self._inject_default_environment = inject_default_environment

        self._state = AccessorState.UNINITIALIZED
        self._workspace: Workspace | None = None

    @property
    def identity(self) -> WorkspaceIdentity:
        return self._identity

    @property
    def mode(self) -> InitMode:
        return self._mode

    @property
    def state(self) -> AccessorState:
        return self._state

    # -- Lifecycle -------------------------------------------------------------

    async def initialize(self) -> InitializationResult:
        """Assemble once in eager mode; a no-op that reports READY in lazy mode.

        Never raises for assembly errors; the failure is returned so the
        bootstrap can abort.  A failed accessor never serves.
        """
        if self._mode is InitMode.LAZY:
            self._state = AccessorState.READY
            return InitializationResult(ok=True)

        try:
            workspace = await self.assemble()
        except (LookupError, ValueError, RuntimeError) as exc:
            self._state = AccessorState.FAILED
            logger.error("Workspace {} could not be assembled at startup: {}", self._identity.id, exc)
            return InitializationResult(ok=False, error=str(exc))

        self._workspace = workspace
        self._state = AccessorState.READY
        logger.info("Workspace {} assembled at startup", self._identity.id)
        return InitializationResult(ok=True)

    # -- Read path -------------------------------------------------------------

    async def get_workspace(self, key: str) -> Workspace:
        """Return the workspace for ``key``.

        Raises ``WorkspaceNotFoundError`` when ``key`` is not the configured
        workspace id or the devfile is missing, and ``WorkspaceNotReadyError``
        when an eager accessor has not been initialized successfully.
        """
        logger.info("Getting workspace {} (current workspace is {})", key, self._identity.id)
        if key != self._identity.id:
            raise WorkspaceNotFoundError(key, f"current workspace is {self._identity.id}")

        if self._mode is InitMode.LAZY:
            return await self.assemble()

        if self._state is not AccessorState.READY or self._workspace is None:
            msg = f"Workspace {self._identity.id} is not initialized (state={self._state})"
            raise WorkspaceNotReadyError(msg)
        return self._workspace

    async def update_workspace(self, key: str, body: dict[str, Any] | None = None) -> Workspace:
        """PUT is accepted for client compatibility but changes nothing; ``body`` is ignored."""
        return await self.get_workspace(key)

    # -- Pipeline --------------------------------------------------------------

    async def assemble(self) -> Workspace:
        identity = self._identity
        resource = await self._retriever.fetch_resource(identity)
        if resource is None:
            raise WorkspaceNotFoundError(identity.id, "the Workspace custom resource was not found")

        devfile_text = self._retriever.devfile_text(resource)
        if devfile_text is None:
            raise WorkspaceNotFoundError(identity.id, "the Workspace custom resource has no devfile")
        logger.debug("Devfile content for workspace {}: {}", identity.name, devfile_text)

        devfile = parse_devfile(devfile_text)
        for warning in validate_devfile(devfile):
            logger.warning("Validation of the devfile failed: {}", warning)

        config = convert_devfile(devfile)
        if self._inject_default_environment:
            config = ensure_default_environment(config)

        runtime = await self._load_runtime(self._retriever.runtime_text(resource))
        return compose_workspace(identity, devfile, config, runtime)

    async def _load_runtime(self, runtime_text: str | None) -> Runtime:
        if self._use_status_runtime and runtime_text:
            logger.debug("Using the runtime stored in the Workspace custom resource status")
            return parse_runtime(runtime_text)

        identity = self._identity
        selector = workspace_id_selector(identity.id)
        services = await self._lister.list_services(identity.namespace, selector)
        ingresses = await self._lister.list_ingresses(identity.namespace, selector)
        return assemble_runtime(services, ingresses, identity.id, strip=self._strip)
