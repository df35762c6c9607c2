from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRouter
from loguru import logger

from cherestapis.kube.client import KubeApis, create_api_client, create_kube_apis
from cherestapis.kube.lister import ClusterObjectLister
from cherestapis.log import setup_logging
from cherestapis.managers.devfile import DevfileRetriever
from cherestapis.managers.workspaces import WorkspaceAccessor
from cherestapis.models.workspace import WorkspaceIdentity
from cherestapis.settings import CheSettings, get_settings


class StartupError(RuntimeError):
    """The workspace could not be assembled at startup (eager mode)."""


def create_accessor(settings: CheSettings, identity: WorkspaceIdentity, apis: KubeApis) -> WorkspaceAccessor:
    """Wire the retriever, lister and accessor from configuration."""
    retriever = DevfileRetriever(
        apis.custom_objects,
        crd_version=settings.workspace_crd_version,
        layout=settings.devfile_layout,
        request_timeout=settings.cluster_request_timeout,
    )
    lister = ClusterObjectLister(
        apis.core,
        apis.networking,
        page_size=settings.list_page_size,
        request_timeout=settings.cluster_request_timeout,
    )
    return WorkspaceAccessor(
        identity,
        retriever,
        lister,
        mode=settings.init_mode,
        use_status_runtime=settings.use_status_runtime,
        strip=settings.server_name_strip,
        inject_default_environment=settings.inject_default_environment,
    )


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level, settings.workspace_id)

    _app.state.accessor = None

    # Missing identity is fatal: ConfigurationError aborts startup.
    identity = settings.identity()
    logger.info("Workspace Id: {}", identity.id)
    logger.info("Workspace Name: {} (namespace={})", identity.name, identity.namespace)

    api_client = create_api_client(settings)
    accessor = create_accessor(settings, identity, create_kube_apis(api_client))

    result = await accessor.initialize()
    if not result.ok:
        api_client.close()
        msg = f"Che Api Service cannot start: {result.error}"
        raise StartupError(msg)

    _app.state.accessor = accessor
    logger.info("Workspace accessor ready (mode={}, crd_version={})", accessor.mode, settings.workspace_crd_version)

    yield

    # -- Shutdown --------------------------------------------------------------
    logger.info("Che Api Service shutting down")
    _app.state.accessor = None
    api_client.close()


app = FastAPI(title="Che Workspace REST APIs", lifespan=lifespan)

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["GET", "PUT"], allow_headers=["*"])


@app.middleware("http")
async def allow_any_origin(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """Set ``Access-Control-Allow-Origin: *`` on every response, with or without an ``Origin`` header."""
    response = await call_next(request)
    response.headers.setdefault("Access-Control-Allow-Origin", "*")
    return response


# ---------------------------------------------------------------------------
# API router -- all endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


from cherestapis.routers.workspace import router as workspace_router  # noqa: E402

api.include_router(workspace_router)

app.include_router(api)
