"""Service configuration loaded from CHE_* environment variables."""

from __future__ import annotations

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from cherestapis.errors import ConfigurationError
from cherestapis.models.enums import DevfileLayout, InitMode, ServerNameStrip
from cherestapis.models.workspace import WorkspaceIdentity


class CheSettings(BaseSettings):
    """Che REST APIs settings.

    All fields are read from environment variables with the ``CHE_`` prefix.
    For example, ``CHE_WORKSPACE_ID=workspace1234`` maps to ``workspace_id``.

    The three workspace identity fields are injected by the workspace operator
    into the sidecar container and are required; see ``identity()``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"

    # -- Workspace identity ----------------------------------------------------
    workspace_id: str | None = None
    workspace_name: str | None = None
    workspace_namespace: str | None = None

    workspace_crd_version: str = "v1alpha1"
    """Version of the ``workspace.che.eclipse.org`` custom resource to read."""

    # -- Kubernetes ------------------------------------------------------------
    kubeconfig: str | None = None
    """Kubeconfig path used when not running in-cluster."""

    kube_context: str | None = None

    cluster_request_timeout: float = 5.0
    """Seconds allowed for each cluster call.  A timed-out listing counts as empty."""

    list_page_size: int = 1000

    # -- Assembly --------------------------------------------------------------
    init_mode: InitMode = InitMode.LAZY
    """``eager`` assembles once at startup and fails the process on error."""

    use_status_runtime: bool = True
    """Prefer the runtime blob from the resource status over Services/Ingresses."""

    devfile_layout: DevfileLayout = DevfileLayout.V1
    server_name_strip: ServerNameStrip = ServerNameStrip.PREFIX
    inject_default_environment: bool = True

    # -- Server ----------------------------------------------------------------
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 9999
    uvicorn_log_level: Literal["critical", "error", "warning", "info", "debug"] = "warning"

    # -- Helpers ---------------------------------------------------------------

    def identity(self) -> WorkspaceIdentity:
        """Return the workspace identity or raise ``ConfigurationError``."""
        missing = [
            f"CHE_{field.upper()}"
            for field in ("workspace_id", "workspace_name", "workspace_namespace")
            if not getattr(self, field)
        ]
        if missing:
            msg = f"The {', '.join(missing)} environment variable(s) should be set"
            raise ConfigurationError(msg)
        return WorkspaceIdentity(
            id=self.workspace_id,
            name=self.workspace_name,
            namespace=self.workspace_namespace,
        )


def get_settings() -> CheSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call, then returns
    the same object.  Call ``_get_settings_cached.cache_clear()`` in tests to force a
    re-read after overriding env vars.
    """
    return _get_settings_cached()


def _get_settings_cached() -> CheSettings:
    """Inner function wrapped by lru_cache (allows type-safe cache_clear)."""
    return CheSettings()


# Apply lru_cache at runtime so the function is only called once.
from functools import lru_cache  # noqa: E402

_get_settings_cached = lru_cache(maxsize=1)(_get_settings_cached)
