import click


@click.group()
def main() -> None:
    """Che REST APIs - read-only workspace API for a single workspace pod."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from CHE_HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from CHE_PORT or 9999).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the workspace API server."""
    import uvicorn

    from cherestapis.settings import CheSettings

    settings = CheSettings()

    uvicorn.run(
        "cherestapis.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level=settings.uvicorn_log_level,  # uvicorn's own logging is intercepted by loguru
    )


@main.command()
@click.option("--workspace-id", default=None, help="Workspace id to request (default: the configured one).")
@click.option("--indent", default=2, type=int, show_default=True, help="JSON indentation.")
def show(workspace_id: str | None, indent: int) -> None:
    """Assemble the workspace once and print it as JSON."""
    import asyncio

    from cherestapis.app import create_accessor
    from cherestapis.errors import ConfigurationError
    from cherestapis.kube.client import create_api_client, create_kube_apis
    from cherestapis.log import setup_logging
    from cherestapis.settings import CheSettings

    settings = CheSettings()
    setup_logging(settings.log_level, settings.workspace_id)

    try:
        identity = settings.identity()
        api_client = create_api_client(settings)
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc

    accessor = create_accessor(settings, identity, create_kube_apis(api_client))

    async def _run() -> str:
        result = await accessor.initialize()
        if not result.ok:
            raise click.ClickException(result.error or "workspace assembly failed")
        workspace = await accessor.get_workspace(workspace_id or identity.id)
        return workspace.model_dump_json(by_alias=True, exclude_none=True, indent=indent)

    try:
        click.echo(asyncio.run(_run()))
    except (LookupError, ValueError, RuntimeError) as exc:
        raise click.ClickException(str(exc)) from exc
    finally:
        api_client.close()


if __name__ == "__main__":
    main()
