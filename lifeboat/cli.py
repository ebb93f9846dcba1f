import click


@click.group()
def main() -> None:
    """Lifeboat - hot-exit backup registry for editor sessions."""


@main.command()
@click.option("--host", default=None, help="Bind host (default: from LIFEBOAT_HOST or 127.0.0.1).")
@click.option("--port", default=None, type=int, help="Bind port (default: from LIFEBOAT_PORT or 8765).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def serve(host: str | None, port: int | None, reload: bool) -> None:
    """Start the backup registry HTTP service."""
    import uvicorn

    from lifeboat.backup_registry.settings import LifeboatSettings

    settings = LifeboatSettings()

    uvicorn.run(
        "lifeboat.backup_registry.app:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_level="warning",  # uvicorn's own logging is intercepted by loguru
    )


# ---------------------------------------------------------------------------
# Offline registry commands
# ---------------------------------------------------------------------------


def _initialized_service():
    """Run startup reconciliation and return the registrar.

    Reconciliation deletes stale backup directories and converts orphans,
    exactly as a service start would.
    """
    import anyio

    from lifeboat.backup_registry.app import create_backup_service
    from lifeboat.backup_registry.log import setup_logging
    from lifeboat.backup_registry.settings import LifeboatSettings

    settings = LifeboatSettings()
    setup_logging(settings.log_level, settings.log_file)
    return anyio.run(create_backup_service, settings)


@main.command()
def reconcile() -> None:
    """Reconcile the registry with disk and print the sessions to restore."""
    service = _initialized_service()

    click.echo(f"Hot exit: {service.get_hot_exit_mode()}")
    for workspace in service.get_workspace_backups():
        click.echo(f"workspace\t{workspace.workspace_id}\t{workspace.config_uri}")
    for folder in service.get_folder_backups():
        click.echo(f"folder\t{service.get_backup_path(folder).name}\t{folder.folder_uri}")
    for window in service.get_empty_window_backups():
        click.echo(f"empty\t{window.backup_folder}")


@main.command()
def dirty() -> None:
    """Print workspaces and folders whose backups currently hold content."""
    import anyio

    from lifeboat.backup_registry.models.backup import WorkspaceBackupInfo

    service = _initialized_service()
    for info in anyio.run(service.get_dirty_workspaces):
        if isinstance(info, WorkspaceBackupInfo):
            click.echo(f"workspace\t{info.workspace_id}\t{info.config_uri}")
        else:
            click.echo(f"folder\t{service.get_backup_path(info).name}\t{info.folder_uri}")


if __name__ == "__main__":
    main()
