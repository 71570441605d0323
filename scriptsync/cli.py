"""Click-based CLI for ScriptSync - script project file synchronization."""

from __future__ import annotations

import functools
import sys
from typing import Any, Callable, Optional

import click
import yaml
from rich.prompt import Confirm

from scriptsync import __version__
from scriptsync.config import (
    ScriptSyncConfig,
    ensure_config_exists,
    get_config_path,
    load_config,
    validate_config_file,
)
from scriptsync.errors import ScriptSyncError, SettingsError
from scriptsync.output import Console, setup_logging
from scriptsync.project import (
    SETTINGS_FILE_NAME,
    find_settings_file,
    load_project_context,
    load_project_settings,
    update_project_setting,
)
from scriptsync.remote import CommandTranspiler, FileCredentialProvider, RemoteProjectStore, ScriptApiStore
from scriptsync.sync import SyncEngine, has_manifest_changed, local_manifest, missing_from_push_order


def _create_store(config: ScriptSyncConfig) -> RemoteProjectStore:
    """Build the remote store from the tool configuration."""
    client = FileCredentialProvider.from_config(config).get_authorized_client()
    return ScriptApiStore(client, base_url=config.api.base_url)


def _is_interactive() -> bool:
    return sys.stdin.isatty() and sys.stdout.isatty()


def _confirm_manifest_update() -> bool:
    """Ask before overwriting a changed remote manifest; never in scripts."""
    if not _is_interactive():
        return False
    return Confirm.ask("Manifest file has been updated. Do you want to push and overwrite?", default=False)


def handle_errors(func: Callable[..., Any]) -> Callable[..., Any]:
    """Print ScriptSync errors through the console and exit with code 1."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        ctx = click.get_current_context()
        try:
            return func(*args, **kwargs)
        except ScriptSyncError as e:
            console: Console = ctx.obj["console"]
            console.print_exception(e)
            ctx.exit(1)

    return wrapper


def _runtime(ctx: click.Context) -> ScriptSyncConfig:
    """Load the tool config and set up logging and the console."""
    config = load_config()
    verbose = ctx.obj["verbose"] or config.output.verbose
    setup_logging(verbose, config.output.log_file)
    ctx.obj["console"] = Console(verbose=verbose, colored=config.output.colored)
    return config


@click.group()
@click.version_option(version=__version__, prog_name="scriptsync")
@click.option("--verbose", "-v", is_flag=True, help="Show detailed output and debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ScriptSync - keep a local directory in sync with a remote script project.

    \b
    Project settings: .clasp.json   (searched upward from the current directory)
    Ignore rules:     .claspignore  (gitignore-style, last match wins)
    Tool config:      ~/.config/scriptsync/config.yaml
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["console"] = Console(verbose=verbose)


@cli.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite the remote manifest without asking")
@click.option("--json", "as_json", is_flag=True, help="Print pushed paths as JSON")
@click.pass_context
@handle_errors
def push(ctx: click.Context, force: bool, as_json: bool) -> None:
    """Replace the remote project files with the local ones.

    Files are sent in filePushOrder first, then by name. A changed
    manifest (appsscript.json) needs confirmation unless --force is given.
    """
    config = _runtime(ctx)
    console: Console = ctx.obj["console"]

    project = load_project_context()
    engine = SyncEngine(project, max_workers=config.io.max_workers)
    plan = engine.plan_push()

    store = _create_store(config)
    try:
        remote_files = store.fetch(project.script_id)

        changed = engine.changed_files(plan, remote_files)
        removed = engine.removed_remote_files(plan, remote_files)
        if not changed and not removed:
            if as_json:
                console.print_json([])
            else:
                console.print_success("Script is already up to date.")
            return

        manifest = local_manifest(changed)
        if manifest is not None and not force:
            if has_manifest_changed(manifest.remote.source, remote_files) and not _confirm_manifest_update():
                if not as_json:
                    console.print_info("Skipping push.")
                return

        plan = engine.transpile(plan, CommandTranspiler.from_config(config))
        store.update(project.script_id, plan.to_upload)
    finally:
        store.close()

    if as_json:
        console.print_json(plan.local_paths)
        return

    console.print_push_result(plan, plan.files, removed=removed)
    console.print_missing_push_order(missing_from_push_order(plan.files, project.settings.file_push_order))


@cli.command()
@click.option("--version-number", type=click.IntRange(min=1), default=None, help="Pull a specific version")
@click.option("--json", "as_json", is_flag=True, help="Print written paths as JSON")
@click.pass_context
@handle_errors
def pull(ctx: click.Context, version_number: Optional[int], as_json: bool) -> None:
    """Write the remote project files into the local content root.

    Existing local files with the same name are overwritten. Files that
    exist only locally are left alone.
    """
    config = _runtime(ctx)
    console: Console = ctx.obj["console"]

    project = load_project_context()
    engine = SyncEngine(project, max_workers=config.io.max_workers)

    store = _create_store(config)
    try:
        remote_files = store.fetch(project.script_id, version_number)
    finally:
        store.close()

    plan = engine.plan_pull(remote_files)
    written = engine.write(plan)

    if as_json:
        console.print_json(written)
        return
    console.print_pull_result(written, plan)


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Print status as JSON")
@click.pass_context
@handle_errors
def status(ctx: click.Context, as_json: bool) -> None:
    """Show which local files a push would include.

    Works offline: nothing is fetched from the remote project.
    """
    config = _runtime(ctx)
    console: Console = ctx.obj["console"]

    project = load_project_context()
    engine = SyncEngine(project, max_workers=config.io.max_workers)
    files = engine.walk()
    plan = engine.plan_push(files)
    untracked = engine.untracked_files(files)

    if as_json:
        console.print_json({"filesToPush": plan.local_paths, "untrackedFiles": untracked})
        return
    console.print_status(plan.local_paths, untracked)


@cli.command()
@click.argument("key", required=False)
@click.argument("value", required=False)
@click.pass_context
@handle_errors
def setting(ctx: click.Context, key: Optional[str], value: Optional[str]) -> None:
    """Show or change project settings.

    \b
    Examples:
        scriptsync setting                  # all settings
        scriptsync setting scriptId         # one value, raw
        scriptsync setting rootDir src      # update a value
    """
    _runtime(ctx)
    console: Console = ctx.obj["console"]

    settings_path = find_settings_file()

    if key is None:
        settings = load_project_settings(settings_path)
        console.print_settings(settings.to_json_dict(), source=str(settings_path))
        return

    if value is None:
        data = load_project_settings(settings_path).to_json_dict()
        if key not in data:
            raise SettingsError(f"Unknown setting: {key}")
        current = data[key]
        if isinstance(current, list):
            current = ",".join(str(v) for v in current)
        elif not isinstance(current, str):
            current = ""
        # raw, without newline, so the value can be captured by scripts
        click.echo(current, nl=False)
        return

    previous = update_project_setting(settings_path, key, value)
    console.print_success(f'Updated "{key}": "{previous or ""}" → "{value}" in {SETTINGS_FILE_NAME}')


@cli.group()
def config() -> None:
    """Tool configuration commands.

    \b
    The configuration file lives at ~/.config/scriptsync/config.yaml
    (override with SCRIPTSYNC_CONFIG).
    """
    pass


@config.command("init")
@click.pass_context
def config_init(ctx: click.Context) -> None:
    """Create the default configuration file if it does not exist."""
    console: Console = ctx.obj["console"]
    config_path, created = ensure_config_exists()
    if created:
        console.print_success(f"Created configuration: {config_path}")
    else:
        console.print_info(f"Configuration already exists: {config_path}")


@config.command("show")
@click.pass_context
@handle_errors
def config_show(ctx: click.Context) -> None:
    """Show the effective configuration (file merged over defaults)."""
    config_data = _runtime(ctx)
    console: Console = ctx.obj["console"]
    content = yaml.safe_dump(config_data.model_dump(), default_flow_style=False, sort_keys=False)
    console.print_config(str(get_config_path()), content)


@config.command("validate")
@click.pass_context
def config_validate(ctx: click.Context) -> None:
    """Validate the configuration file."""
    console: Console = ctx.obj["console"]
    config_path = get_config_path()
    valid, errors = validate_config_file(config_path)

    if valid:
        console.print_success(f"Configuration is valid: {config_path}")
        return

    console.print_error(f"Configuration is invalid: {config_path}")
    for error in errors:
        console.print(f"  • {error}", markup=False)
    ctx.exit(1)


if __name__ == "__main__":
    cli()
