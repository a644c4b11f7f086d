"""
Latest Stack — CLI entrypoint.

Usage:
    latest-stack --help
    latest-stack versions
    latest-stack versions --search react --json
    latest-stack stacks
    latest-stack cache show
"""

from __future__ import annotations

import asyncio
import json
import os
import sys
from collections.abc import Callable, Sequence
from datetime import UTC, datetime
from pathlib import Path

import click

from latest_stack import __version__
from latest_stack.adapters.registry import SourceRegistry, build_default_registry
from latest_stack.core.config.settings import Settings, load_settings
from latest_stack.core.config.stack_loader import ConfigError, load_catalog
from latest_stack.core.engine.resolver import Resolver
from latest_stack.core.models.stack import StackDefinition
from latest_stack.core.observability.logging_config import level_from_flags, setup_logging
from latest_stack.core.persistence.version_cache import VersionCache, default_cache_path
from latest_stack.core.use_cases.dashboard import Dashboard, build_dashboard
from latest_stack.core.use_cases.refresh import InitialState, VersionRefresher


@click.group()
@click.version_option(version=__version__, prog_name="latest-stack")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--catalog",
    "catalog_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to a stacks.yml catalog (default: bundled catalog).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    catalog_path: str | None,
) -> None:
    """Latest Stack — latest versions of languages, frameworks and tools."""
    ctx.ensure_object(dict)
    ctx.obj["quiet"] = quiet

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=level_from_flags(debug, verbose, quiet),
        log_file=os.environ.get("LATEST_STACK_LOG_FILE"),
        log_file_level=os.environ.get("LATEST_STACK_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )

    settings = load_settings()
    ctx.obj["settings"] = settings
    ctx.obj["catalog_path"] = Path(catalog_path) if catalog_path else settings.catalog_path


def _load_stacks(ctx: click.Context) -> list[StackDefinition]:
    try:
        return load_catalog(ctx.obj.get("catalog_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)


def _make_cache(settings: Settings) -> VersionCache:
    return VersionCache(default_cache_path(settings.cache_dir), ttl_seconds=settings.cache_ttl)


# ── Rendering ───────────────────────────────────────────────────────


def _render(dashboard: Dashboard, quiet: bool = False) -> None:
    if dashboard.advisory:
        click.secho(f"⚠️  {dashboard.advisory}", fg="yellow")
        click.echo()

    for section in dashboard.sections:
        click.secho(f"{section.label}", fg="cyan", bold=True)
        width = max(len(e.name) for e in section.entries)
        for entry in section.entries:
            color = "green" if entry.version else "white"
            click.echo(f"  {entry.name.ljust(width)}  ", nl=False)
            click.secho(entry.display_version, fg=color)
        click.echo()

    if not quiet:
        click.echo(f"{dashboard.known}/{dashboard.total} versions known")


# ── versions ────────────────────────────────────────────────────────


async def _run_versions(
    refresher: VersionRefresher,
    stacks: Sequence[StackDefinition],
    initial: InitialState,
    wait: bool,
    on_initial: Callable[[dict[str, str], bool], None],
    on_update: Callable[[dict[str, str]], None],
) -> dict[str, str]:
    """Serve versions (cached or fresh) and optionally join revalidation."""
    if initial.is_loading:
        fresh = await refresher.resolve_and_save(stacks)
        on_initial(fresh, False)
        return fresh

    latest: dict[str, str] = {}

    def _updated(versions: dict[str, str]) -> None:
        latest.update(versions)
        on_update(versions)

    refresher.refresh_in_background(stacks, initial.versions, _updated)
    on_initial(initial.versions, True)

    if wait:
        await refresher.wait_for_background()
    return latest or initial.versions


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--search", "-s", default="", help="Only show stacks whose name contains TEXT.")
@click.option("--refresh", is_flag=True, help="Ignore the cache and resolve now.")
@click.option(
    "--wait/--no-wait",
    default=True,
    help=(
        "Wait for background revalidation of cached versions. "
        "With --no-wait the revalidation is cancelled when the command exits."
    ),
)
@click.pass_context
def versions(ctx: click.Context, as_json: bool, search: str, refresh: bool, wait: bool) -> None:
    """Show the latest version of every stack."""
    settings: Settings = ctx.obj["settings"]
    quiet = ctx.obj.get("quiet", False)
    stacks = _load_stacks(ctx)

    registry = build_default_registry(settings)
    refresher = VersionRefresher(_make_cache(settings), Resolver(registry, settings.http_timeout))

    # Read the cache once; --refresh behaves like a cold start
    initial = InitialState() if refresh else refresher.initial_state()
    if initial.is_loading and not as_json and not quiet:
        click.echo("Fetching latest versions…", err=True)

    def on_initial(current: dict[str, str], revalidating: bool) -> None:
        if as_json:
            return
        _render(build_dashboard(stacks, current, search=search), quiet=quiet)
        if revalidating and wait and not quiet:
            click.echo("Checking for newer versions…", err=True)

    def on_update(updated: dict[str, str]) -> None:
        if as_json:
            return
        click.echo()
        click.secho("↻ Newer versions found", fg="cyan", bold=True)
        _render(build_dashboard(stacks, updated, search=search), quiet=quiet)

    final = asyncio.run(
        _run_versions(refresher, stacks, initial, wait, on_initial, on_update)
    )

    if as_json:
        dashboard = build_dashboard(stacks, final, search=search)
        click.echo(json.dumps(dashboard.to_dict(), indent=2, ensure_ascii=False))


# ── stacks ──────────────────────────────────────────────────────────


def _strategy(registry: SourceRegistry, stack: StackDefinition) -> str:
    source = registry.source_for(stack)
    return source.name if source else ""


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def stacks(ctx: click.Context, as_json: bool) -> None:
    """List the catalog and the source each stack resolves from."""
    settings: Settings = ctx.obj["settings"]
    catalog = _load_stacks(ctx)
    registry = build_default_registry(settings)

    if as_json:
        data = [
            {
                "id": s.id,
                "name": s.name,
                "category": s.category.value,
                "source": _strategy(registry, s),
            }
            for s in catalog
        ]
        click.echo(json.dumps(data, indent=2))
        return

    width = max((len(s.id) for s in catalog), default=0)
    for s in catalog:
        strategy = _strategy(registry, s) or "—"
        click.echo(f"  {s.id.ljust(width)}  {s.category.value:<9}  {strategy}")
    click.echo()
    click.echo(f"{len(catalog)} stacks")


# ── cache ───────────────────────────────────────────────────────────


@cli.group()
def cache() -> None:
    """Version cache commands."""


@cache.command("show")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def cache_show(ctx: click.Context, as_json: bool) -> None:
    """Show the cached snapshot and when it expires."""
    settings: Settings = ctx.obj["settings"]
    version_cache = _make_cache(settings)
    entry = version_cache.read_entry()

    if as_json:
        data: dict = {"path": str(version_cache.path), "present": entry is not None}
        if entry is not None:
            data["expires"] = entry.expires
            data["valid"] = version_cache.load() is not None
            data["data"] = entry.data
        click.echo(json.dumps(data, indent=2))
        return

    click.echo(f"Cache: {version_cache.path}")
    if entry is None:
        click.echo("  (empty)")
        return

    expires_at = datetime.fromtimestamp(entry.expires / 1000, tz=UTC)
    state = "valid" if version_cache.load() is not None else "expired"
    click.echo(f"  {len(entry.data)} versions, {state}, expires {expires_at.isoformat()}")
    for stack_id, version in sorted(entry.data.items()):
        click.echo(f"  {stack_id}: {version}")


@cache.command("clear")
@click.pass_context
def cache_clear(ctx: click.Context) -> None:
    """Delete the cached snapshot."""
    settings: Settings = ctx.obj["settings"]
    if _make_cache(settings).clear():
        click.secho("✅ Cache cleared", fg="green")
    else:
        click.echo("Cache already empty")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
