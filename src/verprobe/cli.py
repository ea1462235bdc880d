"""Command line interface for verprobe."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Any

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from verprobe.catalog import CatalogError, VersionCatalog, load_catalog, save_catalog
from verprobe.config import (
    ConfigError,
    ConfigManager,
    VerprobeConfig,
    assign_nested,
    resolve_with_precedence,
)
from verprobe.detection import byte_array_declaration, detect_version
from verprobe.hashing import (
    HashingError,
    available_algorithms,
    compute_digest,
    get_algorithm,
)
from verprobe.logging_config import configure_logging

console = Console()

UNKNOWN_VERSION_EXIT_CODE = 2


def _load_config() -> VerprobeConfig:
    """Load the effective configuration and configure logging from it.

    Raises:
        click.ClickException: If configuration loading or validation fails.
    """
    try:
        config = ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(config.logging.level)
    return config


def _emit_message(message: Any, *, quiet: bool) -> None:
    """Print CLI output unless quiet mode is active."""
    if quiet:
        return
    console.print(message)


def _load_catalog_or_fail(path: Path) -> VersionCatalog:
    try:
        return load_catalog(path)
    except CatalogError as exc:
        raise click.ClickException(str(exc)) from exc


def _algorithm_name(name: str) -> str:
    try:
        return get_algorithm(name).name
    except HashingError as exc:
        raise click.ClickException(str(exc)) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="verprobe")
def cli() -> None:
    """verprobe identifies program versions from file checksums."""


@cli.command("hash")
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option("--algorithm", type=str, help="Hash algorithm (defaults to hashing.algorithm).")
@click.option("--literal", is_flag=True, help="Print a byte array literal instead of hex.")
def hash_command(file: Path, algorithm: str | None, literal: bool) -> None:
    """Print the checksum of FILE.

    Args:
        file: File to hash.
        algorithm: Optional algorithm name overriding the configured default.
        literal: Emit the byte array literal form.

    Raises:
        click.ClickException: If the algorithm is unknown or the file cannot be read.
    """
    config = _load_config()
    try:
        digest = compute_digest(
            file,
            algorithm or config.hashing.algorithm,
            chunk_size=config.hashing.chunk_size,
        )
    except (HashingError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(byte_array_declaration(digest) if literal else digest.hex())


@cli.command()
@click.argument("file", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--catalog",
    "catalog_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML catalog of known versions.",
)
@click.option(
    "--algorithm",
    type=str,
    help="Expected hash algorithm; must match the catalog's algorithm.",
)
@click.option("--author", type=str, help="Contact named when the version is unknown.")
@click.option("--target", type=str, help="Program name; writes <target>_version.log.")
@click.option(
    "--output-dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory receiving the version hash artifact.",
)
@click.option("--json", "json_output", is_flag=True, help="Emit the result as JSON.")
@click.option("--quiet", is_flag=True, help="Suppress non-error output.")
@click.pass_context
def detect(
    ctx: click.Context,
    file: Path,
    catalog_path: Path,
    algorithm: str | None,
    author: str | None,
    target: str | None,
    output_dir: Path | None,
    json_output: bool,
    quiet: bool,
) -> None:
    """Identify the catalogued version of FILE.

    Exits with status 2 when the version is unknown.

    Raises:
        click.ClickException: If the catalog, configuration, or file cannot be used.
    """
    if json_output and quiet:
        raise click.ClickException("--json cannot be combined with --quiet.")

    config = _load_config()
    quiet = quiet or config.cli.quiet_default
    catalog = _load_catalog_or_fail(catalog_path)
    if algorithm and _algorithm_name(algorithm) != catalog.algorithm:
        raise click.ClickException(
            f"Catalog uses {catalog.algorithm}; cannot detect with {algorithm}."
        )

    if output_dir is None and config.artifacts.output_dir:
        output_dir = Path(config.artifacts.output_dir).expanduser()
    if output_dir is not None:
        output_dir.mkdir(parents=True, exist_ok=True)

    try:
        result = detect_version(
            file,
            catalog.as_mapping(),
            algorithm=catalog.algorithm,
            author=author or config.contact.author,
            target=target,
            output_dir=output_dir,
            write_artifacts=config.artifacts.enabled,
            encoding=config.artifacts.encoding,
            chunk_size=config.hashing.chunk_size,
        )
    except (HashingError, OSError) as exc:
        raise click.ClickException(str(exc)) from exc

    if json_output:
        console.print_json(data=result.to_payload())
    elif result.matched:
        _emit_message(
            f"[green]{result.display_name}: version {result.version}[/green]", quiet=quiet
        )
    else:
        _emit_message(
            f"[yellow]{result.display_name}: unknown version "
            f"({result.algorithm} {result.hex_digest})[/yellow]",
            quiet=quiet,
        )
        if result.artifact_path is not None:
            _emit_message(f"Version hash written to {result.artifact_path}", quiet=quiet)
        if result.artifact_error is not None:
            console.print(f"[red]Could not write artifact: {result.artifact_error}[/red]")

    if result.unknown:
        ctx.exit(UNKNOWN_VERSION_EXIT_CODE)


@cli.group()
def catalog() -> None:
    """Inspect and extend version catalogs."""


@catalog.command("show")
@click.argument(
    "catalog_path", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
def catalog_show(catalog_path: Path) -> None:
    """List the versions recorded in CATALOG_PATH."""
    entries = _load_catalog_or_fail(catalog_path)

    table = Table(title=f"{catalog_path.name} ({entries.algorithm})")
    table.add_column("Version")
    table.add_column("Digest", overflow="fold")
    for label, digest in entries.versions.items():
        table.add_row(label, digest)
    console.print(table)


@catalog.command("add")
@click.argument("catalog_path", type=click.Path(dir_okay=False, path_type=Path))
@click.argument("label")
@click.argument("digest")
@click.option(
    "--algorithm",
    type=str,
    help="Algorithm for a new catalog (defaults to hashing.algorithm).",
)
@click.option("--replace", is_flag=True, help="Overwrite LABEL if it already exists.")
def catalog_add(
    catalog_path: Path,
    label: str,
    digest: str,
    algorithm: str | None,
    replace: bool,
) -> None:
    """Record LABEL with DIGEST in CATALOG_PATH, creating the file if needed.

    DIGEST may be hex or a byte array literal copied from a version hash artifact.

    Raises:
        click.ClickException: If the catalog or digest is invalid.
    """
    config = _load_config()
    if catalog_path.exists():
        entries = _load_catalog_or_fail(catalog_path)
        if algorithm and _algorithm_name(algorithm) != entries.algorithm:
            raise click.ClickException(
                f"Catalog uses {entries.algorithm}; cannot add a {algorithm} digest."
            )
    else:
        try:
            entries = VersionCatalog(algorithm=algorithm or config.hashing.algorithm)
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc

    try:
        entries.add(label, digest, replace=replace)
    except CatalogError as exc:
        raise click.ClickException(str(exc)) from exc

    save_catalog(catalog_path, entries)
    console.print(f"[green]Added {label} to {catalog_path}.[/green]")


@cli.command("algorithms")
def algorithms_command() -> None:
    """List the supported hash algorithms."""
    for name in available_algorithms():
        click.echo(name)


@cli.group()
def config() -> None:
    """Manage verprobe configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration after applying precedence rules.

    Raises:
        click.ClickException: If configuration cannot be loaded.
    """
    try:
        effective = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(effective.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY.

    Raises:
        click.ClickException: If parsing, assignment, or validation fails.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'hashing.algorithm'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        file_data = manager.load_file_overrides()
        assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=VerprobeConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    before = manager.read_text().splitlines()
    manager.save(file_data)
    after = manager.read_text().splitlines()

    diff = [
        line
        for line in difflib.unified_diff(before, after, lineterm="", n=0)
        if not line.startswith(("---", "+++", "@@", "-# Last updated", "+# Last updated"))
    ]
    if not diff:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
