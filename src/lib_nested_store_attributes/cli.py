"""CLI adapter for ``lib_nested_store_attributes`` built on ``lib_cli_exit_tools``.

Purpose
-------
Expose the collection reconciler on the command line so operators can preview
what a batch of nested attributes would do to a stored collection without
writing Python code.

Contents
--------
* :data:`CLICK_CONTEXT_SETTINGS` – shared Click settings ensuring ``-h`` works.
* :func:`cli` – root command that wires global traceback handling into
  ``lib_cli_exit_tools``.
* :func:`cli_info` – prints distribution metadata for quick diagnostics.
* :func:`cli_reconcile` – loads an existing collection and an incoming batch
  from JSON/YAML files and prints the reconciled collection as JSON.
* :func:`main` – entry point used by ``console_scripts`` registration.

System Role
-----------
The CLI lives in the outermost layer. It calls the composition root
(:func:`reconcile_collection`) and the batch file loaders and never reaches
into the matcher directly. ``lib_cli_exit_tools`` centralises the exit code
strategy so all commands behave consistently across shells and CI.
"""

from __future__ import annotations

import sys
from importlib import metadata
from pathlib import Path
from typing import Any, Final, Optional, Sequence

import lib_cli_exit_tools
import rich_click as click

from .adapters.codecs.json_codec import JSONCodec
from .adapters.file_loaders.structured import loader_for
from .core import reconcile_collection

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}
_TRACEBACK_SUMMARY_LIMIT: Final[int] = 500
_TRACEBACK_VERBOSE_LIMIT: Final[int] = 10_000
_DISTRIBUTION: Final[str] = "lib_nested_store_attributes"


def _resolve_version() -> str:
    """Return the installed package version, ``"0.0.0"`` when metadata is missing."""

    try:
        return metadata.version(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        return "0.0.0"


@click.group(
    help="Reconcile serialized collection attributes with nested-attribute batches",
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=False,
)
@click.version_option(
    version=_resolve_version(),
    prog_name=_DISTRIBUTION,
    message="lib_nested_store_attributes version %(version)s",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool) -> None:
    """Root command configuring traceback handling for all subcommands.

    Side Effects
        Mutates ``lib_cli_exit_tools.config.traceback`` and
        ``lib_cli_exit_tools.config.traceback_force_color``.
    """

    ctx.ensure_object(dict)
    ctx.obj["traceback"] = traceback
    lib_cli_exit_tools.config.traceback = traceback
    lib_cli_exit_tools.config.traceback_force_color = traceback


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def cli_info() -> None:
    """Print basic distribution metadata so users can confirm installation."""

    try:
        meta = metadata.metadata(_DISTRIBUTION)
    except metadata.PackageNotFoundError:
        click.echo(f"{_DISTRIBUTION} (metadata unavailable)")
        return
    click.echo(f"Info for {meta.get('Name', _DISTRIBUTION)}:")
    click.echo(f"  Version         : {meta.get('Version', _resolve_version())}")
    click.echo(f"  Requires-Python : {meta.get('Requires-Python', '>=3.10')}")
    summary = meta.get("Summary")
    if summary:
        click.echo(f"  Summary         : {summary}")


@cli.command("reconcile", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--incoming",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
    required=True,
    help="JSON or YAML file holding the incoming batch (list or mapping of records)",
)
@click.option(
    "--existing",
    type=click.Path(path_type=Path, exists=True, file_okay=True, dir_okay=False, readable=True),
    default=None,
    help="JSON or YAML file holding the stored collection (defaults to empty)",
)
@click.option("--primary-key", default="id", show_default=True, help="Field used to match records")
@click.option(
    "--allow-destroy/--no-allow-destroy",
    default=False,
    show_default=True,
    help="Drop matched records flagged with a truthy _destroy",
)
@click.option("--limit", type=int, default=None, help="Maximum number of records accepted in the batch")
@click.option(
    "--reject-all-blank/--no-reject-all-blank",
    default=False,
    help="Reject incoming records whose fields are all blank (ignoring _destroy)",
)
@click.option(
    "--indent",
    type=int,
    default=None,
    help="Pretty-print JSON output with the provided indent size",
)
def cli_reconcile(
    incoming: Path,
    existing: Optional[Path],
    primary_key: str,
    allow_destroy: bool,
    limit: Optional[int],
    reject_all_blank: bool,
    indent: Optional[int],
) -> None:
    """Apply the incoming batch to the existing collection and print the result as JSON."""

    stored = _load(existing) if existing is not None else []
    batch = _load(incoming)
    options: dict[str, Any] = {"primary_key": primary_key, "allow_destroy": allow_destroy, "limit": limit}
    if reject_all_blank:
        options["reject_if"] = "all_blank"
    collection = reconcile_collection(stored, batch, **options)
    click.echo(JSONCodec(indent=indent).dumps(collection))


def _load(path: Path) -> Any:
    """Load a batch or collection file with the loader matching its suffix."""

    return loader_for(str(path)).load(str(path))


def main(argv: Optional[Sequence[str]] = None, *, restore_traceback: bool = True) -> int:
    """Execute the CLI with shared exit handling and return the exit code."""

    previous_traceback = getattr(lib_cli_exit_tools.config, "traceback", False)
    previous_force_color = getattr(lib_cli_exit_tools.config, "traceback_force_color", False)
    try:
        try:
            return lib_cli_exit_tools.run_cli(
                cli,
                argv=list(argv) if argv is not None else None,
                prog_name=_DISTRIBUTION,
            )
        except BaseException as exc:  # noqa: BLE001 - funnel through shared printers
            lib_cli_exit_tools.print_exception_message(
                trace_back=lib_cli_exit_tools.config.traceback,
                length_limit=(
                    _TRACEBACK_VERBOSE_LIMIT if lib_cli_exit_tools.config.traceback else _TRACEBACK_SUMMARY_LIMIT
                ),
            )
            return lib_cli_exit_tools.get_system_exit_code(exc)
    finally:
        if restore_traceback:
            lib_cli_exit_tools.config.traceback = previous_traceback
            lib_cli_exit_tools.config.traceback_force_color = previous_force_color


if __name__ == "__main__":  # pragma: no cover - exercised via console entry point
    raise SystemExit(main(sys.argv[1:]))
