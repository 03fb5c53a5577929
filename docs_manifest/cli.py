"""Cyclopts CLI entrypoint for checking and editing documentation site manifests.

The ``manifest`` console script defined here validates ``mkdocs.yml`` before a
build (navigation paths, redirect targets, installed plugins, hooks), prints
the navigation tree, and records or removes redirects without disturbing the
file's comments and ordering. Typical usage is ``manifest check`` in CI ahead
of the documentation build and ``manifest redirect OLD NEW`` whenever a page
moves.

Examples
--------
Check the manifest in the current directory:

>>> from docs_manifest.cli import main
>>> main()  # doctest: +SKIP

Record a redirect for a moved page:

>>> from docs_manifest.cli import app
>>> app.run(["redirect", "advanced/s3.md", "deployment/s3.md"])  # doctest: +SKIP
"""

from __future__ import annotations

import json
import logging
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import DEFAULT_CONFIG
from .config import ManifestError, load_manifest
from .document import normalize_manifest
from .redirects import add_redirect, remove_redirect
from .validation import ValidationReport, validate_manifest

if typ.TYPE_CHECKING:
    from .config import NavNode

app = App(name="manifest", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

ConfigOption = typ.Annotated[
    Path, Parameter(help="Path to the site manifest", env_var="INPUT_CONFIG")
]
VerboseOption = typ.Annotated[
    bool, Parameter(help="Log debug diagnostics to stderr", env_var="INPUT_VERBOSE")
]


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


def _fail(message: str) -> typ.NoReturn:
    print(message, file=sys.stderr)
    raise SystemExit(1)


@app.command(help="Validate the manifest against the docs tree and installed plugins.")
def check(
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    offline: typ.Annotated[
        bool,
        Parameter(
            help="Skip plugin, theme and extension registry lookups",
            env_var="INPUT_OFFLINE",
        ),
    ] = False,
    strict: typ.Annotated[
        bool, Parameter(help="Treat warnings as errors", env_var="INPUT_STRICT")
    ] = False,
    json_output: typ.Annotated[
        bool,
        Parameter(
            name="--json", help="Print the report as JSON", env_var="INPUT_JSON"
        ),
    ] = False,
    verbose: VerboseOption = False,
) -> None:
    """Validate a manifest and exit non-zero when the build would fail.

    Parameters
    ----------
    config : Path, optional
        Path to the manifest (overridable via ``INPUT_CONFIG``).
    offline : bool, optional
        When True, plugin, theme and extension identifiers are not looked up.
    strict : bool, optional
        When True, warnings also produce a failing exit status.
    json_output : bool, optional
        Print the report as a JSON document instead of one line per finding.
    verbose : bool, optional
        Emit debug logging on stderr.

    Raises
    ------
    SystemExit
        With status 1 when the manifest cannot be loaded or has errors (or
        warnings, in strict mode).
    """
    _configure_logging(verbose)
    try:
        manifest = load_manifest(config)
    except (FileNotFoundError, ManifestError) as exc:
        report = ValidationReport()
        report.add("parse", "error", _format_path(config), str(exc))
    else:
        report = validate_manifest(manifest, check_registry=not offline)

    if json_output:
        print(json.dumps(report.as_dict(), indent=2))
    else:
        for finding in report.findings:
            print(finding.format())
        print(
            f"{_format_path(config)}: {len(report.errors)} error(s), "
            f"{len(report.warnings)} warning(s)"
        )

    if not report.ok or (strict and report.warnings):
        raise SystemExit(1)


@app.command(help="Print the navigation tree in display order.")
def nav(*, config: ConfigOption = DEFAULT_CONFIG, verbose: VerboseOption = False) -> None:
    """Print each navigation entry, indented by depth."""
    _configure_logging(verbose)
    try:
        manifest = load_manifest(config)
    except (FileNotFoundError, ManifestError) as exc:
        _fail(str(exc))
    for node in manifest.nav:
        for line in _render_nav(node, depth=0):
            print(line)


def _render_nav(node: NavNode, *, depth: int) -> list[str]:
    indent = "  " * depth
    if node.path is not None:
        label = f"{node.label}: {node.path}" if node.label else node.path
        return [f"{indent}{label}"]
    lines = [f"{indent}{node.label}/"]
    for child in node.children:
        lines.extend(_render_nav(child, depth=depth + 1))
    return lines


@app.command(help="Redirect an old page path to its new location.")
def redirect(
    old: str,
    new: str,
    *,
    config: ConfigOption = DEFAULT_CONFIG,
    verbose: VerboseOption = False,
) -> None:
    """Record ``old -> new`` in the redirects plugin table.

    Parameters
    ----------
    old : str
        Path of the page before it moved, relative to ``docs_dir``.
    new : str
        Path of the page now, relative to ``docs_dir``.
    config : Path, optional
        Manifest to edit in place.
    verbose : bool, optional
        Emit debug logging on stderr.
    """
    _configure_logging(verbose)
    try:
        change = add_redirect(config, old, new)
    except (FileNotFoundError, ManifestError) as exc:
        _fail(str(exc))
    if change.previous and change.previous != change.new:
        print(f"{change.old}: {change.previous} -> {change.new}")
    else:
        print(f"{change.old} -> {change.new}")
    for source in change.retargeted:
        print(f"{source} -> {change.new} (retargeted)")


@app.command(help="Remove the redirect for an old page path.")
def unredirect(
    old: str, *, config: ConfigOption = DEFAULT_CONFIG, verbose: VerboseOption = False
) -> None:
    """Drop the redirect recorded for ``old``."""
    _configure_logging(verbose)
    try:
        target = remove_redirect(config, old)
    except (FileNotFoundError, ManifestError) as exc:
        _fail(str(exc))
    if target is None:
        _fail(f"no redirect recorded for '{old}'")
    print(f"removed {old} -> {target}")


@app.command(name="format", help="Rewrite the manifest with canonical indentation.")
def format_manifest(
    *, config: ConfigOption = DEFAULT_CONFIG, verbose: VerboseOption = False
) -> None:
    """Normalize indentation while keeping order and comments."""
    _configure_logging(verbose)
    try:
        changed = normalize_manifest(config)
    except (FileNotFoundError, ManifestError) as exc:
        _fail(str(exc))
    state = "reformatted" if changed else "unchanged"
    print(f"{state} {_format_path(config)}")


def main() -> None:
    """Invoke the Cyclopts application that powers the ``manifest`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
