"""Structural validation for a loaded site manifest.

:func:`validate_manifest` walks a :class:`~docs_manifest.config.Manifest`
against the source tree next to it and the installed plugin registry, and
collects :class:`Finding` records instead of stopping at the first problem,
so a single run reports everything the build would trip over:

* navigation leaves that do not resolve to a document under ``docs_dir``;
* redirect targets that are not navigation leaves, or that chain into
  another redirect;
* plugin, theme and markdown-extension identifiers that are not installed,
  and plugin options their schema does not know;
* hook scripts that are missing, unparsable or define no lifecycle hooks;
* extra assets and theme directories that do not exist;
* documents left out of the navigation, reported at the level chosen by
  ``validation.omitted_files``.

Examples
--------
>>> from pathlib import Path
>>> from docs_manifest.config import load_manifest
>>> from docs_manifest.validation import validate_manifest
>>> report = validate_manifest(load_manifest(Path("mkdocs.yml")))  # doctest: +SKIP
>>> report.ok  # doctest: +SKIP
True
"""

from __future__ import annotations

import ast
import collections
import dataclasses as dc
import fnmatch
import logging
import typing as typ
from urllib.parse import urlsplit

from ._constants import DOCUMENT_SUFFIXES, HOOK_EVENTS, REDIRECTS_PLUGIN
from .config.models import (
    ManifestError,
    ManifestParseError,
    ManifestReferenceError,
    PluginConfigError,
    is_external_target,
)
from .registry import EntryPointRegistry
from .schemas import redirect_map_problems, unknown_options

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .config.models import Manifest, NavNode
    from .registry import Registry

logger = logging.getLogger(__name__)

Category = typ.Literal["parse", "reference", "plugin-config"]
Severity = typ.Literal["error", "warning", "info"]

_CATEGORY_ERRORS: dict[str, type[ManifestError]] = {
    "parse": ManifestParseError,
    "reference": ManifestReferenceError,
    "plugin-config": PluginConfigError,
}
_LEVEL_SEVERITY: dict[str, Severity | None] = {
    "warn": "warning",
    "info": "info",
    "ignore": None,
}


@dc.dataclass(frozen=True, slots=True)
class Finding:
    """One validation problem and where it was found."""

    category: Category
    severity: Severity
    message: str
    location: str

    def format(self) -> str:
        return f"{self.severity.upper()} [{self.category}] {self.location}: {self.message}"


@dc.dataclass(slots=True)
class ValidationReport:
    """Findings collected for one manifest."""

    findings: list[Finding] = dc.field(default_factory=list)

    @property
    def errors(self) -> list[Finding]:
        return [item for item in self.findings if item.severity == "error"]

    @property
    def warnings(self) -> list[Finding]:
        return [item for item in self.findings if item.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors

    def add(
        self, category: Category, severity: Severity, location: str, message: str
    ) -> None:
        self.findings.append(Finding(category, severity, message, location))

    def raise_for_errors(self) -> None:
        """Raise the exception matching the first error's category.

        The message lists every error so nothing is hidden behind the first.
        """
        errors = self.errors
        if not errors:
            return
        exc_type = _CATEGORY_ERRORS[errors[0].category]
        msg = "\n".join(item.format() for item in errors)
        raise exc_type(msg)

    def as_dict(self) -> dict[str, typ.Any]:
        """Return a JSON-serializable summary."""
        return {
            "ok": self.ok,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "findings": [dc.asdict(item) for item in self.findings],
        }


def validate_manifest(
    manifest: Manifest,
    *,
    registry: Registry | None = None,
    check_registry: bool = True,
) -> ValidationReport:
    """Check a manifest against its source tree and the installed registry.

    Parameters
    ----------
    manifest : Manifest
        Manifest returned by :func:`docs_manifest.config.load_manifest`.
    registry : Registry, optional
        Source of installed plugins, themes and markdown extensions. Defaults
        to :class:`~docs_manifest.registry.EntryPointRegistry`.
    check_registry : bool, optional
        Skip identifier lookups entirely when False (offline checks).

    Returns
    -------
    ValidationReport
        Every finding, in check order.
    """
    report = ValidationReport()
    _check_docs_dir(manifest, report)
    _check_nav(manifest, report)
    _check_redirects(manifest, report)
    _check_plugins(manifest, report)
    if check_registry:
        _check_identifiers(manifest, registry or EntryPointRegistry(), report)
    _check_hooks(manifest, report)
    _check_assets(manifest, report)
    _check_omitted_files(manifest, report)
    logger.debug(
        "validated %s: %d errors, %d warnings",
        manifest.source_path,
        len(report.errors),
        len(report.warnings),
    )
    return report


def _strip_fragment(path: str) -> str:
    parsed = urlsplit(path)
    return parsed.path


def _document_exists(manifest: Manifest, path: str) -> bool:
    return (manifest.docs_root / _strip_fragment(path).lstrip("/")).is_file()


def _check_docs_dir(manifest: Manifest, report: ValidationReport) -> None:
    if not manifest.docs_root.is_dir():
        report.add(
            "reference",
            "error",
            "docs_dir",
            f"documentation directory '{manifest.site.docs_dir}' does not exist",
        )


def _check_nav(manifest: Manifest, report: ValidationReport) -> None:
    for node in manifest.nav:
        _check_nav_node(manifest, node, report)


def _check_nav_node(manifest: Manifest, node: NavNode, report: ValidationReport) -> None:
    location = f"nav: {node.describe()}"
    if node.path is None:
        if not node.children:
            report.add("reference", "warning", location, "section has no entries")
        for child in node.children:
            _check_nav_node(manifest, child, report)
        return
    if node.is_external:
        return
    if not _document_exists(manifest, node.path):
        report.add(
            "reference",
            "error",
            location,
            f"'{node.path}' does not exist under '{manifest.site.docs_dir}'",
        )


def _check_redirects(manifest: Manifest, report: ValidationReport) -> None:
    plugin = manifest.plugin(REDIRECTS_PLUGIN)
    if plugin is None:
        return
    for problem in redirect_map_problems(plugin.options):
        report.add("plugin-config", "error", f"plugins: {REDIRECTS_PLUGIN}", problem)

    redirects = manifest.redirects
    nav_paths = {_strip_fragment(path) for path in manifest.nav_paths()}
    for old, new in redirects.items():
        location = f"redirect: {old}"
        if is_external_target(new):
            continue
        target = _strip_fragment(new)
        if target == old:
            report.add("reference", "error", location, "redirects to itself")
        elif target in redirects:
            report.add(
                "reference",
                "error",
                location,
                f"target '{new}' is itself redirected to '{redirects[target]}'",
            )
        elif target not in nav_paths:
            if _document_exists(manifest, target):
                problem = f"target '{new}' exists but is not in the navigation"
            else:
                problem = f"target '{new}' does not exist"
            report.add("reference", "error", location, problem)
        if _document_exists(manifest, old):
            report.add(
                "reference",
                "warning",
                location,
                "source still exists and will be replaced by a redirect page",
            )


def _check_plugins(manifest: Manifest, report: ValidationReport) -> None:
    counts = collections.Counter(entry.identifier for entry in manifest.plugins)
    for identifier, count in counts.items():
        if count > 1:
            report.add(
                "plugin-config",
                "error",
                f"plugins: {identifier}",
                f"configured {count} times",
            )
    for entry in manifest.plugins:
        unknown = unknown_options(entry.identifier, entry.options)
        if unknown:
            report.add(
                "plugin-config",
                "error",
                f"plugins: {entry.identifier}",
                f"unknown options: {', '.join(unknown)}",
            )


def _check_identifiers(
    manifest: Manifest, registry: Registry, report: ValidationReport
) -> None:
    if not registry.has_theme(manifest.theme.name):
        report.add(
            "plugin-config",
            "error",
            "theme",
            f"theme '{manifest.theme.name}' is not installed",
        )
    for entry in manifest.plugins:
        if not registry.has_plugin(entry.identifier):
            report.add(
                "plugin-config",
                "error",
                f"plugins: {entry.identifier}",
                f"plugin '{entry.identifier}' is not installed",
            )
    seen: set[str] = set()
    for entry in manifest.markdown_extensions:
        location = f"markdown_extensions: {entry.identifier}"
        if entry.identifier in seen:
            report.add("plugin-config", "warning", location, "listed more than once")
        seen.add(entry.identifier)
        problem = registry.check_extension(entry.identifier, entry.options)
        if problem:
            report.add("plugin-config", "error", location, problem)


def _check_hooks(manifest: Manifest, report: ValidationReport) -> None:
    for hook in manifest.hooks:
        location = f"hooks: {hook.path}"
        script = hook.resolve(manifest.base_dir)
        if not script.is_file():
            report.add("reference", "error", location, "hook script does not exist")
            continue
        if script.suffix != ".py":
            report.add("reference", "error", location, "hook script must be a .py file")
            continue
        try:
            events = _hook_events(script)
        except SyntaxError as exc:
            report.add("parse", "error", location, f"hook script does not parse: {exc.msg}")
            continue
        recognised = events & HOOK_EVENTS
        for name in sorted(events - HOOK_EVENTS):
            report.add("reference", "warning", location, f"'{name}' is not a build event")
        if not recognised:
            report.add("reference", "warning", location, "defines no build event hooks")


def _hook_events(script: Path) -> set[str]:
    """Return the ``on_*`` functions defined at the top level of ``script``."""
    tree = ast.parse(script.read_text(encoding="utf-8"), filename=str(script))
    return {
        node.name
        for node in tree.body
        if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef))
        and node.name.startswith("on_")
    }


def _check_assets(manifest: Manifest, report: ValidationReport) -> None:
    for key, paths in (
        ("extra_css", manifest.extra_css),
        ("extra_javascript", manifest.extra_javascript),
    ):
        for path in paths:
            if is_external_target(path):
                continue
            if not _document_exists(manifest, path):
                report.add(
                    "reference",
                    "error",
                    f"{key}: {path}",
                    f"'{path}' does not exist under '{manifest.site.docs_dir}'",
                )

    theme = manifest.theme
    custom_dir = manifest.base_dir / theme.custom_dir if theme.custom_dir else None
    if custom_dir is not None and not custom_dir.is_dir():
        report.add(
            "reference",
            "error",
            "theme: custom_dir",
            f"'{theme.custom_dir}' does not exist",
        )
    for key, path in (("favicon", theme.favicon), ("logo", theme.logo)):
        if not path or is_external_target(path):
            continue
        candidates = [manifest.docs_root / path]
        if custom_dir is not None:
            candidates.append(custom_dir / path)
        if not any(candidate.is_file() for candidate in candidates):
            report.add(
                "reference",
                "warning",
                f"theme: {key}",
                f"'{path}' not found in docs_dir or custom_dir",
            )


def _check_omitted_files(manifest: Manifest, report: ValidationReport) -> None:
    """Report documents that the navigation leaves out.

    Without an explicit ``nav`` the generator builds one from every file, so
    nothing can be omitted.
    """
    severity = _LEVEL_SEVERITY[manifest.validation.omitted_files]
    if severity is None or not manifest.nav or not manifest.docs_root.is_dir():
        return
    nav_paths = {_strip_fragment(path).lstrip("/") for path in manifest.nav_paths()}
    redirected = set(manifest.redirects)
    for document in sorted(manifest.docs_root.rglob("*")):
        if not document.is_file() or document.suffix not in DOCUMENT_SUFFIXES:
            continue
        relative = document.relative_to(manifest.docs_root).as_posix()
        if relative in nav_paths or relative in redirected:
            continue
        if _excluded(relative, manifest.not_in_nav):
            continue
        report.add(
            "reference",
            severity,
            f"docs: {relative}",
            "not included in the navigation",
        )


def _excluded(relative: str, patterns: tuple[str, ...]) -> bool:
    """Match ``relative`` against gitignore-style ``not_in_nav`` patterns.

    The last matching pattern wins and ``!pattern`` re-includes a path that
    an earlier pattern excluded. A trailing ``/`` matches a directory and
    everything below it. A leading or inner ``/`` anchors the pattern at
    ``docs_dir``; other patterns match at any depth. ``*`` stays within one
    path segment while ``**`` spans any number of them.
    """
    parts = relative.split("/")
    excluded = False
    for raw in patterns:
        negated = raw.startswith("!")
        pattern = raw[1:] if negated else raw
        if _pattern_matches(parts, pattern):
            excluded = not negated
    return excluded


def _pattern_matches(parts: list[str], pattern: str) -> bool:
    body = pattern.strip("/")
    if not body:
        return False
    segments = body.split("/")
    if not (pattern.startswith("/") or "/" in body):
        segments = ["**", *segments]
    # A directory pattern only matches the parents of a file.
    last = len(parts) - 1 if pattern.endswith("/") else len(parts)
    return any(_match_segments(parts[:end], segments) for end in range(1, last + 1))


def _match_segments(parts: list[str], segments: list[str]) -> bool:
    if not segments:
        return not parts
    head, rest = segments[0], segments[1:]
    if head == "**":
        return any(
            _match_segments(parts[index:], rest) for index in range(len(parts) + 1)
        )
    if not parts or not fnmatch.fnmatchcase(parts[0], head):
        return False
    return _match_segments(parts[1:], rest)


__all__ = ["Finding", "ValidationReport", "validate_manifest"]
