"""Tooling for documentation site manifests (``mkdocs.yml``).

This package loads the manifest into immutable typed records, validates it
against the docs tree and the installed plugin registry, and edits its
redirect table without losing comments or ordering.

Exports
-------
- ``app``: Cyclopts application behind the ``manifest`` console script.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from docs_manifest import main
>>> main()  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
