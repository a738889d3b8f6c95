"""Build a homepage and a devlog subsection from one blog manifest.

This package exposes the CLI entry point used by ``uv run devlog-pages`` to
render human-written and AI-generated posts as two builds and merge them into
one publishable site.

Exports
-------
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from devlog_pages import main
>>> main()  # doctest: +SKIP
>>> from devlog_pages import app
>>> app(["build", "--help"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
