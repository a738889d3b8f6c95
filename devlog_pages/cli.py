"""Cyclopts CLI entrypoint for building the merged homepage and devlog site.

The ``devlog-pages`` console script defined here renders a JSON-blog manifest
twice (primary posts for the homepage, secondary posts for the devlog
subsection), merges both builds, and replaces the output directory with the
result. Typical usage is ``devlog-pages build`` locally or in CI.

Examples
--------
Build with the default configuration:

>>> from devlog_pages.cli import main
>>> main()  # doctest: +SKIP

Build from a custom manifest into a custom directory:

>>> from devlog_pages.cli import app
>>> app.run(
...     ["build", "--manifest", "site/blog.json", "--output-dir", "dist"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_build_config
from .config.helpers import _validate_strategy
from .pipeline import SplitSiteBuilder

app = App(name="devlog-pages", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Render primary and secondary posts and publish one merged site.")
def build(
    *,
    config: typ.Annotated[
        Path | None, Parameter(help="Path to build config", env_var="INPUT_CONFIG")
    ] = None,
    manifest: typ.Annotated[
        Path | None,
        Parameter(help="Override the blog manifest", env_var="INPUT_MANIFEST"),
    ] = None,
    output_dir: typ.Annotated[
        Path | None,
        Parameter(help="Override the output folder", env_var="INPUT_OUTPUT_DIR"),
    ] = None,
    strategy: typ.Annotated[
        str | None,
        Parameter(
            help="Markup rewrite strategy (textual or structural)",
            env_var="INPUT_STRATEGY",
        ),
    ] = None,
) -> None:
    """Build the merged site described by the configuration.

    Parameters
    ----------
    config : Path or None, optional
        YAML build configuration; built-in defaults apply when omitted.
    manifest : Path or None, optional
        Blog manifest overriding ``manifest`` from the configuration.
    output_dir : Path or None, optional
        Destination overriding ``output_dir`` from the configuration. Its
        previous contents are replaced.
    strategy : str or None, optional
        Rewrite strategy overriding ``rewrite.strategy``.

    Returns
    -------
    None
        Publishes the site and prints a summary of the build.

    Raises
    ------
    BuildConfigError
        If the configuration or ``strategy`` override is invalid.
    """
    build_config = load_build_config(config)
    if strategy:
        build_config.rewrite = dc.replace(
            build_config.rewrite, strategy=_validate_strategy(strategy)
        )

    report = SplitSiteBuilder(build_config).run(
        manifest_path=manifest, output_dir=output_dir
    )
    print(
        f"primary posts: {report.primary_posts}, "
        f"secondary posts: {report.secondary_posts}"
    )
    print(f"primary build: {report.primary_artifacts} files")
    print(f"secondary build: {report.secondary_artifacts} files")
    slugs = ", ".join(report.exclusive_slugs)
    print(f"exclusive slugs ({len(report.exclusive_slugs)}): {slugs}")
    print(
        f"wrote {report.files_written} files to {_format_path(report.output_dir)}"
    )


def main() -> None:
    """Invoke the Cyclopts application that powers the ``devlog-pages`` command.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
