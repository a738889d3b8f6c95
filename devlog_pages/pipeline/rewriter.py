"""Post-process merged hypertext so both streams read as one site."""

from __future__ import annotations

import typing as typ

from .merge import match_slug, slug_pattern
from .models import Artifact, ArtifactTable, ExclusiveSlugs

if typ.TYPE_CHECKING:
    from devlog_pages.config import LayoutConfig, RewriteConfig, SubsectionConfig

    from .strategies import MarkupStrategy


class ContentRewriter:
    """Apply the navigation, title, and back-link edits to hypertext artifacts.

    Every hypertext artifact gains the subsection navigation link. The
    subsection root is retitled. Pages whose slug is exclusive to the
    secondary build have their back link pointed at the subsection root.
    Running the rewriter again over its own output changes nothing.
    """

    def __init__(
        self,
        *,
        layout: LayoutConfig,
        subsection: SubsectionConfig,
        rewrite: RewriteConfig,
        strategy: MarkupStrategy,
    ) -> None:
        self.layout = layout
        self.subsection = subsection
        self.back_link = rewrite.back_link
        self.strategy = strategy
        self._slug_pattern = slug_pattern(layout.slug_extensions)

    def run(self, table: ArtifactTable, exclusive: ExclusiveSlugs) -> ArtifactTable:
        """Return a copy of ``table`` with every hypertext artifact rewritten."""
        result = table.copy()
        for path, artifact in table.items():
            if not self._is_hypertext(artifact):
                continue
            html = self.rewrite_page(
                path, typ.cast("str", artifact.content), exclusive
            )
            if html != artifact.content:
                result.insert(artifact.with_content(html))
        return result

    def rewrite_page(self, path: str, html: str, exclusive: ExclusiveSlugs) -> str:
        """Return the rewritten markup for the page stored at ``path``."""
        html = self.strategy.inject_nav_link(
            html, href=self.subsection.href, label=self.subsection.label
        )
        if path == self.layout.subsection_index_path:
            html = self.strategy.retitle(html, self.subsection.title)
        slug = match_slug(path, self._slug_pattern)
        if slug is not None and slug in exclusive:
            html = self.strategy.swap_link(html, self.back_link)
        return html

    def _is_hypertext(self, artifact: Artifact) -> bool:
        return artifact.is_text and artifact.path.endswith(self.layout.hypertext_suffix)


def rewrite_content(
    table: ArtifactTable,
    exclusive: ExclusiveSlugs,
    *,
    layout: LayoutConfig,
    subsection: SubsectionConfig,
    rewrite: RewriteConfig,
    strategy: MarkupStrategy,
) -> ArtifactTable:
    """Rewrite every hypertext artifact in ``table``; see :class:`ContentRewriter`."""
    rewriter = ContentRewriter(
        layout=layout, subsection=subsection, rewrite=rewrite, strategy=strategy
    )
    return rewriter.run(table, exclusive)


__all__ = ["ContentRewriter", "rewrite_content"]
