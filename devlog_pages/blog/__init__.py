"""Default renderer that turns a JSON-blog manifest into static files."""

from .renderer import BlogRenderer, PostModel, SiteModel, slugify
from .sources import SourceLoader

__all__ = [
    "BlogRenderer",
    "PostModel",
    "SiteModel",
    "SourceLoader",
    "slugify",
]
