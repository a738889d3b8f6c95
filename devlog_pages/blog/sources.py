"""Resolve a post's ``source`` pointer into markdown text."""

from __future__ import annotations

import typing as typ
from pathlib import Path

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

if typ.TYPE_CHECKING:
    import collections.abc as cabc

REMOTE_PREFIXES = ("http://", "https://")


class SourceLoader:
    """Load post markdown from local files or HTTP(S) URLs.

    Remote sources share one ``requests`` session with transport-level
    retries. Call :meth:`close` (or use the loader as a context manager) to
    release it.
    """

    def __init__(self, *, timeout: float = 30) -> None:
        self.timeout = timeout
        self._session: requests.Session | None = None

    def __enter__(self) -> SourceLoader:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.close()

    def load(self, post: cabc.Mapping[str, typ.Any], base_dir: Path) -> str:
        """Return the markdown for ``post``.

        ``source`` may be an ``http(s)`` URL or a path relative to
        ``base_dir``. Posts without a source fall back to inline ``content``.

        Raises
        ------
        FileNotFoundError
            If a local source does not exist.
        requests.HTTPError
            If a remote source answers with an error status.
        """
        source = post.get("source")
        if not source:
            return str(post.get("content") or "")
        source = str(source)
        if source.startswith(REMOTE_PREFIXES):
            return self._fetch(source)
        path = Path(source)
        if not path.is_absolute():
            path = base_dir / path
        if not path.exists():
            msg = f"Post source '{path}' not found."
            raise FileNotFoundError(msg)
        return path.read_text(encoding="utf-8")

    def close(self) -> None:
        """Close the HTTP session if one was opened."""
        if self._session is not None:
            self._session.close()
            self._session = None

    def _fetch(self, url: str) -> str:
        resp = self._http().get(url, timeout=self.timeout)
        resp.raise_for_status()
        return resp.text

    def _http(self) -> requests.Session:
        """Return a cached session configured with retries."""
        if self._session is None:
            session = requests.Session()
            retry = Retry(
                total=5,
                read=5,
                connect=3,
                backoff_factor=0.5,
                status_forcelist=(500, 502, 503, 504),
                allowed_methods=("GET", "HEAD"),
            )
            adapter = HTTPAdapter(max_retries=retry)
            session.mount("https://", adapter)
            session.mount("http://", adapter)
            self._session = session
        return self._session


__all__ = ["SourceLoader"]
