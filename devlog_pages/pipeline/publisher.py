"""Replace a destination directory with the merged artifact tree.

The tree is written into a temporary sibling directory first and only then
renamed into place, so a failure while writing leaves the previous
destination untouched. The final swap moves the old tree aside, renames the
new tree onto the destination, and deletes the old tree.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import shutil
import tempfile
import typing as typ
from pathlib import Path

if typ.TYPE_CHECKING:
    from .models import Artifact

logger = logging.getLogger(__name__)

_TREE_MODE = 0o755


def _write_tree(root: Path, artifacts: cabc.Iterable[Artifact]) -> int:
    """Write ``artifacts`` beneath ``root`` and return how many were written."""
    count = 0
    for artifact in artifacts:
        target = root / artifact.path
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(artifact.content, bytes):
            target.write_bytes(artifact.content)
        else:
            target.write_text(artifact.content, encoding="utf-8")
        count += 1
    return count


def publish(artifacts: cabc.Iterable[Artifact], destination: Path) -> int:
    """Atomically replace ``destination`` with ``artifacts``.

    Parameters
    ----------
    artifacts : Iterable[Artifact]
        Artifacts to write; each lands at ``destination / artifact.path``.
    destination : Path
        Directory to replace. It is created when missing.

    Returns
    -------
    int
        Number of files written.

    Raises
    ------
    OSError
        Propagated from any filesystem operation. When raised while writing,
        the staging directory is removed and ``destination`` is unchanged.
    """
    destination = destination.resolve()
    destination.parent.mkdir(parents=True, exist_ok=True)
    staging = Path(
        tempfile.mkdtemp(prefix=f".{destination.name}.", dir=destination.parent)
    )
    # mkdtemp creates 0700 directories; published trees must stay readable.
    staging.chmod(_TREE_MODE)
    try:
        count = _write_tree(staging, artifacts)
    except BaseException:
        shutil.rmtree(staging, ignore_errors=True)
        raise

    retired: Path | None = None
    if destination.exists():
        retired = Path(
            tempfile.mkdtemp(prefix=f".{destination.name}.old-", dir=destination.parent)
        )
        retired.rmdir()
        destination.rename(retired)
    try:
        staging.rename(destination)
    except OSError:
        if retired is not None:
            retired.rename(destination)
        shutil.rmtree(staging, ignore_errors=True)
        raise
    if retired is not None:
        shutil.rmtree(retired)
    logger.info("published %d files to %s", count, destination)
    return count


__all__ = ["publish"]
