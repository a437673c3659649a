"""Tag extraction driver.

Runs a PipelineSession over a list of files, one at a time, in order.
Processing is fail-fast: the first file whose tags cannot be resolved
raises, and no later file is started.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from tagprobe.logging.context import file_context
from tagprobe.session import PipelineSession, TagMap

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FileTags:
    """Tags resolved for one file."""

    path: str
    tags: TagMap


def iter_file_tags(
    session: PipelineSession,
    paths: Iterable[str | os.PathLike[str]],
) -> Iterator[FileTags]:
    """Resolve tags for each path, yielding results as they are ready.

    Args:
        session: Session to reuse for every file.
        paths: Files to read, in processing order.

    Yields:
        FileTags for each file, immediately after it is resolved.

    Raises:
        TagExtractionError: For the first file that fails; its ``path``
            attribute names the file. Remaining paths are not processed.
    """
    for index, path in enumerate(paths, start=1):
        path_str = os.fspath(path)
        with file_context(f"F{index:03d}", path_str):
            logger.info("Reading tags from %s", path_str)
            tags = session.resolve_tags(path_str)
            logger.info("Found %d tags", len(tags))
        yield FileTags(path=path_str, tags=tags)


def extract_tags(
    session: PipelineSession,
    paths: Iterable[str | os.PathLike[str]],
) -> list[FileTags]:
    """Resolve tags for every path and return them all.

    Same fail-fast semantics as iter_file_tags().
    """
    return list(iter_file_tags(session, paths))
