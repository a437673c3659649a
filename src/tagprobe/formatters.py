"""Formatters for resolved tags.

This module renders FileTags for the terminal (debug or human-readable
form) or as JSON. Every formatter returns the text for a single file so
results can be printed as soon as each file is done.
"""

import json

from tagprobe.driver import FileTags
from tagprobe.session import TagMap

OUTPUT_FORMATS = ("debug", "human", "json")


def format_debug(tags: TagMap) -> str:
    """Format tags as a single debug-style line.

    Args:
        tags: Tag mapping to format.

    Returns:
        A line like ``Tags: {'title': 'X'}``.
    """
    return f"Tags: {tags!r}"


def format_human(result: FileTags) -> str:
    """Format a file's tags for human-readable output.

    Tags are listed alphabetically, one per line, with names aligned.
    """
    lines = [f"File: {result.path}"]
    if not result.tags:
        lines.append("  (no tags found)")
        return "\n".join(lines)

    width = max(len(name) for name in result.tags)
    for name in sorted(result.tags):
        lines.append(f"  {name:<{width}} : {result.tags[name]}")
    return "\n".join(lines)


def format_json(result: FileTags) -> str:
    """Format a file's tags as a single-line JSON object."""
    return json.dumps(
        {"file": result.path, "tags": result.tags},
        ensure_ascii=False,
        sort_keys=True,
    )


def format_result(result: FileTags, output_format: str) -> str:
    """Format a file's tags in one of OUTPUT_FORMATS.

    Raises:
        ValueError: If output_format is unknown.
    """
    if output_format == "debug":
        return format_debug(result.tags)
    if output_format == "human":
        return format_human(result)
    if output_format == "json":
        return format_json(result)
    raise ValueError(f"Unknown output format: {output_format}")
