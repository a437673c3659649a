"""CLI module for tagprobe."""

from __future__ import annotations

import logging
from pathlib import Path

import click

from tagprobe.cli.exit_codes import ExitCode
from tagprobe.cli.output import error_exit
from tagprobe.config import (
    ConfigBuilder,
    LoggingConfig,
    TagProbeConfig,
    TomlParseError,
    build_logging_config,
    load_config,
)
from tagprobe.driver import iter_file_tags
from tagprobe.errors import (
    BusFailureError,
    EngineUnavailableError,
    NodeError,
    PrematureEndOfStreamError,
    StateChangeError,
    TagExtractionError,
    TagValueDecodeError,
)
from tagprobe.formatters import OUTPUT_FORMATS, format_result
from tagprobe.logging import configure_logging
from tagprobe.session import PipelineSession

logger = logging.getLogger(__name__)

_EXTRACTION_EXIT_CODES: tuple[tuple[type[TagExtractionError], ExitCode], ...] = (
    (BusFailureError, ExitCode.BUS_FAILURE),
    (NodeError, ExitCode.NODE_ERROR),
    (PrematureEndOfStreamError, ExitCode.PREMATURE_EOS),
    (TagValueDecodeError, ExitCode.TAG_DECODE_ERROR),
    (StateChangeError, ExitCode.STATE_CHANGE_FAILED),
)


def exit_code_for(error: TagExtractionError) -> ExitCode:
    """Map an extraction error to its CLI exit code."""
    for error_type, code in _EXTRACTION_EXIT_CODES:
        if isinstance(error, error_type):
            return code
    return ExitCode.GENERAL_ERROR


def _log_startup_settings(
    config: TagProbeConfig,
    logging_config: LoggingConfig,
    builder: ConfigBuilder,
    cli_log_level: str | None,
    cli_log_file: Path | None,
) -> None:
    """Log key settings with their sources (default, file, env, cli)."""
    level_source = "cli" if cli_log_level else builder.source_of("logging_level")
    file_source = "cli" if cli_log_file else builder.source_of("logging_file")
    log_file = str(logging_config.file) if logging_config.file else "stderr"

    logger.info(
        "tagprobe starting: log_level=%s (%s), log_file=%s (%s), "
        "pipeline=%s ! %s ! %s, serialize_non_string=%s (%s)",
        logging_config.level,
        level_source,
        log_file.replace(str(Path.home()), "~"),
        file_source,
        config.pipeline.source_element,
        config.pipeline.decoder_element,
        config.pipeline.sink_element,
        config.tags.serialize_non_string,
        builder.source_of("serialize_non_string"),
    )


@click.command("tagprobe")
@click.version_option(package_name="tagprobe")
@click.argument(
    "video_paths",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path),
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(OUTPUT_FORMATS),
    default="debug",
    help="Output format (default: debug).",
)
@click.option(
    "--serialize-non-string",
    is_flag=True,
    default=False,
    help="Serialize numeric, boolean and date tags instead of failing on them.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, exists=True, dir_okay=False),
    default=None,
    help="Config file (default: ~/.tagprobe/config.toml).",
)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default=None,
    help="Override log level (default: warning).",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path.",
)
@click.option(
    "--log-json",
    is_flag=True,
    default=False,
    help="Use JSON log format.",
)
def main(
    video_paths: tuple[Path, ...],
    output_format: str,
    serialize_non_string: bool,
    config_path: Path | None,
    log_level: str | None,
    log_file: Path | None,
    log_json: bool,
) -> None:
    """Print the metadata tags embedded in media files.

    VIDEO_PATHS are read in order, one at a time, through a single
    GStreamer pipeline. Processing stops at the first file whose tags
    cannot be read.
    """
    json_output = output_format == "json"

    try:
        config, builder = load_config(
            config_path,
            serialize_non_string=True if serialize_non_string else None,
            strict=True,
        )
        logging_config = build_logging_config(
            config.logging,
            level=log_level,
            file=log_file,
            format="json" if log_json else None,
        )
    except TomlParseError as e:
        error_exit(str(e), ExitCode.CONFIG_ERROR, json_output)
    except ValueError as e:
        error_exit(f"Invalid configuration: {e}", ExitCode.CONFIG_ERROR, json_output)

    configure_logging(logging_config)
    _log_startup_settings(config, logging_config, builder, log_level, log_file)

    try:
        session = PipelineSession.create(config)
    except EngineUnavailableError as e:
        error_exit(str(e), ExitCode.ENGINE_NOT_AVAILABLE, json_output)

    with session:
        try:
            for result in iter_file_tags(session, video_paths):
                click.echo(format_result(result, output_format))
        except TagExtractionError as e:
            logger.error("Tag extraction failed for %s: %s", e.path, e)
            error_exit(
                f"{e.path}: {e}",
                exit_code_for(e),
                json_output,
                data={"file": e.path},
            )
